"""
Result rendering.

Pure functions that turn sanitized results and session state into
display-ready records. No escaping happens here; every value reaching this
module is already markup-safe.
"""

from collections.abc import Iterable

import httpx

from ..types import (
    DisplayResult,
    PagingInfo,
    SanitizedResult,
    SearchStatus,
    SearchView,
    SessionState,
)

DEFAULT_BODY_FIELD = "body"
DEFAULT_SOURCE_SUFFIX = ".newrelic"
# Length of "https://"; http URLs lose the first character of the tag.
SOURCE_PREFIX_LENGTH = 8


def derive_source_tag(
    url: httpx.URL | None, suffix: str = DEFAULT_SOURCE_SUFFIX
) -> str | None:
    """
    Pull the site name out of a result URL.

    e.g. https://developer.newrelic.com/x => developer

    Args:
        url: Sanitized result URL
        suffix: Marker the site name precedes

    Returns:
        The site name, or None if the URL does not have the expected shape
    """
    if url is None or not suffix:
        return None

    head, separator, _ = str(url).partition(suffix)
    if not separator:
        return None

    tag = head[SOURCE_PREFIX_LENGTH:]
    return tag or None


def render(
    result: SanitizedResult,
    body_field: str = DEFAULT_BODY_FIELD,
    source_suffix: str = DEFAULT_SOURCE_SUFFIX,
) -> DisplayResult | None:
    """
    Build the display record for one result.

    Args:
        result: Sanitized result
        body_field: Name of the field shown as the result body
        source_suffix: Marker used to derive the source tag

    Returns:
        DisplayResult, or None if the result has no title and must be omitted
    """
    title = result.title
    if not title:
        return None

    has_url = result.url is not None

    return DisplayResult(
        title=title,
        body_html=result.get(body_field),
        url=str(result.url) if has_url else None,
        source_tag=derive_source_tag(result.url, source_suffix),
    )


def render_results(
    results: Iterable[SanitizedResult],
    body_field: str = DEFAULT_BODY_FIELD,
    source_suffix: str = DEFAULT_SOURCE_SUFFIX,
) -> list[DisplayResult]:
    """Render a result list, dropping results that have nothing to show."""
    rendered = (render(result, body_field, source_suffix) for result in results)
    return [display for display in rendered if display is not None]


def paging_info(state: SessionState, results_per_page: int) -> PagingInfo:
    """
    Compute the 'showing X - Y out of Z' summary for the current page.

    Args:
        state: Session state snapshot
        results_per_page: Page size used for the query

    Returns:
        PagingInfo for the current page
    """
    if state.total_results <= 0:
        return PagingInfo(
            start=0, end=0, total_results=0, search_term=state.query_term
        )

    start = (max(state.page, 1) - 1) * results_per_page + 1
    end = min(state.total_results, start + results_per_page - 1)

    return PagingInfo(
        start=start,
        end=end,
        total_results=state.total_results,
        search_term=state.query_term,
    )


def render_view(
    state: SessionState,
    results_per_page: int,
    body_field: str = DEFAULT_BODY_FIELD,
    source_suffix: str = DEFAULT_SOURCE_SUFFIX,
) -> SearchView:
    """
    Build everything the search page shows for a session state.

    Paging and results appear only once a non-empty search has finished
    loading.
    """
    is_loading = state.status == SearchStatus.LOADING
    has_searched = not is_loading and len(state.query_term) > 0
    results = (
        render_results(state.results, body_field, source_suffix)
        if has_searched
        else []
    )

    return SearchView(
        is_loading=is_loading,
        has_searched=has_searched,
        has_results=len(results) > 0,
        paging=paging_info(state, results_per_page) if has_searched else None,
        results=results,
        error=state.error if state.status == SearchStatus.ERROR else None,
    )

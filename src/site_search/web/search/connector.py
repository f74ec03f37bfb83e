import asyncio
import itertools
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from httpcore._async.connection import exponential_backoff

from ...errors import ConnectorError
from ...logger import get_logger
from ...settings import Settings
from ...types import (
    FieldValue,
    Opaque,
    RawResult,
    ResultFieldSpec,
    SearchFilter,
    SearchRequest,
    SearchResults,
    Wrapped,
)

DEFAULT_RESULT_FIELDS: dict[str, ResultFieldSpec] = {
    "title": {"snippet": {"size": 100, "fallback": True}},
    "body": {"snippet": {"size": 400, "fallback": True}},
    "url": {"raw": {}},
}

EXCLUDED_DOCUMENT_TYPES = ["!views_page_menu"]

_FILTER_TYPES = {"any": "or", "all": "and"}

logger = get_logger("connector")


def default_filters(settings: Settings) -> list[SearchFilter]:
    """Filters applied to every query: site sections and excluded page types."""
    return [
        SearchFilter(field="type", values=settings.filter_types_list, type="any"),
        SearchFilter(
            field="document_type", values=list(EXCLUDED_DOCUMENT_TYPES), type="any"
        ),
    ]


def build_search_request(
    term: str,
    page: int,
    settings: Settings,
    result_fields: dict[str, ResultFieldSpec] | None = None,
    filters: list[SearchFilter] | None = None,
) -> SearchRequest:
    return SearchRequest(
        term=term,
        page=page,
        result_fields=result_fields or DEFAULT_RESULT_FIELDS,
        filters=default_filters(settings) if filters is None else filters,
    )


def to_api_payload(request: SearchRequest, settings: Settings) -> dict[str, Any]:
    """
    Convert a search request into a Site Search API request body.

    Args:
        request: Search request
        settings: Search settings carrying the engine key and document type

    Returns:
        JSON-serializable request body
    """
    document_type = settings.document_type

    highlight_fields = {
        name: dict(spec["snippet"])
        for name, spec in request["result_fields"].items()
        if "snippet" in spec
    }

    filters = {
        search_filter["field"]: {
            "type": _FILTER_TYPES[search_filter["type"]],
            "values": list(search_filter["values"]),
        }
        for search_filter in request["filters"]
    }

    return {
        "engine_key": settings.engine_key,
        "q": request["term"],
        "page": request["page"],
        "per_page": settings.results_per_page,
        "document_types": [document_type],
        "fetch_fields": {document_type: list(request["result_fields"])},
        "highlight_fields": {document_type: highlight_fields},
        "filters": {document_type: filters},
    }


def adapt_record(record: dict[str, Any]) -> RawResult:
    """
    Wrap one API record into classified field values.

    Regular fields become Wrapped with their highlight as snippet;
    underscore-prefixed metadata stays Opaque.
    """
    highlight = record.get("highlight") or {}
    result: dict[str, FieldValue] = {}

    for name, value in record.items():
        if name == "highlight":
            continue
        if name.startswith("_"):
            result[name] = Opaque(value)
        else:
            result[name] = Wrapped(raw=value, snippet=highlight.get(name))

    for name, snippet in highlight.items():
        if name not in result:
            result[name] = Wrapped(snippet=snippet)

    return result


def adapt_response(
    data: dict[str, Any], term: str, page: int, document_type: str
) -> SearchResults:
    """
    Convert a Site Search API response body into SearchResults.

    Raises:
        ConnectorError: If the body does not have the expected shape
    """
    try:
        records = (data.get("records") or {}).get(document_type) or []
        info = (data.get("info") or {}).get(document_type) or {}
        results = [adapt_record(record) for record in records]
        total_pages = int(info.get("num_pages", 0))
        total_results = int(info.get("total_result_count", len(results)))
    except (AttributeError, TypeError, ValueError) as e:
        raise ConnectorError(f"Unexpected search API response: {e}") from e

    return SearchResults(
        query=term,
        page=page,
        results=results,
        total_pages=total_pages,
        total_results=total_results,
    )


class QueryConnector:
    """Site Search API client returning raw result sets."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._client = client

    @asynccontextmanager
    async def _client_context(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.settings.request_timeout) as client:
            yield client

    async def search(
        self,
        term: str,
        page: int = 1,
        result_fields: dict[str, ResultFieldSpec] | None = None,
        filters: list[SearchFilter] | None = None,
    ) -> SearchResults:
        """
        Query the Site Search API.

        Args:
            term: The search query string
            page: 1-based page number
            result_fields: Fields to fetch and how (default: title, body, url)
            filters: Field filters (default: site sections, excluded page types)

        Returns:
            SearchResults with raw result records and paging metadata

        Raises:
            ConnectorError: If the API request fails
        """
        request = build_search_request(
            term, page, self.settings, result_fields, filters
        )
        payload = to_api_payload(request, self.settings)

        # Retry logic with exponential backoff for rate limiting
        max_retries = self.settings.max_retries

        async with self._client_context() as client:
            for attempt, delay in enumerate(
                itertools.islice(
                    exponential_backoff(factor=self.settings.retry_backoff_factor),
                    max_retries + 1,
                )
            ):
                await asyncio.sleep(delay)  # 0, 1, 2, 4, ... seconds

                try:
                    response = await client.post(
                        self.settings.api_endpoint, json=payload
                    )
                    response.raise_for_status()
                    data = response.json()
                except httpx.TimeoutException as e:
                    raise ConnectorError("Search request timed out") from e
                except httpx.HTTPStatusError as e:
                    if e.response.status_code == 429 and attempt < max_retries:
                        logger.warning(
                            f"Rate limited, retrying (attempt {attempt + 1}/{max_retries + 1})"
                        )
                        continue
                    raise ConnectorError(
                        f"Search API returned status {e.response.status_code}: {e.response.text}"
                    ) from e
                except Exception as e:
                    raise ConnectorError(f"Search request failed: {str(e)}") from e

                if not isinstance(data, dict):
                    raise ConnectorError("Search API returned a non-object body")

                results = adapt_response(
                    data, term, page, self.settings.document_type
                )
                logger.info(
                    f"🔍 '{term}' page {page}: {len(results['results'])} results "
                    f"({results['total_results']} total, {results['total_pages']} pages)"
                )
                return results

        # If we get here, all retries failed
        raise ConnectorError("Maximum retries exceeded for rate limited requests")

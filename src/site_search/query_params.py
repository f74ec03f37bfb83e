"""
Query parameter synchronization.

Keeps a search session and the navigable URL in step: the URL is the source
of truth on load and on back/forward navigation, and every finished search
is written back to it as a new history entry.
"""

from collections.abc import Callable

import httpx

from .logger import get_logger
from .session import SearchSession
from .types import SearchStatus, SessionState

QUERY_PARAM = "q"
PAGE_PARAM = "page"

NavigationListener = Callable[[httpx.URL], None]

logger = get_logger("query_params")


class NavigableLocation:
    """In-memory browser location with a history stack."""

    def __init__(self, href: str):
        self._entries: list[httpx.URL] = [httpx.URL(href)]
        self._index = 0
        self._listeners: list[NavigationListener] = []

    @property
    def url(self) -> httpx.URL:
        return self._entries[self._index]

    @property
    def href(self) -> str:
        return str(self.url)

    @property
    def params(self) -> httpx.QueryParams:
        return self.url.params

    @property
    def history_length(self) -> int:
        return len(self._entries)

    def push(self, url: httpx.URL | str) -> None:
        """Add a history entry without navigating; forward entries are dropped."""
        del self._entries[self._index + 1 :]
        self._entries.append(httpx.URL(url))
        self._index += 1

    def replace(self, url: httpx.URL | str) -> None:
        self._entries[self._index] = httpx.URL(url)

    def back(self) -> None:
        if self._index > 0:
            self._index -= 1
            self._notify()

    def forward(self) -> None:
        if self._index < len(self._entries) - 1:
            self._index += 1
            self._notify()

    def listen(self, listener: NavigationListener) -> Callable[[], None]:
        """
        Register a callback for back/forward navigation.

        Args:
            listener: Called with the URL navigated to

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unlisten() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unlisten

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.url)


def read_page(params: httpx.QueryParams) -> int:
    """Page number from the query string; anything invalid means page 1."""
    try:
        return max(int(params.get(PAGE_PARAM, "1")), 1)
    except ValueError:
        return 1


def with_search_params(url: httpx.URL, term: str, page: int = 1) -> httpx.URL:
    """
    Set or clear the search parameters on a URL.

    Other query parameters are kept as they are. An empty term removes "q"
    and "page" instead of leaving "q=" behind.
    """
    if not term:
        return url.copy_remove_param(QUERY_PARAM).copy_remove_param(PAGE_PARAM)

    url = url.copy_set_param(QUERY_PARAM, term)
    if page > 1:
        return url.copy_set_param(PAGE_PARAM, str(page))
    return url.copy_remove_param(PAGE_PARAM)


class QueryParamSync:
    """Two-way binding between a SearchSession and a NavigableLocation."""

    def __init__(self, session: SearchSession, location: NavigableLocation):
        self.session = session
        self.location = location
        self._unsubscribers: list[Callable[[], None]] = []
        # Search driven by the URL itself; its result must not add history.
        self._restoring: tuple[str, int] | None = None

    @property
    def mounted(self) -> bool:
        return bool(self._unsubscribers)

    def mount(self) -> None:
        """Derive the session from the current URL and start syncing."""
        if self.mounted:
            return

        self._unsubscribers = [
            self.session.subscribe(self._on_state),
            self.location.listen(self._on_navigate),
        ]

        term = self.location.params.get(QUERY_PARAM, "")
        if term.strip():
            self._restore(term, read_page(self.location.params))

    def unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._restoring = None

    def _restore(self, term: str, page: int) -> None:
        self._restoring = (term.strip(), page)
        self.session.submit(term, page)

    def _on_navigate(self, url: httpx.URL) -> None:
        term = url.params.get(QUERY_PARAM, "")
        logger.debug(f"Navigation restored search '{term}'")
        self._restore(term, read_page(url.params))

    def _on_state(self, state: SessionState) -> None:
        if state.status == SearchStatus.LOADING:
            return

        restoring, self._restoring = self._restoring, None
        replace = restoring == (state.query_term, state.page)

        if state.status in (SearchStatus.SUCCESS, SearchStatus.EMPTY):
            self._write(state.query_term, state.page, replace)
        elif state.status == SearchStatus.IDLE:
            self._write("", 1, replace)

    def _write(self, term: str, page: int, replace: bool = False) -> None:
        current = self.location.url
        updated = with_search_params(current, term, page)
        # Compare decoded parameters; httpx re-encodes "%20" as "+".
        if updated.params == current.params:
            return
        if replace:
            self.location.replace(updated)
        else:
            self.location.push(updated)

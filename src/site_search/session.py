"""
Search Session State Machine

Coordinates query submission, debouncing, paging and the
loading / empty / error / success states of one search box. Responses are
tagged with the generation of the submission that spawned them; only the
current generation may update state.
"""

import asyncio
import dataclasses
from collections.abc import Callable
from typing import Protocol

from .errors import ConnectorError
from .logger import get_logger
from .processing import sanitize_results
from .types import ResultFields, SearchResults, SearchStatus, SessionState

StateListener = Callable[[SessionState], None]

DEFAULT_DEBOUNCE_SECONDS = 0.5


class SearchConnector(Protocol):
    async def search(self, term: str, page: int = 1) -> SearchResults: ...


class SearchSession:
    """
    State machine for one search context.

    Owns its debounce timers and generation counter, so independent search
    widgets never interfere with each other.
    """

    def __init__(
        self,
        connector: SearchConnector,
        *,
        current_origin: str,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        fields: ResultFields = ResultFields(),
    ):
        self.connector = connector
        self.current_origin = current_origin
        self.debounce_seconds = debounce_seconds
        self.fields = fields

        self._state = SessionState()
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[StateListener] = []
        self.logger = get_logger("session")

    @property
    def state(self) -> SessionState:
        """Copy of the current state; consumers never mutate the session."""
        return dataclasses.replace(self._state, results=list(self._state.results))

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a callback for state transitions.

        Args:
            listener: Called with a state copy after every transition

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def submit(self, term: str, page: int = 1) -> None:
        """
        Submit a query.

        An empty term returns the session to idle without querying. Any other
        term moves to loading and schedules a debounced connector call; a
        later submission within the debounce window replaces this one.
        """
        self._generation += 1
        term = term.strip()
        page = max(page, 1)

        if not term:
            self._transition(SessionState(status=SearchStatus.IDLE))
            return

        self._transition(
            SessionState(query_term=term, page=page, status=SearchStatus.LOADING)
        )

        task = asyncio.get_running_loop().create_task(
            self._run(self._generation, term, page)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def change_page(self, page: int) -> None:
        """Re-query the current term for another page."""
        self.submit(self._state.query_term, page)

    async def drain(self) -> None:
        """Wait for every outstanding debounce timer and request."""
        while pending := [task for task in self._tasks if not task.done()]:
            await asyncio.gather(*pending, return_exceptions=True)

    async def close(self) -> None:
        """Cancel outstanding work and ignore any response still in flight."""
        self._generation += 1
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(self, generation: int, term: str, page: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if not self._is_current(generation):
            # Coalesced into a later submission
            return

        self.logger.debug(f"[{generation}] Querying '{term}' page {page}")
        try:
            response = await self.connector.search(term, page)
        except ConnectorError as e:
            self._finish_with_error(generation, term, page, str(e))
            return
        except Exception as e:
            self.logger.exception(f"[{generation}] Unexpected connector failure")
            self._finish_with_error(generation, term, page, str(e))
            return

        if not self._is_current(generation):
            self.logger.debug(f"[{generation}] Discarding stale response for '{term}'")
            return

        results = sanitize_results(
            response["results"], self.current_origin, self.fields
        )
        status = SearchStatus.SUCCESS if results else SearchStatus.EMPTY

        self._transition(
            SessionState(
                query_term=term,
                page=page,
                status=status,
                results=results,
                total_pages=response["total_pages"],
                total_results=response["total_results"] if results else 0,
            )
        )

    def _finish_with_error(
        self, generation: int, term: str, page: int, message: str
    ) -> None:
        if not self._is_current(generation):
            self.logger.debug(f"[{generation}] Discarding stale failure for '{term}'")
            return

        self.logger.warning(f"❌ [{generation}] Search for '{term}' failed: {message}")
        self._transition(
            SessionState(
                query_term=term, page=page, status=SearchStatus.ERROR, error=message
            )
        )

    def _transition(self, state: SessionState) -> None:
        self._state = state
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                self.logger.exception("Search state listener failed")

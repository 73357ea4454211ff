"""
Skip-gated retrieval bindings.

Each facet of a screen owns one ``RetrievalBinding``. On every input change
the controller hands the current ``ListingQuery`` to all bindings; only the
binding whose facet matches dispatches, the others are suppressed and issue
nothing. Results are accepted only from the most recent dispatch of an
enabled binding (last-dispatched-wins); anything older is dropped on arrival.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from newsdesk_console.core.background_task import BackgroundTaskManager
from newsdesk_console.core.cancellation import CancellationToken
from newsdesk_console.listing.facets import Facet
from newsdesk_console.listing.models import ListingQuery, ListingResult

logger = logging.getLogger(__name__)

# (facet_value, page, page_size) -> ListingResult; may block, runs off the UI thread
FetchFn = Callable[[str, int, int], ListingResult]


@dataclass(frozen=True)
class RetrievalState:
    """Snapshot of one binding.

    Attributes:
        query: Last dispatched (or seeded) query, None before the first one
        result: Last successful result; kept while a newer page or a refetch
            of the same filter value is in flight
        fetching: A dispatch is in flight
        error: Failure of the last dispatch, cleared by the next dispatch
        resolved: At least one dispatch succeeded since the binding was enabled
    """
    query: Optional[ListingQuery] = None
    result: Optional[ListingResult] = None
    fetching: bool = False
    error: Optional[Exception] = None
    resolved: bool = False


class RetrievalBinding:
    """Gated async retrieval for one facet."""

    def __init__(
        self,
        facet: Facet,
        fetch: FetchFn,
        task_manager: Optional[Any] = None,
        token: Optional[CancellationToken] = None,
        on_change: Optional[Callable[[Facet], None]] = None,
    ):
        self.facet = facet
        self._fetch = fetch
        self._task_manager = task_manager if task_manager is not None else BackgroundTaskManager(token=token)
        self._token = token
        self._on_change = on_change
        self._state = RetrievalState()
        self._active = False
        self._generation = 0

    @property
    def state(self) -> RetrievalState:
        return self._state

    @property
    def active(self) -> bool:
        return self._active

    def seed(self, query: ListingQuery) -> None:
        """Mark query as already satisfied (hydration) so sync() skips it."""
        if query.facet is not self.facet:
            raise ValueError(f"Cannot seed {self.facet} binding with {query.facet} query")
        self._state = RetrievalState(query=query)
        self._active = True

    def sync(self, query: ListingQuery) -> bool:
        """Gate this binding against the current query.

        Returns:
            True if a request was dispatched
        """
        if query.facet is not self.facet:
            self._suppress()
            return False
        self._active = True
        if query == self._state.query:
            return False
        self._dispatch(query)
        return True

    def refetch(self) -> bool:
        """Reissue the current query. No-op while suppressed."""
        if not self._active or self._state.query is None:
            return False
        self._dispatch(self._state.query)
        return True

    def _suppress(self) -> None:
        if not self._active and self._state == RetrievalState():
            return
        self._active = False
        # Orphan anything in flight and forget results from before suppression
        self._generation += 1
        self._state = RetrievalState()
        logger.debug(f"Suppressed {self.facet.value} retrieval")

    def _dispatch(self, query: ListingQuery) -> None:
        if self._token is not None and self._token.cancelled:
            return
        self._generation += 1
        generation = self._generation
        previous = self._state.query
        if previous is not None and previous.selection != query.selection:
            # Rows of another filter value are not a usable stale result
            self._state = replace(self._state, result=None)
        self._state = replace(self._state, query=query, fetching=True, error=None)
        logger.debug(f"Dispatching {query}")
        self._notify()

        self._task_manager.run(
            target=self._fetch,
            args=(query.facet_value, query.page, query.page_size),
            on_success=lambda result: self._on_resolved(generation, query, result),
            on_error=lambda error: self._on_failed(generation, query, error),
        )

    def _is_current(self, generation: int, query: ListingQuery) -> bool:
        if self._token is not None and self._token.cancelled:
            return False
        if generation != self._generation:
            logger.debug(f"Discarding superseded result for {query}")
            return False
        return True

    def _on_resolved(self, generation: int, query: ListingQuery, result: ListingResult) -> None:
        if not self._is_current(generation, query):
            return
        self._state = RetrievalState(query=query, result=result, resolved=True)
        self._notify()

    def _on_failed(self, generation: int, query: ListingQuery, error: Exception) -> None:
        if not self._is_current(generation, query):
            return
        logger.warning(f"Retrieval failed for {query}: {error}")
        self._state = replace(self._state, fetching=False, error=error)
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.facet)

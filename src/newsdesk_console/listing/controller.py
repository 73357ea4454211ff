"""
Faceted listing controller.

One controller drives one listing screen. It owns the filter inputs,
pagination, the per-facet retrieval bindings and the mutation coordinator,
and publishes a single ``ViewState`` for the screen to render.

Control flow:
    raw search text -> DebouncedCommit -> committed inputs
    category/status/page -> inputs / pagination
    inputs -> select() -> PaginationState.query_for() -> bindings.sync()
    binding results -> project() -> view_state_changed
    mutation outcome -> MutationRefetchCoordinator -> active binding refetch

All state changes happen on the Qt thread; remote calls run on
``BackgroundTask`` workers and come back through queued signals.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from PyQt6.QtCore import QObject, pyqtSignal

from newsdesk_console.config import get_console_config
from newsdesk_console.core.cancellation import CancellationToken
from newsdesk_console.core.debounce_timer import DebouncedCommit
from newsdesk_console.listing.facets import (
    ALL_STATUSES, Facet, FacetInputs, FacetSelection, NewsStatus, select,
)
from newsdesk_console.listing.models import ListingQuery, ListingResult, ViewState
from newsdesk_console.listing.mutations import MutationKind, MutationRefetchCoordinator
from newsdesk_console.listing.pagination import PaginationState
from newsdesk_console.listing.projector import project
from newsdesk_console.listing.retrieval import FetchFn, RetrievalBinding

logger = logging.getLogger(__name__)

_STATUS_VALUES = {status.value for status in NewsStatus}


class MutationClient(Protocol):
    """Remote create/update/delete for one content type."""

    def create_item(self, payload: Mapping[str, Any]) -> Any:
        ...

    def update_item(self, item_id: str, payload: Mapping[str, Any]) -> Any:
        ...

    def delete_item(self, item_id: str) -> Any:
        ...


class FacetedListingController(QObject):
    """
    Reusable controller for every faceted listing screen.

    Usage:
        controller = FacetedListingController.for_client(client, initial_snapshot=snapshot)
        controller.view_state_changed.connect(self._render)
        search_input.textChanged.connect(controller.set_search_text)
        ...
        controller.close()  # On screen teardown
    """

    view_state_changed = pyqtSignal(object)   # ViewState
    query_changed = pyqtSignal(object)        # ListingQuery
    mutation_succeeded = pyqtSignal(object, object)  # MutationKind, payload
    mutation_failed = pyqtSignal(object, object)     # MutationKind, Exception

    def __init__(
        self,
        fetchers: Mapping[Facet, FetchFn],
        page_size: Optional[int] = None,
        debounce_ms: Optional[int] = None,
        initial_snapshot: Optional[ListingResult] = None,
        initial_inputs: Optional[FacetInputs] = None,
        mutation_client: Optional[MutationClient] = None,
        task_manager_factory: Optional[Callable[[], Any]] = None,
        parent=None,
    ):
        super().__init__(parent)
        if Facet.NONE not in fetchers:
            raise ValueError("A default listing fetcher (Facet.NONE) is required")

        config = get_console_config()
        page_size = page_size if page_size is not None else config.page_size
        debounce_ms = debounce_ms if debounce_ms is not None else config.debounce_ms
        make_task_manager = task_manager_factory or (lambda: None)

        self._token = CancellationToken()
        self._mutation_client = mutation_client
        self._inputs = initial_inputs or FacetInputs()
        self._raw_search_text = self._inputs.search_text
        self._pagination = PaginationState(page_size)
        self._search = DebouncedCommit(debounce_ms, self._apply_search, token=self._token)
        self._bindings: Dict[Facet, RetrievalBinding] = {
            facet: RetrievalBinding(
                facet,
                fetch,
                task_manager=make_task_manager(),
                token=self._token,
                on_change=self._on_binding_changed,
            )
            for facet, fetch in fetchers.items()
        }
        self._coordinator = MutationRefetchCoordinator(
            refetch_active=self.refetch,
            on_success=self.mutation_succeeded.emit,
            on_failure=self.mutation_failed.emit,
            task_manager=make_task_manager(),
            token=self._token,
        )
        self._check_supported(select(self._inputs))

        self._snapshot = initial_snapshot
        self._query: Optional[ListingQuery] = None
        self._view_state = ViewState()
        self._updating = False

        if initial_snapshot is not None:
            # Hydration covers the default listing, page 1, only
            self._bindings[Facet.NONE].seed(
                ListingQuery(Facet.NONE, "", 1, self._pagination.page_size)
            )
        self._update()

    @classmethod
    def for_client(cls, client, **kwargs) -> "FacetedListingController":
        """Build a controller whose bindings and mutations go through client."""
        fetchers = {facet: client.fetcher_for(facet) for facet in client.content_type.facets}
        kwargs.setdefault("mutation_client", client)
        return cls(fetchers, **kwargs)

    # --- Read-only state ---

    @property
    def inputs(self) -> FacetInputs:
        return self._inputs

    @property
    def raw_search_text(self) -> str:
        return self._raw_search_text

    @property
    def query(self) -> ListingQuery:
        return self._query

    @property
    def active_facet(self) -> Facet:
        return self._query.facet

    @property
    def page(self) -> int:
        return self._query.page

    @property
    def view_state(self) -> ViewState:
        return self._view_state

    @property
    def closed(self) -> bool:
        return self._token.cancelled

    def has_active_filters(self) -> bool:
        return bool(
            self._raw_search_text
            or self._inputs.category
            or self._inputs.status != ALL_STATUSES
        )

    # --- Input ---

    def set_search_text(self, raw_text: str) -> None:
        """Record a keystroke; the value is committed after the quiescence window."""
        if Facet.SEARCH not in self._bindings and raw_text.strip():
            raise ValueError("This screen does not support search")
        self._raw_search_text = raw_text
        self._search.commit(raw_text)

    def flush_search(self) -> None:
        """Commit pending search text immediately (e.g. on Enter)."""
        self._search.flush()

    def set_category(self, category: str) -> None:
        category = category or ""
        if category and Facet.CATEGORY not in self._bindings:
            raise ValueError("This screen does not support category filtering")
        self._inputs = self._inputs.with_category(category)
        self._pagination.reset()
        self._update()

    def set_status(self, status: str) -> None:
        status = status or ALL_STATUSES
        if status != ALL_STATUSES:
            if status not in _STATUS_VALUES:
                raise ValueError(f"Unknown status {status!r}; expected one of {sorted(_STATUS_VALUES)}")
            if Facet.STATUS not in self._bindings:
                raise ValueError("This screen does not support status filtering")
        self._inputs = self._inputs.with_status(status)
        self._pagination.reset()
        self._update()

    def set_page(self, page: int) -> None:
        self._pagination.set_page(page)
        self._update()

    def next_page(self) -> bool:
        result = self._view_state.result
        total_pages = result.total_pages if result is not None else 1
        if self.page >= total_pages:
            return False
        self.set_page(self.page + 1)
        return True

    def previous_page(self) -> bool:
        if self.page <= 1:
            return False
        self.set_page(self.page - 1)
        return True

    def clear_filters(self) -> None:
        """Reset every filter and the page in one update."""
        self._search.cancel()
        self._raw_search_text = ""
        self._inputs = FacetInputs()
        self._pagination.reset()
        self._update()

    # --- Retrieval ---

    def refetch(self) -> bool:
        """Reissue the active facet's current query."""
        if self.closed:
            return False
        dispatched = self._bindings[self.active_facet].refetch()
        self._emit_view_state()
        return dispatched

    def retry(self) -> bool:
        """Retry action for a failed retrieval."""
        return self.refetch()

    # --- Mutations ---

    def create_item(self, payload: Mapping[str, Any], button=None):
        return self._coordinator.submit(
            MutationKind.CREATE, self._require_mutations().create_item, args=(payload,), button=button
        )

    def update_item(self, item_id: str, payload: Mapping[str, Any], button=None):
        return self._coordinator.submit(
            MutationKind.UPDATE, self._require_mutations().update_item, args=(item_id, payload), button=button
        )

    def delete_item(self, item_id: str, button=None):
        return self._coordinator.submit(
            MutationKind.DELETE, self._require_mutations().delete_item, args=(item_id,), button=button
        )

    def after_mutation(self, kind: MutationKind, error: Optional[Exception] = None) -> bool:
        """Report a mutation performed elsewhere (e.g. an edit screen)."""
        return self._coordinator.after_mutation(kind, error=error)

    # --- Teardown ---

    def close(self) -> None:
        """Cancel pending debounce and orphan in-flight results."""
        if not self.closed:
            logger.debug("Closing listing controller")
        self._token.cancel()

    # --- Internals ---

    def _require_mutations(self) -> MutationClient:
        if self._mutation_client is None:
            raise ValueError("No mutation client configured for this screen")
        return self._mutation_client

    def _check_supported(self, selection: FacetSelection) -> None:
        if selection.facet not in self._bindings:
            raise ValueError(f"Facet {selection.facet.value!r} is not supported by this screen")

    def _apply_search(self, text: str) -> None:
        self._inputs = self._inputs.with_search(text)
        self._pagination.reset()
        self._update()

    def _update(self) -> None:
        if self.closed:
            return
        selection = select(self._inputs)
        self._check_supported(selection)
        query = self._pagination.query_for(selection)
        if query.facet is not Facet.NONE:
            self._snapshot = None

        previous = self._query
        self._query = query
        if previous is None or previous.facet is not query.facet:
            logger.debug(f"Active facet: {query.facet.value}")

        self._updating = True
        try:
            # Suppress the others before the active binding dispatches
            for facet, binding in self._bindings.items():
                if facet is not query.facet:
                    binding.sync(query)
            self._bindings[query.facet].sync(query)
        finally:
            self._updating = False

        if query != previous:
            self.query_changed.emit(query)
        self._emit_view_state()

    def _on_binding_changed(self, facet: Facet) -> None:
        if self._updating or self.closed or self._query is None:
            return
        if facet is not self._query.facet:
            return
        self._emit_view_state()

    def _emit_view_state(self) -> None:
        active = self._query.facet
        states = {facet: binding.state for facet, binding in self._bindings.items()}
        self._view_state = project(active, states, snapshot=self._snapshot)
        if active is Facet.NONE and states[Facet.NONE].resolved:
            self._snapshot = None
        self.view_state_changed.emit(self._view_state)

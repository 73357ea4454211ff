"""Pagination state with facet-change reset rules."""

import logging
from typing import Optional

from newsdesk_console.listing.facets import FacetSelection
from newsdesk_console.listing.models import ListingQuery

logger = logging.getLogger(__name__)


class PaginationState:
    """
    Current page and page size for one screen.

    The page is tied to the selection it was chosen under: applying a
    different selection (another facet, or another value of the same facet)
    resets the page to 1 in the same call that builds the next query.
    Changing the page alone never touches the selection.
    """

    def __init__(self, page_size: int, page: int = 1):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        self._page_size = page_size
        self._page = page
        self._selection: Optional[FacetSelection] = None

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    def query_for(self, selection: FacetSelection) -> ListingQuery:
        """Return the query for selection, resetting the page if it changed."""
        if self._selection is not None and selection != self._selection:
            if self._page != 1:
                logger.debug(f"Selection changed to {selection}; page reset from {self._page}")
            self._page = 1
        self._selection = selection
        return ListingQuery.for_selection(selection, self._page, self._page_size)

    def set_page(self, page: int) -> None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        self._page = page

    def reset(self) -> None:
        self._page = 1

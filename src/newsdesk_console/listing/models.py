"""Listing query, result and view-state types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, Tuple, TypeVar

from newsdesk_console.listing.facets import Facet, FacetSelection

T = TypeVar('T')


@dataclass(frozen=True)
class ListingQuery:
    """Uniquely determines which remote call, if any, is issued."""
    facet: Facet
    facet_value: str
    page: int
    page_size: int

    def __post_init__(self):
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @classmethod
    def for_selection(cls, selection: FacetSelection, page: int, page_size: int) -> "ListingQuery":
        return cls(selection.facet, selection.value, page, page_size)

    @property
    def selection(self) -> FacetSelection:
        return FacetSelection(self.facet, self.facet_value)


@dataclass(frozen=True)
class ListingResult(Generic[T]):
    """One page of items. Items are read-only snapshots keyed by ``_id``."""
    items: Tuple[T, ...] = ()
    total: int = 0
    total_pages: int = 1
    current_page: int = 1

    def __post_init__(self):
        # Normalise list input from JSON payloads
        object.__setattr__(self, "items", tuple(self.items))
        if self.total < 0:
            raise ValueError(f"total must be >= 0, got {self.total}")
        object.__setattr__(self, "total_pages", max(1, self.total_pages))

    @property
    def is_empty(self) -> bool:
        return not self.items


class Phase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    BACKGROUND_REFRESHING = "background_refreshing"
    ERROR = "error"


@dataclass(frozen=True)
class ViewState:
    """What the screen renders. Derived on every change, never stored."""
    phase: Phase = Phase.IDLE
    facet: Facet = Facet.NONE
    result: Optional[ListingResult] = None
    error_detail: Optional[Any] = field(default=None, compare=False)

    @property
    def has_error(self) -> bool:
        return self.error_detail is not None

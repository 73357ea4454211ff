"""
Facet model and precedence resolution.

A listing screen has three independent filter inputs (search text,
category, status) but only one retrieval mode is honoured at a time. The
resolver imposes a fixed precedence, first match wins:

    Search > Category > Status > None

``select()`` returns the winner as a ``FacetSelection`` carrying its own
value, so "what is active" is one value rather than three flags.
"""

from dataclasses import dataclass, replace
from enum import Enum

ALL_STATUSES = "all"


class Facet(Enum):
    """Mutually exclusive retrieval modes."""
    SEARCH = "search"
    CATEGORY = "category"
    STATUS = "status"
    NONE = "none"


class NewsStatus(Enum):
    """Editorial status flags accepted by the status listing endpoint."""
    BREAKING = "breaking"
    LIVE = "live"
    HEADLINE = "headline"
    TOPSTORY = "topstory"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class FacetInputs:
    """Raw filter inputs of a screen.

    ``search_text`` is the committed (post-debounce) text; raw keystrokes
    never reach this object.
    """
    search_text: str = ""
    category: str = ""
    status: str = ALL_STATUSES

    def with_search(self, text: str) -> "FacetInputs":
        return replace(self, search_text=text)

    def with_category(self, category: str) -> "FacetInputs":
        return replace(self, category=category)

    def with_status(self, status: str) -> "FacetInputs":
        return replace(self, status=status)

    @property
    def is_empty(self) -> bool:
        return not self.search_text and not self.category and self.status == ALL_STATUSES


@dataclass(frozen=True)
class FacetSelection:
    """The active facet together with the value it filters by."""
    facet: Facet
    value: str = ""

    @classmethod
    def default(cls) -> "FacetSelection":
        return cls(Facet.NONE, "")


def resolve(inputs: FacetInputs) -> Facet:
    """Return the single active facet for the given inputs."""
    return select(inputs).facet


def select(inputs: FacetInputs) -> FacetSelection:
    """Return the active facet and its value. Pure and total."""
    search = inputs.search_text.strip()
    if search:
        return FacetSelection(Facet.SEARCH, search)
    if inputs.category:
        return FacetSelection(Facet.CATEGORY, inputs.category)
    if inputs.status and inputs.status != ALL_STATUSES:
        return FacetSelection(Facet.STATUS, inputs.status)
    return FacetSelection.default()

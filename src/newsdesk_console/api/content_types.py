"""Registry of content types across the published sites."""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from newsdesk_console.listing.facets import Facet

AVAILABLE_CATEGORIES: Tuple[str, ...] = (
    "Politics",
    "Business",
    "Technology",
    "Entertainment",
    "Sports",
    "Health",
    "Science",
    "Education",
    "Lifestyle",
    "Crime",
    "World",
    "Local",
    "Opinion",
    "Weather",
)

_SEARCH_ONLY = frozenset({Facet.NONE, Facet.SEARCH})
_CATEGORY = frozenset({Facet.NONE, Facet.SEARCH, Facet.CATEGORY})
_FULL = frozenset({Facet.NONE, Facet.SEARCH, Facet.CATEGORY, Facet.STATUS})


@dataclass(frozen=True)
class ContentType:
    """One listable content type on one site.

    Attributes:
        site: Site slug, e.g. "ghanapolitan"
        kind: Content kind, e.g. "article"
        path: API path below the base URL
        items_key: Key of the item list inside the response ``data`` object
        label: Singular display label
        plural_label: Plural display label
        facets: Facets the screen offers (NONE is always present)
    """
    site: str
    kind: str
    path: str
    items_key: str
    label: str
    plural_label: str
    facets: FrozenSet[Facet] = _SEARCH_ONLY
    categories: Tuple[str, ...] = AVAILABLE_CATEGORIES

    @property
    def key(self) -> Tuple[str, str]:
        return (self.site, self.kind)

    def supports(self, facet: Facet) -> bool:
        return facet in self.facets


def _content(site: str, kind: str, facets: FrozenSet[Facet], path: str = None) -> ContentType:
    label = kind.capitalize()
    return ContentType(
        site=site,
        kind=kind,
        path=path or f"{site}/{kind}",
        items_key=f"{kind}s",
        label=label,
        plural_label=f"{label}s",
        facets=facets,
    )


CONTENT_TYPES: Dict[Tuple[str, str], ContentType] = {
    content.key: content
    for content in (
        _content("ghanapolitan", "article", _FULL),
        _content("ghanapolitan", "feature", _CATEGORY),
        _content("ghanapolitan", "graphic", _CATEGORY),
        _content("ghanapolitan", "opinion", _CATEGORY),
        _content("ghanapolitan", "section", _SEARCH_ONLY, path="ghanapolitan/sections"),
        _content("afrobeatsrep", "article", _CATEGORY),
        _content("afrobeatsrep", "feature", _CATEGORY),
        _content("ghanascore", "article", _FULL),
        _content("ghanascore", "feature", _CATEGORY),
    )
}


def get_content_type(site: str, kind: str) -> ContentType:
    """Look up a registered content type. Raises ValueError if unknown."""
    try:
        return CONTENT_TYPES[(site, kind)]
    except KeyError:
        known = ", ".join(f"{s}/{k}" for s, k in sorted(CONTENT_TYPES))
        raise ValueError(f"Unknown content type {site}/{kind}; known: {known}") from None


def content_types_for_site(site: str) -> Tuple[ContentType, ...]:
    return tuple(c for c in CONTENT_TYPES.values() if c.site == site)

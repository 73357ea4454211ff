"""User-facing texts for a listing screen, per active facet."""

from newsdesk_console.listing.facets import Facet, FacetSelection


def headline(selection: FacetSelection, plural_label: str) -> str:
    """Screen title, e.g. "Politics Articles" or "Breaking Articles"."""
    if selection.facet is Facet.CATEGORY:
        return f"{selection.value} {plural_label}"
    if selection.facet is Facet.STATUS:
        return f"{selection.value.capitalize()} {plural_label}"
    return plural_label


def loading_text(selection: FacetSelection, plural_label: str) -> str:
    noun = plural_label.lower()
    if selection.facet is Facet.SEARCH:
        return f"Searching {noun}..."
    if selection.facet in (Facet.CATEGORY, Facet.STATUS):
        return f"Loading {selection.value} {noun}..."
    return f"Loading {noun}..."


def error_text(selection: FacetSelection, plural_label: str) -> str:
    noun = plural_label.lower()
    if selection.facet is Facet.SEARCH:
        return f"Error searching {noun}"
    if selection.facet in (Facet.CATEGORY, Facet.STATUS):
        return f"Error loading {selection.value} {noun}"
    return f"Error loading {noun}"


def empty_text(selection: FacetSelection, plural_label: str) -> str:
    noun = plural_label.lower()
    if selection.facet is Facet.SEARCH:
        return f'No {noun} found for "{selection.value}"'
    if selection.facet is Facet.CATEGORY:
        return f"No {noun} found in {selection.value} category"
    if selection.facet is Facet.STATUS:
        return f"No {selection.value} {noun} found"
    return f"No {noun} yet"


def retry_label(selection: FacetSelection) -> str:
    """Failed searches offer to clear the search instead of retrying it."""
    return "Clear Search" if selection.facet is Facet.SEARCH else "Retry"


def summary_text(selection: FacetSelection, total: int, plural_label: str) -> str:
    noun = plural_label.lower()
    if selection.facet is Facet.SEARCH:
        return f'Search results: {total} {noun} found for "{selection.value}"'
    return f"{total} {noun}"

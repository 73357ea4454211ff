"""Qt screens bound to listing controllers."""

from .listing_browser import ColumnDef, ContentListingBrowser, DEFAULT_COLUMNS

__all__ = [
    "ColumnDef",
    "ContentListingBrowser",
    "DEFAULT_COLUMNS",
]

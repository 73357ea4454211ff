"""
newsdesk-console: faceted content listings for a multi-site newsroom CMS.

Every listing screen of the console (articles, features, graphics,
opinions, sections) is driven by one reusable controller instead of a
per-screen copy of the same filter logic.

Architecture:
- Tier 1 (Core): Qt utilities with no domain logic (debounce, background
  tasks, cancellation tokens, timing)
- Tier 2 (API): Content-type registry and the remote listing client
- Tier 3 (Listing): Facet resolution, pagination, gated retrieval,
  view-state projection and mutation refetch
- Tier 4 (Widgets): Qt screens bound to a listing controller
"""

__version__ = "0.1.0"

from newsdesk_console.config import ConsoleConfig, get_console_config, set_console_config

__all__ = [
    "__version__",
    "ConsoleConfig",
    "get_console_config",
    "set_console_config",
]

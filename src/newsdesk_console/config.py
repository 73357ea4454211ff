"""Console configuration.

Applications set one process-wide ``ConsoleConfig`` at startup; library
code reads it through ``get_console_config()``.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_API_BASE_URL = "http://localhost:8080/api"


@dataclass
class ConsoleConfig:
    """Runtime configuration for listing screens and the API client.

    Attributes:
        api_base_url: Root of the content API (site and kind paths are appended)
        page_size: Items requested per page
        debounce_ms: Quiescence window before search text is committed
        request_timeout_s: Timeout for each HTTP request
        slow_request_threshold_ms: Remote calls slower than this are logged
        performance_logger_name: Logger receiving timing records
    """

    api_base_url: str = field(
        default_factory=lambda: os.getenv("NEWSDESK_API_URL", DEFAULT_API_BASE_URL)
    )
    page_size: int = 10
    debounce_ms: int = 500
    request_timeout_s: float = 15.0
    slow_request_threshold_ms: float = 1000.0
    performance_logger_name: str = "newsdesk_console.performance"

    def __post_init__(self):
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must not be negative, got {self.debounce_ms}")
        self.api_base_url = self.api_base_url.rstrip("/")

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        """Build a config from ``NEWSDESK_*`` environment variables."""
        kwargs = {}
        if "NEWSDESK_API_URL" in os.environ:
            kwargs["api_base_url"] = os.environ["NEWSDESK_API_URL"]
        if "NEWSDESK_PAGE_SIZE" in os.environ:
            kwargs["page_size"] = int(os.environ["NEWSDESK_PAGE_SIZE"])
        if "NEWSDESK_DEBOUNCE_MS" in os.environ:
            kwargs["debounce_ms"] = int(os.environ["NEWSDESK_DEBOUNCE_MS"])
        if "NEWSDESK_REQUEST_TIMEOUT" in os.environ:
            kwargs["request_timeout_s"] = float(os.environ["NEWSDESK_REQUEST_TIMEOUT"])
        return cls(**kwargs)


# Global config instance (set by application)
_console_config: Optional[ConsoleConfig] = None


def set_console_config(config: Optional[ConsoleConfig]) -> None:
    """Set the global console configuration.

    Args:
        config: ConsoleConfig instance, or None to restore defaults
    """
    global _console_config
    _console_config = config


def get_console_config() -> ConsoleConfig:
    """Get the current console configuration.

    Returns:
        Current ConsoleConfig or default if not set
    """
    if _console_config is None:
        return ConsoleConfig()
    return _console_config

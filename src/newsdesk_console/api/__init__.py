"""
Remote content API: content-type registry, HTTP client and errors.
"""

from .exceptions import NewsdeskError, RetrievalError, ApiResponseError, MutationError
from .content_types import (
    AVAILABLE_CATEGORIES,
    CONTENT_TYPES,
    ContentType,
    content_types_for_site,
    get_content_type,
)
from .client import ContentApiClient

__all__ = [
    "NewsdeskError",
    "RetrievalError",
    "ApiResponseError",
    "MutationError",
    "AVAILABLE_CATEGORIES",
    "CONTENT_TYPES",
    "ContentType",
    "content_types_for_site",
    "get_content_type",
    "ContentApiClient",
]

"""Content API exceptions."""

from typing import Optional


class NewsdeskError(Exception):
    """Base class for console errors."""


class RetrievalError(NewsdeskError):
    """Raised when a listing request fails (network, server or payload)."""

    def __init__(self, message: str, query=None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.query = query
        self.status_code = status_code


class ApiResponseError(RetrievalError):
    """Raised when a listing response cannot be parsed."""


class MutationError(NewsdeskError):
    """Raised when create, update or delete fails."""

    def __init__(
        self,
        message: str,
        kind=None,
        item_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.item_id = item_id
        self.status_code = status_code

"""
HTTP client for the content API.

One client serves one content type. Listing endpoints, relative to
``{api_base_url}/{content_type.path}``:

    GET /?page&limit                     default listing
    GET /search?q&page&limit             free-text search
    GET /category/{category}?page&limit  category filter
    GET /status/{status}?page&limit      status filter

Responses look like ``{"status": "success", "data": {"articles": [...]},
"total": 42, "totalPages": 5, "currentPage": 1}``. Mutations are
``POST /``, ``PUT /{id}`` and ``DELETE /{id}``.

Calls block; controllers run them on background tasks.
"""

import logging
from typing import Any, Callable, Mapping, Optional
from urllib.parse import quote

import requests

from newsdesk_console.config import get_console_config
from newsdesk_console.core.performance_monitor import timer
from newsdesk_console.listing.facets import Facet
from newsdesk_console.listing.models import ListingQuery, ListingResult
from newsdesk_console.listing.mutations import MutationKind
from newsdesk_console.api.content_types import ContentType
from newsdesk_console.api.exceptions import ApiResponseError, MutationError, RetrievalError

logger = logging.getLogger(__name__)


def _server_message(response: Optional[requests.Response]) -> Optional[str]:
    """Return the ``message`` field of an error body, if any."""
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


class ContentApiClient:
    """Listing and mutation calls for one content type."""

    def __init__(
        self,
        content_type: ContentType,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        config = get_console_config()
        self.content_type = content_type
        base = (base_url or config.api_base_url).rstrip("/")
        self.base_url = f"{base}/{content_type.path.strip('/')}"
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.request_timeout_s

    # --- Listing ---

    def list_items(self, page: int = 1, limit: int = 10) -> ListingResult:
        return self.fetch_page(ListingQuery(Facet.NONE, "", page, limit))

    def search_items(self, q: str, page: int = 1, limit: int = 10) -> ListingResult:
        return self.fetch_page(ListingQuery(Facet.SEARCH, q, page, limit))

    def list_by_category(self, category: str, page: int = 1, limit: int = 10) -> ListingResult:
        return self.fetch_page(ListingQuery(Facet.CATEGORY, category, page, limit))

    def list_by_status(self, status: str, page: int = 1, limit: int = 10) -> ListingResult:
        return self.fetch_page(ListingQuery(Facet.STATUS, status, page, limit))

    def fetcher_for(self, facet: Facet) -> Callable[[str, int, int], ListingResult]:
        """Return the fetch function a retrieval binding uses for facet."""
        if not self.content_type.supports(facet):
            raise ValueError(
                f"{self.content_type.site}/{self.content_type.kind} has no {facet.value} listing"
            )

        def fetch(facet_value: str, page: int, page_size: int) -> ListingResult:
            return self.fetch_page(ListingQuery(facet, facet_value, page, page_size))

        return fetch

    def fetch_page(self, query: ListingQuery) -> ListingResult:
        """Issue the request matching query and parse the page."""
        path, params = self._listing_request(query)
        noun = self.content_type.plural_label.lower()
        url = f"{self.base_url}{path}"
        try:
            with timer(f"GET {self.content_type.path}{path}", log_args=True, **params):
                response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            response = getattr(e, "response", None)
            message = _server_message(response) or f"Failed to fetch {noun}"
            status_code = response.status_code if response is not None else None
            logger.warning(f"GET {url} failed: {e}")
            raise RetrievalError(message, query=query, status_code=status_code) from e

        return self._parse_listing(response, query)

    def fetch_initial_snapshot(self) -> Optional[ListingResult]:
        """Pre-fetch the default listing, page 1, to hydrate a screen."""
        try:
            return self.list_items(page=1, limit=get_console_config().page_size)
        except RetrievalError as e:
            logger.warning(f"Failed to fetch initial {self.content_type.plural_label.lower()}: {e}")
            return None

    def _listing_request(self, query: ListingQuery):
        params = {"page": query.page, "limit": query.page_size}
        if query.facet is Facet.SEARCH:
            params = {"q": query.facet_value, **params}
            return "/search", params
        if query.facet is Facet.CATEGORY:
            return f"/category/{quote(query.facet_value, safe='')}", params
        if query.facet is Facet.STATUS:
            return f"/status/{quote(query.facet_value, safe='')}", params
        return "/", params

    def _parse_listing(self, response: requests.Response, query: ListingQuery) -> ListingResult:
        try:
            body = response.json()
        except ValueError as e:
            raise ApiResponseError("Response is not JSON", query=query,
                                   status_code=response.status_code) from e
        if not isinstance(body, dict):
            raise ApiResponseError("Response is not an object", query=query,
                                   status_code=response.status_code)
        if body.get("status", "success") != "success":
            message = body.get("message") or f"Failed to fetch {self.content_type.plural_label.lower()}"
            raise RetrievalError(message, query=query, status_code=response.status_code)

        data = body.get("data") or {}
        items = data.get(self.content_type.items_key)
        if items is None:
            items = data.get("items")
        if not isinstance(items, list):
            raise ApiResponseError(
                f"Response has no '{self.content_type.items_key}' list", query=query,
                status_code=response.status_code,
            )
        try:
            return ListingResult(
                items=items,
                total=int(body.get("total", len(items))),
                total_pages=int(body.get("totalPages", 1)),
                current_page=int(body.get("currentPage", query.page)),
            )
        except (TypeError, ValueError) as e:
            raise ApiResponseError(f"Malformed pagination: {e}", query=query,
                                   status_code=response.status_code) from e

    # --- Mutations ---

    def create_item(self, payload: Mapping[str, Any]) -> Any:
        return self._mutate(MutationKind.CREATE, "POST", "/", json=dict(payload))

    def update_item(self, item_id: str, payload: Mapping[str, Any]) -> Any:
        return self._mutate(MutationKind.UPDATE, "PUT", f"/{quote(item_id, safe='')}",
                            item_id=item_id, json=dict(payload))

    def delete_item(self, item_id: str) -> Any:
        return self._mutate(MutationKind.DELETE, "DELETE", f"/{quote(item_id, safe='')}",
                            item_id=item_id)

    def _mutate(self, kind: MutationKind, method: str, path: str,
                item_id: Optional[str] = None, json: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        default_message = f"Failed to {kind.value} {self.content_type.label.lower()}"
        try:
            with timer(f"{method} {self.content_type.path}{path}"):
                response = self.session.request(method, url, json=json, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            response = getattr(e, "response", None)
            status_code = response.status_code if response is not None else None
            logger.warning(f"{method} {url} failed: {e}")
            raise MutationError(_server_message(response) or default_message,
                                kind=kind, item_id=item_id, status_code=status_code) from e

        # 204 and other empty bodies carry only the status signal
        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("status") not in (None, "success"):
            raise MutationError(body.get("message") or default_message,
                                kind=kind, item_id=item_id, status_code=response.status_code)
        logger.info(f"{kind.value} {self.content_type.kind} succeeded (id={item_id})")
        return body

"""Tests for the content API client."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from newsdesk_console.api import (
    ApiResponseError, ContentApiClient, MutationError, RetrievalError, get_content_type,
)
from newsdesk_console.listing import Facet, MutationKind


def _response(body, status_code=200):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode() if body is not None else b""
    response.url = "http://api.test"
    return response


def _listing_body(key="articles", n=2, total=12, total_pages=6, page=1):
    return {
        "status": "success",
        "results": n,
        "total": total,
        "totalPages": total_pages,
        "currentPage": page,
        "data": {key: [{"_id": f"id{i}", "title": f"T{i}"} for i in range(n)]},
    }


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return ContentApiClient(
        get_content_type("ghanapolitan", "article"),
        base_url="http://api.test/api/",
        session=session,
        timeout=5,
    )


def test_default_listing_request(client, session):
    session.get.return_value = _response(_listing_body())

    result = client.list_items(page=2, limit=10)

    session.get.assert_called_once_with(
        "http://api.test/api/ghanapolitan/article/", params={"page": 2, "limit": 10}, timeout=5
    )
    assert [item["_id"] for item in result.items] == ["id0", "id1"]
    assert result.total == 12
    assert result.total_pages == 6


def test_search_category_and_status_requests(client, session):
    session.get.return_value = _response(_listing_body())

    client.search_items("budget cuts", page=1, limit=10)
    client.list_by_category("Politics", page=3, limit=10)
    client.list_by_status("breaking", page=1, limit=5)

    calls = session.get.call_args_list
    assert calls[0].args[0] == "http://api.test/api/ghanapolitan/article/search"
    assert calls[0].kwargs["params"] == {"q": "budget cuts", "page": 1, "limit": 10}
    assert calls[1].args[0] == "http://api.test/api/ghanapolitan/article/category/Politics"
    assert calls[1].kwargs["params"] == {"page": 3, "limit": 10}
    assert calls[2].args[0] == "http://api.test/api/ghanapolitan/article/status/breaking"


def test_fetcher_for_unsupported_facet(session):
    client = ContentApiClient(get_content_type("ghanapolitan", "section"), base_url="http://x", session=session)
    with pytest.raises(ValueError):
        client.fetcher_for(Facet.STATUS)

    session.get.return_value = _response(_listing_body(key="sections"))
    result = client.fetcher_for(Facet.SEARCH)("desk", 1, 10)
    assert session.get.call_args.args[0] == "http://x/ghanapolitan/sections/search"
    assert len(result.items) == 2


def test_generic_items_key_accepted(client, session):
    session.get.return_value = _response(_listing_body(key="items"))
    assert len(client.list_items().items) == 2


def test_http_error_uses_server_message(client, session):
    session.get.return_value = _response({"status": "fail", "message": "Category not found"}, 404)

    with pytest.raises(RetrievalError) as excinfo:
        client.list_by_category("Nope")

    assert excinfo.value.message == "Category not found"
    assert excinfo.value.status_code == 404
    assert excinfo.value.query.facet is Facet.CATEGORY


def test_network_error_becomes_retrieval_error(client, session):
    session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(RetrievalError) as excinfo:
        client.list_items()

    assert str(excinfo.value) == "Failed to fetch articles"
    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_malformed_payload(client, session):
    session.get.return_value = _response({"status": "success", "data": {}})
    with pytest.raises(ApiResponseError):
        client.list_items()


def test_unsuccessful_status_field(client, session):
    session.get.return_value = _response({"status": "error", "message": "Index rebuilding"})
    with pytest.raises(RetrievalError, match="Index rebuilding"):
        client.list_items()


def test_initial_snapshot_swallows_failures(client, session):
    session.get.side_effect = requests.Timeout("slow")
    assert client.fetch_initial_snapshot() is None

    session.get.side_effect = None
    session.get.return_value = _response(_listing_body())
    snapshot = client.fetch_initial_snapshot()
    assert snapshot.total == 12
    assert session.get.call_args.kwargs["params"] == {"page": 1, "limit": 10}


def test_delete_item(client, session):
    session.request.return_value = _response({"status": "success", "message": "Article deleted"})

    body = client.delete_item("abc123")

    session.request.assert_called_once_with(
        "DELETE", "http://api.test/api/ghanapolitan/article/abc123", json=None, timeout=5
    )
    assert body["message"] == "Article deleted"


def test_delete_with_empty_body(client, session):
    session.request.return_value = _response(None, 204)
    assert client.delete_item("abc123") is None


def test_delete_failure(client, session):
    session.request.return_value = _response({"message": "Not authorised"}, 403)

    with pytest.raises(MutationError) as excinfo:
        client.delete_item("abc123")

    assert excinfo.value.message == "Not authorised"
    assert excinfo.value.kind is MutationKind.DELETE
    assert excinfo.value.item_id == "abc123"
    assert excinfo.value.status_code == 403


def test_create_and_update_send_json(client, session):
    session.request.return_value = _response({"status": "success", "data": {"article": {"_id": "n1"}}})

    client.create_item({"title": "Hello"})
    client.update_item("n1", {"title": "Hello again"})

    create_call, update_call = session.request.call_args_list
    assert create_call.args == ("POST", "http://api.test/api/ghanapolitan/article/")
    assert create_call.kwargs["json"] == {"title": "Hello"}
    assert update_call.args == ("PUT", "http://api.test/api/ghanapolitan/article/n1")


def test_mutation_network_error_default_message(client, session):
    session.request.side_effect = requests.ConnectionError("down")
    with pytest.raises(MutationError, match="Failed to create article"):
        client.create_item({"title": "x"})


def test_unknown_content_type():
    with pytest.raises(ValueError):
        get_content_type("ghanapolitan", "podcast")

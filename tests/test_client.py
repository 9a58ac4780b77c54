"""Tests for the HTTP client and its local cache maintenance."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from libadmin.client import LibraryAPIError, LibraryClient


def _response(payload, status=200):
    resp = MagicMock()
    resp.ok = status < 400
    resp.status_code = status
    resp.json.return_value = payload
    return resp


@pytest.fixture()
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture()
def client(session, cache):
    return LibraryClient("http://api.test/api/", cache=cache, session=session)


def test_get_all_is_read_through(client, session):
    session.request.return_value = _response([{"id": "1", "title": "Dune"}])
    assert client.books.get_all() == [{"id": "1", "title": "Dune"}]
    assert client.books.get_all() == [{"id": "1", "title": "Dune"}]
    session.request.assert_called_once_with(
        "GET", "http://api.test/api/books/", timeout=10.0,
    )


def test_get_by_id_caches_item(client, session, cache):
    session.request.return_value = _response({"id": "7", "title": "Kim"})
    assert client.books.get_by_id("7")["title"] == "Kim"
    assert cache.get("books:7") == {"id": "7", "title": "Kim"}
    client.books.get_by_id("7")
    assert session.request.call_count == 1


def test_create_appends_to_cached_list(client, session, cache):
    session.request.return_value = _response([{"id": "1"}])
    client.writers.get_all()

    session.request.return_value = _response({"id": "2", "name": "Austen"}, 201)
    created = client.writers.create({"name": "Austen"})

    assert created["id"] == "2"
    assert cache.get("writers:all") == [{"id": "1"}, {"id": "2", "name": "Austen"}]
    assert cache.get("writers:2") == created
    # the list was patched, not re-fetched
    assert client.writers.get_all()[-1]["name"] == "Austen"
    assert session.request.call_count == 2


def test_create_with_cold_list_does_not_prime(client, session, cache):
    session.request.return_value = _response({"id": "2", "name": "Austen"}, 201)
    client.writers.create({"name": "Austen"})
    assert cache.has("writers:all") is False
    assert cache.has("writers:2") is True


def test_update_replaces_in_cached_list(client, session, cache):
    cache.set("users:all", [{"id": "1", "name": "A"}, {"id": "2", "name": "B"}])
    session.request.return_value = _response({"id": "2", "name": "Bee"})
    client.users.update("2", {"name": "Bee"})
    assert cache.get("users:all") == [{"id": "1", "name": "A"}, {"id": "2", "name": "Bee"}]
    session.request.assert_called_once_with(
        "PUT", "http://api.test/api/users/2", timeout=10.0, json={"name": "Bee"},
    )


def test_delete_removes_from_cached_list(client, session, cache):
    cache.set("categories:all", [{"id": "1"}, {"id": "2"}])
    cache.set("categories:2", {"id": "2"})
    session.request.return_value = _response({"success": True})
    client.categories.delete("2")
    assert cache.get("categories:all") == [{"id": "1"}]
    assert cache.has("categories:2") is False


def test_writes_drop_search_results(client, session, cache):
    cache.set("books:search:dune", [{"id": "1"}])
    session.request.return_value = _response({"id": "3", "title": "Dune Messiah"})
    client.books.create({"title": "Dune Messiah"})
    assert cache.has("books:search:dune") is False


def test_search_is_cached(client, session):
    session.request.return_value = _response([{"id": "1"}])
    assert client.books.search(" Dune ") == [{"id": "1"}]
    assert client.books.search("dune") == [{"id": "1"}]
    session.request.assert_called_once_with(
        "GET", "http://api.test/api/books/search",
        timeout=10.0, params={"q": "Dune"},
    )


def test_error_response_raises(client, session, cache):
    session.request.return_value = _response({"error": "Book not found"}, 404)
    with pytest.raises(LibraryAPIError, match="Book not found") as info:
        client.books.get_by_id("404")
    assert info.value.status_code == 404
    assert cache.has("books:404") is False


def test_connection_error_raises_api_error(client, session):
    session.request.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(LibraryAPIError):
        client.users.get_all()


def test_failed_write_leaves_cache_untouched(client, session, cache):
    cache.set("books:all", [{"id": "1"}])
    session.request.return_value = _response({"error": "duplicate"}, 400)
    with pytest.raises(LibraryAPIError):
        client.books.create({"title": "x"})
    assert cache.get("books:all") == [{"id": "1"}]


def test_server_cache_admin(client, session):
    session.request.return_value = _response({"type": "in-memory", "hitRate": "0.00%"})
    assert client.cache_stats()["type"] == "in-memory"
    session.request.return_value = _response({"success": True})
    client.clear_server_cache()
    session.request.assert_called_with(
        "POST", "http://api.test/api/cache/clear", timeout=10.0,
    )


def test_default_cache_config(session):
    c = LibraryClient(session=session)
    try:
        stats = c.cache.stats()
        assert stats.max_size == 100
        assert c.cache.default_ttl is None
    finally:
        c.close()


def _issue(status="issued", **extra):
    return {
        "id": "5", "bookId": "1", "userId": "2", "status": status,
        "issueDate": "2024-05-01", "dueDate": "2024-05-15", **extra,
    }


def test_issue_takes_a_copy_from_cached_books(client, session, cache):
    listed = [{"id": "1", "availableCopies": 3}, {"id": "2", "availableCopies": 1}]
    item = {"id": "1", "availableCopies": 3}
    cache.set("books:all", listed)
    cache.set("books:1", item)
    cache.set("books:search:dune", [item])

    session.request.return_value = _response(_issue(), 201)
    client.issues.create({"bookId": "1", "userId": "2"})

    assert cache.get("books:all") == [
        {"id": "1", "availableCopies": 2}, {"id": "2", "availableCopies": 1},
    ]
    assert cache.get("books:1") == {"id": "1", "availableCopies": 2}
    assert cache.has("books:search:dune") is False
    # cached values are replaced, not mutated
    assert listed[0]["availableCopies"] == 3
    assert item["availableCopies"] == 3


def test_issue_with_cold_books_does_not_prime(client, session, cache):
    session.request.return_value = _response(_issue(), 201)
    client.issues.create({"bookId": "1", "userId": "2"})
    assert cache.has("books:all") is False
    assert cache.has("books:1") is False


def test_return_puts_the_copy_back(client, session, cache):
    cache.set("issues:all", [_issue()])
    cache.set("books:all", [{"id": "1", "availableCopies": 2}])
    cache.set("books:1", {"id": "1", "availableCopies": 2})

    session.request.return_value = _response(_issue("returned", returnDate="2024-05-10"))
    client.issues.update("5", {"status": "returned", "returnDate": "2024-05-10"})

    assert cache.get("books:all") == [{"id": "1", "availableCopies": 3}]
    assert cache.get("books:1") == {"id": "1", "availableCopies": 3}
    assert cache.get("issues:all")[0]["status"] == "returned"

    # a second return of the same issue changes nothing
    client.issues.update("5", {"status": "returned", "returnDate": "2024-05-10"})
    assert cache.get("books:1") == {"id": "1", "availableCopies": 3}


def test_return_of_uncached_issue_drops_books(client, session, cache):
    cache.set("books:all", [{"id": "1", "availableCopies": 2}])
    cache.set("books:1", {"id": "1", "availableCopies": 2})
    session.request.return_value = _response(_issue("returned"))
    client.issues.update("5", {"status": "returned"})
    assert cache.has("books:all") is False
    assert cache.has("books:1") is False


def test_issue_client_only_lists_creates_and_updates(client):
    assert not hasattr(client.issues, "get_by_id")
    assert not hasattr(client.issues, "delete")
    assert not hasattr(client.book_requests, "get_by_id")
    assert hasattr(client.book_requests, "delete")

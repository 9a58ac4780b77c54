"""Tests for users, categories, writers, issues and book requests."""

from __future__ import annotations


def _user(client, name="Ada", phone="555-1", email="ada@example.org"):
    return client.post(
        "/api/users/", json={"name": name, "phone": phone, "email": email},
    ).get_json()


def test_user_crud(client, cache):
    assert client.get("/api/users/").get_json() == []
    user = _user(client)
    assert user["name"] == "Ada"

    resp = client.put(
        f"/api/users/{user['id']}",
        json={"name": "Ada L.", "phone": "555-1", "email": "ada@example.org"},
    )
    assert resp.get_json()["name"] == "Ada L."
    assert client.get(f"/api/users/{user['id']}").get_json()["name"] == "Ada L."
    assert client.delete(f"/api/users/{user['id']}").status_code == 200
    assert client.get("/api/users/").get_json() == []


def test_user_validation(client):
    resp = client.post("/api/users/", json={"name": "Ada"})
    assert resp.status_code == 400
    assert "phone" in resp.get_json()["error"]


def test_duplicate_email_is_400(client):
    _user(client)
    resp = client.post(
        "/api/users/",
        json={"name": "Bob", "phone": "555-2", "email": "ada@example.org"},
    )
    assert resp.status_code == 400


def test_invalid_json_body(client):
    resp = client.post(
        "/api/users/", data="not json", content_type="application/json",
    )
    assert resp.status_code == 400


def test_user_update_invalidates_books(client, cache):
    user = _user(client)
    client.post("/api/books/", json={"title": "Emma", "ownerId": user["id"]})
    assert client.get("/api/books/").get_json()[0]["ownerName"] == "Ada"

    client.put(
        f"/api/users/{user['id']}",
        json={"name": "Ada Lovelace", "phone": "555-1", "email": "ada@example.org"},
    )
    assert not cache.has("books:all")
    assert client.get("/api/books/").get_json()[0]["ownerName"] == "Ada Lovelace"


def test_categories_and_writers(client):
    cat = client.post(
        "/api/categories/", json={"name": "Fiction", "abbreviation": "FIC"},
    ).get_json()
    writer = client.post(
        "/api/writers/", json={"name": "Jane Austen", "nationality": "UK"},
    ).get_json()

    assert client.get("/api/categories/").get_json() == [cat]
    assert client.get(f"/api/writers/{writer['id']}").get_json()["nationality"] == "UK"

    client.put(f"/api/categories/{cat['id']}", json={"name": "Novels"})
    assert client.get("/api/categories/").get_json()[0]["name"] == "Novels"

    assert client.delete(f"/api/writers/{writer['id']}").status_code == 200
    assert client.get(f"/api/writers/{writer['id']}").status_code == 404
    assert client.put("/api/categories/99", json={"name": "x"}).status_code == 404


def test_issue_flow_refreshes_available_copies(client, cache):
    user = _user(client)
    book = client.post(
        "/api/books/", json={"title": "Emma", "totalCopies": 1, "availableCopies": 1},
    ).get_json()
    assert client.get("/api/books/").get_json()[0]["availableCopies"] == 1

    resp = client.post("/api/issues/", json={
        "bookId": book["id"], "userId": user["id"],
        "issueDate": "2024-05-01", "dueDate": "2024-05-15",
    })
    assert resp.status_code == 201
    issue = resp.get_json()
    assert client.get("/api/books/").get_json()[0]["availableCopies"] == 0
    assert [i["id"] for i in client.get("/api/issues/").get_json()] == [issue["id"]]

    resp = client.put(
        f"/api/issues/{issue['id']}",
        json={"status": "returned", "returnDate": "2024-05-10"},
    )
    assert resp.get_json()["status"] == "returned"
    assert not cache.has("issues:all")
    assert client.get("/api/books/").get_json()[0]["availableCopies"] == 1


def test_issue_errors(client):
    resp = client.post("/api/issues/", json={
        "bookId": "1", "userId": "1",
        "issueDate": "2024-05-01", "dueDate": "2024-05-15",
    })
    assert resp.status_code == 404
    assert client.put("/api/issues/1", json={"status": "lost"}).status_code == 400
    assert client.put("/api/issues/1", json={"status": "returned"}).status_code == 404


def test_book_requests(client, cache):
    cat = client.post("/api/categories/", json={"name": "Poetry"}).get_json()
    resp = client.post("/api/book-requests/", json={
        "bookName": "Odes", "requestDate": "2024-06-01", "categoryId": cat["id"],
    })
    assert resp.status_code == 201
    req = resp.get_json()
    assert req["categoryName"] == "Poetry"

    assert client.get("/api/book-requests/").get_json()[0]["categoryName"] == "Poetry"
    client.put(f"/api/categories/{cat['id']}", json={"name": "Verse"})
    assert not cache.has("book-requests:all")
    assert client.get("/api/book-requests/").get_json()[0]["categoryName"] == "Verse"

    resp = client.put(f"/api/book-requests/{req['id']}", json={
        "bookName": "Odes", "requestDate": "2024-06-01", "status": "rejected",
    })
    assert resp.get_json()["status"] == "rejected"
    assert client.put(f"/api/book-requests/{req['id']}", json={
        "bookName": "Odes", "requestDate": "2024-06-01", "status": "maybe",
    }).status_code == 400
    assert client.delete(f"/api/book-requests/{req['id']}").status_code == 200
    assert client.get("/api/book-requests/").get_json() == []

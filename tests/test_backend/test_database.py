"""Tests for the Database layer."""

from __future__ import annotations

import sqlite3

import pytest

from libadmin.backend.database import Database


def test_database_user_crud():
    """Basic CRUD on the users table."""
    db = Database(":memory:")

    # Initially empty
    assert db.list_users() == []

    # Insert
    user = db.create_user(name="Ada", phone="555-1", email="ada@example.org")
    assert user["id"] == "1"

    # List
    users = db.list_users()
    assert len(users) == 1
    assert users[0]["email"] == "ada@example.org"

    # Update
    updated = db.update_user(user["id"], "Ada L.", "555-1", "ada@example.org")
    assert updated["name"] == "Ada L."
    assert db.update_user("99", "x", "y", "z") is None

    # Delete
    assert db.delete_user(user["id"]) is True
    assert db.get_user(user["id"]) is None
    assert db.delete_user(user["id"]) is False

    db.close()


def test_unique_email():
    db = Database(":memory:")
    db.create_user("A", "1", "a@x.org")
    with pytest.raises(sqlite3.IntegrityError):
        db.create_user("B", "2", "a@x.org")


def test_book_links_and_owner():
    db = Database(":memory:")
    owner = db.create_user("Owner", "1", "o@x.org")
    cat = db.create_category("Fiction", abbreviation="FIC")
    writer = db.create_writer("Frank Herbert", "US")

    book = db.create_book({
        "title": "Dune",
        "isbn": "978-0441013593",
        "ownerId": owner["id"],
        "categoryIds": [cat["id"]],
        "writerIds": [writer["id"]],
    })
    assert book["id"] == "1"
    assert book["ownerName"] == "Owner"
    assert book["categoryIds"] == [cat["id"]]
    assert book["writerIds"] == [writer["id"]]
    assert book["bookType"] == "Paperback"

    assert db.find_duplicate_book(" dune ", [writer["id"]]) == "1"
    assert db.find_duplicate_book("Dune", [writer["id"]], exclude_id="1") is None
    assert db.find_duplicate_book("Dune", []) is None

    updated = db.update_book("1", {"title": "Dune (1965)", "writerIds": []})
    assert updated["title"] == "Dune (1965)"
    assert updated["writerIds"] == []
    assert updated["categoryIds"] == [cat["id"]]
    assert db.update_book("42", {"title": "x"}) is None

    assert [b["id"] for b in db.search_books("1965")] == ["1"]
    assert db.search_books("nothing") == []

    # deleting the owner keeps the book
    db.delete_user(owner["id"])
    assert db.get_book("1")["ownerId"] is None


def test_issue_and_return_adjusts_copies():
    db = Database(":memory:")
    user = db.create_user("Reader", "1", "r@x.org")
    book = db.create_book({"title": "Emma", "totalCopies": 2, "availableCopies": 2})

    issue = db.create_issue(book["id"], user["id"], "2024-05-01", "2024-05-15")
    assert issue["status"] == "issued"
    assert issue["userName"] == "Reader"
    assert db.get_book(book["id"])["availableCopies"] == 1

    returned = db.update_issue(issue["id"], "returned", "2024-05-10")
    assert returned["returnDate"] == "2024-05-10"
    assert db.get_book(book["id"])["availableCopies"] == 2

    # returning twice does not add a phantom copy
    db.update_issue(issue["id"], "returned", "2024-05-11")
    assert db.get_book(book["id"])["availableCopies"] == 2
    assert db.update_issue("99", "returned") is None


def test_book_requests():
    db = Database(":memory:")
    cat = db.create_category("Poetry")
    req = db.create_book_request("Odes", "2024-06-01", category_id=cat["id"])
    assert req["status"] == "pending"
    assert req["categoryName"] == "Poetry"

    done = db.update_book_request(
        req["id"], "Odes", "2024-06-01", "fulfilled", category_id=cat["id"],
    )
    assert done["status"] == "fulfilled"

    db.delete_category(cat["id"])
    assert db.get_book_request(req["id"])["categoryId"] is None
    assert db.delete_book_request(req["id"]) is True
    assert db.list_book_requests() == []

"""SQLite database layer for the libadmin backend.

This is the system of record the cache sits in front of: users,
categories, writers, books (with category and writer links), lending
records ("issues") and book requests.  Rows come back as camelCase dicts
with string ids, the shape the API serves.  Thread-safe via
``check_same_thread=False`` and a write lock.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Any


_DB_INIT_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT NOT NULL,
    phone       TEXT NOT NULL UNIQUE,
    email       TEXT NOT NULL UNIQUE,
    created_at  TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS categories (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    name         TEXT NOT NULL,
    description  TEXT,
    abbreviation TEXT,
    created_at   TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS writers (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT NOT NULL,
    nationality TEXT,
    bio         TEXT,
    image_url   TEXT,
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    UNIQUE (name, nationality)
);

CREATE TABLE IF NOT EXISTS books (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    title            TEXT NOT NULL,
    isbn             TEXT NOT NULL DEFAULT '',
    label_number     TEXT,
    barcode          TEXT,
    publication_year INTEGER,
    total_copies     INTEGER NOT NULL DEFAULT 1,
    available_copies INTEGER NOT NULL DEFAULT 1,
    image_url        TEXT,
    description      TEXT,
    owner_id         INTEGER REFERENCES users(id) ON DELETE SET NULL,
    book_type        TEXT NOT NULL DEFAULT 'Paperback',
    created_at       TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS book_categories (
    book_id     INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
    PRIMARY KEY (book_id, category_id)
);

CREATE TABLE IF NOT EXISTS book_writers (
    book_id   INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    writer_id INTEGER NOT NULL REFERENCES writers(id) ON DELETE CASCADE,
    PRIMARY KEY (book_id, writer_id)
);

CREATE TABLE IF NOT EXISTS books_circulation (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    book_id     INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    issue_date  TEXT NOT NULL,
    due_date    TEXT NOT NULL,
    return_date TEXT,
    status      TEXT NOT NULL DEFAULT 'issued'
                CHECK (status IN ('issued', 'returned'))
);

CREATE TABLE IF NOT EXISTS book_requests (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    book_name    TEXT NOT NULL,
    category_id  INTEGER REFERENCES categories(id) ON DELETE SET NULL,
    author_name  TEXT,
    request_date TEXT NOT NULL,
    status       TEXT NOT NULL DEFAULT 'pending'
                 CHECK (status IN ('pending', 'fulfilled', 'rejected'))
);
"""

_BOOK_SELECT = """
    SELECT b.id, b.title, b.isbn, b.label_number AS labelNumber, b.barcode,
           b.publication_year AS publicationYear,
           b.total_copies AS totalCopies,
           b.available_copies AS availableCopies,
           b.image_url AS imageUrl, b.description,
           b.owner_id AS ownerId, b.book_type AS bookType,
           u.name AS ownerName, u.phone AS ownerPhone, u.email AS ownerEmail
    FROM books b
    LEFT JOIN users u ON b.owner_id = u.id
"""

_ISSUE_SELECT = """
    SELECT bc.id, bc.book_id AS bookId, bc.user_id AS userId,
           bc.issue_date AS issueDate, bc.due_date AS dueDate,
           bc.return_date AS returnDate, bc.status,
           u.name AS userName, u.phone AS userPhone, u.email AS userEmail
    FROM books_circulation bc
    JOIN users u ON bc.user_id = u.id
"""

_REQUEST_SELECT = """
    SELECT br.id, br.book_name AS bookName, br.category_id AS categoryId,
           br.author_name AS authorName, br.request_date AS requestDate,
           br.status, c.name AS categoryName
    FROM book_requests br
    LEFT JOIN categories c ON br.category_id = c.id
"""

_BOOK_COLUMNS = {
    "title": "title",
    "isbn": "isbn",
    "labelNumber": "label_number",
    "barcode": "barcode",
    "publicationYear": "publication_year",
    "totalCopies": "total_copies",
    "availableCopies": "available_copies",
    "imageUrl": "image_url",
    "description": "description",
    "ownerId": "owner_id",
    "bookType": "book_type",
}


def _stringify_ids(row: dict[str, Any], *fields: str) -> dict[str, Any]:
    for field in ("id", *fields):
        if row.get(field) is not None:
            row[field] = str(row[field])
    return row


class Database:
    """Simple SQLite wrapper for the library catalog."""

    def __init__(self, db_path: str | Path = "libadmin.db") -> None:
        self._db_path = str(db_path)
        self._is_memory = self._db_path in (":memory:", "")
        self._lock = threading.RLock()

        if self._is_memory:
            # For in-memory databases, use a single shared connection
            # (thread-safety via the lock).
            self._shared_conn = self._connect(":memory:")
        else:
            self._shared_conn = None

        self._local = threading.local()
        self._init_db()

    # -- connection management ------------------------------------------

    @staticmethod
    def _connect(path: str) -> sqlite3.Connection:
        conn = sqlite3.connect(path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @property
    def _conn(self) -> sqlite3.Connection:
        """Return the shared connection for :memory:, a per-thread one otherwise."""
        if self._shared_conn is not None:
            return self._shared_conn

        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = self._connect(self._db_path)
            conn.execute("PRAGMA journal_mode=WAL")
            self._local.conn = conn
        return conn

    def _init_db(self) -> None:
        self._conn.executescript(_DB_INIT_SQL)
        self._conn.commit()

    def close(self) -> None:
        if self._shared_conn is not None:
            # Don't actually close the shared in-memory conn here;
            # it would destroy all data.
            return
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            conn.close()
            self._local.conn = None

    def _rows(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(r) for r in self._conn.execute(sql, params).fetchall()]

    def _one(self, sql: str, params: tuple = ()) -> dict[str, Any] | None:
        rows = self._rows(sql, params)
        return rows[0] if rows else None

    def _write(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        with self._lock, self._conn:
            return self._conn.execute(sql, params)

    # -- users ----------------------------------------------------------

    def list_users(self) -> list[dict[str, Any]]:
        rows = self._rows(
            "SELECT id, name, phone, email FROM users ORDER BY name",
        )
        return [_stringify_ids(r) for r in rows]

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        row = self._one(
            "SELECT id, name, phone, email FROM users WHERE id = ?",
            (user_id,),
        )
        return _stringify_ids(row) if row else None

    def create_user(self, name: str, phone: str, email: str) -> dict[str, Any]:
        cur = self._write(
            "INSERT INTO users (name, phone, email) VALUES (?, ?, ?)",
            (name, phone, email),
        )
        return {"id": str(cur.lastrowid), "name": name,
                "phone": phone, "email": email}

    def update_user(
        self, user_id: str, name: str, phone: str, email: str,
    ) -> dict[str, Any] | None:
        cur = self._write(
            "UPDATE users SET name = ?, phone = ?, email = ? WHERE id = ?",
            (name, phone, email, user_id),
        )
        return self.get_user(user_id) if cur.rowcount else None

    def delete_user(self, user_id: str) -> bool:
        return self._write(
            "DELETE FROM users WHERE id = ?", (user_id,),
        ).rowcount > 0

    # -- categories -----------------------------------------------------

    def list_categories(self) -> list[dict[str, Any]]:
        rows = self._rows(
            "SELECT id, name, description, abbreviation "
            "FROM categories ORDER BY name",
        )
        return [_stringify_ids(r) for r in rows]

    def get_category(self, category_id: str) -> dict[str, Any] | None:
        row = self._one(
            "SELECT id, name, description, abbreviation "
            "FROM categories WHERE id = ?",
            (category_id,),
        )
        return _stringify_ids(row) if row else None

    def create_category(
        self,
        name: str,
        description: str | None = None,
        abbreviation: str | None = None,
    ) -> dict[str, Any]:
        cur = self._write(
            "INSERT INTO categories (name, description, abbreviation) "
            "VALUES (?, ?, ?)",
            (name, description, abbreviation),
        )
        return {"id": str(cur.lastrowid), "name": name,
                "description": description, "abbreviation": abbreviation}

    def update_category(
        self,
        category_id: str,
        name: str,
        description: str | None = None,
        abbreviation: str | None = None,
    ) -> dict[str, Any] | None:
        cur = self._write(
            "UPDATE categories SET name = ?, description = ?, "
            "abbreviation = ? WHERE id = ?",
            (name, description, abbreviation, category_id),
        )
        return self.get_category(category_id) if cur.rowcount else None

    def delete_category(self, category_id: str) -> bool:
        return self._write(
            "DELETE FROM categories WHERE id = ?", (category_id,),
        ).rowcount > 0

    # -- writers --------------------------------------------------------

    def list_writers(self) -> list[dict[str, Any]]:
        rows = self._rows(
            "SELECT id, name, nationality, bio, image_url AS imageUrl "
            "FROM writers ORDER BY name",
        )
        return [_stringify_ids(r) for r in rows]

    def get_writer(self, writer_id: str) -> dict[str, Any] | None:
        row = self._one(
            "SELECT id, name, nationality, bio, image_url AS imageUrl "
            "FROM writers WHERE id = ?",
            (writer_id,),
        )
        return _stringify_ids(row) if row else None

    def create_writer(
        self,
        name: str,
        nationality: str | None = None,
        bio: str | None = None,
        image_url: str | None = None,
    ) -> dict[str, Any]:
        cur = self._write(
            "INSERT INTO writers (name, nationality, bio, image_url) "
            "VALUES (?, ?, ?, ?)",
            (name, nationality, bio, image_url),
        )
        return {"id": str(cur.lastrowid), "name": name,
                "nationality": nationality, "bio": bio, "imageUrl": image_url}

    def update_writer(
        self,
        writer_id: str,
        name: str,
        nationality: str | None = None,
        bio: str | None = None,
        image_url: str | None = None,
    ) -> dict[str, Any] | None:
        cur = self._write(
            "UPDATE writers SET name = ?, nationality = ?, bio = ?, "
            "image_url = ? WHERE id = ?",
            (name, nationality, bio, image_url, writer_id),
        )
        return self.get_writer(writer_id) if cur.rowcount else None

    def delete_writer(self, writer_id: str) -> bool:
        return self._write(
            "DELETE FROM writers WHERE id = ?", (writer_id,),
        ).rowcount > 0

    # -- books ----------------------------------------------------------

    def _attach_links(self, book: dict[str, Any]) -> dict[str, Any]:
        cats = self._rows(
            "SELECT category_id FROM book_categories WHERE book_id = ? "
            "ORDER BY category_id",
            (book["id"],),
        )
        writers = self._rows(
            "SELECT writer_id FROM book_writers WHERE book_id = ? "
            "ORDER BY writer_id",
            (book["id"],),
        )
        book["categoryIds"] = [str(c["category_id"]) for c in cats]
        book["writerIds"] = [str(w["writer_id"]) for w in writers]
        return _stringify_ids(book, "ownerId")

    def list_books(self) -> list[dict[str, Any]]:
        rows = self._rows(_BOOK_SELECT + " ORDER BY b.title")
        return [self._attach_links(r) for r in rows]

    def get_book(self, book_id: str) -> dict[str, Any] | None:
        row = self._one(_BOOK_SELECT + " WHERE b.id = ?", (book_id,))
        return self._attach_links(row) if row else None

    def search_books(self, term: str) -> list[dict[str, Any]]:
        """Match *term* against title, ISBN, label number and barcode."""
        like = f"%{term}%"
        rows = self._rows(
            _BOOK_SELECT
            + " WHERE b.title LIKE ? OR b.isbn LIKE ?"
            " OR b.label_number LIKE ? OR b.barcode LIKE ?"
            " ORDER BY b.title",
            (like, like, like, like),
        )
        return [self._attach_links(r) for r in rows]

    def find_duplicate_book(
        self,
        title: str,
        writer_ids: list[str],
        exclude_id: str | None = None,
    ) -> str | None:
        """Return the id of a book with the same title and writer set."""
        wanted = sorted(int(w) for w in writer_ids)
        candidates = self._rows(
            "SELECT id FROM books WHERE LOWER(TRIM(title)) = LOWER(TRIM(?))",
            (title,),
        )
        for cand in candidates:
            if exclude_id is not None and str(cand["id"]) == str(exclude_id):
                continue
            existing = self._rows(
                "SELECT writer_id FROM book_writers WHERE book_id = ? "
                "ORDER BY writer_id",
                (cand["id"],),
            )
            if [w["writer_id"] for w in existing] == wanted:
                return str(cand["id"])
        return None

    def _replace_links(
        self,
        conn: sqlite3.Connection,
        book_id: int | str,
        category_ids: list[str],
        writer_ids: list[str],
    ) -> None:
        conn.execute("DELETE FROM book_categories WHERE book_id = ?", (book_id,))
        conn.execute("DELETE FROM book_writers WHERE book_id = ?", (book_id,))
        conn.executemany(
            "INSERT INTO book_categories (book_id, category_id) VALUES (?, ?)",
            [(book_id, c) for c in category_ids],
        )
        conn.executemany(
            "INSERT INTO book_writers (book_id, writer_id) VALUES (?, ?)",
            [(book_id, w) for w in writer_ids],
        )

    def create_book(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Insert a book and its links; returns the stored record."""
        columns = {
            col: fields[key]
            for key, col in _BOOK_COLUMNS.items() if key in fields
        }
        columns.setdefault("book_type", "Paperback")
        names = ", ".join(columns)
        marks = ", ".join("?" for _ in columns)
        with self._lock, self._conn as conn:
            cur = conn.execute(
                f"INSERT INTO books ({names}) VALUES ({marks})",
                tuple(columns.values()),
            )
            book_id = cur.lastrowid
            self._replace_links(
                conn, book_id,
                fields.get("categoryIds") or [],
                fields.get("writerIds") or [],
            )
        return self.get_book(str(book_id))  # type: ignore[return-value]

    def update_book(
        self, book_id: str, fields: dict[str, Any],
    ) -> dict[str, Any] | None:
        columns = {
            col: fields[key]
            for key, col in _BOOK_COLUMNS.items() if key in fields
        }
        with self._lock, self._conn as conn:
            exists = conn.execute(
                "SELECT 1 FROM books WHERE id = ?", (book_id,),
            ).fetchone()
            if exists is None:
                return None
            if columns:
                assignments = ", ".join(f"{c} = ?" for c in columns)
                conn.execute(
                    f"UPDATE books SET {assignments} WHERE id = ?",
                    (*columns.values(), book_id),
                )
            if "categoryIds" in fields or "writerIds" in fields:
                current = self.get_book(book_id) or {}
                self._replace_links(
                    conn, book_id,
                    fields.get("categoryIds", current.get("categoryIds", [])),
                    fields.get("writerIds", current.get("writerIds", [])),
                )
        return self.get_book(book_id)

    def delete_book(self, book_id: str) -> bool:
        return self._write(
            "DELETE FROM books WHERE id = ?", (book_id,),
        ).rowcount > 0

    # -- issues (circulation) ------------------------------------------

    def list_issues(self) -> list[dict[str, Any]]:
        rows = self._rows(_ISSUE_SELECT + " ORDER BY bc.issue_date DESC, bc.id DESC")
        return [_stringify_ids(r, "bookId", "userId") for r in rows]

    def get_issue(self, issue_id: str) -> dict[str, Any] | None:
        row = self._one(_ISSUE_SELECT + " WHERE bc.id = ?", (issue_id,))
        return _stringify_ids(row, "bookId", "userId") if row else None

    def create_issue(
        self, book_id: str, user_id: str, issue_date: str, due_date: str,
    ) -> dict[str, Any]:
        """Lend a book: record the issue and decrement available copies."""
        with self._lock, self._conn as conn:
            cur = conn.execute(
                "INSERT INTO books_circulation "
                "(book_id, user_id, issue_date, due_date, status) "
                "VALUES (?, ?, ?, ?, 'issued')",
                (book_id, user_id, issue_date, due_date),
            )
            conn.execute(
                "UPDATE books SET available_copies = available_copies - 1 "
                "WHERE id = ? AND available_copies > 0",
                (book_id,),
            )
        return self.get_issue(str(cur.lastrowid))  # type: ignore[return-value]

    def update_issue(
        self, issue_id: str, status: str, return_date: str | None = None,
    ) -> dict[str, Any] | None:
        """Update an issue; returning a book increments available copies."""
        with self._lock, self._conn as conn:
            row = conn.execute(
                "SELECT book_id, status FROM books_circulation WHERE id = ?",
                (issue_id,),
            ).fetchone()
            if row is None:
                return None
            conn.execute(
                "UPDATE books_circulation SET return_date = ?, status = ? "
                "WHERE id = ?",
                (return_date, status, issue_id),
            )
            if status == "returned" and row["status"] != "returned":
                conn.execute(
                    "UPDATE books SET available_copies = available_copies + 1 "
                    "WHERE id = ?",
                    (row["book_id"],),
                )
        return self.get_issue(issue_id)

    # -- book requests --------------------------------------------------

    def list_book_requests(self) -> list[dict[str, Any]]:
        rows = self._rows(
            _REQUEST_SELECT + " ORDER BY br.request_date DESC, br.id DESC",
        )
        return [_stringify_ids(r, "categoryId") for r in rows]

    def get_book_request(self, request_id: str) -> dict[str, Any] | None:
        row = self._one(_REQUEST_SELECT + " WHERE br.id = ?", (request_id,))
        return _stringify_ids(row, "categoryId") if row else None

    def create_book_request(
        self,
        book_name: str,
        request_date: str,
        category_id: str | None = None,
        author_name: str | None = None,
    ) -> dict[str, Any]:
        cur = self._write(
            "INSERT INTO book_requests "
            "(book_name, category_id, author_name, request_date, status) "
            "VALUES (?, ?, ?, ?, 'pending')",
            (book_name, category_id, author_name, request_date),
        )
        return self.get_book_request(str(cur.lastrowid))  # type: ignore[return-value]

    def update_book_request(
        self,
        request_id: str,
        book_name: str,
        request_date: str,
        status: str,
        category_id: str | None = None,
        author_name: str | None = None,
    ) -> dict[str, Any] | None:
        cur = self._write(
            "UPDATE book_requests SET book_name = ?, category_id = ?, "
            "author_name = ?, request_date = ?, status = ? WHERE id = ?",
            (book_name, category_id, author_name, request_date,
             status, request_id),
        )
        return self.get_book_request(request_id) if cur.rowcount else None

    def delete_book_request(self, request_id: str) -> bool:
        return self._write(
            "DELETE FROM book_requests WHERE id = ?", (request_id,),
        ).rowcount > 0

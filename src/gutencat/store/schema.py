"""Books table definition and SQLite runtime pragmas."""

from __future__ import annotations

import sqlite3


BOOKS_TABLE = "books"
PRAGMA_BUSY_TIMEOUT_MS = 5000

CREATE_BOOKS_TABLE = f"""
CREATE TABLE {BOOKS_TABLE} (
    id VARCHAR(10) PRIMARY KEY,
    author VARCHAR(300) NULL,
    title VARCHAR(1000) NULL,
    language VARCHAR(3) NULL
)
"""

INSERT_BOOK = f"INSERT INTO {BOOKS_TABLE} (id, author, title, language) VALUES (?, ?, ?, ?)"
SELECT_BOOK_ID = f"SELECT id FROM {BOOKS_TABLE} WHERE id = ?"
SELECT_ALL_BOOKS = f"SELECT id, author, title, language FROM {BOOKS_TABLE} ORDER BY id ASC"
SELECT_ALL_IDS = f"SELECT id FROM {BOOKS_TABLE}"
DELETE_BOOK = f"DELETE FROM {BOOKS_TABLE} WHERE id = ?"
COUNT_BOOKS = f"SELECT COUNT(*) AS c FROM {BOOKS_TABLE}"


def select_books_by_ids(count: int, placeholder: str = "?") -> str:
    """Build a parameterized IN query for ``count`` ids."""

    if count <= 0:
        raise ValueError("count must be positive")
    placeholders = ",".join(placeholder for _ in range(count))
    return f"SELECT id, author, title, language FROM {BOOKS_TABLE} WHERE id IN ({placeholders}) ORDER BY id ASC"


def with_placeholder(statement: str, placeholder: str) -> str:
    """Rewrite qmark statements for drivers using another paramstyle."""

    return statement.replace("?", placeholder)


def apply_runtime_pragmas(connection: sqlite3.Connection) -> None:
    """Apply runtime pragmas recommended for bulk loading."""

    connection.execute("PRAGMA journal_mode=WAL;")
    connection.execute(f"PRAGMA busy_timeout={PRAGMA_BUSY_TIMEOUT_MS};")
    connection.execute("PRAGMA synchronous=NORMAL;")


def create_books_table(connection: sqlite3.Connection) -> bool:
    """Create the books table, treating "already exists" as success."""

    try:
        connection.execute(CREATE_BOOKS_TABLE)
    except sqlite3.OperationalError as exc:
        if "already exists" not in str(exc).lower():
            raise
        return False
    return True

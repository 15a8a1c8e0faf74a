"""SQLite-backed list store.

Keeps a local copy of the tracking list in one file. Useful for dry local
runs against real search results and as the store behind the engine tests.
"""

import sqlite3
from collections.abc import Iterator
from pathlib import Path

from .interface import ListStore
from .types import ConnectionError as StoreConnectionError
from .types import ListItem, StoreError

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS list_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    list_id TEXT NOT NULL,
    title TEXT NOT NULL,
    document_link TEXT NOT NULL DEFAULT '',
    category TEXT NOT NULL DEFAULT '',
    department TEXT NOT NULL DEFAULT '',
    last_modified TEXT NOT NULL DEFAULT '',
    document_author TEXT NOT NULL DEFAULT ''
);
CREATE INDEX IF NOT EXISTS idx_list_items_title ON list_items (list_id, title);
"""

COLUMNS = (
    "title",
    "document_link",
    "category",
    "department",
    "last_modified",
    "document_author",
)


class SQLiteListStore(ListStore):
    """ListStore implementation over a local SQLite file.

    Every write is committed immediately; the store offers no transactions
    to its callers, same as the remote list.
    """

    def __init__(self, db_path: str | Path):
        """Initialize store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Open the database file and ensure the schema exists."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA_SQL)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreConnectionError(f"Failed to open list store {self.db_path}: {e}") from e

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def _require_conn(self) -> sqlite3.Connection:
        if not self._conn:
            raise StoreError("No active connection")
        return self._conn

    @staticmethod
    def _to_item(row: sqlite3.Row) -> ListItem:
        return ListItem(item_id=row["id"], **{column: row[column] for column in COLUMNS})

    def find_by_title(self, list_id: str, title: str) -> ListItem | None:
        conn = self._require_conn()
        try:
            row = conn.execute(
                "SELECT * FROM list_items WHERE list_id = ? AND title = ? ORDER BY id LIMIT 1",
                (list_id, title),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Lookup of '{title}' failed: {e}") from e
        return self._to_item(row) if row else None

    def upsert(self, list_id: str, item: ListItem) -> ListItem:
        conn = self._require_conn()
        values = tuple(getattr(item, column) for column in COLUMNS)
        try:
            if item.item_id is None:
                cursor = conn.execute(
                    f"INSERT INTO list_items (list_id, {', '.join(COLUMNS)}) "
                    f"VALUES (?, {', '.join('?' for _ in COLUMNS)})",
                    (list_id, *values),
                )
                conn.commit()
                return item.with_id(cursor.lastrowid)

            assignments = ", ".join(f"{column} = ?" for column in COLUMNS)
            cursor = conn.execute(
                f"UPDATE list_items SET {assignments} WHERE list_id = ? AND id = ?",
                (*values, list_id, item.item_id),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Write of '{item.title}' failed: {e}") from e

        if cursor.rowcount == 0:
            raise StoreError(f"Item {item.item_id} not found in '{list_id}'")
        return item

    def delete(self, list_id: str, item_id: int) -> None:
        conn = self._require_conn()
        try:
            conn.execute("DELETE FROM list_items WHERE list_id = ? AND id = ?", (list_id, item_id))
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Delete of item {item_id} failed: {e}") from e

    def enumerate_all(self, list_id: str) -> Iterator[ListItem]:
        conn = self._require_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM list_items WHERE list_id = ? ORDER BY id", (list_id,)
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Reading list '{list_id}' failed: {e}") from e
        for row in rows:
            yield self._to_item(row)

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False

    def __repr__(self) -> str:
        status = "connected" if self._conn else "disconnected"
        return f"SQLiteListStore(db_path={self.db_path}, status={status})"

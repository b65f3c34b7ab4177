"""Document store abstractions and SQLite implementation."""
from __future__ import annotations

import contextlib
import json
import secrets
import sqlite3
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

Document = Dict[str, Any]
Filters = Mapping[str, Any]


class StoreError(RuntimeError):
    """Raised when the underlying database rejects an operation."""


class DuplicateKeyError(StoreError):
    """Raised when an insert or update would break a unique key."""

    def __init__(self, collection: str, key_name: str, key_value: str) -> None:
        super().__init__(f"Duplicate {key_name} in {collection}")
        self.collection = collection
        self.key_name = key_name
        self.key_value = key_value


def new_object_id() -> str:
    """Return a 24 character hexadecimal document id."""

    return secrets.token_hex(12)


def matches_filters(document: Document, filters: Filters | None) -> bool:
    """Equality match on top-level fields with membership semantics for lists.

    A list-valued field matches when any of the expected values is present; a
    list of expected values against a scalar field matches any of them.
    """

    if not filters:
        return True
    for key, expected in filters.items():
        actual = document.get(key)
        wanted = list(expected) if isinstance(expected, (list, tuple, set)) else [expected]
        if isinstance(actual, list):
            if not any(value in actual for value in wanted):
                return False
        elif actual not in wanted:
            return False
    return True


class DocumentStore:
    """Persistence interface for JSON documents grouped into collections."""

    def insert(
        self, collection: str, document: Document, unique_keys: Mapping[str, str] | None = None
    ) -> Document:
        raise NotImplementedError

    def insert_if_absent(
        self, collection: str, key_name: str, key_value: str, document: Document
    ) -> Tuple[Document, bool]:
        raise NotImplementedError

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def find_by_key(self, collection: str, key_name: str, key_value: str) -> Optional[Document]:
        raise NotImplementedError

    def find(
        self,
        collection: str,
        filters: Filters | None = None,
        predicate: Callable[[Document], bool] | None = None,
    ) -> List[Document]:
        raise NotImplementedError

    def update(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        unique_keys: Mapping[str, str] | None = None,
    ) -> Optional[Document]:
        raise NotImplementedError

    def modify(
        self, collection: str, doc_id: str, mutator: Callable[[Document], None]
    ) -> Optional[Document]:
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def transaction(self) -> contextlib.AbstractContextManager["DocumentStore"]:
        raise NotImplementedError

    def ping(self) -> bool:
        raise NotImplementedError

    def add_to_set(self, collection: str, doc_id: str, field: str, value: Any) -> Optional[Document]:
        """Append ``value`` to a list field unless it is already present."""

        def mutate(document: Document) -> None:
            values = document.setdefault(field, [])
            if value not in values:
                values.append(value)

        return self.modify(collection, doc_id, mutate)

    def pull(self, collection: str, doc_id: str, field: str, value: Any) -> Optional[Document]:
        """Remove every occurrence of ``value`` from a list field."""

        def mutate(document: Document) -> None:
            document[field] = [item for item in document.get(field, []) if item != value]

        return self.modify(collection, doc_id, mutate)

    def push(self, collection: str, doc_id: str, field: str, value: Any) -> Optional[Document]:
        """Append ``value`` to a list field."""

        def mutate(document: Document) -> None:
            document.setdefault(field, []).append(value)

        return self.modify(collection, doc_id, mutate)


class SQLiteDocumentStore(DocumentStore):
    """Local SQLite-backed store keeping each document as a JSON body."""

    def __init__(self, database_path: str | Path = "data/vesture.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path, isolation_level=None, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        conn = self._connect()
        try:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    body TEXT NOT NULL,
                    UNIQUE (collection, doc_id)
                );
                CREATE TABLE IF NOT EXISTS unique_keys (
                    collection TEXT NOT NULL,
                    key_name TEXT NOT NULL,
                    key_value TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    PRIMARY KEY (collection, key_name, key_value)
                );
                CREATE INDEX IF NOT EXISTS idx_unique_keys_doc ON unique_keys (collection, doc_id);
                """
            )
        finally:
            conn.close()

    @contextlib.contextmanager
    def _session(self, write: bool = False) -> Iterator[sqlite3.Connection]:
        active = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return

        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open {self.database_path}") from exc
        self._local.conn = conn
        try:
            conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            try:
                yield conn
            except sqlite3.Error as exc:
                conn.execute("ROLLBACK")
                raise StoreError(str(exc)) from exc
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        finally:
            self._local.conn = None
            conn.close()

    @contextlib.contextmanager
    def transaction(self) -> Iterator["SQLiteDocumentStore"]:
        """Group several writes so they commit or roll back together.

        Nested calls join the outer transaction. The write lock is taken up
        front so reads inside the block see the state the writes apply to.
        """

        with self._session(write=True):
            yield self

    @staticmethod
    def _load(row: sqlite3.Row | None) -> Optional[Document]:
        return json.loads(row["body"]) if row else None

    def _fetch(self, conn: sqlite3.Connection, collection: str, doc_id: str) -> Optional[Document]:
        row = conn.execute(
            "SELECT body FROM documents WHERE collection = ? AND doc_id = ?",
            (collection, doc_id),
        ).fetchone()
        return self._load(row)

    def _write(self, conn: sqlite3.Connection, collection: str, document: Document) -> None:
        conn.execute(
            "UPDATE documents SET body = ? WHERE collection = ? AND doc_id = ?",
            (json.dumps(document), collection, document["id"]),
        )

    def _claim_key(
        self, conn: sqlite3.Connection, collection: str, key_name: str, key_value: str, doc_id: str
    ) -> None:
        try:
            conn.execute(
                "INSERT INTO unique_keys (collection, key_name, key_value, doc_id) VALUES (?, ?, ?, ?)",
                (collection, key_name, key_value, doc_id),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateKeyError(collection, key_name, key_value) from exc

    def insert(
        self, collection: str, document: Document, unique_keys: Mapping[str, str] | None = None
    ) -> Document:
        stored = dict(document)
        stored["id"] = stored.get("id") or new_object_id()
        with self._session(write=True) as conn:
            for key_name, key_value in (unique_keys or {}).items():
                self._claim_key(conn, collection, key_name, key_value, stored["id"])
            conn.execute(
                "INSERT INTO documents (collection, doc_id, body) VALUES (?, ?, ?)",
                (collection, stored["id"], json.dumps(stored)),
            )
        return stored

    def insert_if_absent(
        self, collection: str, key_name: str, key_value: str, document: Document
    ) -> Tuple[Document, bool]:
        with self._session(write=True) as conn:
            row = conn.execute(
                "SELECT doc_id FROM unique_keys WHERE collection = ? AND key_name = ? AND key_value = ?",
                (collection, key_name, key_value),
            ).fetchone()
            if row:
                existing = self._fetch(conn, collection, row["doc_id"])
                if existing is not None:
                    return existing, False
            return self.insert(collection, document, unique_keys={key_name: key_value}), True

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._session() as conn:
            return self._fetch(conn, collection, doc_id)

    def find_by_key(self, collection: str, key_name: str, key_value: str) -> Optional[Document]:
        with self._session() as conn:
            row = conn.execute(
                """
                SELECT d.body FROM unique_keys k
                JOIN documents d ON d.collection = k.collection AND d.doc_id = k.doc_id
                WHERE k.collection = ? AND k.key_name = ? AND k.key_value = ?
                """,
                (collection, key_name, key_value),
            ).fetchone()
            return self._load(row)

    def find(
        self,
        collection: str,
        filters: Filters | None = None,
        predicate: Callable[[Document], bool] | None = None,
    ) -> List[Document]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT body FROM documents WHERE collection = ? ORDER BY seq",
                (collection,),
            ).fetchall()
        documents = [json.loads(row["body"]) for row in rows]
        return [
            doc
            for doc in documents
            if matches_filters(doc, filters) and (predicate is None or predicate(doc))
        ]

    def update(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        unique_keys: Mapping[str, str] | None = None,
    ) -> Optional[Document]:
        with self._session(write=True) as conn:
            current = self._fetch(conn, collection, doc_id)
            if current is None:
                return None
            for key_name, key_value in (unique_keys or {}).items():
                conn.execute(
                    "DELETE FROM unique_keys WHERE collection = ? AND key_name = ? AND doc_id = ?",
                    (collection, key_name, doc_id),
                )
                self._claim_key(conn, collection, key_name, key_value, doc_id)
            for key, value in fields.items():
                if key == "id":
                    continue
                current[key] = value
            self._write(conn, collection, current)
            return current

    def modify(
        self, collection: str, doc_id: str, mutator: Callable[[Document], None]
    ) -> Optional[Document]:
        with self._session(write=True) as conn:
            current = self._fetch(conn, collection, doc_id)
            if current is None:
                return None
            mutator(current)
            current["id"] = doc_id
            self._write(conn, collection, current)
            return current

    def delete(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._session(write=True) as conn:
            current = self._fetch(conn, collection, doc_id)
            if current is None:
                return None
            conn.execute(
                "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, doc_id),
            )
            conn.execute(
                "DELETE FROM unique_keys WHERE collection = ? AND doc_id = ?",
                (collection, doc_id),
            )
            return current

    def ping(self) -> bool:
        with self._session() as conn:
            return conn.execute("SELECT 1").fetchone() is not None


__all__ = [
    "Document",
    "DocumentStore",
    "DuplicateKeyError",
    "SQLiteDocumentStore",
    "StoreError",
    "matches_filters",
    "new_object_id",
]

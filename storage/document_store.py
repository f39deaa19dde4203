"""Document storage abstractions and SQLite implementation."""
from __future__ import annotations

import json
import re
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Type, TypeVar

from models.document import Document

T = TypeVar("T", bound=Document)

_COLLECTION_NAME = re.compile(r"^[a-z][a-z0-9_]*$")


class DuplicateKeyError(ValueError):
    """Raised when a write would break a collection's unique field."""


class DuplicateEmailError(DuplicateKeyError):
    """Raised when a second account is created for an email already on file."""


def matches(document: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
    """Equality match; a ``None`` filter value also matches a missing key."""

    if not filters:
        return True
    for key, expected in filters.items():
        if document.get(key) != expected:
            return False
    return True


class DocumentStore:
    """Persistence interface for JSON documents grouped into collections."""

    def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def find(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def replace(self, collection: str, doc_id: str, document: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    def exists(self, collection: str, doc_id: str) -> bool:
        return self.get(collection, doc_id) is not None


class SQLiteDocumentStore(DocumentStore):
    """Local SQLite-backed store, one table per collection.

    ``unique_fields`` maps a collection to top-level document fields that get a
    UNIQUE index over the JSON body; colliding writes raise ``DuplicateKeyError``.
    """

    def __init__(
        self,
        database_path: str | Path = "data/fitlockr.db",
        collections: Iterable[str] = (),
        unique_fields: Optional[Mapping[str, Iterable[str]]] = None,
    ) -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._known: set[str] = set()
        self._lock = threading.Lock()
        self._unique_fields = {name: tuple(names) for name, names in (unique_fields or {}).items()}
        for collection in collections:
            self._ensure_collection(collection)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_collection(self, collection: str) -> str:
        if not _COLLECTION_NAME.match(collection):
            raise ValueError(f"Invalid collection name '{collection}'")
        if collection in self._known:
            return collection
        with self._lock, self._connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {collection} (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    body TEXT NOT NULL
                );
                """
            )
            for field_name in self._unique_fields.get(collection, ()):
                if not _COLLECTION_NAME.match(field_name):
                    raise ValueError(f"Invalid unique field '{field_name}'")
                conn.execute(
                    f"CREATE UNIQUE INDEX IF NOT EXISTS {collection}_{field_name}_unique "
                    f"ON {collection} (json_extract(body, '$.{field_name}'))"
                )
            self._known.add(collection)
        return collection

    def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        table = self._ensure_collection(collection)
        doc_id = document.get("_id")
        if not doc_id:
            raise ValueError("Documents must carry an _id before insertion")
        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT INTO {table} (id, body) VALUES (?, ?)",
                    (doc_id, json.dumps(document)),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateKeyError(f"Duplicate key in {collection}: {exc}") from exc
        return document

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        table = self._ensure_collection(collection)
        with self._connect() as conn:
            row = conn.execute(f"SELECT body FROM {table} WHERE id = ?", (doc_id,)).fetchone()
        return json.loads(row["body"]) if row else None

    def find(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        table = self._ensure_collection(collection)
        with self._connect() as conn:
            rows = conn.execute(f"SELECT body FROM {table} ORDER BY seq").fetchall()
        documents = [json.loads(row["body"]) for row in rows]
        return [doc for doc in documents if matches(doc, filters)]

    def replace(self, collection: str, doc_id: str, document: Dict[str, Any]) -> bool:
        table = self._ensure_collection(collection)
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"UPDATE {table} SET body = ? WHERE id = ?",
                    (json.dumps({**document, "_id": doc_id}), doc_id),
                )
                return cursor.rowcount > 0
        except sqlite3.IntegrityError as exc:
            raise DuplicateKeyError(f"Duplicate key in {collection}: {exc}") from exc

    def delete(self, collection: str, doc_id: str) -> bool:
        table = self._ensure_collection(collection)
        with self._connect() as conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (doc_id,))
            return cursor.rowcount > 0


class ModelCollection(Generic[T]):
    """Typed view over one collection that validates through the model class."""

    def __init__(self, documents: DocumentStore, name: str, model: Type[T]) -> None:
        self.documents = documents
        self.name = name
        self.model = model

    def create(self, record: T) -> T:
        self.documents.insert(self.name, record.to_document(include_secrets=True))
        return record

    def get(self, doc_id: str) -> Optional[T]:
        doc = self.documents.get(self.name, doc_id)
        return self.model.from_document(doc) if doc else None

    def find(self, **filters: Any) -> List[T]:
        return [self.model.from_document(doc) for doc in self.documents.find(self.name, filters)]

    def find_one(self, **filters: Any) -> Optional[T]:
        found = self.documents.find(self.name, filters)
        return self.model.from_document(found[0]) if found else None

    def exists(self, doc_id: str) -> bool:
        return self.documents.exists(self.name, doc_id)

    def save(self, record: T) -> T:
        """Persist ``record`` after re-running its validation."""

        validated = self.model.from_document(record.to_document(include_secrets=True))
        self.documents.replace(self.name, validated.id, validated.to_document(include_secrets=True))
        return validated

    def update(self, doc_id: str, updated_fields: Dict[str, Any]) -> Optional[T]:
        """Merge ``updated_fields`` into the stored document and re-validate it."""

        current = self.documents.get(self.name, doc_id)
        if current is None:
            return None
        merged = {**current}
        for key, value in updated_fields.items():
            if key in {"_id", "id"}:
                continue
            merged[key] = value
        validated = self.model.from_document(merged)
        self.documents.replace(self.name, doc_id, validated.to_document(include_secrets=True))
        return validated

    def delete(self, doc_id: str) -> Optional[T]:
        """Remove the document and return what was stored, or ``None``."""

        record = self.get(doc_id)
        if record is None:
            return None
        self.documents.delete(self.name, doc_id)
        return record


__all__ = [
    "DocumentStore",
    "DuplicateEmailError",
    "DuplicateKeyError",
    "ModelCollection",
    "SQLiteDocumentStore",
    "matches",
]

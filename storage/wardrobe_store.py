"""Wardrobe persistence: users, pieces, outfits and shelves."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from models.document import utcnow
from models.outfit import Outfit
from models.piece import Piece
from models.shelf import Shelf
from models.user import User
from storage.document_store import (
    DocumentStore,
    DuplicateEmailError,
    DuplicateKeyError,
    ModelCollection,
    SQLiteDocumentStore,
)

WARDROBE_COLLECTIONS = ("users", "pieces", "outfits", "shelves")


class WardrobeStore:
    """Collections for the wardrobe service plus reference population.

    Population mirrors how the client reads documents: id lists are replaced
    by the referenced documents (dangling ids are dropped) and embedded shelf
    items carry the referenced document, or ``None`` when it is gone.
    """

    def __init__(self, documents: DocumentStore) -> None:
        self.documents = documents
        self.users: ModelCollection[User] = ModelCollection(documents, "users", User)
        self.pieces: ModelCollection[Piece] = ModelCollection(documents, "pieces", Piece)
        self.outfits: ModelCollection[Outfit] = ModelCollection(documents, "outfits", Outfit)
        self.shelves: ModelCollection[Shelf] = ModelCollection(documents, "shelves", Shelf)

    @classmethod
    def sqlite(cls, database_path: str | Path = "data/wardrobe.db") -> "WardrobeStore":
        documents = SQLiteDocumentStore(
            database_path, collections=WARDROBE_COLLECTIONS, unique_fields={"users": ("email",)}
        )
        return cls(documents)

    # users

    def create_user(self, user: User) -> User:
        if self.users.find_one(email=user.email):
            raise DuplicateEmailError(f"A user with email {user.email} already exists")
        try:
            return self.users.create(user)
        except DuplicateKeyError as exc:
            raise DuplicateEmailError(f"A user with email {user.email} already exists") from exc

    def list_users(self, include_deleted: bool = False) -> List[User]:
        if include_deleted:
            return self.users.find()
        return self.users.find(is_deleted=None)

    def find_active_user(self, **filters: Any) -> Optional[User]:
        return self.users.find_one(is_deleted=None, **filters)

    def soft_delete_user(self, user_id: str) -> Optional[User]:
        return self.users.update(user_id, {"is_deleted": utcnow()})

    def update_user(self, user_id: str, updated_fields: Dict[str, Any]) -> Optional[User]:
        email = updated_fields.get("email")
        if email:
            other = self.users.find_one(email=email)
            if other and other.id != user_id:
                raise DuplicateEmailError(f"A user with email {email} already exists")
        try:
            return self.users.update(user_id, updated_fields)
        except DuplicateKeyError as exc:
            raise DuplicateEmailError(f"A user with email {email} already exists") from exc

    # pieces / outfits / shelves

    def list_pieces(self, created_by_id: Optional[str] = None) -> List[Piece]:
        return self.pieces.find(created_by_id=created_by_id) if created_by_id else self.pieces.find()

    def list_outfits(self, created_by_id: Optional[str] = None) -> List[Outfit]:
        return self.outfits.find(created_by_id=created_by_id) if created_by_id else self.outfits.find()

    def list_shelves(self, created_by_id: Optional[str] = None) -> List[Shelf]:
        return self.shelves.find(created_by_id=created_by_id) if created_by_id else self.shelves.find()

    def missing_pieces(self, piece_ids: List[str]) -> List[str]:
        return [piece_id for piece_id in piece_ids if not self.pieces.exists(piece_id)]

    def item_exists(self, item_id: str, item_type: str) -> bool:
        collection = self.pieces if item_type == "Piece" else self.outfits
        return collection.exists(item_id)

    # population

    def _expand(self, collection: ModelCollection, ids: List[str]) -> List[Dict[str, Any]]:
        expanded = []
        for doc_id in ids:
            record = collection.get(doc_id)
            if record is not None:
                expanded.append(record.to_document())
        return expanded

    def populate_outfit(self, outfit: Outfit) -> Dict[str, Any]:
        doc = outfit.to_document()
        doc["pieces"] = self._expand(self.pieces, outfit.pieces)
        return doc

    def populate_shelf(self, shelf: Shelf) -> Dict[str, Any]:
        doc = shelf.to_document()
        populated_items = []
        for item in doc["items"]:
            collection = self.pieces if item["item_type"] == "Piece" else self.outfits
            record = collection.get(item["item_id"])
            populated_items.append({**item, "item_id": record.to_document() if record else None})
        doc["items"] = populated_items
        return doc

    def populate_user(self, user: User, *relations: str) -> Dict[str, Any]:
        """Expand the requested relations (all three when none are named)."""

        doc = user.to_document()
        wanted = relations or ("pieces", "outfits", "shelves")
        if "pieces" in wanted:
            doc["pieces"] = self._expand(self.pieces, user.pieces)
        if "outfits" in wanted:
            doc["outfits"] = self._expand(self.outfits, user.outfits)
        if "shelves" in wanted:
            doc["shelves"] = self._expand(self.shelves, user.shelves)
        return doc


__all__ = ["DuplicateEmailError", "WARDROBE_COLLECTIONS", "WardrobeStore"]

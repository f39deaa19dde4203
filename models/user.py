"""Wardrobe-service user document."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from models.document import (
    Document,
    coerce_datetime,
    id_list,
    item_refs,
    new_object_id,
    optional_text,
    require_text,
)
from models.taxonomy import AUTH_TYPES


@dataclass
class User(Document):
    """A locker owner.

    ``password_hash`` is only set for native accounts and is never part of
    :meth:`to_document` unless secrets are requested explicitly.
    """

    SECRET_FIELDS = ("password_hash",)

    first_name: str
    last_name: str
    name: str
    username: str
    email: str
    picture: Optional[str] = None
    auth_type: str = "native"
    password_hash: Optional[str] = None
    all_items: List[Dict[str, Any]] = field(default_factory=list)
    pieces: List[str] = field(default_factory=list)
    outfits: List[str] = field(default_factory=list)
    shelves: List[str] = field(default_factory=list)
    is_deleted: Optional[datetime] = None
    id: str = field(default_factory=new_object_id)

    def __post_init__(self) -> None:
        self.first_name = require_text("first_name", self.first_name)
        self.last_name = require_text("last_name", self.last_name)
        self.name = require_text("name", self.name)
        self.username = require_text("username", self.username)
        self.email = require_text("email", self.email)
        self.picture = optional_text("picture", self.picture, max_length=1024)
        if self.auth_type not in AUTH_TYPES:
            raise ValueError(f"Unsupported auth_type '{self.auth_type}'. Allowed: {AUTH_TYPES}")
        self.all_items = item_refs("all_items", self.all_items)
        self.pieces = id_list("pieces", self.pieces)
        self.outfits = id_list("outfits", self.outfits)
        self.shelves = id_list("shelves", self.shelves)
        if self.is_deleted is not None:
            self.is_deleted = coerce_datetime(self.is_deleted, "is_deleted")

    def link_item(self, item_id: str, item_type: str) -> None:
        """Reference a piece or outfit from both its own list and ``all_items``."""

        own_list = self.pieces if item_type == "Piece" else self.outfits
        if item_id not in own_list:
            own_list.append(item_id)
        if not any(ref["item_id"] == item_id and ref["item_type"] == item_type for ref in self.all_items):
            self.all_items.append({"item_id": item_id, "item_type": item_type})

    def unlink_item(self, item_id: str, item_type: str) -> None:
        if item_type == "Piece":
            self.pieces = [piece_id for piece_id in self.pieces if piece_id != item_id]
        else:
            self.outfits = [outfit_id for outfit_id in self.outfits if outfit_id != item_id]
        self.all_items = [
            ref for ref in self.all_items if not (ref["item_id"] == item_id and ref["item_type"] == item_type)
        ]


__all__ = ["User"]

"""Shelf document: an ordered, mixed collection of pieces and outfits."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from models.document import Document, coerce_datetime, item_refs, new_object_id, require_id, require_text, utcnow


@dataclass
class Shelf(Document):
    """Each entry in ``items`` is ``{item_id, item_type, item_added_date}``."""

    name: str
    created_by_name: str
    created_by_username: str
    created_by_id: str
    items: List[Dict[str, Any]] = field(default_factory=list)
    created_date: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=new_object_id)

    def __post_init__(self) -> None:
        self.name = require_text("name", self.name)
        self.items = item_refs("items", self.items, with_added_date=True)
        self.created_by_name = require_text("created_by_name", self.created_by_name)
        self.created_by_username = require_text("created_by_username", self.created_by_username)
        self.created_by_id = require_id("created_by_id", self.created_by_id)
        self.created_date = coerce_datetime(self.created_date, "created_date")

    def has_item(self, item_id: str, item_type: str) -> bool:
        return any(item["item_id"] == item_id and item["item_type"] == item_type for item in self.items)


__all__ = ["Shelf"]

"""Outfit document: a named set of pieces."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from models.document import Document, coerce_datetime, id_list, new_object_id, require_id, require_text, utcnow
from models.taxonomy import normalise_tags


@dataclass
class Outfit(Document):
    name: str
    created_by_name: str
    created_by_username: str
    created_by_id: str
    pieces: List[str] = field(default_factory=list)
    tags: Optional[Dict[str, Dict[str, bool]]] = None
    created_date: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=new_object_id)

    def __post_init__(self) -> None:
        self.name = require_text("name", self.name)
        self.pieces = id_list("pieces", self.pieces)
        self.tags = normalise_tags(self.tags)
        self.created_by_name = require_text("created_by_name", self.created_by_name)
        self.created_by_username = require_text("created_by_username", self.created_by_username)
        self.created_by_id = require_id("created_by_id", self.created_by_id)
        self.created_date = coerce_datetime(self.created_date, "created_date")


__all__ = ["Outfit"]

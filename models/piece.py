"""Piece document: a single wardrobe garment."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from models.document import (
    Document,
    coerce_datetime,
    new_object_id,
    optional_text,
    require_id,
    require_text,
    utcnow,
)
from models.taxonomy import normalise_tags, validate_colors, validate_piece_type

MAX_SECONDARY_IMAGES = 6


@dataclass
class Piece(Document):
    """Represents a garment in a user's locker.

    ``created_by_*`` fields are copied from the creating user when the piece
    is made and are not kept in sync afterwards.
    """

    primary_img: str
    name: str
    type: str
    created_by_name: str
    created_by_username: str
    created_by_id: str
    colors: List[str] = field(default_factory=list)
    secondary_imgs: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    owned: bool = True
    subtype: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    price: Optional[str] = None
    product_link: Optional[str] = None
    tags: Optional[Dict[str, Dict[str, bool]]] = None
    created_date: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=new_object_id)

    def __post_init__(self) -> None:
        self.primary_img = require_text("primary_img", self.primary_img, max_length=1024)
        self.secondary_imgs = [
            require_text("secondary_imgs", img, max_length=1024) for img in (self.secondary_imgs or [])
        ]
        if len(self.secondary_imgs) > MAX_SECONDARY_IMAGES:
            raise ValueError(f"secondary_imgs cannot have more than {MAX_SECONDARY_IMAGES} images")
        self.name = require_text("name", self.name)
        self.notes = optional_text("notes", self.notes, max_length=2000)
        self.owned = True if self.owned is None else bool(self.owned)
        self.type = validate_piece_type(self.type)
        self.subtype = optional_text("subtype", self.subtype, min_length=1)
        self.colors = validate_colors(self.colors or [])
        self.brand = optional_text("brand", self.brand)
        self.size = optional_text("size", self.size, max_length=50)
        if self.price is not None and not isinstance(self.price, str):
            self.price = str(self.price)
        self.price = optional_text("price", self.price, max_length=50)
        self.product_link = optional_text("product_link", self.product_link, max_length=1024)
        self.tags = normalise_tags(self.tags)
        self.created_by_name = require_text("created_by_name", self.created_by_name)
        self.created_by_username = require_text("created_by_username", self.created_by_username)
        self.created_by_id = require_id("created_by_id", self.created_by_id)
        self.created_date = coerce_datetime(self.created_date, "created_date")


__all__ = ["MAX_SECONDARY_IMAGES", "Piece"]

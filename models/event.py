"""Ticketed event document."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from models.document import Document, coerce_datetime, new_object_id, require_text


@dataclass
class Event(Document):
    name: str
    slogan: str
    primary_img_src: str
    city: str
    date: datetime
    time: str
    alt_img_srcs: List[str] = field(default_factory=list)
    id: str = field(default_factory=new_object_id)

    def __post_init__(self) -> None:
        self.name = require_text("name", self.name)
        self.slogan = require_text("slogan", self.slogan)
        self.primary_img_src = require_text("primary_img_src", self.primary_img_src)
        if not isinstance(self.alt_img_srcs, list):
            raise ValueError("alt_img_srcs must be a list")
        self.alt_img_srcs = [str(src) for src in self.alt_img_srcs]
        self.city = require_text("city", self.city)
        self.date = coerce_datetime(self.date, "date")
        self.time = require_text("time", self.time)


__all__ = ["Event"]

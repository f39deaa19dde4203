"""Ticket purchase record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from models.document import Document, coerce_datetime, new_object_id, require_id, utcnow


@dataclass
class Transaction(Document):
    user_id: str
    event_id: str
    ticket_quantity: int
    purchased_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=new_object_id)

    def __post_init__(self) -> None:
        self.user_id = require_id("user_id", self.user_id)
        self.event_id = require_id("event_id", self.event_id)
        quantity = self.ticket_quantity
        if isinstance(quantity, bool) or not isinstance(quantity, (int, float)) or int(quantity) != quantity:
            raise ValueError("ticket_quantity must be an integer")
        if quantity < 1:
            raise ValueError("ticket_quantity must be at least 1")
        self.ticket_quantity = int(quantity)
        self.purchased_at = coerce_datetime(self.purchased_at, "purchased_at")


__all__ = ["Transaction"]

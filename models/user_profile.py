"""Ticketing-service user profile with cart and purchase line items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from models.document import Document, coerce_datetime, new_object_id, optional_text, require_id, require_text


def event_line_items(field_name: str, values: Any) -> List[Dict[str, Any]]:
    """Validate ``{event_id, ticket_quantity}`` entries (quantity at least one)."""

    if values is None:
        return []
    items: List[Dict[str, Any]] = []
    for raw in values:
        if not isinstance(raw, dict):
            raise ValueError(f"{field_name} entries must be objects")
        event_id = raw.get("event_id")
        if isinstance(event_id, dict):
            # populated form sent back by the client
            event_id = event_id.get("_id")
        quantity = raw.get("ticket_quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, (int, float)) or int(quantity) != quantity:
            raise ValueError(f"{field_name}.ticket_quantity must be an integer")
        if quantity < 1:
            raise ValueError(f"{field_name}.ticket_quantity must be at least 1")
        items.append({"event_id": require_id(f"{field_name}.event_id", event_id), "ticket_quantity": int(quantity)})
    return items


@dataclass
class UserProfile(Document):
    first_name: str
    name: str
    picture: str
    email: str
    last_name: Optional[str] = None
    phone_number: Optional[int] = None
    address: Optional[str] = None
    carted_events: List[Dict[str, Any]] = field(default_factory=list)
    purchased_events: List[Dict[str, Any]] = field(default_factory=list)
    is_deleted: Optional[datetime] = None
    id: str = field(default_factory=new_object_id)

    def __post_init__(self) -> None:
        self.first_name = require_text("first_name", self.first_name)
        self.last_name = optional_text("last_name", self.last_name, min_length=1)
        self.name = require_text("name", self.name)
        self.picture = require_text("picture", self.picture)
        self.email = require_text("email", self.email)
        if self.phone_number is not None:
            digits = str(self.phone_number)
            if not digits.isdigit() or len(digits) != 10:
                raise ValueError("phone_number must be 10 digits")
            self.phone_number = int(digits)
        self.address = optional_text("address", self.address, min_length=1)
        self.carted_events = event_line_items("carted_events", self.carted_events)
        self.purchased_events = event_line_items("purchased_events", self.purchased_events)
        if self.is_deleted is not None:
            self.is_deleted = coerce_datetime(self.is_deleted, "is_deleted")

    def set_cart_quantity(self, event_id: str, ticket_quantity: int) -> None:
        """Add an event to the cart, or replace its quantity if already carted."""

        for item in self.carted_events:
            if item["event_id"] == event_id:
                item["ticket_quantity"] = ticket_quantity
                break
        else:
            self.carted_events.append({"event_id": event_id, "ticket_quantity": ticket_quantity})
        self.carted_events = event_line_items("carted_events", self.carted_events)

    def remove_from_cart(self, event_id: str) -> None:
        self.carted_events = [item for item in self.carted_events if item["event_id"] != event_id]

    def purchase(self, event_id: str, ticket_quantity: int) -> None:
        """Drop the event from the cart and add the tickets to the purchases."""

        self.remove_from_cart(event_id)
        for item in self.purchased_events:
            if item["event_id"] == event_id:
                item["ticket_quantity"] += ticket_quantity
                break
        else:
            self.purchased_events.append({"event_id": event_id, "ticket_quantity": ticket_quantity})
        self.purchased_events = event_line_items("purchased_events", self.purchased_events)


__all__ = ["UserProfile", "event_line_items"]

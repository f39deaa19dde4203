"""Event routes for the ticketing service."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from models.event import Event
from server.common import get_store
from storage.ticketing_store import TicketingStore

router = APIRouter()


@router.post("", status_code=201)
def create_event(payload: Dict[str, Any] = Body(...), store: TicketingStore = Depends(get_store)) -> dict:
    event = Event.from_document({key: value for key, value in payload.items() if key not in {"_id", "id"}})
    store.events.create(event)
    return {"event": event.to_document()}


@router.get("")
def list_events(store: TicketingStore = Depends(get_store)) -> dict:
    return {"events": [event.to_document() for event in store.events.find()]}


__all__ = ["router"]

"""Ticketing user profiles with cart and purchase state."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from fitlockr_app.logging_config import get_logger, log_event
from logic.validation import CartItemRequest, ProfileCreateRequest
from models.user_profile import UserProfile
from server.common import get_store
from storage.document_store import DuplicateEmailError
from storage.ticketing_store import TicketingStore

LOGGER = get_logger(__name__)
router = APIRouter()


def _load_profile(store: TicketingStore, profile_id: str) -> UserProfile:
    profile = store.profiles.get(profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@router.get("/email/{email}")
def get_profile_by_email(email: str, store: TicketingStore = Depends(get_store)) -> dict:
    profile = store.profiles.find_one(email=email, is_deleted=None)
    return {"user": store.populate_profile(profile) if profile else None}


@router.post("", status_code=201)
def create_profile(
    request: ProfileCreateRequest,
    response: Response,
    store: TicketingStore = Depends(get_store),
) -> dict:
    """Create a profile, or return the existing one for a known email."""

    existing = store.profiles.find_one(email=request.email) if request.email else None
    if existing:
        response.status_code = 200
        return {"user": existing.to_document()}

    profile = UserProfile.from_document(request.model_dump(exclude_none=True))
    try:
        store.create_profile(profile)
    except DuplicateEmailError:
        response.status_code = 200
        return {"user": store.profiles.find_one(email=profile.email).to_document()}
    log_event(LOGGER, logging.INFO, "profile_created", user_id=profile.id)
    return {"user": profile.to_document()}


@router.get("")
def list_profiles(store: TicketingStore = Depends(get_store)) -> dict:
    return {"users": [profile.to_document() for profile in store.list_profiles()]}


@router.get("/all")
def list_all_profiles(store: TicketingStore = Depends(get_store)) -> dict:
    return {"users": [profile.to_document() for profile in store.list_profiles(include_deleted=True)]}


@router.put("/{profile_id}")
def update_profile(
    profile_id: str,
    updates: Dict[str, Any] = Body(...),
    store: TicketingStore = Depends(get_store),
) -> dict:
    profile = store.update_profile(profile_id, updates)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": profile.to_document()}


@router.delete("/{profile_id}")
def delete_profile(profile_id: str, store: TicketingStore = Depends(get_store)) -> dict:
    profile = store.soft_delete_profile(profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User marked as deleted", "user": profile.to_document()}


@router.patch("/{profile_id}/soft-delete")
def soft_delete_profile(profile_id: str, store: TicketingStore = Depends(get_store)) -> dict:
    profile = store.soft_delete_profile(profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User successfully soft-deleted.", "user": profile.to_document()}


@router.post("/{profile_id}/cart")
def add_to_cart(profile_id: str, request: CartItemRequest, store: TicketingStore = Depends(get_store)) -> dict:
    """Add an event to the cart or replace the quantity already carted."""

    profile = _load_profile(store, profile_id)
    profile.set_cart_quantity(request.event_id, request.ticket_quantity)
    profile = store.profiles.save(profile)
    return {"user": store.populate_profile(profile)}


@router.delete("/{profile_id}/cart/{event_id}")
def remove_from_cart(profile_id: str, event_id: str, store: TicketingStore = Depends(get_store)) -> dict:
    profile = _load_profile(store, profile_id)
    profile.remove_from_cart(event_id)
    profile = store.profiles.save(profile)
    return {"user": store.populate_profile(profile)}


@router.post("/{profile_id}/purchase")
def purchase(profile_id: str, request: CartItemRequest, store: TicketingStore = Depends(get_store)) -> dict:
    profile = _load_profile(store, profile_id)
    profile.purchase(request.event_id, request.ticket_quantity)
    profile = store.profiles.save(profile)
    log_event(
        LOGGER,
        logging.INFO,
        "tickets_purchased",
        user_id=profile.id,
        event_id=request.event_id,
        ticket_quantity=request.ticket_quantity,
    )
    return {"user": store.populate_profile(profile)}


__all__ = ["router"]

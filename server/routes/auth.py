"""Username and password login for native accounts."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from fitlockr_app.logging_config import get_logger, log_event
from logic.validation import LoginRequest
from server.common import get_store
from storage.wardrobe_store import WardrobeStore
from tools.passwords import verify_password

LOGGER = get_logger(__name__)
router = APIRouter()

INVALID_CREDENTIALS = "Invalid username or password"


@router.post("/login")
def login(request: LoginRequest, store: WardrobeStore = Depends(get_store)) -> dict:
    """Return the user without its hash. No session or token is issued."""

    if not request.username or not request.password:
        raise HTTPException(status_code=400, detail="username and password are required")

    user = store.find_active_user(username=request.username, auth_type="native")
    if user is None or not verify_password(request.password, user.password_hash):
        log_event(LOGGER, logging.WARNING, "login_rejected", username=request.username)
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    log_event(LOGGER, logging.INFO, "login_succeeded", user_id=user.id)
    return {"user": user.to_document()}


__all__ = ["router"]

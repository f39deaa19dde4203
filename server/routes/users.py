"""Wardrobe user routes, including piece/outfit/shelf links on the user."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from fitlockr_app.logging_config import get_logger, log_event
from logic.validation import (
    ImageUploadRequest,
    LinkOutfitRequest,
    LinkPieceRequest,
    LinkShelfRequest,
    PasswordUpdateRequest,
    UserCreateRequest,
)
from models.user import User
from server.common import get_image_host, get_store
from storage.document_store import DuplicateEmailError
from storage.wardrobe_store import WardrobeStore
from tools.image_host import USERS_FOLDER, ImageHost
from tools.passwords import MIN_PASSWORD_LENGTH, WeakPasswordError, check_password_strength, hash_password

LOGGER = get_logger(__name__)
router = APIRouter()

# Fields a client may never set through the generic update route.
PROTECTED_FIELDS = {"_id", "id", "password_hash", "password"}


def _load_user(store: WardrobeStore, user_id: str) -> User:
    user = store.users.get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/email/{email}")
def get_user_by_email(email: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = store.find_active_user(email=email)
    return {"user": store.populate_user(user) if user else None}


@router.get("/username/{username}")
def get_user_by_username(username: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = store.find_active_user(username=username)
    return {"user": store.populate_user(user) if user else None}


@router.post("", status_code=201)
def create_user(
    request: UserCreateRequest,
    response: Response,
    store: WardrobeStore = Depends(get_store),
) -> dict:
    """Create a user, or return the existing one when the email is already on file."""

    if not (request.first_name and request.last_name and request.name and request.email):
        raise HTTPException(status_code=400, detail="first_name, last_name, name, and email are required")

    existing = store.users.find_one(email=request.email)
    if existing:
        response.status_code = 200
        return {"user": existing.to_document()}

    auth_type = request.auth_type or "native"
    password_hash = None
    if auth_type == "native":
        try:
            check_password_strength(request.password)
        except WeakPasswordError:
            raise HTTPException(
                status_code=400,
                detail=(
                    "Password is required for native accounts and must be at least "
                    f"{MIN_PASSWORD_LENGTH} characters."
                ),
            )
        password_hash = hash_password(request.password)

    user = User(
        first_name=request.first_name,
        last_name=request.last_name,
        name=request.name,
        username=request.username or request.email.split("@")[0] or request.email,
        email=request.email,
        picture=request.picture,
        auth_type=auth_type,
        password_hash=password_hash,
    )
    try:
        store.create_user(user)
    except DuplicateEmailError:
        response.status_code = 200
        return {"user": store.users.find_one(email=user.email).to_document()}
    log_event(LOGGER, logging.INFO, "user_created", user_id=user.id, auth_type=auth_type)
    return {"user": user.to_document()}


@router.post("/update-password")
def update_password(request: PasswordUpdateRequest, store: WardrobeStore = Depends(get_store)) -> dict:
    if not request.user_id or not request.new_password:
        raise HTTPException(status_code=400, detail="user_id and new_password are required.")
    try:
        check_password_strength(request.new_password)
    except WeakPasswordError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    user = store.users.get(request.user_id)
    if user is None or user.is_deleted:
        raise HTTPException(status_code=404, detail="User not found")
    if user.auth_type != "native":
        raise HTTPException(status_code=400, detail="Password can only be updated for native accounts.")

    user.password_hash = hash_password(request.new_password)
    store.users.save(user)
    log_event(LOGGER, logging.INFO, "password_updated", user_id=user.id)
    return {"message": "Password updated successfully."}


@router.post("/{user_id}/profile-picture")
def upload_profile_picture(
    user_id: str,
    request: ImageUploadRequest,
    store: WardrobeStore = Depends(get_store),
    image_host: ImageHost = Depends(get_image_host),
) -> dict:
    if not request.image:
        raise HTTPException(status_code=400, detail="Image is required.")
    uploaded = image_host.upload(request.image, folder=USERS_FOLDER)
    user = store.users.update(user_id, {"picture": uploaded.url})
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": store.populate_user(user)}


@router.get("")
def list_users(store: WardrobeStore = Depends(get_store)) -> dict:
    return {"users": [user.to_document() for user in store.list_users()]}


@router.get("/all")
def list_all_users(store: WardrobeStore = Depends(get_store)) -> dict:
    return {"users": [user.to_document() for user in store.list_users(include_deleted=True)]}


@router.get("/{user_id}")
def get_user(user_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    return {"user": store.populate_user(_load_user(store, user_id))}


@router.put("/{user_id}")
def update_user(
    user_id: str,
    updates: Dict[str, Any] = Body(...),
    store: WardrobeStore = Depends(get_store),
) -> dict:
    allowed = {key: value for key, value in updates.items() if key not in PROTECTED_FIELDS}
    user = store.update_user(user_id, allowed)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": user.to_document()}


@router.delete("/{user_id}")
def delete_user(user_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = store.soft_delete_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User marked as deleted", "user": user.to_document()}


@router.patch("/{user_id}/soft-delete")
def soft_delete_user(user_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = store.soft_delete_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User successfully soft-deleted.", "user": user.to_document()}


# pieces


@router.get("/{user_id}/pieces")
def list_user_pieces(user_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    return {"pieces": store.populate_user(user, "pieces")["pieces"]}


@router.post("/{user_id}/pieces")
def link_piece(user_id: str, request: LinkPieceRequest, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    if not request.piece_id or not store.pieces.exists(request.piece_id):
        raise HTTPException(status_code=404, detail="Piece not found")
    user.link_item(request.piece_id, "Piece")
    user = store.users.save(user)
    return {"user": store.populate_user(user, "pieces")}


@router.delete("/{user_id}/pieces/{piece_id}")
def unlink_piece(user_id: str, piece_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    user.unlink_item(piece_id, "Piece")
    user = store.users.save(user)
    return {"user": store.populate_user(user, "pieces")}


# outfits


@router.get("/{user_id}/outfits")
def list_user_outfits(user_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    return {"outfits": store.populate_user(user, "outfits")["outfits"]}


@router.post("/{user_id}/outfits")
def link_outfit(user_id: str, request: LinkOutfitRequest, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    if not request.outfit_id or not store.outfits.exists(request.outfit_id):
        raise HTTPException(status_code=404, detail="Outfit not found")
    user.link_item(request.outfit_id, "Outfit")
    user = store.users.save(user)
    return {"user": store.populate_user(user, "outfits")}


@router.delete("/{user_id}/outfits/{outfit_id}")
def unlink_outfit(user_id: str, outfit_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    user.unlink_item(outfit_id, "Outfit")
    user = store.users.save(user)
    return {"user": store.populate_user(user, "outfits")}


# shelves


@router.get("/{user_id}/shelves")
def list_user_shelves(user_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    return {"shelves": store.populate_user(user, "shelves")["shelves"]}


@router.post("/{user_id}/shelves")
def link_shelf(user_id: str, request: LinkShelfRequest, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    if not request.shelf_id or not store.shelves.exists(request.shelf_id):
        raise HTTPException(status_code=404, detail="Shelf not found")
    if request.shelf_id not in user.shelves:
        user.shelves.append(request.shelf_id)
    user = store.users.save(user)
    return {"user": store.populate_user(user, "shelves")}


@router.delete("/{user_id}/shelves/{shelf_id}")
def unlink_shelf(user_id: str, shelf_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    user = _load_user(store, user_id)
    user.shelves = [linked for linked in user.shelves if linked != shelf_id]
    user = store.users.save(user)
    return {"user": store.populate_user(user, "shelves")}


__all__ = ["router"]

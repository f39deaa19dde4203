"""Outfit routes. Responses carry the outfit's pieces expanded."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from logic.validation import OutfitCreateRequest
from models.document import utcnow
from models.outfit import Outfit
from server.common import get_store
from storage.wardrobe_store import WardrobeStore

router = APIRouter()


@router.post("", status_code=201)
def create_outfit(request: OutfitCreateRequest, store: WardrobeStore = Depends(get_store)) -> dict:
    if store.missing_pieces(request.pieces):
        raise HTTPException(status_code=400, detail="One or more pieces were not found")

    outfit = Outfit(
        name=request.name,
        pieces=request.pieces,
        tags=request.tags,
        created_by_name=request.created_by_name,
        created_by_username=request.created_by_username,
        created_by_id=request.created_by_id,
        created_date=request.created_date or utcnow(),
    )
    store.outfits.create(outfit)
    return {"outfit": store.populate_outfit(outfit)}


@router.get("")
def list_outfits(created_by_id: Optional[str] = None, store: WardrobeStore = Depends(get_store)) -> dict:
    return {"outfits": [store.populate_outfit(outfit) for outfit in store.list_outfits(created_by_id)]}


@router.get("/{outfit_id}")
def get_outfit(outfit_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    outfit = store.outfits.get(outfit_id)
    if outfit is None:
        raise HTTPException(status_code=404, detail="Outfit not found")
    return {"outfit": store.populate_outfit(outfit)}


@router.put("/{outfit_id}")
def update_outfit(
    outfit_id: str,
    updates: Dict[str, Any] = Body(...),
    store: WardrobeStore = Depends(get_store),
) -> dict:
    outfit = store.outfits.update(outfit_id, updates)
    if outfit is None:
        raise HTTPException(status_code=404, detail="Outfit not found")
    return {"outfit": store.populate_outfit(outfit)}


@router.delete("/{outfit_id}")
def delete_outfit(outfit_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    outfit = store.outfits.delete(outfit_id)
    if outfit is None:
        raise HTTPException(status_code=404, detail="Outfit not found")
    return {"message": "Outfit deleted", "outfit": outfit.to_document()}


__all__ = ["router"]

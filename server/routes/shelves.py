"""Shelf routes, including single-item add and remove."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from logic.validation import ShelfCreateRequest, ShelfItemRequest
from models.document import utcnow
from models.shelf import Shelf
from models.taxonomy import ITEM_TYPES
from server.common import get_store
from storage.wardrobe_store import WardrobeStore

router = APIRouter()


def _check_item(store: WardrobeStore, item_id: Optional[str], item_type: Optional[str], with_id: bool) -> None:
    if item_type not in ITEM_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid item_type: {item_type}" if with_id else "Invalid item_type")
    if not item_id or not store.item_exists(item_id, item_type):
        detail = f"{item_type} not found"
        raise HTTPException(status_code=400, detail=f"{detail}: {item_id}" if with_id else detail)


def _normalise_items(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Stamp ``item_added_date`` on entries that arrive without one."""

    return [
        {
            "item_id": item.get("item_id"),
            "item_type": item.get("item_type"),
            "item_added_date": item.get("item_added_date") or utcnow(),
        }
        for item in items
    ]


def _load_shelf(store: WardrobeStore, shelf_id: str) -> Shelf:
    shelf = store.shelves.get(shelf_id)
    if shelf is None:
        raise HTTPException(status_code=404, detail="Shelf not found")
    return shelf


@router.post("", status_code=201)
def create_shelf(request: ShelfCreateRequest, store: WardrobeStore = Depends(get_store)) -> dict:
    for item in request.items:
        _check_item(store, item.item_id, item.item_type, with_id=True)

    shelf = Shelf(
        name=request.name,
        items=_normalise_items([item.model_dump() for item in request.items]),
        created_by_name=request.created_by_name,
        created_by_username=request.created_by_username,
        created_by_id=request.created_by_id,
        created_date=request.created_date or utcnow(),
    )
    store.shelves.create(shelf)
    return {"shelf": store.populate_shelf(shelf)}


@router.get("")
def list_shelves(created_by_id: Optional[str] = None, store: WardrobeStore = Depends(get_store)) -> dict:
    return {"shelves": [store.populate_shelf(shelf) for shelf in store.list_shelves(created_by_id)]}


@router.get("/{shelf_id}")
def get_shelf(shelf_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    return {"shelf": store.populate_shelf(_load_shelf(store, shelf_id))}


@router.put("/{shelf_id}")
def update_shelf(
    shelf_id: str,
    updates: Dict[str, Any] = Body(...),
    store: WardrobeStore = Depends(get_store),
) -> dict:
    fields = dict(updates)
    if isinstance(fields.get("items"), list):
        fields["items"] = _normalise_items([item if isinstance(item, dict) else {} for item in fields["items"]])
    shelf = store.shelves.update(shelf_id, fields)
    if shelf is None:
        raise HTTPException(status_code=404, detail="Shelf not found")
    return {"shelf": store.populate_shelf(shelf)}


@router.delete("/{shelf_id}")
def delete_shelf(shelf_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    shelf = store.shelves.delete(shelf_id)
    if shelf is None:
        raise HTTPException(status_code=404, detail="Shelf not found")
    return {"message": "Shelf deleted", "shelf": shelf.to_document()}


@router.post("/{shelf_id}/items")
def add_shelf_item(shelf_id: str, request: ShelfItemRequest, store: WardrobeStore = Depends(get_store)) -> dict:
    shelf = _load_shelf(store, shelf_id)
    _check_item(store, request.item_id, request.item_type, with_id=False)
    if not shelf.has_item(request.item_id, request.item_type):
        shelf.items.append(_normalise_items([request.model_dump()])[0])
    shelf = store.shelves.save(shelf)
    return {"shelf": store.populate_shelf(shelf)}


@router.delete("/{shelf_id}/items/{item_id}")
def remove_shelf_item(
    shelf_id: str,
    item_id: str,
    item_type: Optional[str] = None,
    store: WardrobeStore = Depends(get_store),
) -> dict:
    if item_type not in ITEM_TYPES:
        raise HTTPException(status_code=400, detail="item_type query param must be Piece or Outfit")
    shelf = _load_shelf(store, shelf_id)
    shelf.items = [
        item for item in shelf.items if not (item["item_id"] == item_id and item["item_type"] == item_type)
    ]
    shelf = store.shelves.save(shelf)
    return {"shelf": store.populate_shelf(shelf)}


__all__ = ["router"]

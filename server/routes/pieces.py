"""Piece routes: CRUD, tag metadata, image uploads and product-page scraping."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from fitlockr_app.logging_config import get_logger, log_event
from logic.validation import ImageFromUrlRequest, ImageUploadRequest, PieceCreateRequest, ScrapeRequest
from models.piece import MAX_SECONDARY_IMAGES, Piece
from models.taxonomy import tag_metadata
from server.common import get_image_host, get_store
from storage.wardrobe_store import WardrobeStore
from tools.image_host import PIECES_FOLDER, ImageHost
from tools.product_page_fetcher import fetch_product_page, validate_product_url
from tools.product_parser import parse_product_html

LOGGER = get_logger(__name__)
router = APIRouter()


def _load_piece(store: WardrobeStore, piece_id: str) -> Piece:
    piece = store.pieces.get(piece_id)
    if piece is None:
        raise HTTPException(status_code=404, detail="Piece not found")
    return piece


@router.get("/tags")
def get_tags() -> dict:
    return {"tags": tag_metadata()}


@router.post("", status_code=201)
def create_piece(
    request: PieceCreateRequest,
    store: WardrobeStore = Depends(get_store),
    image_host: ImageHost = Depends(get_image_host),
) -> dict:
    """Create a piece after moving every image onto the image host."""

    if not request.primary_img:
        raise HTTPException(status_code=400, detail="primary_img is required")
    if not request.name or not request.type or not request.colors:
        raise HTTPException(status_code=400, detail="name, type, and at least one color are required")

    primary_img = image_host.upload_if_needed(request.primary_img, folder=PIECES_FOLDER)
    secondary_imgs = image_host.upload_many(request.secondary_imgs, folder=PIECES_FOLDER)

    piece = Piece(
        primary_img=primary_img,
        secondary_imgs=secondary_imgs[:MAX_SECONDARY_IMAGES],
        name=request.name,
        notes=request.notes,
        owned=request.owned if request.owned is not None else True,
        type=request.type,
        subtype=request.subtype,
        colors=request.colors,
        brand=request.brand,
        size=request.size,
        price=request.price,
        product_link=request.product_link,
        tags=request.tags,
        created_by_name=request.created_by_name,
        created_by_username=request.created_by_username,
        created_by_id=request.created_by_id,
    )
    store.pieces.create(piece)
    log_event(LOGGER, logging.INFO, "piece_created", piece_id=piece.id, images=1 + len(piece.secondary_imgs))
    return {"piece": piece.to_document()}


@router.post("/upload-image")
def upload_piece_image(request: ImageUploadRequest, image_host: ImageHost = Depends(get_image_host)) -> dict:
    if not request.image:
        raise HTTPException(status_code=400, detail="Image is required")
    return image_host.upload(request.image, folder=PIECES_FOLDER).to_dict()


@router.post("/upload-image-from-url")
def upload_piece_image_from_url(
    request: ImageFromUrlRequest, image_host: ImageHost = Depends(get_image_host)
) -> dict:
    if not request.url:
        raise HTTPException(status_code=400, detail="url is required")
    return {"url": image_host.upload_if_needed(request.url, folder=request.folder)}


@router.post("/scrape-from-url")
def scrape_from_url(request: ScrapeRequest) -> dict:
    """Pull name, brand, images, type and colors from a retailer product page."""

    if not request.url:
        raise HTTPException(status_code=400, detail="url is required")
    validate_product_url(request.url)
    html = fetch_product_page(request.url)
    return parse_product_html(html, request.url)


@router.get("")
def list_pieces(created_by_id: Optional[str] = None, store: WardrobeStore = Depends(get_store)) -> dict:
    return {"pieces": [piece.to_document() for piece in store.list_pieces(created_by_id)]}


@router.get("/{piece_id}")
def get_piece(piece_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    return {"piece": _load_piece(store, piece_id).to_document()}


@router.put("/{piece_id}")
def update_piece(
    piece_id: str,
    updates: Dict[str, Any] = Body(...),
    store: WardrobeStore = Depends(get_store),
) -> dict:
    fields = dict(updates)
    if isinstance(fields.get("secondary_imgs"), list):
        fields["secondary_imgs"] = fields["secondary_imgs"][:MAX_SECONDARY_IMAGES]
    piece = store.pieces.update(piece_id, fields)
    if piece is None:
        raise HTTPException(status_code=404, detail="Piece not found")
    return {"piece": piece.to_document()}


@router.delete("/{piece_id}")
def delete_piece(piece_id: str, store: WardrobeStore = Depends(get_store)) -> dict:
    piece = store.pieces.delete(piece_id)
    if piece is None:
        raise HTTPException(status_code=404, detail="Piece not found")
    log_event(LOGGER, logging.INFO, "piece_deleted", piece_id=piece_id)
    return {"message": "Piece deleted", "piece": piece.to_document()}


__all__ = ["router"]

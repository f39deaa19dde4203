"""Pydantic request schemas shared by the wardrobe and ticketing routes."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from tools.image_host import PIECES_FOLDER


class RequestModel(BaseModel):
    """Base for request bodies; unknown keys are ignored like the client expects."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def provided(self) -> Dict[str, Any]:
        """Fields the client actually sent, for partial updates."""

        return self.model_dump(exclude_unset=True)


# wardrobe users / auth


class UserCreateRequest(RequestModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    picture: Optional[str] = None
    auth_type: Optional[str] = Field(None, description="native or google; native when omitted")
    password: Optional[str] = None


class PasswordUpdateRequest(RequestModel):
    user_id: Optional[str] = None
    new_password: Optional[str] = None


class LoginRequest(RequestModel):
    username: Optional[str] = None
    password: Optional[str] = None


class ImageUploadRequest(RequestModel):
    image: Optional[str] = Field(None, description="Base64 data URL")


class LinkPieceRequest(RequestModel):
    piece_id: Optional[str] = None


class LinkOutfitRequest(RequestModel):
    outfit_id: Optional[str] = None


class LinkShelfRequest(RequestModel):
    shelf_id: Optional[str] = None


# pieces / outfits / shelves


class PieceCreateRequest(RequestModel):
    primary_img: Optional[str] = None
    secondary_imgs: List[str] = Field(default_factory=list)
    name: Optional[str] = None
    notes: Optional[str] = None
    owned: Optional[bool] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    colors: List[str] = Field(default_factory=list)
    brand: Optional[str] = None
    size: Optional[str] = None
    price: Optional[str | int | float] = None
    product_link: Optional[str] = None
    tags: Optional[Dict[str, Any]] = None
    created_by_name: Optional[str] = None
    created_by_username: Optional[str] = None
    created_by_id: Optional[str] = None


class ImageFromUrlRequest(RequestModel):
    url: Optional[str] = None
    folder: str = PIECES_FOLDER


class ScrapeRequest(RequestModel):
    url: Optional[str] = None


class OutfitCreateRequest(RequestModel):
    name: Optional[str] = None
    pieces: List[str] = Field(default_factory=list)
    tags: Optional[Dict[str, Any]] = None
    created_by_name: Optional[str] = None
    created_by_username: Optional[str] = None
    created_by_id: Optional[str] = None
    created_date: Optional[str] = None


class ShelfItemRequest(RequestModel):
    item_id: Optional[str] = None
    item_type: Optional[str] = None
    item_added_date: Optional[str] = None


class ShelfCreateRequest(RequestModel):
    name: Optional[str] = None
    items: List[ShelfItemRequest] = Field(default_factory=list)
    created_by_name: Optional[str] = None
    created_by_username: Optional[str] = None
    created_by_id: Optional[str] = None
    created_date: Optional[str] = None


# ticketing


class ProfileCreateRequest(RequestModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    email: Optional[str] = None


class CartItemRequest(RequestModel):
    """Cart and purchase body; the client sends either ``event_id`` or ``eventId``."""

    event_id: str = Field(validation_alias=AliasChoices("event_id", "eventId"), min_length=1)
    ticket_quantity: int = Field(ge=1)


class TransactionCreateRequest(RequestModel):
    user_id: Optional[str] = None
    event_id: Optional[str] = None
    ticket_quantity: Optional[int] = None


def validation_message(errors: Sequence[Dict[str, Any]]) -> str:
    """Flatten Pydantic errors into one readable sentence for ``{"detail": ...}``."""

    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


__all__ = [
    "CartItemRequest",
    "ImageFromUrlRequest",
    "ImageUploadRequest",
    "LinkOutfitRequest",
    "LinkPieceRequest",
    "LinkShelfRequest",
    "LoginRequest",
    "OutfitCreateRequest",
    "PasswordUpdateRequest",
    "PieceCreateRequest",
    "ProfileCreateRequest",
    "RequestModel",
    "ScrapeRequest",
    "ShelfCreateRequest",
    "ShelfItemRequest",
    "TransactionCreateRequest",
    "UserCreateRequest",
    "validation_message",
]

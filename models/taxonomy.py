"""Canonical labels for pieces, tags and polymorphic references.

This module centralises the enum values the wardrobe documents accept. Helper
functions keep validation consistent across models, stores and routes.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

PIECE_TYPES: List[str] = ["Headwear", "Outerwear", "Top", "Bottom", "Footwear"]

PIECE_COLORS: List[str] = [
    "Black",
    "White",
    "Grey",
    "Brown",
    "Blue",
    "Green",
    "Yellow",
    "Orange",
    "Tan",
    "Red",
    "Purple",
    "Pink",
    "Multi",
]

COMFORT_TAG_KEYS: List[str] = ["comfy", "casual", "classy"]
SEASON_TAG_KEYS: List[str] = ["fall", "winter", "spring", "summer"]
TAG_GROUPS: Dict[str, List[str]] = {"comfort": COMFORT_TAG_KEYS, "season": SEASON_TAG_KEYS}

ITEM_TYPES: List[str] = ["Piece", "Outfit"]
AUTH_TYPES: List[str] = ["native", "google"]

# Words seen on retailer pages mapped onto the piece types above.
TYPE_KEYWORDS: Dict[str, List[str]] = {
    "Headwear": ["hat", "cap", "beanie", "beret", "bucket hat", "headband", "visor"],
    "Outerwear": ["coat", "jacket", "parka", "puffer", "trench", "blazer", "vest", "anorak"],
    "Top": ["shirt", "tee", "t-shirt", "top", "blouse", "sweater", "hoodie", "polo", "cardigan", "tank"],
    "Bottom": ["jeans", "pants", "trousers", "chinos", "shorts", "skirt", "leggings", "joggers"],
    "Footwear": ["shoe", "shoes", "sneakers", "boots", "boot", "loafers", "sandals", "heels", "trainers"],
}

COLOR_MAP: Dict[str, str] = {
    "black": "Black",
    "jet black": "Black",
    "white": "White",
    "off white": "White",
    "ivory": "White",
    "cream": "White",
    "grey": "Grey",
    "gray": "Grey",
    "charcoal": "Grey",
    "heather grey": "Grey",
    "brown": "Brown",
    "chocolate": "Brown",
    "blue": "Blue",
    "navy": "Blue",
    "navy blue": "Blue",
    "light blue": "Blue",
    "denim": "Blue",
    "green": "Green",
    "olive": "Green",
    "khaki": "Tan",
    "yellow": "Yellow",
    "mustard": "Yellow",
    "orange": "Orange",
    "tan": "Tan",
    "beige": "Tan",
    "camel": "Tan",
    "red": "Red",
    "burgundy": "Red",
    "maroon": "Red",
    "purple": "Purple",
    "lilac": "Purple",
    "pink": "Pink",
    "multi": "Multi",
    "multicolor": "Multi",
    "multicolour": "Multi",
}


def validate_piece_type(value: str) -> str:
    """Return ``value`` if it is a known piece type.

    Raises a :class:`ValueError` otherwise; matching is exact, like the stored
    enum.
    """

    if value not in PIECE_TYPES:
        raise ValueError(f"Unsupported piece type '{value}'. Allowed: {PIECE_TYPES}")
    return value


def validate_colors(values: Iterable[str]) -> List[str]:
    """Validate every color against :data:`PIECE_COLORS`, keeping order."""

    colors = list(values)
    invalid = [color for color in colors if color not in PIECE_COLORS]
    if invalid:
        raise ValueError(f"Unsupported colors {invalid}. Allowed: {PIECE_COLORS}")
    return colors


def validate_item_type(value: str) -> str:
    if value not in ITEM_TYPES:
        raise ValueError(f"Invalid item_type: {value}")
    return value


def normalise_tags(raw: Optional[Dict[str, Any]]) -> Optional[Dict[str, Dict[str, bool]]]:
    """Fill a comfort/season tag dict with explicit booleans.

    ``None`` stays ``None``; unknown keys are dropped.
    """

    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError("tags must be an object with comfort and season groups")
    normalised: Dict[str, Dict[str, bool]] = {}
    for group, keys in TAG_GROUPS.items():
        group_values = raw.get(group) or {}
        if not isinstance(group_values, dict):
            raise ValueError(f"tags.{group} must be an object")
        normalised[group] = {key: bool(group_values.get(key, False)) for key in keys}
    return normalised


def tag_metadata() -> Dict[str, List[Dict[str, str]]]:
    """Describe the tag keys with display labels for the client."""

    return {
        group: [{"key": key, "label": key[:1].upper() + key[1:]} for key in keys]
        for group, keys in TAG_GROUPS.items()
    }


def normalize_color_name(raw_string: str) -> Optional[str]:
    """Map a raw retailer color string to a piece color, if one matches."""

    key = raw_string.strip().lower()
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    for word in re.split(r"[\s/,&-]+", key):
        if word in COLOR_MAP:
            return COLOR_MAP[word]
    return None


def guess_piece_type(text: str) -> Optional[str]:
    """Infer a piece type from free text such as a product title."""

    lowered = text.lower()
    for piece_type, keywords in TYPE_KEYWORDS.items():
        for keyword in keywords:
            if re.search(rf"\b{re.escape(keyword)}\b", lowered):
                return piece_type
    return None


__all__ = [
    "PIECE_TYPES",
    "PIECE_COLORS",
    "COMFORT_TAG_KEYS",
    "SEASON_TAG_KEYS",
    "TAG_GROUPS",
    "ITEM_TYPES",
    "AUTH_TYPES",
    "validate_piece_type",
    "validate_colors",
    "validate_item_type",
    "normalise_tags",
    "tag_metadata",
    "normalize_color_name",
    "guess_piece_type",
]

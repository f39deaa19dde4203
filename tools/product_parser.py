"""HTML parsing utilities for retailer product pages."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from models.taxonomy import guess_piece_type, normalize_color_name

logger = logging.getLogger(__name__)

MAX_SCRAPED_IMAGES = 6


def _get_meta_content(soup: BeautifulSoup, key: str, attr: str = "property") -> str:
    tag = soup.find("meta", attrs={attr: key})
    return tag["content"].strip() if tag and tag.get("content") else ""


def _first_meta(soup: BeautifulSoup, *candidates: tuple) -> str:
    for attr, key in candidates:
        value = _get_meta_content(soup, key, attr=attr)
        if value:
            return value
    return ""


def _extract_primary_image(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    meta_image = _first_meta(soup, ("property", "og:image"), ("name", "twitter:image"))
    if meta_image:
        return urljoin(base_url, meta_image)

    first_img = soup.find("img")
    if first_img and first_img.get("src"):
        return urljoin(base_url, first_img["src"])
    return None


def _extract_secondary_images(soup: BeautifulSoup, base_url: str) -> List[str]:
    """Absolute ``src`` values of the first six ``<img>`` tags, without duplicates."""

    images: List[str] = []
    for tag in soup.find_all("img", limit=MAX_SCRAPED_IMAGES):
        src = tag.get("src")
        if not src:
            continue
        absolute = urljoin(base_url, src)
        if absolute not in images:
            images.append(absolute)
    return images


def _extract_colors(soup: BeautifulSoup) -> List[str]:
    raw = _first_meta(
        soup,
        ("property", "product:color"),
        ("itemprop", "color"),
        ("name", "color"),
    )
    colors: List[str] = []
    for part in raw.split(","):
        color = normalize_color_name(part) if part.strip() else None
        if color and color not in colors:
            colors.append(color)
    return colors


def parse_product_html(html: str, url: str) -> Dict[str, object]:
    """Parse retailer HTML into the scrape payload the piece form expects.

    Structured metadata (Open Graph, Twitter cards, ``itemprop``) wins; the
    ``<title>`` and plain ``<img>`` tags are used when it is missing. ``type``
    and ``colors`` are mapped onto the wardrobe taxonomy where a match exists;
    an unmapped category is passed through untouched.
    """

    soup = BeautifulSoup(html, "html.parser")
    title_tag = soup.find("title")
    title = _get_meta_content(soup, "og:title") or (title_tag.get_text().strip() if title_tag else "")
    brand = _first_meta(
        soup,
        ("property", "og:site_name"),
        ("itemprop", "brand"),
        ("name", "brand"),
    )
    category = _first_meta(soup, ("property", "product:category"), ("name", "category"))
    piece_type = guess_piece_type(category) if category else None
    piece_type = piece_type or (guess_piece_type(title) if title else None) or category

    parsed = {
        "primaryImage": _extract_primary_image(soup, url),
        "secondaryImages": _extract_secondary_images(soup, url),
        "name": title,
        "brand": brand,
        "type": piece_type,
        "colors": _extract_colors(soup),
    }

    logger.info(
        "Parsed product HTML", extra={"url": url, "fields": {k: bool(v) for k, v in parsed.items()}}
    )
    return parsed


__all__ = ["MAX_SCRAPED_IMAGES", "parse_product_html"]

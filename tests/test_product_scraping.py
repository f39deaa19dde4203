"""Product page fetching and parsing tests."""

from __future__ import annotations

from typing import Dict

import pytest

from tools.product_page_fetcher import (
    BROWSER_USER_AGENT,
    InvalidProductURLError,
    ProductPageFetchError,
    fetch_product_page,
)
from tools.product_parser import parse_product_html


def test_fetch_product_page_success(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: Dict[str, object] = {}

    class FakeResponse:
        status_code = 200
        text = "<html>ok</html>"

    def fake_get(url: str, headers: Dict[str, str] | None = None, timeout: float = 10.0):
        calls["url"] = url
        calls["headers"] = headers
        calls["timeout"] = timeout
        return FakeResponse()

    monkeypatch.setattr("tools.product_page_fetcher.requests.get", fake_get)
    html = fetch_product_page("https://example.com/product/123", timeout=5)
    assert "ok" in html
    assert calls == {
        "url": "https://example.com/product/123",
        "headers": {"User-Agent": BROWSER_USER_AGENT},
        "timeout": 5,
    }


def test_fetch_product_page_invalid_url() -> None:
    with pytest.raises(InvalidProductURLError):
        fetch_product_page("ftp://example.com/bad")
    with pytest.raises(InvalidProductURLError):
        fetch_product_page("not a url")


def test_fetch_product_page_non_200(monkeypatch: pytest.MonkeyPatch) -> None:
    class FakeResponse:
        status_code = 403
        text = "blocked"

    monkeypatch.setattr(
        "tools.product_page_fetcher.requests.get", lambda *args, **kwargs: FakeResponse()
    )
    with pytest.raises(ProductPageFetchError):
        fetch_product_page("https://example.com/missing")


def test_parse_product_html_with_open_graph() -> None:
    html = """
    <html>
      <head>
        <title>Ignored title</title>
        <meta property="og:title" content="Relaxed Denim Jeans" />
        <meta property="og:image" content="/images/jeans-main.jpg" />
        <meta property="og:site_name" content="Acme Denim" />
        <meta property="product:color" content="Navy Blue, off white" />
      </head>
      <body>
        <img src="/images/jeans-1.jpg" />
        <img src="https://cdn.example.com/jeans-2.jpg" />
        <img src="/images/jeans-1.jpg" />
        <img />
      </body>
    </html>
    """
    parsed = parse_product_html(html, "https://shop.example.com/p/jeans")

    assert parsed == {
        "primaryImage": "https://shop.example.com/images/jeans-main.jpg",
        "secondaryImages": [
            "https://shop.example.com/images/jeans-1.jpg",
            "https://cdn.example.com/jeans-2.jpg",
        ],
        "name": "Relaxed Denim Jeans",
        "brand": "Acme Denim",
        "type": "Bottom",
        "colors": ["Blue", "White"],
    }


def test_parse_product_html_with_basic_tags() -> None:
    images = "".join(f'<img src="img{i}.jpg" />' for i in range(8))
    html = f"""
    <html>
      <head>
        <title> Mystery Item </title>
        <meta name="twitter:image" content="https://cdn.example.com/tw.jpg" />
        <meta itemprop="brand" content="House Label" />
        <meta name="category" content="Accessories" />
      </head>
      <body>{images}</body>
    </html>
    """
    parsed = parse_product_html(html, "https://shop.example.com/items/1")

    assert parsed["primaryImage"] == "https://cdn.example.com/tw.jpg"
    assert len(parsed["secondaryImages"]) == 6
    assert parsed["secondaryImages"][0] == "https://shop.example.com/items/img0.jpg"
    assert parsed["name"] == "Mystery Item"
    assert parsed["brand"] == "House Label"
    assert parsed["type"] == "Accessories"
    assert parsed["colors"] == []


def test_parse_product_html_without_metadata() -> None:
    parsed = parse_product_html("<html><body><p>nothing here</p></body></html>", "https://example.com")
    assert parsed["primaryImage"] is None
    assert parsed["secondaryImages"] == []
    assert parsed["name"] == ""
    assert parsed["type"] == ""

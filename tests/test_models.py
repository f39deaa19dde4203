"""Document model validation and taxonomy tests."""

from __future__ import annotations

from datetime import timezone

import pytest

from models import taxonomy
from models.event import Event
from models.outfit import Outfit
from models.piece import Piece
from models.shelf import Shelf
from models.transaction import Transaction
from models.user import User
from models.user_profile import UserProfile


def _piece(owner: dict, **overrides) -> Piece:
    fields = {
        "primary_img": "https://res.cloudinary.com/demo/image/upload/top.jpg",
        "name": "Oxford shirt",
        "type": "Top",
        "colors": ["Blue"],
        **owner,
    }
    fields.update(overrides)
    return Piece(**fields)


def test_taxonomy_lists() -> None:
    assert taxonomy.PIECE_TYPES == ["Headwear", "Outerwear", "Top", "Bottom", "Footwear"]
    assert "Grey" in taxonomy.PIECE_COLORS
    assert taxonomy.ITEM_TYPES == ["Piece", "Outfit"]


def test_tag_metadata_uses_capitalised_labels() -> None:
    metadata = taxonomy.tag_metadata()
    assert metadata["comfort"][0] == {"key": "comfy", "label": "Comfy"}
    assert [tag["key"] for tag in metadata["season"]] == ["fall", "winter", "spring", "summer"]


def test_normalise_tags_fills_missing_flags() -> None:
    tags = taxonomy.normalise_tags({"comfort": {"casual": True}})
    assert tags == {
        "comfort": {"comfy": False, "casual": True, "classy": False},
        "season": {"fall": False, "winter": False, "spring": False, "summer": False},
    }
    assert taxonomy.normalise_tags(None) is None


def test_normalize_color_name_and_type_guess() -> None:
    assert taxonomy.normalize_color_name("Navy Blue") == "Blue"
    assert taxonomy.normalize_color_name("heather gray") == "Grey"
    assert taxonomy.normalize_color_name("chartreuse") is None
    assert taxonomy.guess_piece_type("Relaxed Fit Denim Jeans") == "Bottom"
    assert taxonomy.guess_piece_type("Wool Trench Coat") == "Outerwear"
    assert taxonomy.guess_piece_type("Gift card") is None


def test_piece_defaults_and_serialisation(owner: dict) -> None:
    piece = _piece(owner, price=49.5)
    assert piece.owned is True
    assert piece.price == "49.5"
    assert len(piece.id) == 24
    assert piece.created_date.tzinfo == timezone.utc

    doc = piece.to_document()
    assert doc["_id"] == piece.id
    assert "id" not in doc
    assert Piece.from_document(doc) == piece


@pytest.mark.parametrize(
    "overrides",
    [
        {"type": "Dress"},
        {"colors": ["Magenta"]},
        {"name": ""},
        {"secondary_imgs": [f"img{i}" for i in range(7)]},
        {"size": "x" * 51},
        {"notes": "n" * 2001},
    ],
)
def test_piece_rejects_invalid_fields(owner: dict, overrides: dict) -> None:
    with pytest.raises(ValueError):
        _piece(owner, **overrides)


def test_from_document_reports_missing_fields() -> None:
    with pytest.raises(ValueError, match="name is required"):
        Outfit.from_document({"created_by_name": "A", "created_by_username": "a", "created_by_id": "1"})


def test_shelf_items_get_added_date(owner: dict) -> None:
    shelf = Shelf(name="Summer", items=[{"item_id": "p1", "item_type": "Piece"}], **owner)
    assert shelf.items[0]["item_added_date"] is not None
    assert shelf.has_item("p1", "Piece")
    assert not shelf.has_item("p1", "Outfit")

    with pytest.raises(ValueError, match="Invalid item_type: Hat"):
        Shelf(name="Bad", items=[{"item_id": "p1", "item_type": "Hat"}], **owner)


def test_user_link_and_unlink_keep_all_items_in_step() -> None:
    user = User(first_name="Ada", last_name="Lovelace", name="Ada Lovelace", username="ada", email="ada@example.com")
    user.link_item("p1", "Piece")
    user.link_item("p1", "Piece")
    user.link_item("o1", "Outfit")

    assert user.pieces == ["p1"]
    assert user.outfits == ["o1"]
    assert user.all_items == [
        {"item_id": "p1", "item_type": "Piece"},
        {"item_id": "o1", "item_type": "Outfit"},
    ]

    user.unlink_item("p1", "Piece")
    assert user.pieces == []
    assert user.all_items == [{"item_id": "o1", "item_type": "Outfit"}]


def test_user_hides_password_hash() -> None:
    user = User(
        first_name="Ada",
        last_name="Lovelace",
        name="Ada Lovelace",
        username="ada",
        email="ada@example.com",
        password_hash="hash",
    )
    assert "password_hash" not in user.to_document()
    assert user.to_document(include_secrets=True)["password_hash"] == "hash"

    with pytest.raises(ValueError):
        User(first_name="A", last_name="B", name="AB", username="ab", email="ab@example.com", auth_type="github")


def _profile(**overrides) -> UserProfile:
    fields = {"first_name": "Grace", "name": "Grace Hopper", "picture": "avatar.png", "email": "grace@example.com"}
    fields.update(overrides)
    return UserProfile(**fields)


def test_profile_cart_and_purchase() -> None:
    profile = _profile()
    profile.set_cart_quantity("e1", 2)
    profile.set_cart_quantity("e1", 4)
    profile.set_cart_quantity("e2", 1)
    assert profile.carted_events == [
        {"event_id": "e1", "ticket_quantity": 4},
        {"event_id": "e2", "ticket_quantity": 1},
    ]

    profile.purchase("e1", 4)
    profile.purchase("e1", 1)
    assert profile.carted_events == [{"event_id": "e2", "ticket_quantity": 1}]
    assert profile.purchased_events == [{"event_id": "e1", "ticket_quantity": 5}]


def test_profile_validation() -> None:
    assert _profile(phone_number="5551234567").phone_number == 5551234567
    with pytest.raises(ValueError, match="10 digits"):
        _profile(phone_number=12345)
    with pytest.raises(ValueError, match="at least 1"):
        _profile(carted_events=[{"event_id": "e1", "ticket_quantity": 0}])


def test_profile_accepts_populated_line_items() -> None:
    profile = _profile(carted_events=[{"event_id": {"_id": "e1", "name": "Geese"}, "ticket_quantity": 2}])
    assert profile.carted_events == [{"event_id": "e1", "ticket_quantity": 2}]


def test_event_and_transaction() -> None:
    event = Event(
        name="Geese",
        slogan="Getting Killed Tour",
        primary_img_src="geese_primary",
        city="Portland, ME",
        date="2025-10-18",
        time="7:30 PM",
    )
    assert event.date.year == 2025
    assert event.to_document()["date"].startswith("2025-10-18")

    transaction = Transaction(user_id="u1", event_id=event.id, ticket_quantity=2.0)
    assert transaction.ticket_quantity == 2
    with pytest.raises(ValueError, match="integer"):
        Transaction(user_id="u1", event_id=event.id, ticket_quantity=1.5)
    with pytest.raises(ValueError, match="integer"):
        Transaction(user_id="u1", event_id=event.id, ticket_quantity="2")

"""SQLite document store, population and seeding tests."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from models.event import Event
from models.outfit import Outfit
from models.piece import Piece
from models.shelf import Shelf
from models.transaction import Transaction
from models.user import User
from models.user_profile import UserProfile
from storage.document_store import DuplicateEmailError, DuplicateKeyError, SQLiteDocumentStore, matches
from storage.seed_events import SAMPLE_EVENTS, seed_events
from storage.ticketing_store import TicketingStore
from storage.wardrobe_store import WardrobeStore


def _user(email: str = "ada@example.com") -> User:
    return User(first_name="Ada", last_name="Lovelace", name="Ada Lovelace", username="ada", email=email)


def _piece(owner: dict, name: str = "Oxford shirt") -> Piece:
    return Piece(primary_img="img", name=name, type="Top", colors=["Blue"], **owner)


def test_matches_treats_none_as_missing() -> None:
    assert matches({"a": 1}, {"is_deleted": None})
    assert not matches({"is_deleted": "2024-01-01"}, {"is_deleted": None})
    assert matches({"a": 1}, None)


def test_sqlite_store_crud(tmp_path: Path) -> None:
    documents = SQLiteDocumentStore(tmp_path / "nested" / "docs.db", collections=("things",))
    documents.insert("things", {"_id": "1", "colour": "red"})
    documents.insert("things", {"_id": "2", "colour": "blue"})

    assert documents.get("things", "1") == {"_id": "1", "colour": "red"}
    assert [doc["_id"] for doc in documents.find("things")] == ["1", "2"]
    assert documents.find("things", {"colour": "blue"}) == [{"_id": "2", "colour": "blue"}]

    assert documents.replace("things", "1", {"colour": "green"})
    assert documents.get("things", "1") == {"_id": "1", "colour": "green"}
    assert documents.delete("things", "2")
    assert not documents.exists("things", "2")
    assert not documents.replace("things", "missing", {})


def test_sqlite_store_rejects_bad_collection_names(tmp_path: Path) -> None:
    documents = SQLiteDocumentStore(tmp_path / "docs.db")
    with pytest.raises(ValueError):
        documents.find("things; DROP TABLE x")
    with pytest.raises(ValueError):
        documents.insert("things", {"colour": "red"})


def test_model_collection_update_revalidates(wardrobe_store: WardrobeStore, owner: dict) -> None:
    piece = wardrobe_store.pieces.create(_piece(owner))

    updated = wardrobe_store.pieces.update(piece.id, {"brand": "Acme", "_id": "hijack"})
    assert updated is not None and updated.brand == "Acme"
    assert updated.id == piece.id

    with pytest.raises(ValueError):
        wardrobe_store.pieces.update(piece.id, {"type": "Dress"})
    assert wardrobe_store.pieces.get(piece.id).type == "Top"
    assert wardrobe_store.pieces.update("missing", {"brand": "x"}) is None


def test_sqlite_store_unique_fields(tmp_path: Path) -> None:
    documents = SQLiteDocumentStore(tmp_path / "docs.db", collections=("people",), unique_fields={"people": ("email",)})
    documents.insert("people", {"_id": "1", "email": "ada@example.com"})
    documents.insert("people", {"_id": "2", "email": "grace@example.com"})
    documents.insert("people", {"_id": "3"})
    documents.insert("people", {"_id": "4"})

    with pytest.raises(DuplicateKeyError):
        documents.insert("people", {"_id": "5", "email": "ada@example.com"})
    with pytest.raises(DuplicateKeyError):
        documents.replace("people", "2", {"email": "ada@example.com"})

    assert documents.get("people", "2") == {"_id": "2", "email": "grace@example.com"}
    assert not documents.exists("people", "5")


def test_users_unique_email_and_soft_delete(wardrobe_store: WardrobeStore) -> None:
    user = wardrobe_store.create_user(_user())
    with pytest.raises(DuplicateEmailError):
        wardrobe_store.create_user(_user())

    other = wardrobe_store.create_user(_user("other@example.com"))
    with pytest.raises(DuplicateEmailError):
        wardrobe_store.update_user(other.id, {"email": "ada@example.com"})

    wardrobe_store.soft_delete_user(user.id)
    assert [u.id for u in wardrobe_store.list_users()] == [other.id]
    assert len(wardrobe_store.list_users(include_deleted=True)) == 2
    assert wardrobe_store.find_active_user(email="ada@example.com") is None


def _hold_after_lookup(collection, barrier: threading.Barrier):
    original = collection.find_one

    def find_then_wait(**filters):
        found = original(**filters)
        barrier.wait()
        return found

    return find_then_wait


def test_concurrent_user_creation_stores_one_email(
    wardrobe_store: WardrobeStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    barrier = threading.Barrier(2, timeout=5)
    monkeypatch.setattr(wardrobe_store.users, "find_one", _hold_after_lookup(wardrobe_store.users, barrier))
    errors: list = []

    def create() -> None:
        try:
            wardrobe_store.create_user(_user("dup@example.com"))
        except DuplicateEmailError as exc:
            errors.append(exc)

    threads = [threading.Thread(target=create) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(errors) == 1
    assert [u.email for u in wardrobe_store.list_users(include_deleted=True)] == ["dup@example.com"]


def test_email_updates_are_refused_even_when_lookup_misses(
    wardrobe_store: WardrobeStore, ticketing_store: TicketingStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    wardrobe_store.create_user(_user())
    other = wardrobe_store.create_user(_user("other@example.com"))
    grace = UserProfile(first_name="Grace", name="Grace Hopper", picture="p.png", email="grace@example.com")
    ada = UserProfile(first_name="Ada", name="Ada Lovelace", picture="a.png", email="ada@example.com")
    ticketing_store.create_profile(grace)
    ticketing_store.create_profile(ada)

    monkeypatch.setattr(wardrobe_store.users, "find_one", lambda **filters: None)
    monkeypatch.setattr(ticketing_store.profiles, "find_one", lambda **filters: None)

    with pytest.raises(DuplicateEmailError):
        wardrobe_store.create_user(_user())
    with pytest.raises(DuplicateEmailError):
        wardrobe_store.update_user(other.id, {"email": "ada@example.com"})
    with pytest.raises(DuplicateEmailError):
        ticketing_store.update_profile(ada.id, {"email": "grace@example.com"})

    assert wardrobe_store.users.get(other.id).email == "other@example.com"
    assert ticketing_store.profiles.get(ada.id).email == "ada@example.com"


def test_population_drops_dangling_references(wardrobe_store: WardrobeStore, owner: dict) -> None:
    kept = wardrobe_store.pieces.create(_piece(owner, "Kept"))
    gone = wardrobe_store.pieces.create(_piece(owner, "Gone"))
    outfit = wardrobe_store.outfits.create(Outfit(name="Look", pieces=[kept.id, gone.id], **owner))
    shelf = wardrobe_store.shelves.create(
        Shelf(
            name="Mixed",
            items=[{"item_id": gone.id, "item_type": "Piece"}, {"item_id": outfit.id, "item_type": "Outfit"}],
            **owner,
        )
    )
    user = _user()
    user.link_item(kept.id, "Piece")
    user.link_item(gone.id, "Piece")
    user.shelves.append(shelf.id)
    wardrobe_store.create_user(user)

    wardrobe_store.pieces.delete(gone.id)

    populated_outfit = wardrobe_store.populate_outfit(outfit)
    assert [piece["name"] for piece in populated_outfit["pieces"]] == ["Kept"]

    populated_shelf = wardrobe_store.populate_shelf(shelf)
    assert populated_shelf["items"][0]["item_id"] is None
    assert populated_shelf["items"][1]["item_id"]["name"] == "Look"

    populated_user = wardrobe_store.populate_user(user)
    assert [piece["_id"] for piece in populated_user["pieces"]] == [kept.id]
    assert populated_user["shelves"][0]["name"] == "Mixed"
    assert wardrobe_store.missing_pieces([kept.id, gone.id]) == [gone.id]


def test_ticketing_population(ticketing_store: TicketingStore) -> None:
    event = ticketing_store.events.create(Event(**SAMPLE_EVENTS[0]))
    profile = UserProfile(first_name="Grace", name="Grace Hopper", picture="p.png", email="grace@example.com")
    profile.set_cart_quantity(event.id, 2)
    profile.set_cart_quantity("f" * 24, 1)
    ticketing_store.create_profile(profile)

    populated = ticketing_store.populate_profile(profile)
    assert populated["carted_events"][0]["event_id"]["name"] == "Dijon"
    assert populated["carted_events"][1]["event_id"] is None

    transaction = ticketing_store.transactions.create(
        Transaction(user_id=profile.id, event_id=event.id, ticket_quantity=2)
    )
    doc = ticketing_store.populate_transaction(transaction)
    assert doc["user_id"]["email"] == "grace@example.com"
    assert doc["event_id"]["city"] == "Boston, MA"
    assert ticketing_store.list_transactions(user_id="nobody") == []


def test_seed_events_is_idempotent(ticketing_store: TicketingStore) -> None:
    first = seed_events(ticketing_store)
    second = seed_events(ticketing_store)

    assert len(first) == len(SAMPLE_EVENTS)
    assert [event.id for event in first] == [event.id for event in second]
    assert len(ticketing_store.events.find()) == len(SAMPLE_EVENTS)
    assert len(first[0].alt_img_srcs) == 6

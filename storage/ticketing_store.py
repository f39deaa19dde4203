"""Ticketing persistence: events, user profiles and transactions."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from models.document import utcnow
from models.event import Event
from models.transaction import Transaction
from models.user_profile import UserProfile
from storage.document_store import (
    DocumentStore,
    DuplicateEmailError,
    DuplicateKeyError,
    ModelCollection,
    SQLiteDocumentStore,
)

TICKETING_COLLECTIONS = ("events", "profiles", "transactions")


class TicketingStore:
    """Collections for the ticketing service plus reference population."""

    def __init__(self, documents: DocumentStore) -> None:
        self.documents = documents
        self.events: ModelCollection[Event] = ModelCollection(documents, "events", Event)
        self.profiles: ModelCollection[UserProfile] = ModelCollection(documents, "profiles", UserProfile)
        self.transactions: ModelCollection[Transaction] = ModelCollection(
            documents, "transactions", Transaction
        )

    @classmethod
    def sqlite(cls, database_path: str | Path = "data/ticketing.db") -> "TicketingStore":
        documents = SQLiteDocumentStore(
            database_path, collections=TICKETING_COLLECTIONS, unique_fields={"profiles": ("email",)}
        )
        return cls(documents)

    def create_profile(self, profile: UserProfile) -> UserProfile:
        if self.profiles.find_one(email=profile.email):
            raise DuplicateEmailError(f"A user with email {profile.email} already exists")
        try:
            return self.profiles.create(profile)
        except DuplicateKeyError as exc:
            raise DuplicateEmailError(f"A user with email {profile.email} already exists") from exc

    def update_profile(self, profile_id: str, updated_fields: Dict[str, Any]) -> Optional[UserProfile]:
        email = updated_fields.get("email")
        if email:
            other = self.profiles.find_one(email=email)
            if other and other.id != profile_id:
                raise DuplicateEmailError(f"A user with email {email} already exists")
        try:
            return self.profiles.update(profile_id, updated_fields)
        except DuplicateKeyError as exc:
            raise DuplicateEmailError(f"A user with email {email} already exists") from exc

    def list_profiles(self, include_deleted: bool = False) -> List[UserProfile]:
        if include_deleted:
            return self.profiles.find()
        return self.profiles.find(is_deleted=None)

    def soft_delete_profile(self, profile_id: str) -> Optional[UserProfile]:
        return self.profiles.update(profile_id, {"is_deleted": utcnow()})

    def upsert_event_by_name(self, event: Event) -> Event:
        """Insert ``event`` or overwrite the stored event with the same name."""

        existing = self.events.find_one(name=event.name)
        if existing is None:
            return self.events.create(event)
        fields = event.to_document()
        fields.pop("_id")
        return self.events.update(existing.id, fields)  # type: ignore[return-value]

    def list_transactions(self, user_id: Optional[str] = None) -> List[Transaction]:
        return self.transactions.find(user_id=user_id) if user_id else self.transactions.find()

    # population

    def _event_doc(self, event_id: str) -> Optional[Dict[str, Any]]:
        event = self.events.get(event_id)
        return event.to_document() if event else None

    def populate_profile(self, profile: UserProfile) -> Dict[str, Any]:
        doc = profile.to_document()
        for key in ("carted_events", "purchased_events"):
            doc[key] = [{**item, "event_id": self._event_doc(item["event_id"])} for item in doc[key]]
        return doc

    def populate_transaction(self, transaction: Transaction) -> Dict[str, Any]:
        doc = transaction.to_document()
        profile = self.profiles.get(transaction.user_id)
        doc["user_id"] = profile.to_document() if profile else None
        doc["event_id"] = self._event_doc(transaction.event_id)
        return doc


__all__ = ["TICKETING_COLLECTIONS", "TicketingStore"]

"""Field validators and serialisation shared by all stored documents."""

from __future__ import annotations

import uuid
from dataclasses import MISSING, fields
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from models.taxonomy import validate_item_type

D = TypeVar("D", bound="Document")


def new_object_id() -> str:
    """Return a 24 character hex id, the same width as a Mongo ObjectId."""

    return uuid.uuid4().hex[:24]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coerce_datetime(value: Any, field_name: str) -> datetime:
    """Accept datetimes, dates and ISO strings; naive values are treated as UTC."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"{field_name} is not a valid date: {value!r}") from exc
    else:
        raise ValueError(f"{field_name} is required")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def require_text(field_name: str, value: Any, max_length: int = 255, min_length: int = 1) -> str:
    if value is None:
        raise ValueError(f"{field_name} is required")
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    if len(value) < min_length:
        raise ValueError(f"{field_name} must be at least {min_length} characters")
    if len(value) > max_length:
        raise ValueError(f"{field_name} must be at most {max_length} characters")
    return value


def optional_text(field_name: str, value: Any, max_length: int = 255, min_length: int = 0) -> Optional[str]:
    if value is None:
        return None
    return require_text(field_name, value, max_length=max_length, min_length=min_length)


def require_id(field_name: str, value: Any) -> str:
    if value is None or str(value).strip() == "":
        raise ValueError(f"{field_name} is required")
    return str(value)


def id_list(field_name: str, values: Any) -> List[str]:
    if values is None:
        return []
    if not isinstance(values, (list, tuple)):
        raise ValueError(f"{field_name} must be a list of ids")
    return [require_id(field_name, value) for value in values]


def item_refs(field_name: str, values: Any, with_added_date: bool = False) -> List[Dict[str, Any]]:
    """Validate polymorphic ``{item_id, item_type}`` references."""

    if values is None:
        return []
    refs: List[Dict[str, Any]] = []
    for raw in values:
        if not isinstance(raw, dict):
            raise ValueError(f"{field_name} entries must be objects")
        ref: Dict[str, Any] = {
            "item_id": require_id(f"{field_name}.item_id", raw.get("item_id")),
            "item_type": validate_item_type(raw.get("item_type")),
        }
        if with_added_date:
            added = raw.get("item_added_date")
            ref["item_added_date"] = (
                coerce_datetime(added, f"{field_name}.item_added_date") if added else utcnow()
            )
        refs.append(ref)
    return refs


def _serialise(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _serialise(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialise(item) for item in value]
    return value


class Document:
    """Mixin for dataclass documents stored as JSON keyed by ``_id``."""

    SECRET_FIELDS: Tuple[str, ...] = ()

    def to_document(self, include_secrets: bool = False) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"_id": getattr(self, "id")}
        for definition in fields(self):  # type: ignore[arg-type]
            if definition.name == "id":
                continue
            if definition.name in self.SECRET_FIELDS and not include_secrets:
                continue
            doc[definition.name] = _serialise(getattr(self, definition.name))
        return doc

    @classmethod
    def from_document(cls: Type[D], doc: Dict[str, Any]) -> D:
        """Rebuild (and re-validate) a record, ignoring unknown keys."""

        declared = fields(cls)  # type: ignore[arg-type]
        known = {definition.name for definition in declared}
        values = {key: value for key, value in doc.items() if key in known and key != "id"}
        if doc.get("_id") or doc.get("id"):
            values["id"] = str(doc.get("_id") or doc.get("id"))
        missing = [
            definition.name
            for definition in declared
            if definition.name not in values
            and definition.default is MISSING
            and definition.default_factory is MISSING  # type: ignore[misc]
        ]
        if missing:
            raise ValueError(f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required")
        return cls(**values)


__all__ = [
    "Document",
    "coerce_datetime",
    "id_list",
    "item_refs",
    "new_object_id",
    "optional_text",
    "require_id",
    "require_text",
    "utcnow",
]

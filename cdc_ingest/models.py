"""The change-data-capture event and its JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


class InvalidEventError(ValueError):
    """Raised when an event is not valid JSON or lacks a required field."""


@dataclass
class CDCEvent:
    """A change event: the entity key, its new state and its previous state."""

    key: str
    document: Any
    before: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the event in its wire layout."""
        return {
            "before": self.before,
            "after": {"key": self.key, "value": {"object": self.document}},
        }

    def to_json(self) -> str:
        """Serialise the event to compact JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


def _object(value: Any, path: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidEventError(f"field {path} must be an object")
    return value


def parse_event(data: str | bytes | bytearray | dict[str, Any] | None) -> CDCEvent:
    """Build a validated event from JSON text or an already decoded mapping."""
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise InvalidEventError(f"invalid JSON: {exc}") from exc

    payload = _object(data, "event")
    after = _object(payload.get("after"), "after")
    key = after.get("key")
    if key is not None and not isinstance(key, str):
        raise InvalidEventError("field after.key must be a string")
    document = _object(after.get("value"), "after.value").get("object")

    if not key:
        raise InvalidEventError("missing required field: after.key")
    if document is None:
        raise InvalidEventError("missing required field: after.value.object")
    return CDCEvent(key=key, document=document, before=payload.get("before"))
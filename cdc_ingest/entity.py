"""Working out the entity type and id of a change event."""

from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class EntityError(ValueError):
    """Base class for entity extraction failures."""


class InvalidKeyError(EntityError):
    """The key has too few path segments."""

    def __init__(self, message: str = "invalid key format") -> None:
        super().__init__(message)


class InvalidObjectError(EntityError):
    """The event's object is not a mapping."""

    def __init__(self, message: str = "invalid object format") -> None:
        super().__init__(message)


class MissingIDError(EntityError):
    """The event's object has no string ``id``."""

    def __init__(self, message: str = "missing id field") -> None:
        super().__init__(message)


class EntityExtractor(Protocol):
    """Something that yields ``(entity_type, id)`` for an event key and object."""

    def extract_entity_info(self, key: str, value: Any) -> tuple[str, str]:
        """Return the entity type and id, raising ``EntityError`` on failure."""


class CDCEntityExtractor:
    """Takes the type from the key's second-to-last segment and the id from the object."""

    def extract_entity_info(self, key: str, value: Any) -> tuple[str, str]:
        parts = key.split("/")
        if len(parts) < 4:
            logger.error("Key has insufficient parts: %s", key)
            raise InvalidKeyError()

        entity_type = parts[-2]

        if not isinstance(value, dict):
            logger.error("Failed to cast object to map: %s", key)
            raise InvalidObjectError()

        entity_id = value.get("id")
        if not isinstance(entity_id, str):
            logger.error("Failed to get ID from object: %s", key)
            raise MissingIDError()

        return entity_type, entity_id
"""Turning change events into indexed documents."""

from __future__ import annotations

import logging
from typing import Protocol

from .entity import EntityExtractor
from .indexer import DocumentIndexer
from .models import CDCEvent

logger = logging.getLogger(__name__)


class EventProcessor(Protocol):
    """Something that handles one change event."""

    def process_event(self, event: CDCEvent) -> None:
        """Handle the event, raising on failure."""


class CDCEventProcessor:
    """Indexes each event's document in ``<prefix>-<entity type>`` under its id."""

    def __init__(
        self,
        indexer: DocumentIndexer,
        entity_extractor: EntityExtractor,
        index_prefix: str,
    ) -> None:
        self._indexer = indexer
        self._entity_extractor = entity_extractor
        self._index_prefix = index_prefix

    def process_event(self, event: CDCEvent) -> None:
        """Index the event's document; errors from the extractor or indexer propagate."""
        entity_type, doc_id = self._entity_extractor.extract_entity_info(
            event.key, event.document
        )

        index_name = f"{self._index_prefix}-{entity_type}"
        logger.info(
            "Processing event: entityType=%s indexName=%s key=%s",
            entity_type,
            index_name,
            event.key,
        )

        self._indexer.index_document(index_name, doc_id, event.document)

        logger.info("Successfully indexed document: indexName=%s id=%s", index_name, doc_id)
"""Consuming change events from a message stream."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import InvalidEventError, parse_event
from .processor import EventProcessor

logger = logging.getLogger(__name__)


@dataclass
class ConsumerMessage:
    """One message taken from a topic partition."""

    value: bytes
    key: bytes | None = None
    topic: str = ""
    partition: int = 0
    offset: int = 0


@dataclass
class ConsumerSession:
    """A consumer session: records handled messages and can be cancelled."""

    marked: list[ConsumerMessage] = field(default_factory=list)
    cancelled: threading.Event = field(default_factory=threading.Event)

    def mark_message(self, message: ConsumerMessage) -> None:
        """Record the message as handled."""
        self.marked.append(message)


class KafkaConsumerHandler:
    """Decodes each message into an event and hands it to a processor."""

    def __init__(self, processor: EventProcessor) -> None:
        self.processor = processor

    def setup(self, session: ConsumerSession) -> None:
        """Run at the start of a session; nothing to prepare."""

    def cleanup(self, session: ConsumerSession) -> None:
        """Run at the end of a session; nothing to release."""

    def consume_claim(
        self, session: ConsumerSession, messages: Iterable[ConsumerMessage | None]
    ) -> None:
        """Handle messages until they run out, a ``None`` arrives or the session is cancelled.

        Every message is marked, whether or not it could be decoded or processed.
        """
        for message in messages:
            if session.cancelled.is_set() or message is None:
                return

            try:
                event = parse_event(message.value)
            except InvalidEventError as exc:
                logger.error("Failed to unmarshal event: %s", exc)
                session.mark_message(message)
                continue

            try:
                self.processor.process_event(event)
            except Exception as exc:  # one bad event must not stop the stream
                logger.error("Failed to process event: %s", exc)

            session.mark_message(message)
"""Publishing change events to a message topic."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from .models import CDCEvent

logger = logging.getLogger(__name__)


@dataclass
class ProducerMessage:
    """A message addressed to a topic, keyed by the event key."""

    topic: str
    key: str
    value: str


class SyncProducer(Protocol):
    """A client that sends messages and waits for them to be acknowledged."""

    def send_message(self, message: ProducerMessage) -> tuple[int, int]:
        """Send the message and return its ``(partition, offset)``."""

    def close(self) -> None:
        """Release the client."""


class EventProducer(Protocol):
    """Something that publishes change events."""

    def produce_event(self, event: CDCEvent) -> None:
        """Publish the event, raising on failure."""

    def close(self) -> None:
        """Release the producer."""


class KafkaEventProducer:
    """Publishes each event as JSON, keyed by its entity key, to one topic."""

    def __init__(self, producer: SyncProducer, topic: str) -> None:
        self._producer = producer
        self.topic = topic

    def produce_event(self, event: CDCEvent) -> None:
        """Send the event; errors from the underlying producer propagate."""
        message = ProducerMessage(topic=self.topic, key=event.key, value=event.to_json())
        try:
            partition, offset = self._producer.send_message(message)
        except Exception as exc:
            logger.error("Failed to send message: %s", exc)
            raise
        logger.info("Message sent: partition=%d offset=%d", partition, offset)

    def close(self) -> None:
        """Close the underlying producer."""
        self._producer.close()

    def __enter__(self) -> KafkaEventProducer:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
"""Reading a stream of change events from a JSON file."""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Iterator
from typing import Any

from .models import CDCEvent, InvalidEventError, parse_event

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_DECODER = json.JSONDecoder()


class EventReader:
    """Reads JSON values one after another from a file and turns them into events.

    An event that decodes but fails validation raises ``InvalidEventError``
    and reading carries on with the next value; malformed JSON raises
    ``InvalidEventError`` on this and every later read.
    """

    def __init__(self, file_path: str | os.PathLike[str]) -> None:
        self._file = open(file_path, encoding="utf-8", errors="replace")
        self._text = self._file.read()
        self._pos = 0
        self._failure: InvalidEventError | None = None

    def read_event(self) -> CDCEvent | None:
        """Return the next event, or ``None`` once the file is exhausted."""
        if self._failure is not None:
            raise self._failure
        start = _WHITESPACE.match(self._text, self._pos).end()
        if start >= len(self._text):
            return None
        try:
            try:
                value, self._pos = _DECODER.raw_decode(self._text, start)
            except json.JSONDecodeError as exc:
                self._failure = InvalidEventError(f"invalid JSON: {exc}")
                raise self._failure from exc
            return parse_event(value)
        except InvalidEventError as exc:
            logger.error("Failed to decode event: %s", exc)
            raise

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __iter__(self) -> Iterator[CDCEvent]:
        while (event := self.read_event()) is not None:
            yield event

    def __enter__(self) -> EventReader:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
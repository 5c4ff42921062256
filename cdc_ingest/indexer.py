"""Storing documents in an OpenSearch cluster."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, Protocol
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

DEFAULT_HOST = "http://localhost:9200"
MAX_RETRIES = 3
RETRY_STATUSES = frozenset({502, 503, 504})


class IndexingError(Exception):
    """Raised when a document cannot be serialised or sent."""


class DocumentIndexer(Protocol):
    """Something that stores a document under an id in a named index."""

    def index_document(self, index_name: str, doc_id: str, document: Any) -> None:
        """Store the document, raising ``IndexingError`` on failure."""


class OpenSearchIndexer:
    """Indexes documents over the OpenSearch HTTP API, cycling through the hosts.

    Connection failures and 502/503/504 answers are retried on the next host,
    up to ``MAX_RETRIES`` times. Other HTTP answers are accepted as they are.
    """

    def __init__(
        self,
        hosts: Iterable[str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._hosts = [host.rstrip("/") for host in (hosts or [])] or [DEFAULT_HOST]
        self._session = session if session is not None else requests.Session()
        self._position = 0

    def _next_host(self) -> str:
        host = self._hosts[self._position % len(self._hosts)]
        self._position = (self._position + 1) % len(self._hosts)
        return host

    def index_document(self, index_name: str, doc_id: str, document: Any) -> None:
        try:
            body = json.dumps(
                document, sort_keys=True, separators=(",", ":"), ensure_ascii=False
            )
        except (TypeError, ValueError) as exc:
            logger.error("Failed to marshal object: %s", exc)
            raise IndexingError(f"cannot serialise document: {exc}") from exc

        path = f"/{quote(index_name, safe='')}/_doc/{quote(doc_id, safe='')}"
        headers = {"Content-Type": "application/json"}
        last_error: Exception | None = None

        for attempt in range(MAX_RETRIES + 1):
            url = self._next_host() + path
            try:
                response = self._session.put(url, data=body.encode("utf-8"), headers=headers)
            except requests.RequestException as exc:
                last_error = exc
                continue
            if response.status_code in RETRY_STATUSES and attempt < MAX_RETRIES:
                continue
            return

        logger.error("Failed to index document: %s", last_error)
        raise IndexingError(f"cannot index document {doc_id!r}: {last_error}") from last_error
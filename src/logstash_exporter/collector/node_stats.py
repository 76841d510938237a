"""
Fetches Logstash's /_node/stats document over HTTP.

One GET per call, fresh client per call, hard timeout. No retries here --
the next scrape is the retry.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Optional

import httpx

from logstash_exporter.errors import DecodeError, StatusError, TransportError
from logstash_exporter.stats import StatsDocument

log = logging.getLogger(__name__)

DEFAULT_HOST = "localhost:9600"
DEFAULT_TIMEOUT_SECONDS = 3.0
NODE_STATS_PATH = "/_node/stats"


def node_stats_url(host: str) -> str:
    """`localhost:9600` -> `http://localhost:9600/_node/stats`."""
    base = host.rstrip("/")
    if "://" not in base:
        base = "http://" + base
    if not base.endswith(NODE_STATS_PATH):
        base += NODE_STATS_PATH
    return base


class NodeStatsClient:

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = node_stats_url(host)
        self._timeout = timeout_seconds
        self._transport = transport

    def fetch(self) -> StatsDocument:
        """GET the stats document and decode it into a dict.

        The timeout is a deadline for the whole call (connect, headers and
        body), not just per socket operation, so an upstream trickling
        bytes can't hold a scrape open.

        Raises TransportError, StatusError or DecodeError. Callers treat
        all three the same way, the split is there for the log message.
        """
        deadline = time.monotonic() + self._timeout
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                with client.stream("GET", self.url) as response:
                    if response.status_code != httpx.codes.OK:
                        raise StatusError(self.url, response.status_code)
                    body = self._read_body(response, deadline)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(self.url, f"{type(exc).__name__}: {exc}") from exc

        try:
            document = json.loads(body)
        except ValueError as exc:
            raise DecodeError(self.url, f"invalid JSON: {exc}") from exc
        except RecursionError:
            raise DecodeError(self.url, "invalid JSON: nested too deeply") from None

        if not isinstance(document, dict):
            raise DecodeError(self.url, f"expected a JSON object, got {type(document).__name__}")

        log.debug("Fetched %s (%d top-level keys)", self.url, len(document))
        return document

    def _read_body(self, response: httpx.Response, deadline: float) -> bytes:
        chunks = []
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise TransportError(self.url, f"no complete response within {self._timeout:g}s")
        return b"".join(chunks)

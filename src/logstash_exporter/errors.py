"""
Exceptions raised while fetching and decoding Logstash node stats.

FetchError and its subclasses mean the whole document is unusable for this
scrape. SectionExtractError only affects the one section that failed.
"""

from __future__ import annotations

from typing import Optional


class ExporterError(Exception):
    """Base class for everything the exporter raises on purpose."""


class FetchError(ExporterError):
    """The stats document could not be retrieved or decoded."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class TransportError(FetchError):
    """Connection refused, DNS failure, timeout and friends."""


class StatusError(FetchError):

    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"unexpected HTTP status {status_code}")
        self.status_code = status_code


class DecodeError(FetchError):
    """Body is not JSON, or not a JSON object at the top level."""


class SectionExtractError(ExporterError):
    """A present section doesn't have the shape we expect."""

    def __init__(self, section: str, message: str, field: Optional[str] = None):
        where = f"{section}.{field}" if field else section
        super().__init__(f"bad '{where}' section: {message}")
        self.section = section
        self.field = field

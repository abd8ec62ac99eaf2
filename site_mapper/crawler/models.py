# site_mapper/crawler/models.py
"""
Data models for the SiteMapper crawler.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Link:
    """A hyperlink as written in the markup: raw ``href`` and flattened visible text."""

    target: str
    text: str


@dataclass(slots=True, frozen=True)
class Origin:
    """Same-site boundary of a crawl: scheme plus network location (host[:port])."""

    scheme: str
    host: str

    @property
    def prefix(self) -> str:
        return f"{self.scheme}://{self.host}"


@dataclass(slots=True)
class PageData:
    """Holds the effective (post-redirect) URL, raw body and content type of a fetched page."""

    url: str
    content: bytes
    content_type: str = ""

    @property
    def is_html(self) -> bool:
        # servers that omit the header are given the benefit of the doubt
        return not self.content_type or "html" in self.content_type

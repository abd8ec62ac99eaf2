# File: site_mapper/errors.py
"""
Exception hierarchy for SiteMapper.

Raised where a failure is detected; handled only by the crawl loop
(per-page error policy) and by the CLI (exit status 1).
"""
from __future__ import annotations

from typing import Optional

__all__ = ["SiteMapperError", "ParseError", "TransportError", "SerializationError"]


class SiteMapperError(Exception):
    """Base exception for all SiteMapper errors."""


class ParseError(SiteMapperError):
    """Raised when input bytes cannot be parsed as an HTML document."""


class TransportError(SiteMapperError):
    """Raised when a GET request fails (network, DNS, timeout or non-2xx status)."""

    def __init__(self, message: str, url: str, status: Optional[int] = None) -> None:
        self.url = url
        self.status = status
        super().__init__(message)


class SerializationError(SiteMapperError):
    """Raised when the sitemap document cannot be encoded."""

# site_mapper/crawler/normalizer.py
"""
URL normalization and origin filtering utilities for SiteMapper.

Equality of URLs is plain string identity: nothing is percent-decoded and
``http://x/a`` differs from ``http://x/a/`` unless the
``strip-trailing-slash`` policy is selected.
"""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List
from urllib.parse import urlsplit, urlunsplit

from site_mapper.crawler.models import Link, Origin

__all__ = (
    "origin_from_url",
    "to_absolute_origin_links",
    "strip_trailing_slash",
    "get_url_policy",
    "URL_POLICIES",
)

UrlPolicy = Callable[[str], str]


def origin_from_url(url: str) -> Origin:
    """Return the scheme and host[:port] of *url*; credentials are dropped."""
    parsed = urlsplit(url)
    return Origin(scheme=parsed.scheme, host=parsed.netloc.rpartition("@")[2])


def _absolute(target: str, origin: Origin) -> str | None:
    if target.startswith("/"):
        return origin.prefix + target
    if target.startswith("http"):
        return target
    # relative paths, fragments, mailto:, javascript:, empty
    return None


def to_absolute_origin_links(links: Iterable[Link], origin: Origin) -> List[str]:
    """
    Turn link targets into absolute URLs and keep only those inside *origin*.

    Root-relative targets are prefixed with the origin; absolute ``http…``
    targets pass through and are then filtered by prefix. Order and
    duplicates are preserved.
    """
    absolute = [url for url in (_absolute(link.target, origin) for link in links) if url is not None]
    prefix = origin.prefix
    return [url for url in absolute if url.startswith(prefix)]


def strip_trailing_slash(url: str) -> str:
    """Drop trailing slashes from the path so ``/a/`` and ``/a`` compare equal."""
    parts = urlsplit(url)
    path = parts.path.rstrip("/")
    if path == parts.path:
        return url
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


URL_POLICIES: Dict[str, UrlPolicy] = {
    "exact": lambda url: url,
    "strip-trailing-slash": strip_trailing_slash,
}


def get_url_policy(name: str) -> UrlPolicy:
    try:
        return URL_POLICIES[name]
    except KeyError:
        raise ValueError(f"unknown URL policy: {name!r}") from None

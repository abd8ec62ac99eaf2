# site_mapper/crawler/fetcher.py
"""
Fetcher module: retrieves one page over HTTP and turns it into origin-qualified links.
"""
from __future__ import annotations

import asyncio
from typing import List, Optional, Tuple

from aiohttp import ClientError, ClientResponseError, ClientSession

from site_mapper.config import CrawlConfig
from site_mapper.crawler.link_extractor import extract_links, parse_document
from site_mapper.crawler.models import Origin, PageData
from site_mapper.crawler.normalizer import get_url_policy, origin_from_url, to_absolute_origin_links
from site_mapper.errors import ParseError, TransportError
from site_mapper.logger import logger


class Fetcher:
    """Issues GET requests on a shared session and extracts same-origin links."""

    def __init__(self, session: ClientSession, config: CrawlConfig) -> None:
        self.session = session
        self.config = config
        self._url_policy = get_url_policy(config.url_policy)

    async def fetch(self, url: str) -> PageData:
        """
        GET *url*, following redirects.

        Returns PageData whose ``url`` is the effective URL of the response.
        Raises TransportError on network failure, timeout or a non-2xx status.
        """
        logger.debug("GET %s", url)
        try:
            async with self.session.get(url, allow_redirects=True) as resp:
                resp.raise_for_status()
                body = await resp.read()
                return PageData(
                    url=str(resp.url),
                    content=body,
                    content_type=resp.headers.get("Content-Type", "").lower(),
                )
        except ClientResponseError as exc:
            raise TransportError(f"HTTP {exc.status} for {url}", url, exc.status) from exc
        except asyncio.TimeoutError as exc:
            raise TransportError(f"Timed out after {self.config.timeout}s: {url}", url) from exc
        except ClientError as exc:
            raise TransportError(f"Request failed for {url}: {exc}", url) from exc

    async def fetch_origin_links(
        self, page_url: str, origin: Optional[Origin] = None
    ) -> Tuple[Origin, List[str]]:
        """
        Fetch *page_url* and return its links restricted to the crawl origin.

        Without *origin* the origin is taken from the response's effective URL;
        this is how the crawl root pins the origin for the whole crawl.
        """
        page = await self.fetch(page_url)
        served_from = origin_from_url(page.url)
        if origin is None:
            origin = served_from
        elif served_from != origin:
            logger.debug("%s redirected off-origin to %s, ignoring its links", page_url, page.url)
            return origin, []

        if not page.is_html:
            logger.debug("Skipping non-HTML %s (%s)", page.url, page.content_type)
            return origin, []

        try:
            links = extract_links(parse_document(page.content))
        except ParseError as exc:
            logger.warning("Could not parse %s: %s", page.url, exc)
            return origin, []

        urls = [self._url_policy(u) for u in to_absolute_origin_links(links, origin)]
        logger.debug("%s: %d links, %d same-origin", page.url, len(links), len(urls))
        return origin, urls

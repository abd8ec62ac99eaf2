# site_mapper/crawler/crawler.py
from __future__ import annotations

import time
from typing import Dict, List, Optional, Set

from aiohttp import ClientSession, ClientTimeout

from site_mapper.config import CrawlConfig
from site_mapper.crawler.fetcher import Fetcher
from site_mapper.crawler.models import Origin
from site_mapper.errors import TransportError
from site_mapper.logger import logger

__all__ = ("SitemapCrawler", "merge_into")


def merge_into(visited: Dict[str, None], urls: List[str]) -> List[str]:
    """Add *urls* to the ordered set *visited*; return the ones that were new, in order."""
    added: List[str] = []
    for url in urls:
        if url not in visited:
            visited[url] = None
            added.append(url)
    return added


class SitemapCrawler:
    """
    Breadth-first, depth-bounded crawler.

    Levels ``0..max_depth`` are fetched one after another and one page at a
    time. The origin is pinned by the root's effective URL. Per-page transport
    errors are skipped or abort the crawl depending on ``config.on_error``.
    """

    def __init__(self, config: CrawlConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self.fetcher: Optional[Fetcher] = None
        self.origin: Optional[Origin] = None
        self.fetched: List[str] = []
        self.failed: Dict[str, str] = {}

    async def __aenter__(self) -> SitemapCrawler:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, root_url: Optional[str] = None, max_depth: Optional[int] = None) -> List[str]:
        """Walk the site and return the visited URLs in first-seen order."""
        if self.fetcher is None:
            raise RuntimeError("Session not initialized, use 'async with SitemapCrawler(...)'")
        root = root_url if root_url is not None else str(self.config.base_url)
        depth = self.config.max_depth if max_depth is None else max_depth
        if depth < 0:
            raise ValueError("max_depth must be >= 0")

        logger.info("Crawl started: %s (depth %d)", root, depth)
        start = time.monotonic()
        self.origin = None
        self.fetched = []
        self.failed = {}
        done: Set[str] = set()
        visited: Dict[str, None] = {}
        frontier: List[str] = [root]

        for level in range(depth + 1):
            discovered: List[str] = []
            for url in frontier:
                if url in done:
                    continue
                done.add(url)
                discovered.extend(await self._page_links(url))
            frontier = merge_into(visited, discovered)
            logger.info("Level %d: %d new URLs, %d total", level, len(frontier), len(visited))
            if not frontier:
                break

        logger.info(
            "Crawl finished: %d URLs, %d pages fetched, %d failed in %.2f s",
            len(visited), len(self.fetched), len(self.failed), time.monotonic() - start,
        )
        return list(visited)

    async def _page_links(self, url: str) -> List[str]:
        self.fetched.append(url)
        try:
            origin, links = await self.fetcher.fetch_origin_links(url, self.origin)
        except TransportError as exc:
            # the root pins the origin, nothing can be crawled without it
            if self.origin is None or self.config.on_error == "abort":
                raise
            self.failed[url] = str(exc)
            logger.warning("Skipping %s: %s", url, exc)
            return []
        self.origin = origin
        return links

# File: site_mapper/engine.py
"""site_mapper.engine: точка запуска обхода для CLI и тестов."""

from __future__ import annotations

from typing import List

from site_mapper.config import CrawlConfig
from site_mapper.crawler.crawler import SitemapCrawler

__all__ = ["start_crawl"]


async def start_crawl(cfg: CrawlConfig) -> List[str]:
    """
    Запускает краулер в контексте и возвращает найденные URL.

    Parameters
    ----------
    cfg : CrawlConfig
        Конфигурация обхода.

    Returns
    -------
    List[str]
        URL в порядке первого обнаружения, без повторов.
    """
    async with SitemapCrawler(cfg) as crawler:
        return await crawler.crawl()

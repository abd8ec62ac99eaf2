# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Callable, Optional

import pytest
import pytest_asyncio

from site_helpers import SiteStub, serve_app
from site_mapper.config import CrawlConfig


@pytest_asyncio.fixture
async def site(unused_tcp_port: int) -> AsyncIterator[SiteStub]:
    """An empty SiteStub already being served; tests fill in its pages."""
    stub = SiteStub()
    async with serve_app(stub.build_app(), unused_tcp_port) as base:
        stub.base_url = base
        yield stub


@pytest.fixture()
def make_config() -> Callable[..., CrawlConfig]:
    """Build a CrawlConfig with short timeouts suitable for local servers."""

    def _make(base_url: Optional[str] = None, **overrides) -> CrawlConfig:
        data = {"base_url": base_url or "http://example.com", "max_depth": 1, "timeout": 2.0}
        data.update(overrides)
        return CrawlConfig(**data)

    return _make

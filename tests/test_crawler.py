# File: tests/test_crawler.py
from __future__ import annotations

import pytest
from aiohttp import ClientSession

import site_mapper.crawler.fetcher as fetcher_module
from site_mapper.crawler.crawler import SitemapCrawler, merge_into
from site_mapper.crawler.fetcher import Fetcher
from site_mapper.crawler.models import Origin
from site_mapper.engine import start_crawl
from site_mapper.errors import ParseError, TransportError
from site_mapper.report.sitemap_xml import render_sitemap
from site_helpers import parse_sitemap

ROOT_PAGE = '<a href="/a">A</a><a href="http://external.com/b">B</a><a href="/a">A again</a>'


async def run_crawler(config, **kwargs):
    async with SitemapCrawler(config) as crawler:
        urls = await crawler.crawl(**kwargs)
    return crawler, urls


@pytest.fixture()
def chain_site(site):
    """/ -> /p1 -> /p2 -> /p3 -> (/p1, /)"""
    site.pages.update(
        {
            "/": '<a href="/p1">1</a>',
            "/p1": '<a href="/p2">2</a>',
            "/p2": '<a href="/p3">3</a>',
            "/p3": '<a href="/p1">back</a><a href="/">home</a>',
        }
    )
    return site


def test_merge_into_keeps_first_seen_order():
    visited = dict.fromkeys(["a"])
    assert merge_into(visited, ["b", "a", "c", "b"]) == ["b", "c"]
    assert list(visited) == ["a", "b", "c"]


@pytest.mark.asyncio()
async def test_depth_zero_fetches_root_only(site, make_config):
    site.pages["/"] = ROOT_PAGE
    site.pages["/a"] = '<a href="/deeper">D</a>'

    crawler, urls = await run_crawler(make_config(site.base_url, max_depth=0))

    assert urls == [site.url("/a")]
    assert dict(site.hits) == {"/": 1}
    assert crawler.fetched == [f"{site.base_url}/"]


@pytest.mark.asyncio()
async def test_each_level_goes_one_hop_deeper(chain_site, make_config):
    site = chain_site
    _, depth1 = await run_crawler(make_config(site.base_url, max_depth=1))
    assert depth1 == [site.url("/p1"), site.url("/p2")]

    _, depth3 = await run_crawler(make_config(site.base_url, max_depth=3))
    assert depth3 == [site.url("/p1"), site.url("/p2"), site.url("/p3"), site.url("/")]


@pytest.mark.asyncio()
async def test_cycles_never_duplicate_urls(chain_site, make_config):
    site = chain_site
    crawler, urls = await run_crawler(make_config(site.base_url, max_depth=10))

    assert len(urls) == len(set(urls)) == 4
    assert site.hits["/"] == site.hits["/p1"] == site.hits["/p2"] == site.hits["/p3"] == 1
    assert len(crawler.fetched) == len(set(crawler.fetched))


@pytest.mark.asyncio()
async def test_crawl_arguments_override_config(chain_site, make_config):
    site = chain_site
    config = make_config("http://example.invalid", max_depth=5)
    _, urls = await run_crawler(config, root_url=site.url("/p2"), max_depth=0)
    assert urls == [site.url("/p3")]


@pytest.mark.asyncio()
async def test_broken_page_is_skipped_by_default(site, make_config):
    site.pages["/"] = '<a href="/a">A</a><a href="/broken">B</a><a href="/c">C</a>'
    site.pages["/a"] = '<a href="/from-a">x</a>'
    site.pages["/c"] = '<a href="/from-c">x</a>'
    site.errors["/broken"] = 500

    crawler, urls = await run_crawler(make_config(site.base_url, max_depth=1))

    assert urls == [
        site.url("/a"),
        site.url("/broken"),
        site.url("/c"),
        site.url("/from-a"),
        site.url("/from-c"),
    ]
    assert list(crawler.failed) == [site.url("/broken")]


@pytest.mark.asyncio()
async def test_abort_policy_propagates_page_errors(site, make_config):
    site.pages["/"] = '<a href="/broken">B</a>'
    site.errors["/broken"] = 503

    with pytest.raises(TransportError) as info:
        await run_crawler(make_config(site.base_url, max_depth=1, on_error="abort"))
    assert info.value.status == 503
    assert info.value.url == site.url("/broken")


@pytest.mark.asyncio()
async def test_root_failure_is_fatal_even_when_skipping(site, make_config):
    site.errors["/"] = 500
    with pytest.raises(TransportError):
        await run_crawler(make_config(site.base_url, max_depth=2, on_error="skip"))


@pytest.mark.asyncio()
async def test_timeout_is_a_transport_error(site, make_config):
    site.pages["/"] = "<p>slow</p>"
    site.delays["/"] = 1.0
    with pytest.raises(TransportError):
        await run_crawler(make_config(site.base_url, max_depth=0, timeout=0.2))


@pytest.mark.asyncio()
async def test_origin_comes_from_redirected_root(site, make_config):
    site.redirects["/start"] = "/home"
    site.pages["/home"] = '<a href="/a">A</a>'

    crawler, urls = await run_crawler(make_config(site.url("/start"), max_depth=0))

    assert urls == [site.url("/a")]
    assert crawler.origin == Origin("http", site.base_url.removeprefix("http://"))


@pytest.mark.asyncio()
async def test_off_origin_redirect_yields_no_links(site, make_config):
    port = site.base_url.rsplit(":", 1)[1]
    site.pages["/"] = '<a href="/away">away</a><a href="/stay">stay</a>'
    site.redirects["/away"] = f"http://localhost:{port}/landing"
    site.pages["/landing"] = '<a href="/only-from-landing">x</a>'
    site.pages["/stay"] = "<p>ok</p>"

    _, urls = await run_crawler(make_config(site.base_url, max_depth=1))

    assert urls == [site.url("/away"), site.url("/stay")]


@pytest.mark.asyncio()
async def test_non_html_pages_yield_no_links(site, make_config):
    site.pages["/"] = '<a href="/doc.pdf">doc</a>'
    site.binary["/doc.pdf"] = '<a href="/hidden">hidden</a>'

    _, urls = await run_crawler(make_config(site.base_url, max_depth=2))

    assert urls == [site.url("/doc.pdf")]


@pytest.mark.asyncio()
async def test_trailing_slash_policy(site, make_config):
    site.pages["/"] = '<a href="/a/">A</a><a href="/a">A</a>'
    site.pages["/a"] = "<p>a</p>"

    _, exact = await run_crawler(make_config(site.base_url, max_depth=0))
    assert exact == [site.url("/a/"), site.url("/a")]

    config = make_config(site.base_url, max_depth=0, url_policy="strip-trailing-slash")
    _, merged = await run_crawler(config)
    assert merged == [site.url("/a")]


@pytest.mark.asyncio()
async def test_fetcher_reports_effective_url(site, make_config):
    site.redirects["/old"] = "/new"
    site.pages["/new"] = '<a href="/x">x</a><a href="mailto:a@b.com">m</a>'

    async with ClientSession() as session:
        fetcher = Fetcher(session, make_config(site.base_url))
        page = await fetcher.fetch(site.url("/old"))
        origin, urls = await fetcher.fetch_origin_links(site.url("/old"))

    assert page.url == site.url("/new")
    assert page.is_html
    assert origin.prefix == site.base_url
    assert urls == [site.url("/x")]


@pytest.mark.asyncio()
async def test_crawl_requires_context_manager(make_config):
    with pytest.raises(RuntimeError):
        await SitemapCrawler(make_config()).crawl()


@pytest.mark.asyncio()
async def test_sitemap_round_trip(chain_site, make_config):
    site = chain_site
    urls = await start_crawl(make_config(site.base_url, max_depth=3))

    document = render_sitemap(urls)

    assert parse_sitemap(document) == urls


@pytest.mark.asyncio()
async def test_external_session_is_left_open(site, make_config):
    site.pages["/"] = '<a href="/a">A</a>'
    async with ClientSession() as session:
        async with SitemapCrawler(make_config(site.base_url, max_depth=0), session=session) as crawler:
            urls = await crawler.crawl()
        assert not session.closed
    assert urls == [site.url("/a")]


@pytest.mark.asyncio()
async def test_control_character_href_is_rendered_with_replacement(site, make_config):
    site.pages["/"] = '<a href="/ok">ok</a><a href="/bad\x01">bad</a>'

    urls = await start_crawl(make_config(site.base_url, max_depth=0))

    assert urls == [site.url("/ok"), site.url("/bad\x01")]
    assert parse_sitemap(render_sitemap(urls)) == [site.url("/ok"), site.url("/bad\ufffd")]


@pytest.mark.asyncio()
async def test_unparseable_page_counts_as_zero_links(site, make_config, monkeypatch):
    site.pages["/"] = '<a href="/a">A</a><a href="/garbled">G</a>'
    site.pages["/a"] = '<a href="/from-a">x</a>'
    site.pages["/from-a"] = "<p>leaf</p>"
    site.pages["/garbled"] = '<p>unparseable</p><a href="/from-garbled">x</a>'

    real_parse = fetcher_module.parse_document

    def parse_or_fail(markup):
        if b"unparseable" in markup:
            raise ParseError("parser rejected markup")
        return real_parse(markup)

    monkeypatch.setattr(fetcher_module, "parse_document", parse_or_fail)
    crawler, urls = await run_crawler(make_config(site.base_url, max_depth=2))

    assert urls == [site.url("/a"), site.url("/garbled"), site.url("/from-a")]
    assert site.hits["/garbled"] == 1
    assert crawler.failed == {}

# site_mapper/crawler/link_extractor.py
"""
Link extraction for SiteMapper.

The document tree is walked depth-first, pre-order, with an explicit stack so
that pathological nesting cannot exhaust the call stack. An ``<a>`` element
ends the descent of its branch: anchors nested inside another anchor are not
reported.
"""
from __future__ import annotations

from typing import List, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from site_mapper.crawler.models import Link
from site_mapper.errors import ParseError

__all__ = ("parse_document", "extract_links", "flatten_text")

Markup = Union[str, bytes]


def parse_document(markup: Markup) -> BeautifulSoup:
    """Parse raw HTML into a document tree, raising :class:`ParseError` on failure."""
    if not isinstance(markup, (str, bytes)):
        raise ParseError(f"expected str or bytes, got {type(markup).__name__}")
    try:
        return BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(str(exc)) from exc


def _children(node: PageElement) -> List[PageElement]:
    return list(node.children) if isinstance(node, Tag) else []


def _is_text(node: PageElement) -> bool:
    # Comment, Doctype, CData, ProcessingInstruction are PreformattedString
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def flatten_text(node: PageElement) -> str:
    """Concatenate all descendant text nodes with single spaces and collapse whitespace."""
    fragments: List[str] = []
    stack: List[PageElement] = [node]
    while stack:
        current = stack.pop()
        if _is_text(current):
            fragments.append(str(current))
            continue
        stack.extend(reversed(_children(current)))
    return " ".join(" ".join(fragments).split())


def _build_link(tag: Tag) -> Link:
    href = tag.get("href")
    if isinstance(href, list):
        href = " ".join(href)
    return Link(target=href or "", text=flatten_text(tag))


def extract_links(document: Union[BeautifulSoup, Tag, Markup]) -> List[Link]:
    """
    Return every outermost ``<a>`` element of *document* as a :class:`Link`.

    Accepts an already parsed tree or raw markup; an empty list means the
    page has no hyperlinks.
    """
    root = document if isinstance(document, Tag) else parse_document(document)
    links: List[Link] = []
    stack: List[PageElement] = [root]
    while stack:
        node = stack.pop()
        if not isinstance(node, Tag):
            continue
        if node.name == "a":
            links.append(_build_link(node))
            continue
        stack.extend(reversed(_children(node)))
    return links

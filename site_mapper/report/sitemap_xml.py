# File: site_mapper/report/sitemap_xml.py
"""site_mapper.report.sitemap_xml: Генерация sitemap.xml с помощью lxml."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Union

from lxml import etree

from site_mapper.errors import SerializationError

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9/"

_NS = f"{{{SITEMAP_NAMESPACE}}}"

# everything outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def xml_safe(text: str) -> str:
    """Заменяет символы, недопустимые в XML 1.0, на U+FFFD."""
    return _INVALID_XML_CHARS.sub("\ufffd", text)


def render_sitemap(urls: Iterable[str]) -> bytes:
    """Рендерит список URL в документ sitemap.

    Символы, недопустимые в XML (управляющие, NUL, одиночные суррогаты),
    заменяются на U+FFFD.

    Args:
        urls: URL в том порядке, в котором они должны появиться в документе.

    Returns:
        UTF-8 байты: строка объявления XML, ``<urlset>`` с отступом в два
        пробела и завершающий перевод строки.

    Raises:
        SerializationError: если элемент нельзя записать в XML (например, это не строка).
    """
    root = etree.Element(f"{_NS}urlset", nsmap={None: SITEMAP_NAMESPACE})
    try:
        for url in urls:
            entry = etree.SubElement(root, f"{_NS}url")
            etree.SubElement(entry, f"{_NS}loc").text = xml_safe(url)
        return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True)
    except (ValueError, TypeError) as exc:
        raise SerializationError(f"Cannot encode sitemap: {exc}") from exc


def write_sitemap(urls: Iterable[str], output_path: Union[Path, str]) -> Path:
    """Сохраняет sitemap по указанному пути и возвращает Path файла."""
    document = render_sitemap(urls)
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(document)
    return output

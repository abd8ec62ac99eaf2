# File: site_mapper/report/__init__.py
"""site_mapper.report: output formats for the crawl result (sitemap XML and JSON)."""

from __future__ import annotations

from site_mapper.report.json_report import render_json
from site_mapper.report.sitemap_xml import SITEMAP_NAMESPACE, render_sitemap, write_sitemap

__all__ = ["SITEMAP_NAMESPACE", "render_sitemap", "write_sitemap", "render_json"]

"""Crawl engine: link extraction, origin filtering, page fetching and the frontier walk."""

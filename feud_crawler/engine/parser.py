"""DOM helpers and listing-page link discovery."""

from __future__ import annotations

import re
from urllib.parse import urljoin

import structlog
from selectolax.parser import HTMLParser, Node

from ..config import SelectorConfig

_OUTER_TAG = re.compile(r"^\s*<[^>]+>(?P<inner>.*)</[^>]+>\s*$", re.DOTALL)


class Document:
    """Parsed page exposing CSS queries and raw inner markup of located elements."""

    def __init__(self, html: str, url: str) -> None:
        self.url = url
        self.html = html
        self._tree = HTMLParser(html)

    def css(self, selector: str) -> list[Node]:
        return self._tree.css(selector)

    def css_first(self, selector: str) -> Node | None:
        return self._tree.css_first(selector)

    def text(self, selector: str) -> str | None:
        node = self.css_first(selector)
        if node is None:
            return None
        return node.text(deep=True, separator="", strip=False).strip()

    def inner_html(self, selector: str) -> str | None:
        """Markup between the opening and closing tag of the first match."""

        node = self.css_first(selector)
        if node is None:
            return None
        match = _OUTER_TAG.match(node.html or "")
        return match.group("inner") if match else ""


class Parser:
    """Discover detail-page links on the listing page."""

    def __init__(
        self,
        selectors: SelectorConfig | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.selectors = selectors or SelectorConfig()
        self.logger = logger or structlog.get_logger("feud_crawler.parser")

    def parse_links(self, document: Document, base_url: str) -> list[str]:
        container = document.css_first(self.selectors.listing_container)
        if container is None:
            self.logger.warning("listing_container_missing", url=document.url)
            return []
        links: list[str] = []
        seen: set[str] = set()
        for node in container.css(self.selectors.listing_links):
            href = (node.attributes.get("href") or "").strip()
            if not href or href.startswith(("javascript:", "#")):
                continue
            try:
                full_url = urljoin(base_url, href)
            except ValueError as exc:
                self.logger.warning("link_malformed", href=href, error=str(exc))
                continue
            if full_url not in seen:
                seen.add(full_url)
                links.append(full_url)
        return links


__all__ = ["Document", "Parser"]

"""HTTP page fetching returning parsed documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

import httpx
import structlog

from ..config import CrawlerSettings
from .parser import Document


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    status_code: int
    text: str
    headers: Dict[str, str]
    raw: httpx.Response | None = field(repr=False, default=None)


class Fetcher:
    """Retrieve pages with a fixed browser-like header set and timeout.

    Network and HTTP failures never leave this class: they are logged and
    reported as ``None`` so callers decide how to recover.
    """

    def __init__(
        self,
        settings: CrawlerSettings | None = None,
        client: httpx.AsyncClient | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings or CrawlerSettings()
        self.logger = logger or structlog.get_logger("feud_crawler.fetcher")
        self._client = client or httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.settings.request_timeout,
            headers={"User-Agent": self.settings.user_agent},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch(self, url: str) -> FetchResponse | None:
        try:
            response = await self._client.get(
                url,
                headers={"User-Agent": self.settings.user_agent},
                timeout=self.settings.request_timeout,
            )
            response.raise_for_status()
            text = response.text
        except httpx.HTTPStatusError as exc:
            self.logger.warning(
                "fetch_failed", url=url, status=exc.response.status_code, error=str(exc)
            )
            return None
        except (httpx.HTTPError, UnicodeDecodeError) as exc:
            self.logger.warning("fetch_failed", url=url, error=str(exc) or type(exc).__name__)
            return None
        return FetchResponse(
            url=str(response.url),
            status_code=response.status_code,
            text=text,
            headers=dict(response.headers),
            raw=response,
        )

    async def fetch_document(self, url: str) -> Document | None:
        response = await self.fetch(url)
        if response is None:
            return None
        # Keep the requested URL as identity; redirects must not fork the store key
        return Document(response.text, url)


__all__ = ["Fetcher", "FetchResponse"]

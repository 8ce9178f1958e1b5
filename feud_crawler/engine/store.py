"""Append-only question store keyed by URL and persisted as a JSON snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from ..infra.storage import CorruptSnapshotError, SnapshotWriter, read_json_array
from .records import QuestionRecord


class QuestionStore:
    """Track processed URLs and persist every accepted record immediately."""

    def __init__(
        self,
        path: Path,
        writer: SnapshotWriter | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.path = path
        self.logger = logger or structlog.get_logger("feud_crawler.store")
        self.writer = writer or SnapshotWriter(path, logger=self.logger)
        self._entries: list[dict[str, Any]] = []
        self._urls: set[str] = set()
        self._loaded = False

    def load(self) -> None:
        """Read persisted state; missing or malformed files yield an empty store."""

        if self._loaded:
            return
        self._loaded = True
        try:
            payload = read_json_array(self.path)
        except CorruptSnapshotError as exc:
            self.logger.warning("store_corrupt", path=str(self.path), error=str(exc))
            payload = None
        except OSError as exc:
            self.logger.warning("store_unreadable", path=str(self.path), error=str(exc))
            payload = None
        self._entries = list(payload or [])
        for entry in self._entries:
            if isinstance(entry, dict) and entry.get("url"):
                self._urls.add(str(entry["url"]))
        self.logger.info("store_loaded", path=str(self.path), records=len(self._entries), urls=len(self._urls))

    def contains(self, url: str) -> bool:
        return url in self._urls

    async def append(self, record: QuestionRecord) -> bool:
        """Add ``record`` unless its URL is already known; returns whether it was added.

        A failed snapshot write leaves the in-memory state as it was and
        propagates to the caller.
        """

        if record.url in self._urls:
            self.logger.info("store_duplicate_url", url=record.url)
            return False
        entry = record.to_dict()
        self._urls.add(record.url)
        self._entries.append(entry)
        try:
            await self.persist()
        except Exception:
            self._urls.discard(record.url)
            self._entries.remove(entry)
            raise
        return True

    async def persist(self) -> None:
        await self.writer.submit(self._entries)

    async def close(self) -> None:
        await self.writer.close()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["QuestionStore"]

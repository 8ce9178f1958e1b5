"""JSON snapshot storage shared by the crawl and translation stores."""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Any, Iterable

import structlog


class CorruptSnapshotError(ValueError):
    """Raised when a snapshot file exists but is not a JSON array."""


def read_json_array(path: Path) -> list[Any] | None:
    """Return the array stored at ``path`` or ``None`` when the file is absent."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise CorruptSnapshotError(f"{path}: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptSnapshotError(f"{path}: {exc}") from exc
    if not isinstance(payload, list):
        raise CorruptSnapshotError(f"{path}: expected a top-level array")
    return payload


def dump_snapshot(records: Iterable[dict[str, Any]]) -> str:
    return json.dumps(list(records), ensure_ascii=False, indent=2)


def write_snapshot(path: Path, text: str) -> None:
    """Overwrite ``path`` with ``text`` through a sibling temp file and atomic replace."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as stream:
            stream.write(text)
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


class SnapshotWriter:
    """Single consumer owning one snapshot file.

    Callers submit the full current record set and await completion. The
    payload is serialised at submission time and requests are written
    strictly in submission order, each as a complete overwrite.
    """

    def __init__(self, path: Path, logger: structlog.BoundLogger | None = None) -> None:
        self.path = path
        self.logger = logger or structlog.get_logger("feud_crawler.storage")
        self._queue: asyncio.Queue[tuple[str, asyncio.Future[None]]] | None = None
        self._worker: asyncio.Task[None] | None = None

    async def submit(self, records: Iterable[dict[str, Any]]) -> None:
        text = dump_snapshot(records)
        queue = self._ensure_worker()
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        await queue.put((text, future))
        await future

    def _ensure_worker(self) -> asyncio.Queue[tuple[str, asyncio.Future[None]]]:
        if self._queue is None or self._worker is None or self._worker.done():
            self._queue = asyncio.Queue()
            self._worker = asyncio.create_task(self._run(self._queue), name=f"snapshot:{self.path.name}")
        return self._queue

    async def _run(self, queue: asyncio.Queue[tuple[str, asyncio.Future[None]]]) -> None:
        while True:
            text, future = await queue.get()
            try:
                await asyncio.to_thread(write_snapshot, self.path, text)
            except Exception as exc:  # noqa: BLE001
                self.logger.error("snapshot_write_failed", path=str(self.path), error=str(exc))
                if not future.done():
                    future.set_exception(exc)
            else:
                if not future.done():
                    future.set_result(None)
            finally:
                queue.task_done()

    async def close(self) -> None:
        if self._queue is None or self._worker is None:
            return
        await self._queue.join()
        self._worker.cancel()
        with suppress(asyncio.CancelledError):
            await self._worker
        self._queue = None
        self._worker = None


__all__ = [
    "CorruptSnapshotError",
    "SnapshotWriter",
    "dump_snapshot",
    "read_json_array",
    "write_snapshot",
]

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from conftest import read_json

from feud_crawler.infra import CorruptSnapshotError, SnapshotWriter, read_json_array, write_snapshot
from feud_crawler.infra.storage import dump_snapshot


def test_read_json_array_handles_missing_and_invalid(tmp_path: Path) -> None:
    assert read_json_array(tmp_path / "absent.json") is None

    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(CorruptSnapshotError):
        read_json_array(broken)

    mapping = tmp_path / "mapping.json"
    mapping.write_text('{"a": 1}', encoding="utf-8")
    with pytest.raises(CorruptSnapshotError):
        read_json_array(mapping)

    undecodable = tmp_path / "undecodable.json"
    undecodable.write_bytes(b"\xff\xfe[]")
    with pytest.raises(CorruptSnapshotError):
        read_json_array(undecodable)


def test_dump_snapshot_keeps_non_ascii_readable() -> None:
    text = dump_snapshot([{"question": "Назовите питомца"}])
    assert "Назовите питомца" in text
    assert text.startswith("[\n  {")


def test_write_snapshot_replaces_file_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "data.json"
    write_snapshot(path, "[1]")
    write_snapshot(path, "[1, 2]")

    assert read_json(path) == [1, 2]
    assert sorted(item.name for item in path.parent.iterdir()) == ["data.json"]


def test_writer_applies_submissions_in_order(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    snapshots = [[{"n": value} for value in range(size)] for size in range(1, 6)]

    async def scenario() -> None:
        writer = SnapshotWriter(path)
        try:
            await asyncio.gather(*(writer.submit(snapshot) for snapshot in snapshots))
        finally:
            await writer.close()

    asyncio.run(scenario())
    assert read_json(path) == snapshots[-1]


def test_writer_serialises_payload_at_submission(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    records = [{"n": 1}]

    async def scenario() -> None:
        writer = SnapshotWriter(path)
        pending = asyncio.ensure_future(writer.submit(records))
        await asyncio.sleep(0)
        records.append({"n": 2})
        await pending
        await writer.close()

    asyncio.run(scenario())
    assert read_json(path) == [{"n": 1}]


def test_writer_reports_failures_to_submitter(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    async def scenario() -> None:
        writer = SnapshotWriter(blocker / "data.json")
        try:
            await writer.submit([{"n": 1}])
        finally:
            await writer.close()

    with pytest.raises(OSError):
        asyncio.run(scenario())

"""Infra layer utilities (snapshot storage)."""

from .storage import CorruptSnapshotError, SnapshotWriter, read_json_array, write_snapshot

__all__ = ["CorruptSnapshotError", "SnapshotWriter", "read_json_array", "write_snapshot"]

"""
Snapshot cache.

Snapshots are stored as a versioned JSON document:

    {
      "version": 1,
      "workspace_id": "...",
      "projects": [ ... ]
    }

Equal snapshots always encode to identical bytes, and loading a stored
snapshot returns one equal to what was stored.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from asana_tree.constants import SNAPSHOT_VERSION
from asana_tree.exceptions import CacheCorruptError, CacheError, CacheMissingError
from asana_tree.models import Snapshot

logger = logging.getLogger(__name__)


class SnapshotCache:
    """Stores and loads a single Snapshot file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.is_file()

    @staticmethod
    def encode(snapshot: Snapshot) -> bytes:
        return snapshot.model_dump_json(indent=2).encode("utf-8")

    def store(self, snapshot: Snapshot) -> None:
        """
        Write the snapshot, replacing any previous file.

        Raises:
            CacheError: If the file cannot be written
        """
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            tmp_path.write_bytes(self.encode(snapshot))
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise CacheError(f"Cannot store snapshot: {e}", path=str(self.path)) from e
        logger.info("Stored snapshot of %d projects in %s", len(snapshot.projects), self.path)

    def load(self) -> Snapshot:
        """
        Read the stored snapshot.

        Raises:
            CacheMissingError: If no file exists at the cache path
            CacheCorruptError: If the file cannot be decoded
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError as e:
            raise CacheMissingError("No saved snapshot", path=str(self.path)) from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise CacheCorruptError(f"Snapshot is not valid JSON: {e}", path=str(self.path)) from e

        version = data.get("version") if isinstance(data, dict) else None
        if version != SNAPSHOT_VERSION:
            raise CacheCorruptError(
                f"Unsupported snapshot version {version!r}, expected {SNAPSHOT_VERSION}",
                path=str(self.path),
            )

        try:
            snapshot = Snapshot.model_validate(data)
        except ValidationError as e:
            raise CacheCorruptError(f"Snapshot has an invalid structure: {e}", path=str(self.path)) from e

        logger.debug("Loaded snapshot of %d projects from %s", len(snapshot.projects), self.path)
        return snapshot

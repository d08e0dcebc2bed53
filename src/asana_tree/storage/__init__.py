"""On-disk snapshot cache."""

from asana_tree.storage.cache import SnapshotCache

__all__ = ["SnapshotCache"]

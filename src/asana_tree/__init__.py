"""
Asana CLI Tree - print the open work of an Asana workspace as an indented tree.

The package fetches projects, sections, tasks and subtasks from Asana,
assembles them into an immutable snapshot, optionally caches the snapshot
on disk, and renders the non-completed items to the terminal.

Architecture:
    CLI (asana-tree)
         │
         ▼
    TreeBuilder ──► Snapshot ──► SnapshotCache
         │              │
         ▼              ▼
    AsanaClient      Renderer
"""

__version__ = "0.1.0"
__author__ = "Asana CLI Tree Contributors"

from asana_tree.exceptions import (
    AsanaTreeError,
    AsanaAPIError,
    AsanaAuthenticationError,
    AsanaNotFoundError,
    AsanaRateLimitError,
    AsanaValidationError,
    ConfigurationError,
    CacheError,
    CacheMissingError,
    CacheCorruptError,
)

__all__ = [
    "__version__",
    "AsanaTreeError",
    "AsanaAPIError",
    "AsanaAuthenticationError",
    "AsanaNotFoundError",
    "AsanaRateLimitError",
    "AsanaValidationError",
    "ConfigurationError",
    "CacheError",
    "CacheMissingError",
    "CacheCorruptError",
]

"""
Constants shared across the package.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

# API
DEFAULT_BASE_URL = "https://app.asana.com/api/1.0"
DEFAULT_TIMEOUT = 30.0

# Page sizes
DEFAULT_PAGE_SIZE = 100
TAGGED_TASKS_PAGE_SIZE = 100
SUBTASKS_PAGE_SIZE = 50

# opt_fields requested per endpoint
PROJECT_FIELDS = ("name", "layout")
SECTION_FIELDS = ("name",)
SECTION_TASK_FIELDS = ("completed", "name")
TASK_FIELDS = ("completed", "completed_at", "name", "parent")

# Configuration
CONFIG_PATH = Path.home() / ".asana-cli-tree.yml"
ENV_PREFIX = "ASANA_TREE_"

# Snapshot encoding
SNAPSHOT_VERSION = 1


class ProjectLayout(str, Enum):
    """How a project organizes its tasks."""

    BOARD = "board"
    LIST = "list"

    @classmethod
    def supported(cls, value: str | None) -> bool:
        return value in {m.value for m in cls}

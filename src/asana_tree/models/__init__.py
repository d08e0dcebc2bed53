"""
Asana CLI Tree Data Models.

Typed pydantic records for everything that crosses the API boundary, and
the immutable snapshot tree assembled from them.

Models:
    - Project: Top-level project (board or list layout)
    - Section: Board column
    - Task: Task or subtask
    - TaskGroup: Ordered tasks plus their allowlisted subtasks
    - SectionNode: A board section and its task group
    - ProjectNode: A project and its sections or task group
    - Snapshot: The whole workspace tree
"""

from asana_tree.models.project import Project, Section
from asana_tree.models.task import Task
from asana_tree.models.snapshot import TaskGroup, SectionNode, ProjectNode, Snapshot

__all__ = [
    "Project",
    "Section",
    "Task",
    "TaskGroup",
    "SectionNode",
    "ProjectNode",
    "Snapshot",
]

"""
Snapshot tree models.

A Snapshot is the complete, immutable tree for one workspace at one point
in time:

    Snapshot
      └─ ProjectNode (board)          ProjectNode (list)
           └─ SectionNode                └─ TaskGroup
                ├─ tasks                      ├─ tasks
                └─ subtasks                   └─ subtasks

``subtasks`` maps a task id to that task's subtasks. Only tasks carrying
the marker tag at build time have an entry.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from asana_tree.constants import SNAPSHOT_VERSION, ProjectLayout
from asana_tree.models.project import Project, Section
from asana_tree.models.task import Task


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TaskGroup(_Node):
    """Ordered tasks plus the subtasks of those that were allowlisted."""

    tasks: list[Task] = Field(default_factory=list)
    subtasks: dict[str, list[Task]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def subtask_keys_are_known_tasks(self) -> "TaskGroup":
        known = {task.id for task in self.tasks}
        orphans = [key for key in self.subtasks if key not in known]
        if orphans:
            raise ValueError(f"subtasks recorded for unknown task ids: {orphans}")
        return self

    def subtasks_of(self, task_id: str) -> list[Task]:
        """Subtasks recorded for a task; empty when none were fetched."""
        return self.subtasks.get(task_id, [])


class SectionNode(TaskGroup):
    """A board section with its tasks."""

    section: Section


class ProjectNode(_Node):
    """A project and its contents, shaped by the project layout."""

    project: Project
    sections: Optional[list[SectionNode]] = None
    group: Optional[TaskGroup] = None

    @model_validator(mode="after")
    def shape_matches_layout(self) -> "ProjectNode":
        if self.project.layout is ProjectLayout.BOARD:
            if self.sections is None or self.group is not None:
                raise ValueError(f"board project {self.project.id} must hold sections only")
        elif self.group is None or self.sections is not None:
            raise ValueError(f"list project {self.project.id} must hold a task group only")
        return self


class Snapshot(_Node):
    """The assembled project tree of a workspace."""

    version: int = SNAPSHOT_VERSION
    workspace_id: str
    projects: list[ProjectNode] = Field(default_factory=list)

"""
Task model.

Subtasks use the same record; a subtask is tied to its parent through the
parent's id in a TaskGroup's subtask mapping.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from asana_tree.models.base import AsanaModel, gid_field


class Task(AsanaModel):
    """An Asana task or subtask."""

    id: str = gid_field()
    name: str = ""
    completed: bool = False
    completed_on: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("completed_on", "completed_at"),
    )
    parent: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def none_name_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("parent", mode="before")
    @classmethod
    def parent_reference_to_id(cls, v: Any) -> Any:
        # The API returns the parent as a compact record: {"gid": ..., "resource_type": "task"}
        if isinstance(v, dict):
            return v.get("gid") or v.get("id")
        return v

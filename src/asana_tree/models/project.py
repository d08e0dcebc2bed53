"""
Project and Section models.
"""

from __future__ import annotations

from asana_tree.constants import ProjectLayout
from asana_tree.models.base import AsanaModel, gid_field


class Project(AsanaModel):
    """
    An Asana project.

    Projects are either boards (tasks grouped into real sections) or lists
    (a flat task sequence, with sections implied by task names).
    """

    id: str = gid_field()
    name: str
    layout: ProjectLayout

    @property
    def is_board(self) -> bool:
        return self.layout is ProjectLayout.BOARD


class Section(AsanaModel):
    """A section (column) of a board project."""

    id: str = gid_field()
    name: str

"""
Terminal rendering of a Snapshot.

Only open work is shown: completed tasks and subtasks are dropped. In list
projects a task whose name ends with a colon stands in for a section and
is printed as a header. Board projects have real sections, so their
top-level tasks are never treated that way.
"""

from __future__ import annotations

from typing import Iterator

from rich.console import Console
from rich.text import Text

from asana_tree.models import ProjectNode, Snapshot, TaskGroup

SEP = "=" * 30
INDENT = "  "

PROJECT_STYLE = "bold magenta"
SECTION_STYLE = "violet"
SUBSECTION_STYLE = "royal_blue1"


def is_pseudo_section_title(name: str) -> bool:
    """Whether a task name marks a section header ("Errands:")."""
    return name.endswith(":")


class Renderer:
    """Turns a Snapshot into styled lines of text."""

    def render(self, snapshot: Snapshot) -> list[Text]:
        """Render every project of the snapshot, in fetch order."""
        lines: list[Text] = []
        for node in snapshot.projects:
            lines.extend(self._project(node))
        return lines

    def write(self, snapshot: Snapshot, console: Console) -> None:
        for line in self.render(snapshot):
            console.print(line, highlight=False, soft_wrap=True)

    # -------------------------------------------------------------------------
    # Layouts
    # -------------------------------------------------------------------------

    def _project(self, node: ProjectNode) -> Iterator[Text]:
        yield self._project_title(node.project.name)

        if node.sections is not None:
            for section in node.sections:
                yield from self._section_title(section.section.name)
                for task in section.tasks:
                    if task.completed:
                        continue
                    yield Text(task.name)
                    yield from self._subtasks(task.id, section)
        elif node.group is not None:
            for task in node.group.tasks:
                if task.completed:
                    continue
                if is_pseudo_section_title(task.name):
                    yield from self._section_title(task.name)
                else:
                    yield Text(task.name)
                    yield from self._subtasks(task.id, node.group)

    # -------------------------------------------------------------------------
    # Lines
    # -------------------------------------------------------------------------

    @staticmethod
    def _project_title(title: str) -> Text:
        return Text(f"{SEP} {title.upper()} {SEP}", style=PROJECT_STYLE)

    @staticmethod
    def _section_title(title: str) -> Iterator[Text]:
        yield Text("")
        yield Text(title, style=SECTION_STYLE)

    @staticmethod
    def _subtasks(task_id: str, group: TaskGroup) -> Iterator[Text]:
        for subtask in group.subtasks_of(task_id):
            if subtask.completed:
                continue
            if is_pseudo_section_title(subtask.name):
                yield Text(f"{INDENT}{subtask.name}", style=SUBSECTION_STYLE)
            else:
                yield Text(f"{INDENT}{subtask.name}")

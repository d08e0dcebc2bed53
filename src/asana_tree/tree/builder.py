"""
Snapshot assembly.

TreeBuilder turns the flat query results of a Fetcher into a Snapshot,
reconciling the two project layouts:

    board: project → sections → tasks (+ subtasks)
    list:  project → tasks (+ subtasks)

Subtasks are only requested for tasks in the tagged allowlist, the set of
task ids carrying the configured marker tag. Untagged tasks never have
their subtasks looked up.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from asana_tree.constants import ProjectLayout
from asana_tree.models import (
    Project,
    ProjectNode,
    Section,
    SectionNode,
    Snapshot,
    Task,
    TaskGroup,
)

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """The read queries TreeBuilder needs from the remote service."""

    async def list_projects(self, workspace_id: str) -> list[Project]: ...

    async def list_tagged_task_ids(self, tag_id: str) -> list[str]: ...

    async def list_sections(self, project_id: str) -> list[Section]: ...

    async def list_section_tasks(self, section_id: str) -> list[Task]: ...

    async def list_project_tasks(self, project_id: str) -> list[Task]: ...

    async def list_subtasks(self, task_id: str) -> list[Task]: ...


class TreeBuilder:
    """
    Build a Snapshot of a workspace.

    Every fetch is awaited before the next one starts. Any fetch error
    propagates out of build() unchanged; no partial Snapshot is returned.
    """

    def __init__(self, fetcher: Fetcher, has_subtask_tag: str) -> None:
        self._fetcher = fetcher
        self._has_subtask_tag = has_subtask_tag

    async def build(self, workspace_id: str) -> Snapshot:
        """Fetch the workspace and assemble its Snapshot."""
        projects = await self._fetcher.list_projects(workspace_id)
        logger.info("Found %d projects in workspace %s", len(projects), workspace_id)

        allowlist = await self.load_allowlist()
        logger.info("%d tasks are tagged as having subtasks", len(allowlist))

        nodes: list[ProjectNode] = []
        for project in projects:
            logger.debug("Loading %s project %r", project.layout.value, project.name)
            if project.layout is ProjectLayout.BOARD:
                sections = await self._load_board(project, allowlist)
                nodes.append(ProjectNode(project=project, sections=sections))
            else:
                group = await self._load_list(project, allowlist)
                nodes.append(ProjectNode(project=project, group=group))

        return Snapshot(workspace_id=workspace_id, projects=nodes)

    async def load_allowlist(self) -> frozenset[str]:
        """Ids of every task carrying the marker tag."""
        return frozenset(await self._fetcher.list_tagged_task_ids(self._has_subtask_tag))

    async def _load_board(
        self,
        project: Project,
        allowlist: frozenset[str],
    ) -> list[SectionNode]:
        nodes: list[SectionNode] = []
        for section in await self._fetcher.list_sections(project.id):
            tasks = await self._fetcher.list_section_tasks(section.id)
            subtasks = await self._load_subtasks(tasks, allowlist)
            nodes.append(SectionNode(section=section, tasks=tasks, subtasks=subtasks))
        return nodes

    async def _load_list(self, project: Project, allowlist: frozenset[str]) -> TaskGroup:
        tasks = await self._fetcher.list_project_tasks(project.id)
        subtasks = await self._load_subtasks(tasks, allowlist)
        return TaskGroup(tasks=tasks, subtasks=subtasks)

    async def _load_subtasks(
        self,
        tasks: Iterable[Task],
        allowlist: frozenset[str],
    ) -> dict[str, list[Task]]:
        subtasks: dict[str, list[Task]] = {}
        for task in tasks:
            if task.id in allowlist:
                subtasks[task.id] = await self._fetcher.list_subtasks(task.id)
        return subtasks

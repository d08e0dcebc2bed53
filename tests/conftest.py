"""
Pytest Configuration and Fixtures for Asana CLI Tree Tests.

This module provides fixtures, mock factories, and shared utilities for
testing the tree builder, cache, renderer and command line.

Architecture:
    - MockFetcher: Async in-memory stand-in for AsanaClient
    - Factories: Generate test data (projects, sections, tasks)
    - Fixtures: Provide configured fetchers, snapshots and settings
    - Markers: Custom pytest markers for test categorization
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

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


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "builder: Snapshot assembly tests")
    config.addinivalue_line("markers", "cache: Snapshot cache tests")
    config.addinivalue_line("markers", "render: Rendering tests")
    config.addinivalue_line("markers", "api: HTTP client tests")
    config.addinivalue_line("markers", "cli: Command-line tests")
    config.addinivalue_line("markers", "errors: Error handling tests")


# =============================================================================
# Time Utilities
# =============================================================================


def utc_now() -> datetime:
    """Get current UTC time, truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def days_ago(n: int) -> datetime:
    """Get datetime n days ago."""
    return utc_now() - timedelta(days=n)


# =============================================================================
# ID Generators
# =============================================================================


class IDGenerator:
    """Sequential gid generator for test objects."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        """Reset counter (call in fixtures)."""
        cls._counter = 0

    @classmethod
    def next_id(cls) -> str:
        """Generate next unique gid (16 digits, like Asana's)."""
        cls._counter += 1
        return f"{1200000000000000 + cls._counter}"


# =============================================================================
# Test Data Factories
# =============================================================================


class TaskFactory:
    """Factory for creating Task test objects."""

    @staticmethod
    def create(
        name: str = "Test Task",
        id: str | None = None,
        completed: bool = False,
        completed_on: datetime | None = None,
        parent: str | None = None,
    ) -> Task:
        """Create a Task with sensible defaults."""
        return Task(
            id=id or IDGenerator.next_id(),
            name=name,
            completed=completed,
            completed_on=completed_on,
            parent=parent,
        )

    @staticmethod
    def create_completed(name: str = "Done Task", **kwargs) -> Task:
        """Create a completed task."""
        return TaskFactory.create(name=name, completed=True, completed_on=days_ago(1), **kwargs)

    @staticmethod
    def create_subtask(parent: Task, name: str = "Subtask", **kwargs) -> Task:
        """Create a subtask of a task."""
        return TaskFactory.create(name=name, parent=parent.id, **kwargs)

    @staticmethod
    def create_batch(*names: str) -> list[Task]:
        """Create one open task per name."""
        return [TaskFactory.create(name=name) for name in names]


class ProjectFactory:
    """Factory for creating Project test objects."""

    @staticmethod
    def create(
        name: str = "Test Project",
        layout: ProjectLayout = ProjectLayout.LIST,
        id: str | None = None,
    ) -> Project:
        """Create a Project with sensible defaults."""
        return Project(id=id or IDGenerator.next_id(), name=name, layout=layout)

    @staticmethod
    def create_board(name: str = "Test Board", **kwargs) -> Project:
        return ProjectFactory.create(name=name, layout=ProjectLayout.BOARD, **kwargs)


class SectionFactory:
    """Factory for creating Section test objects."""

    @staticmethod
    def create(name: str = "To Do", id: str | None = None) -> Section:
        return Section(id=id or IDGenerator.next_id(), name=name)


# =============================================================================
# Mock Fetcher
# =============================================================================


class MockFetcher:
    """
    In-memory mock of the AsanaClient query surface.

    Data is seeded with add_board_project/add_list_project. Calls are
    recorded for verification, and any method can be made to fail.
    """

    def __init__(self):
        """Initialize mock with empty data stores."""
        self.projects: list[Project] = []
        self.tagged_ids: list[str] = []
        self.sections: dict[str, list[Section]] = {}
        self.section_tasks: dict[str, list[Task]] = {}
        self.project_tasks: dict[str, list[Task]] = {}
        self.subtasks: dict[str, list[Task]] = {}

        # Track method calls for verification
        self.call_history: list[tuple[str, tuple]] = []

        # Configurable behaviors
        self.should_fail: dict[str, Exception | None] = {}

    def _record_call(self, method: str, *args) -> None:
        """Record method call for verification."""
        self.call_history.append((method, args))

    def _check_failure(self, method: str) -> None:
        """Check if method should raise an exception."""
        if method in self.should_fail and self.should_fail[method]:
            raise self.should_fail[method]

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def add_board_project(
        self,
        name: str,
        sections: dict[str, list[Task]],
    ) -> Project:
        """Add a board project with named sections of tasks."""
        project = ProjectFactory.create_board(name=name)
        self.projects.append(project)
        self.sections[project.id] = []
        for section_name, tasks in sections.items():
            section = SectionFactory.create(name=section_name)
            self.sections[project.id].append(section)
            self.section_tasks[section.id] = list(tasks)
        return project

    def add_list_project(self, name: str, tasks: list[Task]) -> Project:
        """Add a list project with a flat task sequence."""
        project = ProjectFactory.create(name=name)
        self.projects.append(project)
        self.project_tasks[project.id] = list(tasks)
        return project

    def add_subtasks(self, task: Task, subtasks: list[Task], tagged: bool = True) -> None:
        """Give a task subtasks on the remote side, optionally tagging it."""
        self.subtasks[task.id] = list(subtasks)
        if tagged:
            self.tagged_ids.append(task.id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def list_projects(self, workspace_id: str) -> list[Project]:
        self._record_call("list_projects", workspace_id)
        self._check_failure("list_projects")
        return list(self.projects)

    async def list_tagged_task_ids(self, tag_id: str) -> list[str]:
        self._record_call("list_tagged_task_ids", tag_id)
        self._check_failure("list_tagged_task_ids")
        return list(self.tagged_ids)

    async def list_sections(self, project_id: str) -> list[Section]:
        self._record_call("list_sections", project_id)
        self._check_failure("list_sections")
        return list(self.sections.get(project_id, []))

    async def list_section_tasks(self, section_id: str) -> list[Task]:
        self._record_call("list_section_tasks", section_id)
        self._check_failure("list_section_tasks")
        return list(self.section_tasks.get(section_id, []))

    async def list_project_tasks(self, project_id: str) -> list[Task]:
        self._record_call("list_project_tasks", project_id)
        self._check_failure("list_project_tasks")
        return list(self.project_tasks.get(project_id, []))

    async def list_subtasks(self, task_id: str) -> list[Task]:
        self._record_call("list_subtasks", task_id)
        self._check_failure("list_subtasks")
        return list(self.subtasks.get(task_id, []))

    # -------------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------------

    def get_calls(self, method_name: str) -> list[tuple]:
        """Get the arguments of all calls to a specific method."""
        return [args for name, args in self.call_history if name == method_name]

    def assert_called(self, method_name: str, times: int | None = None) -> None:
        """Assert a method was called (optionally a specific number of times)."""
        calls = self.get_calls(method_name)
        if times is not None:
            assert len(calls) == times, f"Expected {method_name} to be called {times} times, got {len(calls)}"
        else:
            assert len(calls) > 0, f"Expected {method_name} to be called at least once"

    def assert_not_called(self, method_name: str) -> None:
        """Assert a method was not called."""
        calls = self.get_calls(method_name)
        assert len(calls) == 0, f"Expected {method_name} not to be called, but was called {len(calls)} times"


# =============================================================================
# Snapshot Builders
# =============================================================================


def board_node(project: Project, sections: list[tuple[Section, list[Task], dict[str, list[Task]]]]) -> ProjectNode:
    """Build a board ProjectNode from (section, tasks, subtasks) triples."""
    return ProjectNode(
        project=project,
        sections=[
            SectionNode(section=section, tasks=tasks, subtasks=subtasks)
            for section, tasks, subtasks in sections
        ],
    )


def list_node(project: Project, tasks: list[Task], subtasks: dict[str, list[Task]] | None = None) -> ProjectNode:
    """Build a list ProjectNode."""
    return ProjectNode(project=project, group=TaskGroup(tasks=tasks, subtasks=subtasks or {}))


# =============================================================================
# Fixtures
# =============================================================================


WORKSPACE_ID = "1199999999999999"
SUBTASK_TAG = "1199999999999998"


@pytest.fixture(autouse=True)
def id_generator():
    """Reset and provide ID generator."""
    IDGenerator.reset()
    return IDGenerator


@pytest.fixture
def fetcher() -> MockFetcher:
    """Create a fresh mock fetcher."""
    return MockFetcher()


@pytest.fixture
def marketing_snapshot() -> Snapshot:
    """Board project with one section, one plain and one tagged task."""
    draft = TaskFactory.create(name="Draft copy")
    launch = TaskFactory.create(name="Launch")
    approve = TaskFactory.create_subtask(launch, name="Approve asset")
    project = ProjectFactory.create_board(name="Marketing")
    section = SectionFactory.create(name="Q1")
    return Snapshot(
        workspace_id=WORKSPACE_ID,
        projects=[board_node(project, [(section, [draft, launch], {launch.id: [approve]})])],
    )


@pytest.fixture
def personal_snapshot() -> Snapshot:
    """List project with pseudo-sections."""
    project = ProjectFactory.create(name="Personal")
    tasks = TaskFactory.create_batch("Errands:", "Buy milk", "Work:", "Fix bug")
    return Snapshot(workspace_id=WORKSPACE_ID, projects=[list_node(project, tasks)])


@pytest.fixture
def mixed_snapshot(marketing_snapshot: Snapshot, personal_snapshot: Snapshot) -> Snapshot:
    """Both layouts, with completed items and dated completions."""
    fix = TaskFactory.create(name="Fix bug")
    done = TaskFactory.create_completed(name="Old chore")
    sub_header = TaskFactory.create_subtask(fix, name="Steps:")
    sub_open = TaskFactory.create_subtask(fix, name="Reproduce")
    sub_done = TaskFactory.create_subtask(fix, name="Write test", completed=True, completed_on=days_ago(2))
    project = ProjectFactory.create(name="Work")
    work = list_node(project, [fix, done], {fix.id: [sub_header, sub_open, sub_done]})
    return Snapshot(
        workspace_id=WORKSPACE_ID,
        projects=[*marketing_snapshot.projects, *personal_snapshot.projects, work],
    )


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write a complete config file and point the environment at nothing else."""
    for key in ("ACCESS_TOKEN", "WORKSPACE_ID", "HAS_SUBTASK_TAG", "DUMP_PATH", "CONFIG"):
        monkeypatch.delenv(f"ASANA_TREE_{key}", raising=False)

    path = tmp_path / "asana-cli-tree.yml"
    path.write_text(
        yaml.safe_dump(
            {
                "access_token": "1/test:token",
                "workspace_id": WORKSPACE_ID,
                "has_subtask_tag": SUBTASK_TAG,
                "dump_path": str(tmp_path / "snapshot.json"),
            }
        )
    )
    return path

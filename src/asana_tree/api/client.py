"""
Asana REST API client.

This module provides AsanaClient, the read-only boundary between the
package and Asana. Every response is converted into typed records here,
so nothing past this module handles raw JSON.

All methods are coroutines, but callers await them one at a time: the
client never issues overlapping requests.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from types import TracebackType
from typing import TYPE_CHECKING, Any, AsyncIterator, TypeVar

import httpx

from asana_tree.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT,
    PROJECT_FIELDS,
    SECTION_FIELDS,
    SECTION_TASK_FIELDS,
    SUBTASKS_PAGE_SIZE,
    TAGGED_TASKS_PAGE_SIZE,
    TASK_FIELDS,
    ProjectLayout,
)
from asana_tree.exceptions import (
    AsanaAPIError,
    AsanaAuthenticationError,
    AsanaNotFoundError,
    AsanaRateLimitError,
    AsanaValidationError,
    ConfigurationError,
)
from asana_tree.models import Project, Section, Task

if TYPE_CHECKING:
    from asana_tree.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="AsanaClient")


def parse_retry_after(value: str | None) -> float | None:
    """
    Seconds to wait from a Retry-After header.

    The header holds either a number of seconds or an HTTP date. Anything
    unparseable yields None.
    """
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


class AsanaClient:
    """
    Async client for the subset of the Asana API the tree needs.

    Usage:
        async with AsanaClient(access_token="...") as client:
            projects = await client.list_projects(workspace_id)
            sections = await client.list_sections(projects[0].id)
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not access_token:
            raise ConfigurationError("An Asana access token is required")

        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
            transport=transport,
        )

    @classmethod
    def from_settings(cls: type[T], settings: Settings, **kwargs: Any) -> T:
        """Create a client from a Settings object."""
        return cls(
            access_token=settings.access_token.get_secret_value(),
            base_url=settings.base_url,
            timeout=settings.timeout,
            **kwargs,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def __aenter__(self: T) -> T:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # =========================================================================
    # Transport
    # =========================================================================

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Perform a GET request and return the decoded JSON body.

        Raises:
            AsanaAuthenticationError: On 401/403
            AsanaNotFoundError: On 404
            AsanaRateLimitError: On 429
            AsanaAPIError: On any other error status or network failure
            AsanaValidationError: If the body is not a JSON object
        """
        logger.debug("GET %s %s", path, params or {})
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as e:
            raise AsanaAPIError(f"Request to {path} failed: {e}") from e

        if not response.is_success:
            self._raise_for_status(path, response)

        try:
            body = response.json()
        except ValueError as e:
            raise AsanaValidationError(
                f"Response from {path} is not valid JSON",
                details={"status_code": response.status_code},
            ) from e

        if not isinstance(body, dict):
            raise AsanaValidationError(f"Response from {path} is not a JSON object")
        return body

    @staticmethod
    def _raise_for_status(path: str, response: httpx.Response) -> None:
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        message = f"Asana returned {response.status_code} for {path}"
        errors = body.get("errors") if isinstance(body, dict) else None
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict) and first.get("message"):
                message = f"{message}: {first['message']}"

        status = response.status_code
        if status in (401, 403):
            raise AsanaAuthenticationError(message, status_code=status, response_body=body)
        if status == 404:
            raise AsanaNotFoundError(message, status_code=status, response_body=body)
        if status == 429:
            raise AsanaRateLimitError(
                message,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
                status_code=status,
                response_body=body,
            )
        raise AsanaAPIError(message, status_code=status, response_body=body)

    async def _paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> AsyncIterator[dict[str, Any]]:
        """
        Iterate over every object of a paginated collection.

        Pages are requested lazily, one after another, following the
        ``next_page.offset`` cursor until the collection is exhausted.
        """
        query = dict(params or {})
        query["limit"] = page_size

        while True:
            body = await self._get(path, query)
            data = body.get("data")
            if not isinstance(data, list):
                raise AsanaValidationError(f"Response from {path} has no data list")

            for item in data:
                yield item

            next_page = body.get("next_page")
            offset = next_page.get("offset") if isinstance(next_page, dict) else None
            if not offset:
                return
            query["offset"] = offset

    @staticmethod
    def _fields(fields: tuple[str, ...]) -> str:
        return ",".join(fields)

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_projects(self, workspace_id: str) -> list[Project]:
        """
        List the non-archived projects of a workspace.

        Projects in a layout other than board or list have no tree shape
        and are left out.
        """
        params = {
            "workspace": workspace_id,
            "archived": "false",
            "opt_fields": self._fields(PROJECT_FIELDS),
        }
        projects: list[Project] = []
        async for raw in self._paginate("/projects", params):
            layout = raw.get("layout") if isinstance(raw, dict) else None
            if not ProjectLayout.supported(layout):
                logger.debug("Skipping project %s with layout %r", raw, layout)
                continue
            projects.append(Project.from_api(raw))
        return projects

    async def list_tagged_task_ids(self, tag_id: str) -> list[str]:
        """List the ids of every task carrying a tag."""
        params = {"opt_fields": "gid"}
        ids: list[str] = []
        async for raw in self._paginate(f"/tags/{tag_id}/tasks", params, TAGGED_TASKS_PAGE_SIZE):
            gid = raw.get("gid") if isinstance(raw, dict) else None
            if not gid:
                raise AsanaValidationError("Tagged task without a gid", details={"data": raw})
            ids.append(str(gid))
        return ids

    async def list_sections(self, project_id: str) -> list[Section]:
        """List the sections of a board project."""
        params = {"opt_fields": self._fields(SECTION_FIELDS)}
        return [
            Section.from_api(raw)
            async for raw in self._paginate(f"/projects/{project_id}/sections", params)
        ]

    async def list_section_tasks(self, section_id: str) -> list[Task]:
        """List the tasks of a section with completion state and name only."""
        params = {"opt_fields": self._fields(SECTION_TASK_FIELDS)}
        return [
            Task.from_api(raw)
            async for raw in self._paginate(f"/sections/{section_id}/tasks", params)
        ]

    async def list_project_tasks(self, project_id: str) -> list[Task]:
        """List all tasks of a project, including completion date and parent."""
        params = {"project": project_id, "opt_fields": self._fields(TASK_FIELDS)}
        return [Task.from_api(raw) async for raw in self._paginate("/tasks", params)]

    async def list_subtasks(self, task_id: str) -> list[Task]:
        """List the direct subtasks of a task."""
        params = {"opt_fields": self._fields(TASK_FIELDS)}
        return [
            Task.from_api(raw)
            async for raw in self._paginate(
                f"/tasks/{task_id}/subtasks", params, SUBTASKS_PAGE_SIZE
            )
        ]

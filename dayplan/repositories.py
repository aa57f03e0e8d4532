"""
Defines the repository protocols for the collaborators around the
day-timeline compiler.

The compiler never calls these itself; use cases fetch fresh input snapshots
from them and then run the pure pipeline.
"""

from datetime import date
from typing import List, Optional, Protocol, runtime_checkable

from .domain import (
    AssignmentTable,
    CalendarEvent,
    CreateTaskRequest,
    OAuthTokens,
    Task,
    TaskStatus,
    UpdateTaskRequest,
)


@runtime_checkable
class SettingsRepository(Protocol):
    """
    Protocol for a string key-value settings store.
    """

    async def get(self, key: str) -> Optional[str]:
        """Returns the stored value, or None if the key is not set."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Stores a value, replacing any previous one."""
        ...

    async def delete(self, key: str) -> None:
        """Removes a key; removing a missing key is not an error."""
        ...


@runtime_checkable
class TaskRepository(Protocol):
    """
    Protocol for the task store backing the plate and backlog.

    Methods addressing a single task raise TaskNotFoundError when the id is
    unknown.
    """

    async def list(self, status: Optional[TaskStatus] = None) -> List[Task]:
        """Lists tasks, optionally filtered by status, by sort order."""
        ...

    async def get(self, task_id: str) -> Optional[Task]:
        """Retrieves a task by id, or None."""
        ...

    async def create(self, request: CreateTaskRequest) -> Task:
        """Creates a task at the end of its status bucket."""
        ...

    async def update(self, task_id: str, request: UpdateTaskRequest) -> Task:
        """Applies the fields set on the request."""
        ...

    async def delete(self, task_id: str) -> None:
        ...

    async def reorder(self, task_id: str, new_sort_order: int) -> None:
        """Moves a task within its bucket and renumbers the bucket."""
        ...

    async def move_to_status(
        self, task_id: str, status: TaskStatus, sort_order: int
    ) -> Task:
        """Moves a task to another bucket at the given sort order."""
        ...

    async def seed(self) -> None:
        """Populates an empty store with starter tasks."""
        ...


@runtime_checkable
class CalendarRepository(Protocol):
    """
    Protocol for a calendar provider: day event fetch plus the OAuth token
    exchange and refresh calls.
    """

    async def fetch_events_for_day(
        self, access_token: str, day: date
    ) -> List[CalendarEvent]:
        """Fetches the classified, colored events for a single day."""
        ...

    async def exchange_auth_code(
        self, code: str, client_id: str, client_secret: str
    ) -> OAuthTokens:
        """Exchanges an authorization code for tokens."""
        ...

    async def refresh_access_token(
        self, refresh_token: str, client_id: str, client_secret: str
    ) -> OAuthTokens:
        """Obtains a fresh access token, keeping the refresh token."""
        ...


@runtime_checkable
class TokenRepository(Protocol):
    """
    Protocol for storing the calendar provider's OAuth tokens.
    """

    async def get_tokens(self) -> Optional[OAuthTokens]:
        ...

    async def save_tokens(self, tokens: OAuthTokens) -> None:
        ...

    async def clear_tokens(self) -> None:
        ...


@runtime_checkable
class AssignmentRepository(Protocol):
    """
    Protocol for holding the per-day pomodoro assignment table between
    pipeline runs. This is transient UI state, not durable storage.
    """

    async def get_assignments(self, day: date) -> AssignmentTable:
        ...

    async def save_assignments(
        self, day: date, assignments: AssignmentTable
    ) -> None:
        ...

"""
In-memory implementation of the TaskRepository protocol.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from dayplan.domain import (
    CreateTaskRequest,
    Priority,
    Size,
    Task,
    TaskStatus,
    UpdateTaskRequest,
)
from dayplan.errors import TaskNotFoundError
from dayplan.repositories import TaskRepository

logger = logging.getLogger(__name__)

SEED_TASKS: List[CreateTaskRequest] = [
    CreateTaskRequest(
        title="Review auth service PR",
        description="PR #342, team is blocked on this",
        priority=Priority.P0,
        size=Size.M,
        project="Auth",
        blocking=True,
        status=TaskStatus.PLATE,
    ),
    CreateTaskRequest(
        title="Write design doc for rate limiter",
        description="Needed before sprint planning Thursday",
        priority=Priority.P1,
        size=Size.L,
        project="Platform",
        status=TaskStatus.PLATE,
    ),
    CreateTaskRequest(
        title="Fix flaky integration test",
        description="test_user_signup_flow fails ~20% of the time",
        priority=Priority.P1,
        size=Size.S,
        project="CI",
        status=TaskStatus.PLATE,
    ),
    CreateTaskRequest(
        title="Investigate slow dashboard query",
        description="P95 latency jumped from 200ms to 1.2s after last deploy",
        priority=Priority.P2,
        size=Size.M,
        project="Dashboard",
        status=TaskStatus.BACKLOG,
    ),
    CreateTaskRequest(
        title="Add OpenTelemetry tracing",
        description="Instrument key API endpoints for observability",
        priority=Priority.P2,
        size=Size.XL,
        project="Platform",
        status=TaskStatus.BACKLOG,
    ),
]


class MemoryTaskRepository(TaskRepository):
    """
    Task store held in a dict keyed by task id.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}

    async def list(self, status: Optional[TaskStatus] = None) -> List[Task]:
        tasks = [
            t
            for t in self._tasks.values()
            if status is None or t.status == status
        ]
        return sorted(tasks, key=lambda t: t.sort_order)

    async def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def _require(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def create(self, request: CreateTaskRequest) -> Task:
        now = datetime.now(timezone.utc)
        bucket = [t for t in self._tasks.values() if t.status == request.status]
        max_order = max((t.sort_order for t in bucket), default=-1)

        task = Task(
            task_id=str(uuid.uuid4()),
            sort_order=max_order + 1,
            created_at=now,
            updated_at=now,
            **request.model_dump(),
        )
        self._tasks[task.task_id] = task
        logger.debug(
            "Created task",
            extra={"task_id": task.task_id, "status": task.status.value},
        )
        return task

    async def update(self, task_id: str, request: UpdateTaskRequest) -> Task:
        task = self._require(task_id)
        changes = request.model_dump(exclude_unset=True)
        updated = task.model_copy(
            update={**changes, "updated_at": datetime.now(timezone.utc)}
        )
        # Re-validate so a blank title is rejected on update too
        updated = Task.model_validate(updated.model_dump())
        self._tasks[task_id] = updated
        return updated

    async def delete(self, task_id: str) -> None:
        self._tasks.pop(task_id, None)

    async def reorder(self, task_id: str, new_sort_order: int) -> None:
        task = self._require(task_id)
        bucket = sorted(
            (
                t
                for t in self._tasks.values()
                if t.status == task.status and t.task_id != task_id
            ),
            key=lambda t: t.sort_order,
        )
        bucket.insert(new_sort_order, task)
        for i, t in enumerate(bucket):
            self._tasks[t.task_id] = t.model_copy(update={"sort_order": i})

    async def move_to_status(
        self, task_id: str, status: TaskStatus, sort_order: int
    ) -> Task:
        task = self._require(task_id)
        updated = task.model_copy(
            update={
                "status": status,
                "sort_order": sort_order,
                "updated_at": datetime.now(timezone.utc),
            }
        )
        self._tasks[task_id] = updated
        return updated

    async def seed(self) -> None:
        if self._tasks:
            return
        for request in SEED_TASKS:
            await self.create(request)
        logger.info(f"Seeded {len(SEED_TASKS)} tasks")

    def clear(self) -> None:
        self._tasks.clear()

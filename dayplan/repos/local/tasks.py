"""
Local file-based implementation of the TaskRepository protocol.
Stores all tasks in a single JSON document on the local filesystem.
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from dayplan.domain import (
    CreateTaskRequest,
    Task,
    TaskStatus,
    UpdateTaskRequest,
)
from dayplan.errors import TaskNotFoundError
from dayplan.repos.memory.tasks import SEED_TASKS
from dayplan.repositories import TaskRepository

logger = logging.getLogger(__name__)

DEFAULT_TASKS_PATH = "~/.local/share/dayplan/tasks.json"


class LocalTaskRepository(TaskRepository):
    """
    Task store persisted as one JSON file mapping task id to task.
    """

    def __init__(self, tasks_path: Optional[str] = None):
        if tasks_path is None:
            tasks_path = os.environ.get("DAYPLAN_TASKS_PATH", DEFAULT_TASKS_PATH)
        self._tasks_path = Path(tasks_path).expanduser()

    def _read(self) -> Dict[str, Task]:
        if not self._tasks_path.exists():
            return {}
        try:
            with open(self._tasks_path, "r") as f:
                data = json.load(f)
        except (IOError, json.JSONDecodeError):
            logger.warning(
                f"Could not read or parse tasks file: {self._tasks_path}",
                exc_info=True,
            )
            return {}
        return {
            task_id: Task.model_validate(item)
            for task_id, item in data.items()
        }

    def _write(self, tasks: Dict[str, Task]) -> None:
        os.makedirs(self._tasks_path.parent, exist_ok=True)
        with open(self._tasks_path, "w") as f:
            json.dump(
                {
                    task_id: task.model_dump(mode="json")
                    for task_id, task in tasks.items()
                },
                f,
                indent=2,
            )

    def _require(self, tasks: Dict[str, Task], task_id: str) -> Task:
        task = tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def list(self, status: Optional[TaskStatus] = None) -> List[Task]:
        tasks = [
            t
            for t in self._read().values()
            if status is None or t.status == status
        ]
        return sorted(tasks, key=lambda t: t.sort_order)

    async def get(self, task_id: str) -> Optional[Task]:
        return self._read().get(task_id)

    async def create(self, request: CreateTaskRequest) -> Task:
        tasks = self._read()
        now = datetime.now(timezone.utc)
        max_order = max(
            (t.sort_order for t in tasks.values() if t.status == request.status),
            default=-1,
        )
        task = Task(
            task_id=str(uuid.uuid4()),
            sort_order=max_order + 1,
            created_at=now,
            updated_at=now,
            **request.model_dump(),
        )
        tasks[task.task_id] = task
        self._write(tasks)
        logger.info(
            "Created task",
            extra={"task_id": task.task_id, "path": str(self._tasks_path)},
        )
        return task

    async def update(self, task_id: str, request: UpdateTaskRequest) -> Task:
        tasks = self._read()
        task = self._require(tasks, task_id)
        data = task.model_dump()
        data.update(request.model_dump(exclude_unset=True))
        data["updated_at"] = datetime.now(timezone.utc)
        updated = Task.model_validate(data)
        tasks[task_id] = updated
        self._write(tasks)
        return updated

    async def delete(self, task_id: str) -> None:
        tasks = self._read()
        if tasks.pop(task_id, None) is not None:
            self._write(tasks)

    async def reorder(self, task_id: str, new_sort_order: int) -> None:
        tasks = self._read()
        task = self._require(tasks, task_id)
        bucket = sorted(
            (
                t
                for t in tasks.values()
                if t.status == task.status and t.task_id != task_id
            ),
            key=lambda t: t.sort_order,
        )
        bucket.insert(new_sort_order, task)
        for i, t in enumerate(bucket):
            tasks[t.task_id] = t.model_copy(update={"sort_order": i})
        self._write(tasks)

    async def move_to_status(
        self, task_id: str, status: TaskStatus, sort_order: int
    ) -> Task:
        tasks = self._read()
        task = self._require(tasks, task_id)
        updated = task.model_copy(
            update={
                "status": status,
                "sort_order": sort_order,
                "updated_at": datetime.now(timezone.utc),
            }
        )
        tasks[task_id] = updated
        self._write(tasks)
        return updated

    async def seed(self) -> None:
        if self._read():
            return
        for request in SEED_TASKS:
            await self.create(request)

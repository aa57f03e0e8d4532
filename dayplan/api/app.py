"""
FastAPI application for the day planner.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, List, NoReturn, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import ValidationError

from dayplan.domain import Task, TaskStatus, WorkingConfiguration
from dayplan.errors import (
    CalendarSyncError,
    ConfigurationError,
    TaskNotFoundError,
)
from dayplan.config import load_working_configuration
from dayplan.repositories import SettingsRepository, TaskRepository
from dayplan.usecase import (
    AssignTaskUseCase,
    BuildDayPlanUseCase,
    ConnectCalendarUseCase,
    DisconnectCalendarUseCase,
    MoveLunchUseCase,
    SwapAssignmentsUseCase,
    UpdateWorkingConfigurationUseCase,
)
from dayplan.api.requests import (
    AssignTaskRequest,
    ConnectCalendarRequest,
    MoveLunchRequest,
    SwapAssignmentsRequest,
)
from dayplan.api.responses import (
    CalendarConnectionResponse,
    DayPlanResponse,
    HealthCheckResponse,
    LunchMoveResponse,
)
from dayplan.api.dependencies import (
    get_assign_task_use_case,
    get_build_day_plan_use_case,
    get_connect_calendar_use_case,
    get_container,
    get_disconnect_calendar_use_case,
    get_move_lunch_use_case,
    get_settings_repository,
    get_swap_assignments_use_case,
    get_task_repository,
    get_update_working_configuration_use_case,
)


def setup_logging() -> None:
    """Configure logging based on environment variables"""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_format = os.environ.get(
        "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    numeric_level = getattr(logging, log_level, None)
    if not isinstance(numeric_level, int):
        print(f"Invalid log level: {log_level}, defaulting to INFO")
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        force=True,
    )


setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Seed the task store so a fresh install has something to assign."""
    task_repo = get_container().task_repository()
    await task_repo.seed()
    yield


app = FastAPI(title="Day Planner API", lifespan=lifespan)


def _raise_http_error(action: str, e: Exception, **context: object) -> NoReturn:
    """Map collaborator and validation failures to HTTP errors."""
    if isinstance(e, HTTPException):
        raise e
    if isinstance(e, TaskNotFoundError):
        logger.info(
            f"Failed to {action}: task not found",
            extra={**context, "task_id": e.task_id},
        )
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, CalendarSyncError):
        logger.warning(
            f"Failed to {action}: calendar unavailable",
            extra={**context, "error_message": str(e)},
        )
        raise HTTPException(
            status_code=502, detail="Calendar provider unavailable."
        )
    if isinstance(e, (ConfigurationError, ValidationError, ValueError)):
        logger.info(
            f"Rejected request to {action}",
            extra={**context, "error_message": str(e)},
        )
        raise HTTPException(status_code=422, detail=str(e))

    logger.error(
        f"Failed to {action}",
        extra={
            **context,
            "error_type": type(e).__name__,
            "error_message": str(e),
        },
        exc_info=True,
    )
    # Return a generic error message to prevent information leakage
    raise HTTPException(
        status_code=500,
        detail=f"Failed to {action} due to an internal error.",
    )


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint"""
    logger.debug("Health check requested")
    return HealthCheckResponse(status="ok", version="0.1.0")


@app.get("/days/{day}/plan", response_model=DayPlanResponse)
async def get_day_plan(
    day: date,
    use_case: BuildDayPlanUseCase = Depends(get_build_day_plan_use_case),
) -> DayPlanResponse:
    """Compile and return the timeline for one day."""
    try:
        plan = await use_case.execute(day)
    except Exception as e:
        _raise_http_error("build day plan", e, day=day.isoformat())
    return DayPlanResponse.from_plan(plan)


@app.post("/days/{day}/lunch", response_model=LunchMoveResponse)
async def move_lunch(
    day: date,
    request: MoveLunchRequest,
    use_case: MoveLunchUseCase = Depends(get_move_lunch_use_case),
) -> LunchMoveResponse:
    """
    Propose a new lunch start. The move is rejected (and the current start
    returned) when the new interval overlaps an event.
    """
    try:
        result = await use_case.execute(day, request.lunch_start)
    except Exception as e:
        _raise_http_error(
            "move lunch",
            e,
            day=day.isoformat(),
            proposed_start=request.lunch_start,
        )
    return LunchMoveResponse(
        accepted=result.accepted, lunch_start=result.lunch_start
    )


@app.put("/days/{day}/assignments/{pomodoro_index}", status_code=204)
async def assign_task(
    day: date,
    pomodoro_index: int,
    request: AssignTaskRequest,
    use_case: AssignTaskUseCase = Depends(get_assign_task_use_case),
) -> None:
    """Bind a task title to the pomodoro at ``pomodoro_index``."""
    try:
        await use_case.execute(day, pomodoro_index, request.task_title)
    except Exception as e:
        _raise_http_error(
            "assign task",
            e,
            day=day.isoformat(),
            pomodoro_index=pomodoro_index,
        )


@app.post("/days/{day}/assignments/swap", response_model=DayPlanResponse)
async def swap_assignments(
    day: date,
    request: SwapAssignmentsRequest,
    use_case: SwapAssignmentsUseCase = Depends(get_swap_assignments_use_case),
) -> DayPlanResponse:
    """Exchange the tasks of two pomodoros, addressed by ordinal."""
    try:
        plan = await use_case.execute(
            day, request.from_index, request.to_index
        )
    except Exception as e:
        _raise_http_error("swap assignments", e, day=day.isoformat())
    return DayPlanResponse.from_plan(plan)


@app.get("/settings/working-hours", response_model=WorkingConfiguration)
async def get_working_configuration(
    settings_repo: SettingsRepository = Depends(get_settings_repository),
) -> WorkingConfiguration:
    try:
        return await load_working_configuration(settings_repo)
    except Exception as e:
        _raise_http_error("load settings", e)


@app.put("/settings/working-hours", response_model=WorkingConfiguration)
async def update_working_configuration(
    configuration: WorkingConfiguration,
    use_case: UpdateWorkingConfigurationUseCase = Depends(
        get_update_working_configuration_use_case
    ),
) -> WorkingConfiguration:
    try:
        return await use_case.execute(configuration)
    except Exception as e:
        _raise_http_error("save settings", e)


@app.get("/tasks", response_model=List[Task])
async def list_tasks(
    status: Optional[TaskStatus] = None,
    task_repo: TaskRepository = Depends(get_task_repository),
) -> List[Task]:
    """List tasks, e.g. ``?status=plate`` for assignable titles."""
    try:
        return await task_repo.list(status)
    except Exception as e:
        _raise_http_error("list tasks", e)


@app.get("/tasks/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    task_repo: TaskRepository = Depends(get_task_repository),
) -> Task:
    try:
        task = await task_repo.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task
    except Exception as e:
        _raise_http_error("get task", e, task_id=task_id)


@app.post("/calendar/connect", response_model=CalendarConnectionResponse)
async def connect_calendar(
    request: ConnectCalendarRequest,
    use_case: ConnectCalendarUseCase = Depends(get_connect_calendar_use_case),
) -> CalendarConnectionResponse:
    try:
        await use_case.execute(request.code)
    except Exception as e:
        _raise_http_error("connect calendar", e)
    return CalendarConnectionResponse(connected=True)


@app.post("/calendar/disconnect", response_model=CalendarConnectionResponse)
async def disconnect_calendar(
    use_case: DisconnectCalendarUseCase = Depends(
        get_disconnect_calendar_use_case
    ),
) -> CalendarConnectionResponse:
    await use_case.execute()
    return CalendarConnectionResponse(connected=False)

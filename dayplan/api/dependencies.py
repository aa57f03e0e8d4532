"""
Dependency injection for FastAPI endpoints.

Collaborators are explicit constructor parameters of the use cases; this
module is the only place that decides which implementations to wire.
"""

import os
import logging
from typing import Any, Callable, Dict

from fastapi import Depends

from dayplan.repositories import (
    AssignmentRepository,
    CalendarRepository,
    SettingsRepository,
    TaskRepository,
    TokenRepository,
)
from dayplan.repos.memory import (
    MemoryAssignmentRepository,
    MemorySettingsRepository,
    MemoryTaskRepository,
    MockCalendarRepository,
)
from dayplan.repos.tokens import SettingsTokenRepository
from dayplan.usecase import (
    AssignTaskUseCase,
    BuildDayPlanUseCase,
    ConnectCalendarUseCase,
    DisconnectCalendarUseCase,
    MoveLunchUseCase,
    SwapAssignmentsUseCase,
    UpdateWorkingConfigurationUseCase,
)
from dayplan.validation import ensure_repository_protocol

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container with singleton lifecycle management.
    Storage and calendar backends are chosen from the environment; mocks
    for tests are provided by dependency overrides.
    """

    def __init__(self) -> None:
        self._instances: Dict[str, Any] = {}

    def get_or_create(self, key: str, factory: Callable[[], Any]) -> Any:
        """Get or create a singleton instance."""
        if key not in self._instances:
            self._instances[key] = factory()
        return self._instances[key]

    def reset(self) -> None:
        self._instances.clear()

    def settings_repository(self) -> SettingsRepository:
        return self.get_or_create("settings", self._create_settings_repo)

    def task_repository(self) -> TaskRepository:
        return self.get_or_create("tasks", self._create_task_repo)

    def calendar_repository(self) -> CalendarRepository:
        return self.get_or_create("calendar", self._create_calendar_repo)

    def assignment_repository(self) -> AssignmentRepository:
        return self.get_or_create("assignments", MemoryAssignmentRepository)

    def _create_settings_repo(self) -> SettingsRepository:
        storage = os.environ.get("DAYPLAN_STORAGE", "memory").lower()
        logger.debug("Creating settings repository", extra={"storage": storage})
        if storage == "local":
            from dayplan.repos.local import LocalSettingsRepository

            return ensure_repository_protocol(
                LocalSettingsRepository(), SettingsRepository
            )
        return MemorySettingsRepository()

    def _create_task_repo(self) -> TaskRepository:
        storage = os.environ.get("DAYPLAN_STORAGE", "memory").lower()
        if storage == "local":
            from dayplan.repos.local import LocalTaskRepository

            return ensure_repository_protocol(
                LocalTaskRepository(), TaskRepository
            )
        return MemoryTaskRepository()

    def _create_calendar_repo(self) -> CalendarRepository:
        provider = os.environ.get("DAYPLAN_CALENDAR", "mock").lower()
        logger.debug(
            "Creating calendar repository", extra={"provider": provider}
        )
        if provider == "google":
            from dayplan.repos.google import GoogleCalendarRepository

            return ensure_repository_protocol(
                GoogleCalendarRepository(), CalendarRepository
            )
        return MockCalendarRepository()


# Global container instance
_container = DependencyContainer()


def get_container() -> DependencyContainer:
    return _container


def get_settings_repository() -> SettingsRepository:
    """FastAPI dependency for the settings store."""
    return _container.settings_repository()


def get_task_repository() -> TaskRepository:
    """FastAPI dependency for the task store."""
    return _container.task_repository()


def get_calendar_repository() -> CalendarRepository:
    """FastAPI dependency for the calendar provider."""
    return _container.calendar_repository()


def get_assignment_repository() -> AssignmentRepository:
    """FastAPI dependency for the per-day assignment tables."""
    return _container.assignment_repository()


def get_token_repository(
    settings_repo: SettingsRepository = Depends(get_settings_repository),
) -> TokenRepository:
    return SettingsTokenRepository(settings_repo)


def get_build_day_plan_use_case(
    settings_repo: SettingsRepository = Depends(get_settings_repository),
    token_repo: TokenRepository = Depends(get_token_repository),
    calendar_repo: CalendarRepository = Depends(get_calendar_repository),
    assignment_repo: AssignmentRepository = Depends(
        get_assignment_repository
    ),
) -> BuildDayPlanUseCase:
    """FastAPI dependency for BuildDayPlanUseCase."""
    return BuildDayPlanUseCase(
        settings_repo=settings_repo,
        token_repo=token_repo,
        calendar_repo=calendar_repo,
        assignment_repo=assignment_repo,
    )


def get_move_lunch_use_case(
    settings_repo: SettingsRepository = Depends(get_settings_repository),
    build_day_plan: BuildDayPlanUseCase = Depends(get_build_day_plan_use_case),
) -> MoveLunchUseCase:
    return MoveLunchUseCase(
        settings_repo=settings_repo, build_day_plan=build_day_plan
    )


def get_assign_task_use_case(
    assignment_repo: AssignmentRepository = Depends(
        get_assignment_repository
    ),
) -> AssignTaskUseCase:
    return AssignTaskUseCase(assignment_repo=assignment_repo)


def get_swap_assignments_use_case(
    build_day_plan: BuildDayPlanUseCase = Depends(get_build_day_plan_use_case),
    assignment_repo: AssignmentRepository = Depends(
        get_assignment_repository
    ),
) -> SwapAssignmentsUseCase:
    return SwapAssignmentsUseCase(
        build_day_plan=build_day_plan, assignment_repo=assignment_repo
    )


def get_connect_calendar_use_case(
    settings_repo: SettingsRepository = Depends(get_settings_repository),
    token_repo: TokenRepository = Depends(get_token_repository),
    calendar_repo: CalendarRepository = Depends(get_calendar_repository),
) -> ConnectCalendarUseCase:
    return ConnectCalendarUseCase(
        settings_repo=settings_repo,
        token_repo=token_repo,
        calendar_repo=calendar_repo,
    )


def get_disconnect_calendar_use_case(
    token_repo: TokenRepository = Depends(get_token_repository),
) -> DisconnectCalendarUseCase:
    return DisconnectCalendarUseCase(token_repo=token_repo)


def get_update_working_configuration_use_case(
    settings_repo: SettingsRepository = Depends(get_settings_repository),
) -> UpdateWorkingConfigurationUseCase:
    return UpdateWorkingConfigurationUseCase(settings_repo=settings_repo)

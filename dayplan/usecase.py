"""
Defines the use cases for day planning.

Use cases gather fresh input snapshots from the collaborators (settings,
tokens, calendar provider, assignment table) and then run the pure
day-timeline pipeline. Any collaborator failure surfaces as an exception
before the pipeline is invoked; the pipeline itself never fails on
scheduling conflicts.
"""

import logging
from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from .assignments import (
    assignment_table,
    pomodoro_positions,
    prune_assignments,
    swap_assignments,
)
from .config import (
    GOOGLE_CLIENT_ID_KEY,
    GOOGLE_CLIENT_SECRET_KEY,
    LUNCH_START_KEY,
    load_working_configuration,
    save_working_configuration,
)
from .domain import (
    BlockKind,
    CalendarEvent,
    DayPlan,
    OAuthTokens,
    WorkingConfiguration,
    parse_hhmm,
)
from .errors import CalendarSyncError
from .pipeline import compile_day
from .repositories import (
    AssignmentRepository,
    CalendarRepository,
    SettingsRepository,
    TokenRepository,
)
from .timeline import lunch_is_clear
from .validation import validate_repository_protocol

logger = logging.getLogger(__name__)


class LunchMoveResult(BaseModel):
    accepted: bool
    lunch_start: str


async def _client_credentials(
    settings_repo: SettingsRepository,
) -> tuple[str, str]:
    client_id = await settings_repo.get(GOOGLE_CLIENT_ID_KEY) or ""
    client_secret = await settings_repo.get(GOOGLE_CLIENT_SECRET_KEY) or ""
    return client_id, client_secret


class BuildDayPlanUseCase:
    """
    Compiles the plan for one day from the current events, working
    configuration and stored task assignments.

    This use case depends only on repository abstractions. It owns the
    token refresh dance and the re-derivation of pomodoro ordinals; the
    timeline logic itself lives in the pure pipeline.
    """

    def __init__(
        self,
        settings_repo: SettingsRepository,
        token_repo: TokenRepository,
        calendar_repo: CalendarRepository,
        assignment_repo: AssignmentRepository,
    ):
        validate_repository_protocol(settings_repo, SettingsRepository)
        validate_repository_protocol(token_repo, TokenRepository)
        validate_repository_protocol(calendar_repo, CalendarRepository)
        validate_repository_protocol(assignment_repo, AssignmentRepository)
        self.settings_repo = settings_repo
        self.token_repo = token_repo
        self.calendar_repo = calendar_repo
        self.assignment_repo = assignment_repo

    async def fetch_events(self, day: date) -> List[CalendarEvent]:
        """
        Fetch the day's events, refreshing the access token first when it
        has expired. Returns no events when the calendar is not connected.

        Raises:
            CalendarSyncError: if the token refresh or the fetch fails
        """
        tokens = await self.token_repo.get_tokens()
        if tokens is None:
            logger.info(
                "Calendar not connected, planning without events",
                extra={"day": day.isoformat()},
            )
            return []

        try:
            if tokens.is_expired():
                client_id, client_secret = await _client_credentials(
                    self.settings_repo
                )
                tokens = await self.calendar_repo.refresh_access_token(
                    tokens.refresh_token, client_id, client_secret
                )
                await self.token_repo.save_tokens(tokens)
                logger.info("Refreshed expired calendar token")

            events = await self.calendar_repo.fetch_events_for_day(
                tokens.access_token, day
            )
        except Exception as e:
            logger.error(
                "Failed to fetch calendar events",
                extra={
                    "day": day.isoformat(),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
                exc_info=True,
            )
            raise CalendarSyncError(f"Failed to fetch events: {e}") from e

        return events

    async def execute(self, day: date) -> DayPlan:
        """
        Builds the plan for ``day``.

        1. Reads the working configuration.
        2. Fetches the day's events (refreshing tokens if needed).
        3. Compiles the timeline without assignments to learn the current
           pomodoro count, and prunes stale ordinals from the stored table.
        4. Compiles again with the pruned table.
        """
        configuration = await load_working_configuration(self.settings_repo)
        events = await self.fetch_events(day)

        stored = await self.assignment_repo.get_assignments(day)
        unassigned = compile_day(events, day, configuration)
        assignments = prune_assignments(
            stored, len(pomodoro_positions(unassigned.blocks))
        )
        if assignments != stored:
            await self.assignment_repo.save_assignments(day, assignments)

        plan = compile_day(events, day, configuration, assignments)
        logger.info(
            "Compiled day plan",
            extra={
                "day": day.isoformat(),
                "event_count": len(events),
                "block_count": len(plan.blocks),
                "pomodoro_count": sum(
                    1 for b in plan.blocks if b.kind == BlockKind.POMODORO
                ),
                "lunch_inserted": plan.lunch_inserted,
            },
        )
        return plan


class MoveLunchUseCase:
    """
    Validates a proposed lunch start against the day's events and persists
    it when the move is accepted.
    """

    def __init__(
        self,
        settings_repo: SettingsRepository,
        build_day_plan: BuildDayPlanUseCase,
    ):
        self.settings_repo = settings_repo
        self.build_day_plan = build_day_plan

    async def execute(self, day: date, proposed_start: str) -> LunchMoveResult:
        parse_hhmm(proposed_start)
        configuration = await load_working_configuration(self.settings_repo)
        events = await self.build_day_plan.fetch_events(day)

        accepted = lunch_is_clear(
            proposed_start, events, day, configuration.lunch_duration
        )
        lunch_start = proposed_start if accepted else configuration.lunch_start
        if accepted and lunch_start != configuration.lunch_start:
            await self.settings_repo.set(LUNCH_START_KEY, lunch_start)

        logger.info(
            "Lunch move requested",
            extra={
                "day": day.isoformat(),
                "proposed_start": proposed_start,
                "accepted": accepted,
            },
        )
        return LunchMoveResult(accepted=accepted, lunch_start=lunch_start)


class AssignTaskUseCase:
    """
    Binds a task title to the pomodoro at a given ordinal, or clears it when
    the title is None.
    """

    def __init__(self, assignment_repo: AssignmentRepository):
        self.assignment_repo = assignment_repo

    async def execute(
        self, day: date, pomodoro_index: int, task_title: Optional[str]
    ) -> None:
        if pomodoro_index < 0:
            raise ValueError(
                f"pomodoro_index must be non-negative, got {pomodoro_index}"
            )
        assignments = await self.assignment_repo.get_assignments(day)
        if task_title is None or not task_title.strip():
            assignments.pop(pomodoro_index, None)
        else:
            assignments[pomodoro_index] = task_title.strip()
        await self.assignment_repo.save_assignments(day, assignments)


class SwapAssignmentsUseCase:
    """
    Exchanges the tasks of two pomodoros, addressed by ordinal, on a freshly
    compiled plan and stores the re-derived table.
    """

    def __init__(
        self,
        build_day_plan: BuildDayPlanUseCase,
        assignment_repo: AssignmentRepository,
    ):
        self.build_day_plan = build_day_plan
        self.assignment_repo = assignment_repo

    async def execute(self, day: date, from_index: int, to_index: int) -> DayPlan:
        plan = await self.build_day_plan.execute(day)
        blocks = swap_assignments(plan.blocks, from_index, to_index)
        assignments = assignment_table(blocks)
        await self.assignment_repo.save_assignments(day, assignments)
        return plan.model_copy(
            update={"blocks": blocks, "assignments": assignments}
        )


class ConnectCalendarUseCase:
    """Exchanges an authorization code and stores the resulting tokens."""

    def __init__(
        self,
        settings_repo: SettingsRepository,
        token_repo: TokenRepository,
        calendar_repo: CalendarRepository,
    ):
        self.settings_repo = settings_repo
        self.token_repo = token_repo
        self.calendar_repo = calendar_repo

    async def execute(self, code: str) -> OAuthTokens:
        client_id, client_secret = await _client_credentials(
            self.settings_repo
        )
        try:
            tokens = await self.calendar_repo.exchange_auth_code(
                code, client_id, client_secret
            )
        except Exception as e:
            logger.error(
                "Calendar authorization failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
                exc_info=True,
            )
            raise CalendarSyncError(f"Failed to connect: {e}") from e

        await self.token_repo.save_tokens(tokens)
        logger.info("Calendar connected")
        return tokens


class DisconnectCalendarUseCase:
    def __init__(self, token_repo: TokenRepository):
        self.token_repo = token_repo

    async def execute(self) -> None:
        await self.token_repo.clear_tokens()
        logger.info("Calendar disconnected")


class UpdateWorkingConfigurationUseCase:
    def __init__(self, settings_repo: SettingsRepository):
        self.settings_repo = settings_repo

    async def execute(
        self, configuration: WorkingConfiguration
    ) -> WorkingConfiguration:
        await save_working_configuration(self.settings_repo, configuration)
        return configuration

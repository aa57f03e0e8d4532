"""
Day planning package.

Compiles a working day from calendar events into a contiguous timeline of
free, event, pomodoro, rest and lunch blocks, following Clean Architecture
principles: a pure compiler in the middle, use cases around it, and
repository protocols for the settings, task, token, assignment and calendar
collaborators.
"""

from .assignments import (
    apply_assignments,
    assignment_table,
    prune_assignments,
    swap_assignments,
)
from .classifier import classify_event, resolve_color
from .domain import (
    BlockKind,
    CalendarEvent,
    DayPlan,
    EventBlock,
    EventType,
    FreeBlock,
    LunchBlock,
    PomodoroBlock,
    RestBlock,
    Task,
    TaskStatus,
    TimeBlock,
    WorkingConfiguration,
)
from .errors import (
    CalendarSyncError,
    ConfigurationError,
    DayPlanError,
    TaskNotFoundError,
)
from .pipeline import compile_day
from .repositories import (
    AssignmentRepository,
    CalendarRepository,
    SettingsRepository,
    TaskRepository,
    TokenRepository,
)
from .timeline import (
    block_height_px,
    build_timeline,
    insert_lunch,
    lunch_is_clear,
    move_lunch,
    split_pomodoros,
)
from .usecase import (
    AssignTaskUseCase,
    BuildDayPlanUseCase,
    ConnectCalendarUseCase,
    DisconnectCalendarUseCase,
    MoveLunchUseCase,
    SwapAssignmentsUseCase,
    UpdateWorkingConfigurationUseCase,
)

__all__ = [
    # Calendar events and classification
    "CalendarEvent",
    "EventType",
    "classify_event",
    "resolve_color",
    # Time blocks and the compiled day
    "BlockKind",
    "TimeBlock",
    "FreeBlock",
    "EventBlock",
    "PomodoroBlock",
    "RestBlock",
    "LunchBlock",
    "DayPlan",
    "WorkingConfiguration",
    "Task",
    "TaskStatus",
    # Compiler
    "build_timeline",
    "split_pomodoros",
    "insert_lunch",
    "move_lunch",
    "lunch_is_clear",
    "block_height_px",
    "swap_assignments",
    "apply_assignments",
    "assignment_table",
    "prune_assignments",
    "compile_day",
    # Repository protocols
    "SettingsRepository",
    "TaskRepository",
    "CalendarRepository",
    "TokenRepository",
    "AssignmentRepository",
    # Use Cases
    "BuildDayPlanUseCase",
    "MoveLunchUseCase",
    "AssignTaskUseCase",
    "SwapAssignmentsUseCase",
    "ConnectCalendarUseCase",
    "DisconnectCalendarUseCase",
    "UpdateWorkingConfigurationUseCase",
    # Errors
    "DayPlanError",
    "CalendarSyncError",
    "TaskNotFoundError",
    "ConfigurationError",
]

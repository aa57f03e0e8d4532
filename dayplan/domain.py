"""
Day planning domain models.

These models represent calendar events, the typed time blocks of a compiled
working day and the surrounding task and settings records, following the
established Pydantic v2 patterns of the calendar package.

All timestamps are naive local wall-clock datetimes. The compiler never
converts between timezones, so aware datetimes are rejected at the boundary.
"""

from datetime import date, datetime, timezone
from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum
import re


HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_hhmm(value: str) -> tuple[int, int]:
    """Parse an ``HH:MM`` wall-clock string into (hour, minute)."""
    if not isinstance(value, str) or not HHMM_PATTERN.match(value):
        raise ValueError(f"Expected HH:MM wall-clock time, got {value!r}")
    hour, minute = value.split(":")
    return int(hour), int(minute)


def at_time(day: date, hhmm: str) -> datetime:
    """Combine a calendar day and an ``HH:MM`` string into a naive datetime."""
    hour, minute = parse_hhmm(hhmm)
    return datetime(day.year, day.month, day.day, hour, minute)


def _ensure_naive(v: datetime) -> datetime:
    if v.tzinfo is not None:
        raise ValueError(
            f"Timestamps must be naive local wall-clock values, got {v}"
        )
    return v


# --- Enums ---


class EventType(str, Enum):
    """Classification of a calendar event."""

    MEETING = "meeting"
    FOCUS = "focus"
    OTHER = "other"


class BlockKind(str, Enum):
    """Kind tag of a time block in a compiled day."""

    FREE = "free"
    EVENT = "event"
    POMODORO = "pomodoro"
    REST = "rest"
    LUNCH = "lunch"


class TaskStatus(str, Enum):
    PLATE = "plate"
    BACKLOG = "backlog"
    DONE = "done"


class Priority(str, Enum):
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class Size(str, Enum):
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"


# --- Calendar events ---


class CalendarEvent(BaseModel):
    """
    A single commitment fetched from the calendar provider for one day.

    Events are immutable for the duration of a pipeline run; event blocks
    hold a shared reference to them.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(..., description="Opaque identifier from the source")
    title: str = Field(..., description="Display title of the event")
    start_time: datetime = Field(..., description="Local wall-clock start")
    end_time: datetime = Field(..., description="Local wall-clock end")
    type: EventType = Field(
        EventType.OTHER, description="Meeting, focus or other"
    )
    color_id: Optional[str] = Field(
        None, description="Provider palette identifier, if any"
    )
    color: Optional[str] = Field(
        None, description="Resolved display color as #rrggbb"
    )
    html_link: Optional[str] = Field(
        None, description="Link to the event in the provider UI"
    )

    @field_validator("start_time", "end_time")
    @classmethod
    def ensure_naive(cls, v: datetime) -> datetime:
        """Reject timezone-aware datetimes."""
        return _ensure_naive(v)

    @field_validator("end_time")
    @classmethod
    def end_time_after_start_time(cls, v: datetime, info) -> datetime:
        """Ensure end time is after start time."""
        if "start_time" in info.data and v <= info.data["start_time"]:
            raise ValueError(
                f"Event end {v.isoformat()} must be after start "
                f"{info.data['start_time'].isoformat()}"
            )
        return v

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Strip whitespace from title."""
        return v.strip()


# --- Time blocks ---


class _BaseBlock(BaseModel):
    """Half-open interval [start_time, end_time) shared by all block kinds."""

    model_config = ConfigDict(frozen=True)

    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def ensure_naive(cls, v: datetime) -> datetime:
        return _ensure_naive(v)

    @model_validator(mode="after")
    def end_after_start(self) -> "_BaseBlock":
        if self.end_time <= self.start_time:
            raise ValueError(
                f"{self.__class__.__name__} must have positive duration: "
                f"{self.start_time.isoformat()} - {self.end_time.isoformat()}"
            )
        return self

    @property
    def duration_minutes(self) -> float:
        """Block duration in minutes."""
        return (self.end_time - self.start_time).total_seconds() / 60


class FreeBlock(_BaseBlock):
    """Unclaimed working time."""

    kind: Literal[BlockKind.FREE] = BlockKind.FREE


class EventBlock(_BaseBlock):
    """Working time occupied by a calendar event, clipped to the work day."""

    kind: Literal[BlockKind.EVENT] = BlockKind.EVENT
    event: CalendarEvent


class PomodoroBlock(_BaseBlock):
    """A focus interval that may carry the title of an assigned task."""

    kind: Literal[BlockKind.POMODORO] = BlockKind.POMODORO
    assigned_task: Optional[str] = None


class RestBlock(_BaseBlock):
    kind: Literal[BlockKind.REST] = BlockKind.REST


class LunchBlock(_BaseBlock):
    kind: Literal[BlockKind.LUNCH] = BlockKind.LUNCH


TimeBlock = Annotated[
    Union[FreeBlock, EventBlock, PomodoroBlock, RestBlock, LunchBlock],
    Field(discriminator="kind"),
]

# Ordinal of a pomodoro block (counting pomodoros only) -> task title.
AssignmentTable = Dict[int, str]


# --- Configuration ---


class WorkingConfiguration(BaseModel):
    """
    User-configured working parameters. Owned by the settings store and
    read once at the start of each pipeline run.
    """

    work_start: str = Field("09:00", description="Work day start, HH:MM")
    work_end: str = Field("17:00", description="Work day end, HH:MM")
    pomodoro_duration: int = Field(
        30, gt=0, description="Focus block length in minutes"
    )
    rest_duration: int = Field(
        5, ge=0, description="Rest block length in minutes"
    )
    lunch_start: str = Field("12:00", description="Lunch start, HH:MM")
    lunch_duration: int = Field(
        60, ge=0, description="Lunch length in minutes"
    )

    @field_validator("work_start", "work_end", "lunch_start")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        parse_hhmm(v)
        return v

    @model_validator(mode="after")
    def work_end_after_start(self) -> "WorkingConfiguration":
        if parse_hhmm(self.work_end) <= parse_hhmm(self.work_start):
            raise ValueError(
                f"work_end {self.work_end} must be after work_start "
                f"{self.work_start}"
            )
        return self


# --- Tasks ---


class Task(BaseModel):
    """A task on the user's plate or backlog."""

    task_id: str
    title: str
    description: str = ""
    blocking: bool = False
    link: Optional[str] = None
    priority: Priority = Priority.P2
    project: str = ""
    size: Size = Size.M
    status: TaskStatus = TaskStatus.PLATE
    sort_order: int = 0
    created_at: datetime
    updated_at: datetime

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task title cannot be empty")
        return v


class CreateTaskRequest(BaseModel):
    title: str
    description: str = ""
    blocking: bool = False
    link: Optional[str] = None
    priority: Priority = Priority.P2
    project: str = ""
    size: Size = Size.M
    status: TaskStatus = TaskStatus.PLATE


class UpdateTaskRequest(BaseModel):
    """Partial update; only fields that are set are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    blocking: Optional[bool] = None
    link: Optional[str] = None
    priority: Optional[Priority] = None
    project: Optional[str] = None
    size: Optional[Size] = None
    status: Optional[TaskStatus] = None
    sort_order: Optional[int] = None


# --- Calendar provider credentials ---


class OAuthTokens(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: datetime = Field(..., description="Expiry as aware UTC time")

    @field_validator("expires_at")
    @classmethod
    def ensure_timezone_aware(cls, v: datetime) -> datetime:
        """Token expiry is wall-clock independent, so keep it in UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at


# --- Compiled day ---


class DayPlan(BaseModel):
    """Output of one pipeline run for a single day."""

    day: date
    configuration: WorkingConfiguration
    events: List[CalendarEvent] = Field(default_factory=list)
    blocks: List[TimeBlock] = Field(default_factory=list)
    assignments: AssignmentTable = Field(default_factory=dict)
    lunch_inserted: bool = False

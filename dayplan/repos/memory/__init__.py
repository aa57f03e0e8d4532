"""In-memory implementations of the day planning repositories."""

from .assignments import MemoryAssignmentRepository
from .calendar import MockCalendarRepository
from .settings import MemorySettingsRepository
from .tasks import MemoryTaskRepository

__all__ = [
    "MemoryAssignmentRepository",
    "MockCalendarRepository",
    "MemorySettingsRepository",
    "MemoryTaskRepository",
]

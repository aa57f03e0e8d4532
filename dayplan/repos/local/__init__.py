"""Local storage implementations of day planning repositories."""

from .settings import LocalSettingsRepository
from .tasks import LocalTaskRepository

__all__ = [
    "LocalSettingsRepository",
    "LocalTaskRepository",
]

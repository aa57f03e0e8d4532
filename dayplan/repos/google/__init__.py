"""Google Calendar provider."""

from .calendar import GoogleCalendarRepository

__all__ = ["GoogleCalendarRepository"]

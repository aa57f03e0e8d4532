"""
Mock calendar provider with realistic sample events for demonstration and
tests.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

from dayplan.classifier import classify_event, resolve_color
from dayplan.domain import CalendarEvent, OAuthTokens
from dayplan.repositories import CalendarRepository

logger = logging.getLogger(__name__)

# (event_id, title, start offset from 09:00 in minutes, minutes, attendees,
#  provider color id)
SAMPLE_EVENTS: List[Tuple[str, str, int, int, int, Optional[str]]] = [
    ("standup-001", "Daily Standup", 30, 15, 6, "7"),
    ("deep-work-001", "Deep work: rate limiter", 90, 60, 0, None),
    ("one-on-one-001", "1:1 with Manager", 300, 30, 1, "2"),
    ("dentist-001", "Dentist", 420, 45, 0, None),
]


class MockCalendarRepository(CalendarRepository):
    """
    Mock calendar provider. Serves either explicitly set events or a
    generated sample day, and hands out fake tokens.
    """

    def __init__(self, events: Optional[List[CalendarEvent]] = None):
        self._events = events
        self.fetch_count = 0

    def _create_sample_events(self, day: date) -> List[CalendarEvent]:
        """Create a realistic set of sample events for one day."""
        base_time = datetime(day.year, day.month, day.day, 9, 0)
        events = []
        for event_id, title, offset, minutes, attendees, color_id in (
            SAMPLE_EVENTS
        ):
            start_time = base_time + timedelta(minutes=offset)
            events.append(
                CalendarEvent(
                    event_id=event_id,
                    title=title,
                    start_time=start_time,
                    end_time=start_time + timedelta(minutes=minutes),
                    type=classify_event(title, attendees),
                    color_id=color_id,
                    color=resolve_color(color_id, title),
                )
            )
        return events

    async def fetch_events_for_day(
        self, access_token: str, day: date
    ) -> List[CalendarEvent]:
        self.fetch_count += 1
        if self._events is not None:
            events = [e for e in self._events if e.start_time.date() == day]
        else:
            events = self._create_sample_events(day)
        logger.debug(
            f"Returning {len(events)} mock events for {day.isoformat()}"
        )
        return events

    async def exchange_auth_code(
        self, code: str, client_id: str, client_secret: str
    ) -> OAuthTokens:
        return OAuthTokens(
            access_token="mock-access-token",
            refresh_token="mock-refresh-token",
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )

    async def refresh_access_token(
        self, refresh_token: str, client_id: str, client_secret: str
    ) -> OAuthTokens:
        return OAuthTokens(
            access_token="mock-refreshed-access-token",
            refresh_token=refresh_token,
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )

"""
Tests for the Google Calendar provider.

The Calendar API client is replaced through ``service_factory``; OAuth flows
are patched at the google-auth boundary.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List
from unittest.mock import MagicMock, patch

import pytest

from dayplan.domain import EventType
from dayplan.repos.google.calendar import (
    GoogleCalendarRepository,
    _parse_wall_clock,
)
from dayplan.tests.factories import DAY, at


class FakeRequest:
    def __init__(self, response: Any):
        self._response = response
        self.uri = "https://www.googleapis.com/calendar/v3/fake"
        self.method = "GET"

    def execute(self) -> Any:
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


class FakeService:
    """Serves pages of event resources in order."""

    def __init__(self, pages: List[Any]):
        self._pages = list(pages)
        self.list_calls: List[Dict[str, Any]] = []

    def events(self) -> "FakeService":
        return self

    def list(self, **kwargs: Any) -> FakeRequest:
        self.list_calls.append(kwargs)
        return FakeRequest(self._pages.pop(0))


def _item(event_id: str, summary: str, start: str, end: str, **extra):
    item = {
        "id": event_id,
        "summary": summary,
        "start": {"dateTime": start},
        "end": {"dateTime": end},
    }
    item.update(extra)
    return item


def _repo(service: FakeService) -> GoogleCalendarRepository:
    return GoogleCalendarRepository(service_factory=lambda creds: service)


class TestParseWallClock:
    def test_offset_is_dropped(self) -> None:
        assert _parse_wall_clock(
            {"dateTime": "2024-07-22T10:00:00-07:00"}
        ) == at(10)

    def test_utc_suffix(self) -> None:
        assert _parse_wall_clock({"dateTime": "2024-07-22T10:00:00Z"}) == at(10)

    def test_all_day_is_midnight(self) -> None:
        assert _parse_wall_clock({"date": "2024-07-22"}) == at(0)

    def test_missing(self) -> None:
        with pytest.raises(ValueError):
            _parse_wall_clock({})


class TestFetchEventsForDay:
    async def test_maps_events(self) -> None:
        service = FakeService(
            [
                {
                    "items": [
                        _item(
                            "e1",
                            "Sprint planning",
                            "2024-07-22T10:00:00+02:00",
                            "2024-07-22T11:00:00+02:00",
                            attendees=[{"email": "a@example.com"}],
                            colorId="9",
                            htmlLink="https://calendar.google.com/e1",
                        ),
                        _item(
                            "e2",
                            "Focus: parser",
                            "2024-07-22T14:00:00+02:00",
                            "2024-07-22T15:00:00+02:00",
                        ),
                    ]
                }
            ]
        )

        events = await _repo(service).fetch_events_for_day("token", DAY)

        assert [e.event_id for e in events] == ["e1", "e2"]
        assert events[0].start_time == at(10)
        assert events[0].type == EventType.MEETING
        assert events[0].color == "#3F51B5"
        assert events[0].html_link == "https://calendar.google.com/e1"
        assert events[1].type == EventType.FOCUS
        assert events[1].color.startswith("#")
        call = service.list_calls[0]
        assert call["calendarId"] == "primary"
        assert call["singleEvents"] is True

    async def test_follows_pages_and_skips_cancelled(self) -> None:
        service = FakeService(
            [
                {
                    "items": [
                        _item(
                            "e1",
                            "One",
                            "2024-07-22T09:00:00Z",
                            "2024-07-22T09:30:00Z",
                        )
                    ],
                    "nextPageToken": "page-2",
                },
                {
                    "items": [
                        _item(
                            "e2",
                            "Two",
                            "2024-07-22T10:00:00Z",
                            "2024-07-22T10:30:00Z",
                            status="cancelled",
                        ),
                        _item(
                            "e3",
                            "",
                            "2024-07-22T11:00:00Z",
                            "2024-07-22T11:30:00Z",
                        ),
                    ]
                },
            ]
        )

        events = await _repo(service).fetch_events_for_day("token", DAY)

        assert [e.event_id for e in events] == ["e1", "e3"]
        assert events[1].title == "(No title)"
        assert service.list_calls[1]["pageToken"] == "page-2"

    async def test_skips_invalid_events(self) -> None:
        service = FakeService(
            [
                {
                    "items": [
                        _item(
                            "bad",
                            "Backwards",
                            "2024-07-22T11:00:00Z",
                            "2024-07-22T10:00:00Z",
                        )
                    ]
                }
            ]
        )

        assert await _repo(service).fetch_events_for_day("token", DAY) == []

    async def test_api_errors_propagate(self) -> None:
        service = FakeService([RuntimeError("quota exceeded")])

        with pytest.raises(RuntimeError):
            await _repo(service).fetch_events_for_day("token", DAY)


class TestTokens:
    async def test_exchange_auth_code(self) -> None:
        credentials = MagicMock(
            token="access",
            refresh_token="refresh",
            expiry=datetime(2030, 1, 1, 12, 0),
        )
        flow = MagicMock(credentials=credentials)

        with patch(
            "dayplan.repos.google.calendar.Flow.from_client_config",
            return_value=flow,
        ) as from_client_config:
            tokens = await GoogleCalendarRepository().exchange_auth_code(
                "code-1", "cid", "secret"
            )

        flow.fetch_token.assert_called_once_with(code="code-1")
        config = from_client_config.call_args.args[0]
        assert config["installed"]["client_id"] == "cid"
        assert tokens.access_token == "access"
        assert tokens.refresh_token == "refresh"
        assert tokens.expires_at == datetime(
            2030, 1, 1, 12, 0, tzinfo=timezone.utc
        )

    async def test_refresh_keeps_refresh_token(self) -> None:
        def fake_refresh(self, request) -> None:
            self.token = "new-access"

        with patch(
            "dayplan.repos.google.calendar.Credentials.refresh",
            autospec=True,
            side_effect=fake_refresh,
        ):
            tokens = await GoogleCalendarRepository().refresh_access_token(
                "refresh-1", "cid", "secret"
            )

        assert tokens.access_token == "new-access"
        assert tokens.refresh_token == "refresh-1"

"""
Google Calendar implementation of the CalendarRepository protocol.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build, Resource

from dayplan.classifier import classify_event, resolve_color
from dayplan.domain import CalendarEvent, OAuthTokens
from dayplan.repositories import CalendarRepository

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
REDIRECT_URI = "http://localhost:8085"
UNTITLED = "(No title)"


def build_calendar_service(credentials: Credentials) -> Resource:
    """Build a Calendar v3 client for the given credentials."""
    return build(
        "calendar", "v3", credentials=credentials, cache_discovery=False
    )


def _parse_wall_clock(time_data: Dict[str, str]) -> datetime:
    """
    Parses Google's start/end structure into a naive wall-clock datetime.

    Timed events keep the wall-clock time as reported by the calendar and
    drop the offset. All-day events start at midnight.
    """
    dt_str = time_data.get("dateTime", time_data.get("date"))
    if dt_str is None:
        raise ValueError("No datetime or date found in time_data")

    if "T" in dt_str:
        if dt_str.endswith("Z"):
            dt_str = dt_str[:-1] + "+00:00"
        return datetime.fromisoformat(dt_str).replace(tzinfo=None)
    return datetime.combine(date.fromisoformat(dt_str), time())


def _google_event_to_domain_event(item: Dict[str, Any]) -> CalendarEvent:
    """Converts a Google Calendar API event resource to a CalendarEvent."""
    title = item.get("summary") or UNTITLED
    attendee_count = len(item.get("attendees", []))
    color_id = item.get("colorId")

    return CalendarEvent(
        event_id=item["id"],
        title=title,
        start_time=_parse_wall_clock(item["start"]),
        end_time=_parse_wall_clock(item["end"]),
        type=classify_event(title, attendee_count),
        color_id=color_id,
        color=resolve_color(color_id, title),
        html_link=item.get("htmlLink"),
    )


def _credentials_to_tokens(
    credentials: Credentials, refresh_token: Optional[str] = None
) -> OAuthTokens:
    expiry = credentials.expiry
    if expiry is None:
        expires_at = datetime.now(timezone.utc) + timedelta(hours=1)
    else:
        # google-auth reports expiry as naive UTC
        expires_at = expiry.replace(tzinfo=timezone.utc)
    return OAuthTokens(
        access_token=credentials.token,
        refresh_token=credentials.refresh_token or refresh_token or "",
        expires_at=expires_at,
    )


class GoogleCalendarRepository(CalendarRepository):
    """
    Calendar provider backed by the Google Calendar API.

    Reads the primary calendar of the authorised user. The service factory
    can be replaced for tests.
    """

    def __init__(
        self,
        calendar_id: str = "primary",
        service_factory: Callable[[Credentials], Resource] = (
            build_calendar_service
        ),
        redirect_uri: str = REDIRECT_URI,
    ):
        self._calendar_id = calendar_id
        self._service_factory = service_factory
        self._redirect_uri = redirect_uri

    async def fetch_events_for_day(
        self, access_token: str, day: date
    ) -> List[CalendarEvent]:
        """Fetch the single-instance events of one local day."""
        service = self._service_factory(Credentials(token=access_token))
        day_start = datetime.combine(day, time()).astimezone()
        day_end = day_start + timedelta(days=1)

        events: List[CalendarEvent] = []
        page_token = None
        while True:
            request = service.events().list(
                calendarId=self._calendar_id,
                timeMin=day_start.isoformat(),
                timeMax=day_end.isoformat(),
                singleEvents=True,
                orderBy="startTime",
                pageToken=page_token,
            )
            events_result = await self._execute_request(request)

            for item in events_result.get("items", []):
                if item.get("status") == "cancelled":
                    continue
                try:
                    events.append(_google_event_to_domain_event(item))
                except Exception as e:
                    logger.warning(
                        f"Skipping invalid calendar event "
                        f"{item.get('id', 'unknown')}: {str(e)}"
                    )

            page_token = events_result.get("nextPageToken")
            if not page_token:
                break

        logger.info(
            "Fetched calendar events",
            extra={
                "calendar_id": self._calendar_id,
                "day": day.isoformat(),
                "event_count": len(events),
            },
        )
        return events

    def _client_config(self, client_id: str, client_secret: str) -> dict:
        return {
            "installed": {
                "client_id": client_id,
                "client_secret": client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
                "redirect_uris": [self._redirect_uri],
            }
        }

    async def exchange_auth_code(
        self, code: str, client_id: str, client_secret: str
    ) -> OAuthTokens:
        flow = Flow.from_client_config(
            self._client_config(client_id, client_secret),
            scopes=SCOPES,
            redirect_uri=self._redirect_uri,
        )
        flow.fetch_token(code=code)
        logger.info("Exchanged authorization code for calendar tokens")
        return _credentials_to_tokens(flow.credentials)

    async def refresh_access_token(
        self, refresh_token: str, client_id: str, client_secret: str
    ) -> OAuthTokens:
        credentials = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=client_id,
            client_secret=client_secret,
            scopes=SCOPES,
        )
        credentials.refresh(Request())
        logger.info("Refreshed calendar access token")
        return _credentials_to_tokens(credentials, refresh_token)

    async def _execute_request(self, request: Any) -> Any:
        """Execute a Google API client request."""
        # The google-api-python-client is not natively async.
        try:
            return request.execute()
        except Exception as e:
            error_type = type(e).__name__
            logger.error(
                f"Google API request failed: {error_type}: {str(e)}",
                extra={
                    "error_type": error_type,
                    "request_uri": getattr(request, "uri", "unknown"),
                    "request_method": getattr(request, "method", "unknown"),
                },
                exc_info=True,
            )
            raise

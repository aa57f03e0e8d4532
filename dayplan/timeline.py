"""
Day-timeline compiler.

Pure functions turning calendar events and working parameters into an
ordered, contiguous, non-overlapping list of time blocks for one work day.
Nothing here performs I/O or keeps state between calls; the caller reruns
the whole pipeline whenever an input changes.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterable, List, Sequence, Union

from dayplan.domain import (
    BlockKind,
    CalendarEvent,
    EventBlock,
    FreeBlock,
    LunchBlock,
    PomodoroBlock,
    RestBlock,
    TimeBlock,
    at_time,
)

logger = logging.getLogger(__name__)

DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "17:00"
DEFAULT_PX_PER_MINUTE = 2


def as_date(day: Union[date, str]) -> date:
    """Accept a date or a YYYY-MM-DD string."""
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    return date.fromisoformat(day)


def _as_datetime(value: Union[datetime, str]) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _overlaps(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    return start_a < end_b and end_a > start_b


def build_timeline(
    events: Iterable[CalendarEvent],
    day: Union[date, str],
    work_start: str = DEFAULT_WORK_START,
    work_end: str = DEFAULT_WORK_END,
) -> List[TimeBlock]:
    """
    Convert events into alternating free and event blocks spanning exactly
    [work_start, work_end) on ``day``.

    Events are clipped to the work day. An event that does not intersect
    the work day, or whose clipped part is already covered by an earlier
    overlapping event, contributes nothing.
    """
    day = as_date(day)
    day_start = at_time(day, work_start)
    day_end = at_time(day, work_end)

    blocks: List[TimeBlock] = []
    cursor = day_start

    for event in sorted(events, key=lambda e: e.start_time):
        clipped_start = max(event.start_time, day_start, cursor)
        clipped_end = min(event.end_time, day_end)
        if clipped_start >= clipped_end:
            continue

        if clipped_start > cursor:
            blocks.append(FreeBlock(start_time=cursor, end_time=clipped_start))

        blocks.append(
            EventBlock(
                start_time=clipped_start, end_time=clipped_end, event=event
            )
        )
        cursor = max(cursor, clipped_end)

    if cursor < day_end:
        blocks.append(FreeBlock(start_time=cursor, end_time=day_end))

    return blocks


def split_pomodoros(
    blocks: Sequence[TimeBlock], pomodoro_duration: int, rest_duration: int
) -> List[TimeBlock]:
    """
    Subdivide free blocks into alternating pomodoro and rest blocks.

    A rest is only emitted when another full pomodoro fits after it, so a
    free region never ends in a rest; whatever is left after the last
    pomodoro stays free. Non-free blocks are passed through as the same
    objects, and a non-positive pomodoro length leaves the input unchanged.
    """
    if pomodoro_duration <= 0:
        return list(blocks)
    pomodoro = timedelta(minutes=pomodoro_duration)
    rest = timedelta(minutes=rest_duration)

    result: List[TimeBlock] = []
    for block in blocks:
        if block.kind != BlockKind.FREE:
            result.append(block)
            continue

        if block.end_time - block.start_time < pomodoro:
            result.append(block)
            continue

        cursor = block.start_time
        while True:
            remaining = block.end_time - cursor
            if remaining < pomodoro:
                if remaining > timedelta(0):
                    result.append(
                        FreeBlock(start_time=cursor, end_time=block.end_time)
                    )
                break

            result.append(
                PomodoroBlock(start_time=cursor, end_time=cursor + pomodoro)
            )
            cursor += pomodoro

            remaining = block.end_time - cursor
            if remaining >= pomodoro + rest:
                # A zero-length rest is not a block; pomodoros just abut.
                if rest > timedelta(0):
                    result.append(
                        RestBlock(start_time=cursor, end_time=cursor + rest)
                    )
                    cursor += rest
                continue

            if remaining > timedelta(0):
                result.append(
                    FreeBlock(start_time=cursor, end_time=block.end_time)
                )
            break

    return result


def insert_lunch(
    blocks: Sequence[TimeBlock], lunch_start: str, lunch_duration: int
) -> List[TimeBlock]:
    """
    Carve a lunch block out of the free block that fully contains it.

    The lunch date is taken from the first block. Lunch is silently skipped
    (the input is returned unchanged) when it would overlap an event block,
    when no single free block contains the whole lunch interval, or when
    its duration is not positive.
    """
    if not blocks or lunch_duration <= 0:
        return list(blocks)

    lunch_begin = at_time(blocks[0].start_time.date(), lunch_start)
    lunch_end = lunch_begin + timedelta(minutes=lunch_duration)

    for block in blocks:
        if block.kind == BlockKind.EVENT and _overlaps(
            lunch_begin, lunch_end, block.start_time, block.end_time
        ):
            logger.debug(
                f"Skipping lunch at {lunch_start}: overlaps event "
                f"'{block.event.title}'"
            )
            return list(blocks)

    result: List[TimeBlock] = []
    inserted = False
    for block in blocks:
        if (
            not inserted
            and block.kind == BlockKind.FREE
            and block.start_time <= lunch_begin
            and lunch_end <= block.end_time
        ):
            if lunch_begin > block.start_time:
                result.append(
                    FreeBlock(start_time=block.start_time, end_time=lunch_begin)
                )
            result.append(LunchBlock(start_time=lunch_begin, end_time=lunch_end))
            if lunch_end < block.end_time:
                result.append(
                    FreeBlock(start_time=lunch_end, end_time=block.end_time)
                )
            inserted = True
        else:
            result.append(block)

    if not inserted:
        logger.debug(
            f"Skipping lunch at {lunch_start}: no single free block "
            f"contains {lunch_begin.isoformat()} - {lunch_end.isoformat()}"
        )
    return result


def lunch_is_clear(
    lunch_start: str,
    events: Iterable[CalendarEvent],
    day: Union[date, str],
    lunch_duration: int = 60,
) -> bool:
    """True when a lunch starting at ``lunch_start`` overlaps no event."""
    lunch_begin = at_time(as_date(day), lunch_start)
    lunch_end = lunch_begin + timedelta(minutes=lunch_duration)

    for event in events:
        if _overlaps(lunch_begin, lunch_end, event.start_time, event.end_time):
            logger.debug(
                f"Lunch at {lunch_start} overlaps event '{event.title}'"
            )
            return False
    return True


def move_lunch(
    current_start: str,
    proposed_start: str,
    events: Iterable[CalendarEvent],
    day: Union[date, str],
    lunch_duration: int = 60,
) -> str:
    """
    Validate a proposed lunch start against the day's events.

    Returns ``proposed_start`` when the new interval is clear of every
    event, otherwise ``current_start``. The block list is not touched;
    callers rerun the pipeline with the returned start.
    """
    if lunch_is_clear(proposed_start, events, day, lunch_duration):
        return proposed_start
    return current_start


def block_height_px(
    start: Union[datetime, str],
    end: Union[datetime, str],
    px_per_minute: float = DEFAULT_PX_PER_MINUTE,
) -> int:
    """Vertical extent of a block for rendering, rounded to whole pixels."""
    minutes = (_as_datetime(end) - _as_datetime(start)).total_seconds() / 60
    # Half-up rounding rather than Python's round-half-even.
    return math.floor(minutes * px_per_minute + 0.5)

"""
Tests for the day-timeline compiler stages.
"""

from datetime import datetime

from dayplan.domain import BlockKind
from dayplan.tests.factories import (
    DAY,
    at,
    event_block,
    free_block,
    lunch_block,
    minimal_calendar_event,
)
from dayplan.timeline import (
    block_height_px,
    build_timeline,
    insert_lunch,
    lunch_is_clear,
    move_lunch,
    split_pomodoros,
)


def spans(blocks):
    """(kind, start HH:MM, end HH:MM) for each block."""
    return [
        (
            b.kind.value,
            b.start_time.strftime("%H:%M"),
            b.end_time.strftime("%H:%M"),
        )
        for b in blocks
    ]


class TestBuildTimeline:
    def test_no_events_is_one_free_block(self) -> None:
        blocks = build_timeline([], DAY)
        assert spans(blocks) == [("free", "09:00", "17:00")]

    def test_single_event_splits_the_day(self) -> None:
        event = minimal_calendar_event(start_time=at(10), end_time=at(10, 30))
        blocks = build_timeline([event], DAY)
        assert spans(blocks) == [
            ("free", "09:00", "10:00"),
            ("event", "10:00", "10:30"),
            ("free", "10:30", "17:00"),
        ]
        assert blocks[1].event is event

    def test_accepts_iso_date_string(self) -> None:
        blocks = build_timeline([], "2024-07-22", "08:00", "12:00")
        assert blocks[0].start_time == datetime(2024, 7, 22, 8, 0)
        assert blocks[0].end_time == datetime(2024, 7, 22, 12, 0)

    def test_events_are_sorted(self) -> None:
        late = minimal_calendar_event("b", start_time=at(15), end_time=at(16))
        early = minimal_calendar_event("a", start_time=at(9), end_time=at(10))
        blocks = build_timeline([late, early], DAY)
        assert spans(blocks) == [
            ("event", "09:00", "10:00"),
            ("free", "10:00", "15:00"),
            ("event", "15:00", "16:00"),
            ("free", "16:00", "17:00"),
        ]

    def test_event_clipped_to_work_day(self) -> None:
        early = minimal_calendar_event("a", start_time=at(8), end_time=at(9, 30))
        late = minimal_calendar_event("b", start_time=at(16, 30), end_time=at(18))
        blocks = build_timeline([early, late], DAY)
        assert spans(blocks) == [
            ("event", "09:00", "09:30"),
            ("free", "09:30", "16:30"),
            ("event", "16:30", "17:00"),
        ]
        # The event itself keeps its real times
        assert blocks[0].event.start_time == at(8)

    def test_back_to_back_events_have_no_gap(self) -> None:
        first = minimal_calendar_event("a", start_time=at(10), end_time=at(11))
        second = minimal_calendar_event("b", start_time=at(11), end_time=at(12))
        blocks = build_timeline([first, second], DAY)
        assert spans(blocks) == [
            ("free", "09:00", "10:00"),
            ("event", "10:00", "11:00"),
            ("event", "11:00", "12:00"),
            ("free", "12:00", "17:00"),
        ]

    def test_event_covering_the_whole_day(self) -> None:
        event = minimal_calendar_event(start_time=at(0), end_time=at(23, 59))
        blocks = build_timeline([event], DAY)
        assert spans(blocks) == [("event", "09:00", "17:00")]

    def test_events_outside_work_day_are_skipped(self) -> None:
        before = minimal_calendar_event("a", start_time=at(7), end_time=at(8))
        ending_at_start = minimal_calendar_event(
            "b", start_time=at(8), end_time=at(9)
        )
        after = minimal_calendar_event("c", start_time=at(17), end_time=at(18))
        blocks = build_timeline([before, ending_at_start, after], DAY)
        assert spans(blocks) == [("free", "09:00", "17:00")]

    def test_overlapping_events_are_trimmed(self) -> None:
        first = minimal_calendar_event("a", start_time=at(10), end_time=at(11))
        overlap = minimal_calendar_event(
            "b", start_time=at(10, 30), end_time=at(11, 30)
        )
        covered = minimal_calendar_event(
            "c", start_time=at(10, 15), end_time=at(10, 45)
        )
        blocks = build_timeline([first, overlap, covered], DAY)
        assert spans(blocks) == [
            ("free", "09:00", "10:00"),
            ("event", "10:00", "11:00"),
            ("event", "11:00", "11:30"),
            ("free", "11:30", "17:00"),
        ]


class TestSplitPomodoros:
    def test_seventy_minutes(self) -> None:
        blocks = split_pomodoros([free_block(at(9), at(10, 10))], 30, 5)
        assert spans(blocks) == [
            ("pomodoro", "09:00", "09:30"),
            ("rest", "09:30", "09:35"),
            ("pomodoro", "09:35", "10:05"),
            ("free", "10:05", "10:10"),
        ]

    def test_exact_fit_has_no_trailing_rest(self) -> None:
        blocks = split_pomodoros([free_block(at(9), at(10, 5))], 30, 5)
        assert spans(blocks) == [
            ("pomodoro", "09:00", "09:30"),
            ("rest", "09:30", "09:35"),
            ("pomodoro", "09:35", "10:05"),
        ]

    def test_no_rest_when_next_pomodoro_does_not_fit(self) -> None:
        blocks = split_pomodoros([free_block(at(9), at(10))], 30, 5)
        assert spans(blocks) == [
            ("pomodoro", "09:00", "09:30"),
            ("free", "09:30", "10:00"),
        ]

    def test_short_free_block_passes_through(self) -> None:
        block = free_block(at(9), at(9, 20))
        assert split_pomodoros([block], 30, 5) == [block]

    def test_zero_rest_pomodoros_abut(self) -> None:
        blocks = split_pomodoros([free_block(at(9), at(10, 30))], 30, 0)
        assert spans(blocks) == [
            ("pomodoro", "09:00", "09:30"),
            ("pomodoro", "09:30", "10:00"),
            ("pomodoro", "10:00", "10:30"),
        ]

    def test_non_free_blocks_are_untouched(self) -> None:
        event = minimal_calendar_event(start_time=at(10), end_time=at(11))
        lunch = lunch_block(at(12), at(13))
        blocks = [
            free_block(at(9), at(10)),
            event_block(event),
            free_block(at(11), at(12)),
            lunch,
        ]
        result = split_pomodoros(blocks, 25, 5)
        assert result[4] is blocks[1]
        assert result[-1] is lunch
        assert [b.kind for b in result] == [
            BlockKind.POMODORO,
            BlockKind.REST,
            BlockKind.POMODORO,
            BlockKind.FREE,
            BlockKind.EVENT,
            BlockKind.POMODORO,
            BlockKind.REST,
            BlockKind.POMODORO,
            BlockKind.FREE,
            BlockKind.LUNCH,
        ]

    def test_non_positive_pomodoro_leaves_blocks_unchanged(self) -> None:
        event = minimal_calendar_event(start_time=at(10), end_time=at(11))
        blocks = [free_block(at(9), at(10)), event_block(event)]
        assert split_pomodoros(blocks, 0, 5) == blocks
        assert split_pomodoros(blocks, -30, 5) == blocks


class TestInsertLunch:
    def test_lunch_in_open_day(self) -> None:
        blocks = insert_lunch([free_block(at(9), at(17))], "12:00", 60)
        assert spans(blocks) == [
            ("free", "09:00", "12:00"),
            ("lunch", "12:00", "13:00"),
            ("free", "13:00", "17:00"),
        ]

    def test_lunch_at_start_of_free_block(self) -> None:
        blocks = insert_lunch([free_block(at(12), at(14))], "12:00", 30)
        assert spans(blocks) == [
            ("lunch", "12:00", "12:30"),
            ("free", "12:30", "14:00"),
        ]

    def test_lunch_filling_free_block_exactly(self) -> None:
        event = minimal_calendar_event(start_time=at(13), end_time=at(14))
        blocks = [free_block(at(12), at(13)), event_block(event)]
        assert spans(insert_lunch(blocks, "12:00", 60)) == [
            ("lunch", "12:00", "13:00"),
            ("event", "13:00", "14:00"),
        ]

    def test_overlapping_event_skips_lunch(self) -> None:
        event = minimal_calendar_event(start_time=at(11), end_time=at(13))
        blocks = build_timeline([event], DAY)
        assert insert_lunch(blocks, "12:00", 60) == blocks

    def test_lunch_touching_event_is_allowed(self) -> None:
        event = minimal_calendar_event(start_time=at(11), end_time=at(12))
        blocks = insert_lunch(build_timeline([event], DAY), "12:00", 60)
        assert ("lunch", "12:00", "13:00") in spans(blocks)

    def test_lunch_straddling_free_blocks_is_skipped(self) -> None:
        blocks = [free_block(at(9), at(12, 30)), free_block(at(12, 30), at(17))]
        assert insert_lunch(blocks, "12:00", 60) == blocks

    def test_lunch_outside_work_day_is_skipped(self) -> None:
        blocks = [free_block(at(9), at(17))]
        assert insert_lunch(blocks, "16:30", 60) == blocks

    def test_empty_input(self) -> None:
        assert insert_lunch([], "12:00", 60) == []

    def test_zero_duration_is_skipped(self) -> None:
        blocks = [free_block(at(9), at(17))]
        assert insert_lunch(blocks, "12:00", 0) == blocks


class TestMoveLunch:
    def test_accepts_free_slot(self) -> None:
        event = minimal_calendar_event(start_time=at(14), end_time=at(15))
        assert move_lunch("12:00", "12:30", [event], DAY) == "12:30"

    def test_rejects_overlap(self) -> None:
        event = minimal_calendar_event(start_time=at(13), end_time=at(14))
        assert move_lunch("12:00", "12:30", [event], DAY) == "12:00"

    def test_adjacent_event_is_not_an_overlap(self) -> None:
        event = minimal_calendar_event(start_time=at(13), end_time=at(14))
        assert move_lunch("11:00", "12:00", [event], DAY) == "12:00"

    def test_respects_duration(self) -> None:
        event = minimal_calendar_event(start_time=at(12, 45), end_time=at(14))
        assert move_lunch("11:00", "12:00", [event], DAY, 30) == "12:00"
        assert move_lunch("11:00", "12:00", [event], DAY, 60) == "11:00"

    def test_current_slot_under_event_is_not_clear(self) -> None:
        event = minimal_calendar_event(start_time=at(12), end_time=at(13))
        assert not lunch_is_clear("12:00", [event], DAY)
        assert move_lunch("12:00", "12:00", [event], DAY) == "12:00"

    def test_clear_slot(self) -> None:
        event = minimal_calendar_event(start_time=at(12), end_time=at(13))
        assert lunch_is_clear("13:00", [event], DAY)
        assert lunch_is_clear("12:00", [], DAY)


class TestBlockHeight:
    def test_default_scale(self) -> None:
        assert block_height_px(at(9), at(9, 30)) == 60
        assert block_height_px(at(9), at(10)) == 120

    def test_custom_scale(self) -> None:
        assert block_height_px(at(9), at(9, 15), 3) == 45

    def test_iso_strings(self) -> None:
        assert block_height_px("2024-07-22T09:00", "2024-07-22T09:45") == 90

    def test_rounds_half_up(self) -> None:
        assert block_height_px(at(9), at(9, 5), 0.5) == 3

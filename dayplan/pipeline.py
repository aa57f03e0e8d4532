"""
The full day-timeline pipeline.

build_timeline -> insert_lunch -> split_pomodoros -> apply_assignments, rerun
in full whenever events, the selected day, the working configuration or the
assignment table change.
"""

from datetime import date
from typing import Mapping, Optional, Sequence, Union

from dayplan.assignments import apply_assignments, assignment_table
from dayplan.domain import (
    BlockKind,
    CalendarEvent,
    DayPlan,
    WorkingConfiguration,
)
from dayplan.timeline import (
    as_date,
    build_timeline,
    insert_lunch,
    split_pomodoros,
)


def compile_day(
    events: Sequence[CalendarEvent],
    day: Union[date, str],
    configuration: WorkingConfiguration,
    assignments: Optional[Mapping[int, str]] = None,
) -> DayPlan:
    """Run the whole pipeline for one day and return the compiled plan."""
    day = as_date(day)
    blocks = build_timeline(
        events, day, configuration.work_start, configuration.work_end
    )
    blocks = insert_lunch(
        blocks, configuration.lunch_start, configuration.lunch_duration
    )
    lunch_inserted = any(b.kind == BlockKind.LUNCH for b in blocks)
    blocks = split_pomodoros(
        blocks, configuration.pomodoro_duration, configuration.rest_duration
    )
    blocks = apply_assignments(blocks, assignments or {})

    return DayPlan(
        day=day,
        configuration=configuration,
        events=list(events),
        blocks=blocks,
        assignments=assignment_table(blocks),
        lunch_inserted=lunch_inserted,
    )

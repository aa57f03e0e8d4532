"""
Task assignment rebinding for pomodoro blocks.

Assignments are addressed by pomodoro ordinal: the 0-based position of a
block among the pomodoro blocks of a day, left to right. Ordinals are
re-derived from the freshly compiled block list on every run because
upstream changes (new events, different durations) shift them.
"""

import logging
from typing import List, Mapping, Sequence

from dayplan.domain import AssignmentTable, BlockKind, TimeBlock

logger = logging.getLogger(__name__)


def pomodoro_positions(blocks: Sequence[TimeBlock]) -> List[int]:
    """Indices into ``blocks`` of every pomodoro block, in order."""
    return [i for i, b in enumerate(blocks) if b.kind == BlockKind.POMODORO]


def swap_assignments(
    blocks: Sequence[TimeBlock], from_index: int, to_index: int
) -> List[TimeBlock]:
    """
    Exchange the assigned tasks of two pomodoro blocks, addressed by
    pomodoro ordinal.

    Timing and every other block are untouched. Out-of-range ordinals make
    this a no-op.
    """
    positions = pomodoro_positions(blocks)
    if not (0 <= from_index < len(positions) and 0 <= to_index < len(positions)):
        logger.debug(
            f"Ignoring assignment swap {from_index} <-> {to_index}: "
            f"only {len(positions)} pomodoro blocks"
        )
        return list(blocks)

    result = list(blocks)
    source = result[positions[from_index]]
    target = result[positions[to_index]]
    result[positions[from_index]] = source.model_copy(
        update={"assigned_task": target.assigned_task}
    )
    result[positions[to_index]] = target.model_copy(
        update={"assigned_task": source.assigned_task}
    )
    return result


def apply_assignments(
    blocks: Sequence[TimeBlock], assignments: Mapping[int, str]
) -> List[TimeBlock]:
    """Bind task titles onto pomodoro blocks; unknown ordinals are ignored."""
    result = list(blocks)
    for ordinal, position in enumerate(pomodoro_positions(blocks)):
        title = assignments.get(ordinal)
        if title is not None:
            result[position] = result[position].model_copy(
                update={"assigned_task": title}
            )
    return result


def assignment_table(blocks: Sequence[TimeBlock]) -> AssignmentTable:
    """Re-derive the ordinal -> task table from a compiled block list."""
    table: AssignmentTable = {}
    for ordinal, position in enumerate(pomodoro_positions(blocks)):
        task = blocks[position].assigned_task
        if task is not None:
            table[ordinal] = task
    return table


def prune_assignments(
    assignments: Mapping[int, str], pomodoro_count: int
) -> AssignmentTable:
    """Drop ordinals that no longer exist after the timeline changed."""
    pruned = {
        ordinal: title
        for ordinal, title in assignments.items()
        if 0 <= ordinal < pomodoro_count
    }
    if len(pruned) != len(assignments):
        logger.info(
            "Dropped stale task assignments",
            extra={
                "dropped": sorted(set(assignments) - set(pruned)),
                "pomodoro_count": pomodoro_count,
            },
        )
    return pruned

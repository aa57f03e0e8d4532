from dayplan.assignments import (
    apply_assignments,
    assignment_table,
    pomodoro_positions,
    prune_assignments,
    swap_assignments,
)
from dayplan.tests.factories import (
    at,
    free_block,
    lunch_block,
    pomodoro_block,
    rest_block,
)


def _blocks():
    return [
        pomodoro_block(at(9), at(9, 30), "Write report"),
        rest_block(at(9, 30), at(9, 35)),
        pomodoro_block(at(9, 35), at(10, 5)),
        free_block(at(10, 5), at(12)),
        lunch_block(at(12), at(13)),
        pomodoro_block(at(13), at(13, 30), "Review PR"),
    ]


def test_pomodoro_positions() -> None:
    assert pomodoro_positions(_blocks()) == [0, 2, 5]


class TestSwapAssignments:
    def test_swaps_tasks_by_ordinal(self) -> None:
        blocks = _blocks()
        result = swap_assignments(blocks, 0, 2)
        assert result[0].assigned_task == "Review PR"
        assert result[5].assigned_task == "Write report"
        # Timing is untouched
        assert result[0].start_time == blocks[0].start_time
        assert result[5].end_time == blocks[5].end_time

    def test_swap_with_empty_pomodoro_moves_task(self) -> None:
        result = swap_assignments(_blocks(), 0, 1)
        assert result[0].assigned_task is None
        assert result[2].assigned_task == "Write report"

    def test_other_blocks_are_the_same_objects(self) -> None:
        blocks = _blocks()
        result = swap_assignments(blocks, 0, 2)
        for i in (1, 2, 3, 4):
            assert result[i] is blocks[i]

    def test_out_of_range_is_noop(self) -> None:
        blocks = _blocks()
        assert swap_assignments(blocks, 0, 3) == blocks
        assert swap_assignments(blocks, -1, 0) == blocks

    def test_does_not_mutate_input(self) -> None:
        blocks = _blocks()
        swap_assignments(blocks, 0, 2)
        assert blocks[0].assigned_task == "Write report"

    def test_swap_twice_restores(self) -> None:
        blocks = _blocks()
        assert swap_assignments(swap_assignments(blocks, 0, 2), 0, 2) == blocks


class TestAssignmentTable:
    def test_apply_binds_by_ordinal(self) -> None:
        blocks = [
            pomodoro_block(at(9), at(9, 30)),
            rest_block(at(9, 30), at(9, 35)),
            pomodoro_block(at(9, 35), at(10, 5)),
        ]
        result = apply_assignments(blocks, {1: "Fix test", 7: "Ghost"})
        assert result[0].assigned_task is None
        assert result[2].assigned_task == "Fix test"

    def test_table_round_trip(self) -> None:
        assert assignment_table(_blocks()) == {0: "Write report", 2: "Review PR"}

    def test_prune_drops_stale_ordinals(self) -> None:
        assert prune_assignments({0: "a", 2: "b", 5: "c"}, 3) == {0: "a", 2: "b"}

    def test_prune_keeps_everything_in_range(self) -> None:
        table = {0: "a", 1: "b"}
        assert prune_assignments(table, 2) == table

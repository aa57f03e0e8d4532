"""
In-memory implementation of the AssignmentRepository protocol.
"""

from datetime import date
from typing import Dict

from dayplan.domain import AssignmentTable
from dayplan.repositories import AssignmentRepository


class MemoryAssignmentRepository(AssignmentRepository):
    """Per-day assignment tables kept for the lifetime of the process."""

    def __init__(self) -> None:
        self._tables: Dict[date, AssignmentTable] = {}

    async def get_assignments(self, day: date) -> AssignmentTable:
        return dict(self._tables.get(day, {}))

    async def save_assignments(
        self, day: date, assignments: AssignmentTable
    ) -> None:
        self._tables[day] = dict(assignments)

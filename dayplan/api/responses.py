"""
Pydantic models for API responses.
These define the contract between the API and external clients.
"""

from datetime import date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel

from dayplan.domain import (
    BlockKind,
    CalendarEvent,
    DayPlan,
    TimeBlock,
    WorkingConfiguration,
)
from dayplan.timeline import block_height_px


class HealthCheckResponse(BaseModel):
    status: str
    version: str


class BlockResponse(BaseModel):
    """A compiled block with its rendering hints."""

    kind: BlockKind
    start_time: datetime
    end_time: datetime
    height_px: int
    draggable: bool
    event: Optional[CalendarEvent] = None
    assigned_task: Optional[str] = None
    pomodoro_index: Optional[int] = None

    @classmethod
    def from_block(
        cls, block: TimeBlock, pomodoro_index: Optional[int]
    ) -> "BlockResponse":
        assigned_task = getattr(block, "assigned_task", None)
        # Only lunch and task-bearing pomodoros can be dragged in the UI
        draggable = block.kind == BlockKind.LUNCH or (
            block.kind == BlockKind.POMODORO and assigned_task is not None
        )
        return cls(
            kind=block.kind,
            start_time=block.start_time,
            end_time=block.end_time,
            height_px=block_height_px(block.start_time, block.end_time),
            draggable=draggable,
            event=getattr(block, "event", None),
            assigned_task=assigned_task,
            pomodoro_index=pomodoro_index,
        )


class DayPlanResponse(BaseModel):
    """Response for a compiled day"""

    day: date
    configuration: WorkingConfiguration
    blocks: List[BlockResponse]
    assignments: Dict[int, str]
    lunch_inserted: bool

    @classmethod
    def from_plan(cls, plan: DayPlan) -> "DayPlanResponse":
        blocks = []
        ordinal = 0
        for block in plan.blocks:
            if block.kind == BlockKind.POMODORO:
                blocks.append(BlockResponse.from_block(block, ordinal))
                ordinal += 1
            else:
                blocks.append(BlockResponse.from_block(block, None))
        return cls(
            day=plan.day,
            configuration=plan.configuration,
            blocks=blocks,
            assignments=plan.assignments,
            lunch_inserted=plan.lunch_inserted,
        )


class LunchMoveResponse(BaseModel):
    accepted: bool
    lunch_start: str


class CalendarConnectionResponse(BaseModel):
    connected: bool

"""
Pydantic models for API requests.
These define the contract between the API and external clients.
"""

from typing import Optional
from pydantic import BaseModel, Field


class MoveLunchRequest(BaseModel):
    """Request to move the lunch block to a new start time."""

    lunch_start: str = Field(..., description="Proposed start, HH:MM")


class AssignTaskRequest(BaseModel):
    """Assign a task title to a pomodoro; null clears the assignment."""

    task_title: Optional[str] = None


class SwapAssignmentsRequest(BaseModel):
    from_index: int
    to_index: int


class ConnectCalendarRequest(BaseModel):
    code: str = Field(..., min_length=1)

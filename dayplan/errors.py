"""
Exceptions raised around the day-timeline compiler.

The compiler itself never raises for scheduling conflicts; these cover the
collaborators and configuration that feed it.
"""


class DayPlanError(Exception):
    """Base class for day planning errors"""

    pass


class CalendarSyncError(DayPlanError):
    """Raised when fetching events or refreshing provider tokens fails"""

    pass


class TaskNotFoundError(DayPlanError):
    """Raised when a task id does not exist in the task store"""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class ConfigurationError(DayPlanError):
    """Raised when a stored setting cannot be parsed"""

    pass

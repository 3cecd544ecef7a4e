"""Application services."""

from .timesheets import TimesheetService, get_timesheet_service, reset_timesheet_state

__all__ = [
    "TimesheetService",
    "get_timesheet_service",
    "reset_timesheet_state",
]

"""Infrastructure layer exports."""

from .timesheets import InMemoryTimesheetRepository, SettingsRepository, ShiftStore

__all__ = [
    "InMemoryTimesheetRepository",
    "SettingsRepository",
    "ShiftStore",
]

"""Domain layer definitions."""

from .timesheets import UserLedger

__all__ = [
    "UserLedger",
]

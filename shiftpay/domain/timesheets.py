"""Domain entities for per-user timesheets."""
from __future__ import annotations

from dataclasses import dataclass, field

from shiftpay.core.schema import ShiftRecord, UserSettings


@dataclass(slots=True)
class UserLedger:
    """Everything held in memory for a single user."""

    user_id: str
    shifts: dict[str, ShiftRecord] = field(default_factory=dict)
    settings: UserSettings | None = None

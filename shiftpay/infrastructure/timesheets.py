"""Infrastructure layer for shift and settings persistence."""
from __future__ import annotations

from typing import Protocol

from shiftpay.core.schema import ShiftRecord, UserSettings
from shiftpay.domain import UserLedger


class ShiftStore(Protocol):
    """Key-value contract for shifts keyed by ``(user_id, date)``."""

    def put(self, user_id: str, record: ShiftRecord) -> None: ...

    def get_by_date(self, user_id: str, date: str) -> ShiftRecord | None: ...

    def delete(self, user_id: str, shift_id: str) -> ShiftRecord: ...

    def list_shifts(self, user_id: str) -> list[ShiftRecord]: ...

    def clear(self, user_id: str) -> None: ...

    def reset(self) -> None: ...


class SettingsRepository(Protocol):
    """Persistence contract for per-user settings."""

    def load(self, user_id: str) -> UserSettings: ...

    def save(self, user_id: str, settings: UserSettings) -> None: ...

    def reset(self) -> None: ...


class InMemoryTimesheetRepository:
    """Simple in-memory store implementing both contracts, for tests and local runs."""

    def __init__(self) -> None:
        self._ledgers: dict[str, UserLedger] = {}

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _ensure_ledger(self, user_id: str) -> UserLedger:
        ledger = self._ledgers.get(user_id)
        if ledger is None:
            ledger = UserLedger(user_id=user_id)
            self._ledgers[user_id] = ledger
        return ledger

    # ------------------------------------------------------------------
    # shifts
    # ------------------------------------------------------------------
    def put(self, user_id: str, record: ShiftRecord) -> None:
        ledger = self._ensure_ledger(user_id)
        ledger.shifts[record.date] = record

    def get_by_date(self, user_id: str, date: str) -> ShiftRecord | None:
        ledger = self._ledgers.get(user_id)
        return ledger.shifts.get(date) if ledger else None

    def delete(self, user_id: str, shift_id: str) -> ShiftRecord:
        ledger = self._ledgers.get(user_id)
        if ledger is None:
            raise KeyError(shift_id)
        for date, record in ledger.shifts.items():
            if record.id == shift_id:
                return ledger.shifts.pop(date)
        raise KeyError(shift_id)

    def list_shifts(self, user_id: str) -> list[ShiftRecord]:
        ledger = self._ledgers.get(user_id)
        if ledger is None:
            return []
        return [ledger.shifts[date] for date in sorted(ledger.shifts)]

    def clear(self, user_id: str) -> None:
        ledger = self._ledgers.get(user_id)
        if ledger is not None:
            ledger.shifts.clear()

    # ------------------------------------------------------------------
    # settings
    # ------------------------------------------------------------------
    def load(self, user_id: str) -> UserSettings:
        ledger = self._ledgers.get(user_id)
        if ledger is None or ledger.settings is None:
            return UserSettings()
        return ledger.settings.model_copy(deep=True)

    def save(self, user_id: str, settings: UserSettings) -> None:
        ledger = self._ensure_ledger(user_id)
        ledger.settings = settings.model_copy(deep=True)

    def reset(self) -> None:
        self._ledgers.clear()

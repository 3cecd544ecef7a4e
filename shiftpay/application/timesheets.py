"""Application service layer for timesheet use cases."""
from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from pathlib import Path

from shiftpay.core.cycles import grand_total, month_totals, pay_cycles_for_month, pay_per_cycle
from shiftpay.core.pay import build_shift_record
from shiftpay.core.schema import PayCycle, ShiftInput, ShiftRecord, UserSettings
from shiftpay.core.validation import validate_overtime_rule, validate_pay_cycle_config
from shiftpay.exporters.timesheet_sheet import export_timesheet
from shiftpay.extractors import timesheet_sheet as timesheet_parser
from shiftpay.infrastructure import InMemoryTimesheetRepository, SettingsRepository, ShiftStore

logger = logging.getLogger(__name__)


class TimesheetService:
    """Coordinates shift entry, settings and reporting for each user."""

    def __init__(self, shifts: ShiftStore, settings: SettingsRepository) -> None:
        self._shifts = shifts
        self._settings = settings

    # ------------------------------------------------------------------
    # settings
    # ------------------------------------------------------------------
    def load_settings(self, user_id: str) -> UserSettings:
        return self._settings.load(user_id)

    def save_settings(self, user_id: str, settings: UserSettings) -> UserSettings:
        validate_overtime_rule(settings.overtime_rule)
        validate_pay_cycle_config(settings.pay_cycle)
        self._settings.save(user_id, settings)
        logger.info("saved settings for %s", user_id)
        return settings

    # ------------------------------------------------------------------
    # shifts
    # ------------------------------------------------------------------
    def upsert_shift(self, user_id: str, shift: ShiftInput) -> ShiftRecord:
        """Create the shift for ``shift.date`` or replace the existing one in place."""

        existing = self._shifts.get_by_date(user_id, shift.date)
        record_id = existing.id if existing else uuid.uuid4().hex
        record = build_shift_record(shift, self.load_settings(user_id), record_id=record_id)
        self._shifts.put(user_id, record)
        logger.info("%s shift %s for %s", "updated" if existing else "added", shift.date, user_id)
        return record

    def delete_shift(self, user_id: str, shift_id: str) -> ShiftRecord:
        return self._shifts.delete(user_id, shift_id)

    def list_shifts(self, user_id: str, month: str | None = None) -> list[ShiftRecord]:
        records = self._shifts.list_shifts(user_id)
        if month:
            records = [record for record in records if record.month_key == month]
        return records

    # ------------------------------------------------------------------
    # spreadsheet exchange
    # ------------------------------------------------------------------
    def import_timesheet(
        self, user_id: str, path: Path, *, replace: bool = True
    ) -> timesheet_parser.TimesheetParseResult:
        """Load shifts from ``path`` into the user's store.

        Pay is recomputed with the user's saved overtime rule.  Rows that share
        a date collapse onto the last one in file order.
        """

        settings = self.load_settings(user_id)
        result = timesheet_parser.parse(path, overtime_rule=settings.overtime_rule)
        if replace:
            self._shifts.clear(user_id)
        for record in result.records:
            self._shifts.put(user_id, record)
        logger.info(
            "imported %d shifts for %s from %s (%d skipped)",
            len(result.records),
            user_id,
            path.name,
            len(result.skipped),
        )
        return result

    def export_timesheet(self, user_id: str, path: Path, month: str | None = None) -> Path:
        return export_timesheet(path, self.list_shifts(user_id, month))

    # ------------------------------------------------------------------
    # reporting
    # ------------------------------------------------------------------
    def month_totals(self, user_id: str) -> dict[str, Decimal]:
        return month_totals(self.list_shifts(user_id))

    def grand_total(self, user_id: str) -> Decimal:
        return grand_total(self.list_shifts(user_id))

    def cycle_breakdown(self, user_id: str, year: int, month: int) -> list[PayCycle]:
        settings = self.load_settings(user_id)
        cycles = pay_cycles_for_month(settings.pay_cycle, year, month)
        return pay_per_cycle(self.list_shifts(user_id), cycles)

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._shifts.reset()
        if self._settings is not self._shifts:
            self._settings.reset()


_repository = InMemoryTimesheetRepository()
_service = TimesheetService(_repository, _repository)


def get_timesheet_service() -> TimesheetService:
    """Return the singleton timesheet service for the process."""

    return _service


def reset_timesheet_state() -> None:
    """Reset the in-memory store (used in tests)."""

    _service.reset()

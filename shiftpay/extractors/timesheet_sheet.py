"""Parser for the 工時表 exchange spreadsheet.

The workbook layout mirrors :mod:`shiftpay.exporters.timesheet_sheet`: the
first sheet holds one header row followed by one row per shift.  Derived
fields that the file does not carry (holiday type, overtime pay) are rebuilt
here, so the result is always a complete set of :class:`ShiftRecord` values.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError as SchemaValidationError

from shiftpay.core.defaults import HOLIDAY_MARKERS
from shiftpay.core.pay import DEFAULT_OVERTIME_RULE, compute_pay, compute_worked_hours, quantize_hours
from shiftpay.core.schema import TIMESHEET_COLUMNS, OvertimeRule, ShiftRecord
from shiftpay.core.validation import ValidationError

logger = logging.getLogger(__name__)

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


@dataclass
class SkippedRow:
    row: int
    reason: str


@dataclass
class TimesheetParseResult:
    records: list[ShiftRecord]
    skipped: list[SkippedRow] = field(default_factory=list)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _note_text(value: Any) -> str:
    # Notes are free text and come back exactly as written.
    if isinstance(value, str):
        return value
    if _is_blank(value):
        return ""
    return str(value)


def _normalise_date(value: Any) -> str:
    if _is_blank(value):
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    return str(value).strip()


def _normalise_time(value: Any) -> str:
    if _is_blank(value):
        return ""
    if isinstance(value, (datetime, time)):
        return value.strftime("%H:%M")
    text = str(value).strip()
    match = _CLOCK_RE.match(text)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    return text


def _safe_decimal(value: Any) -> Decimal | None:
    if _is_blank(value):
        return None
    try:
        decimal_value = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not decimal_value.is_finite():
        return None
    return decimal_value


def _safe_int(value: Any, default: int = 0) -> int:
    decimal_value = _safe_decimal(value)
    if decimal_value is None:
        return default
    return int(decimal_value)


def infer_holiday(note: str) -> str:
    if HOLIDAY_MARKERS["typhoon"] in note:
        return "typhoon"
    if HOLIDAY_MARKERS["national"] in note:
        return "national"
    return "none"


def _read_frame(path: Path, sheet_name: str | int | None) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        dataframe = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    else:
        dataframe = pd.read_excel(
            path,
            sheet_name=sheet_name if sheet_name is not None else 0,
            dtype=object,
            keep_default_na=False,
        )
    renamed = {col: str(col).strip() for col in dataframe.columns}
    return dataframe.rename(columns=renamed)


def _build_record(
    index: int,
    row: dict[str, Any],
    overtime_rule: OvertimeRule,
) -> ShiftRecord | str:
    """Return a record for ``row`` or the reason it was skipped."""

    columns = TIMESHEET_COLUMNS
    shift_date = _normalise_date(row.get(columns["date"]))
    start_time = _normalise_time(row.get(columns["start_time"]))
    end_time = _normalise_time(row.get(columns["end_time"]))
    if not shift_date or not start_time or not end_time:
        return "missing date or time"

    break_minutes = _safe_int(row.get(columns["break_minutes"]))
    note = _note_text(row.get(columns["note"]))
    wage = _safe_decimal(row.get(columns["wage"])) or Decimal("0")

    try:
        hours = _safe_decimal(row.get(columns["hours"]))
        if hours is None:
            hours = compute_worked_hours(start_time, end_time, break_minutes)
        else:
            hours = quantize_hours(hours)
        holiday = infer_holiday(note)
        pay = compute_pay(hours, wage, holiday, overtime_rule)
        return ShiftRecord(
            id=f"{index}-{shift_date}",
            date=shift_date,
            start_time=start_time,
            end_time=end_time,
            break_minutes=break_minutes,
            hours=hours,
            wage=wage,
            holiday=holiday,
            overtime_pay=pay.overtime_pay,
            total_pay=pay.total_pay,
            note=note,
        )
    except ValidationError as exc:
        return str(exc)
    except SchemaValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        return f"{location}: {error['msg']}"


def parse(
    path: Path,
    *,
    overtime_rule: OvertimeRule = DEFAULT_OVERTIME_RULE,
    sheet_name: str | int | None = None,
) -> TimesheetParseResult:
    """Parse a timesheet spreadsheet into shift records.

    Rows lacking a date, start time or end time are dropped and reported in
    ``skipped``.  Pay is recomputed with ``overtime_rule``.
    """

    dataframe = _read_frame(path, sheet_name)
    result = TimesheetParseResult(records=[])
    for index, row in enumerate(dataframe.to_dict(orient="records")):
        outcome = _build_record(index, row, overtime_rule)
        if isinstance(outcome, ShiftRecord):
            result.records.append(outcome)
            continue
        # Spreadsheet row numbers are 1-based and the header occupies row 1.
        result.skipped.append(SkippedRow(row=index + 2, reason=outcome))
        logger.debug("skipped row %d of %s: %s", index + 2, path.name, outcome)

    logger.info(
        "parsed %s: %d shifts, %d rows skipped",
        path.name,
        len(result.records),
        len(result.skipped),
    )
    return result

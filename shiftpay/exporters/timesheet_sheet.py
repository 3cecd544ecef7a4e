from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from shiftpay.core.schema import TIMESHEET_HEADER, ShiftRecord

logger = logging.getLogger(__name__)

SHEET_NAME = "timesheet"


def _to_row(record: ShiftRecord) -> list:
    return [
        record.date,
        record.start_time,
        record.end_time,
        record.break_minutes,
        float(record.hours),
        float(record.wage),
        float(record.total_pay),
        record.note or "",
    ]


def export_timesheet(path: Path, records: Iterable[ShiftRecord]) -> Path:
    """Write ``records`` to ``path`` as ``.xlsx`` (default) or ``.csv``.

    Overtime pay, holiday type and record ids are not part of the format.
    """

    rows = [_to_row(record) for record in records]
    df = pd.DataFrame(rows, columns=TIMESHEET_HEADER)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".csv":
        df.to_csv(path, index=False, encoding="utf-8-sig")
    else:
        df.to_excel(path, index=False, sheet_name=SHEET_NAME, engine="openpyxl")
    logger.info("exported %d shifts to %s", len(rows), path)
    return path

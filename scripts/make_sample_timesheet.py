#!/usr/bin/env python
from __future__ import annotations

import argparse
import calendar
from pathlib import Path

from openpyxl import Workbook

HEADER = ["日期", "上班時間", "下班時間", "休息時間", "工作時數", "時薪", "工資", "備註"]

# (上班, 下班, 休息分鐘, 備註) cycled over the weekdays of the month
PATTERNS = [
    ("09:00", "18:00", 60, ""),
    ("09:00", "21:00", 60, "加班"),
    ("22:00", "06:00", 30, "夜班"),
    ("10:00", "16:00", 0, "颱風假出勤"),
    ("09:00", "18:00", 60, "國定假日"),
]


def build_rows(month: str, wage: int) -> list[list]:
    year, month_number = (int(part) for part in month.split("-"))
    last_day = calendar.monthrange(year, month_number)[1]
    rows: list[list] = []
    weekday_count = 0
    for day in range(1, last_day + 1):
        if calendar.weekday(year, month_number, day) >= 5:
            continue
        start, end, break_minutes, note = PATTERNS[weekday_count % len(PATTERNS)]
        weekday_count += 1
        # 工作時數 / 工資 left blank so importers recompute them
        rows.append([f"{year:04d}-{month_number:02d}-{day:02d}", start, end, break_minutes, None, wage, None, note])
    return rows


def main(argv: list[str] | None = None) -> Path:
    parser = argparse.ArgumentParser(description="產生工時表範例活頁簿")
    parser.add_argument("--month", required=True, help="月份，格式 YYYY-MM")
    parser.add_argument("--output", required=True, help="輸出檔案路徑 (.xlsx)")
    parser.add_argument("--wage", type=int, default=190, help="時薪")
    args = parser.parse_args(argv)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "timesheet"
    sheet.append(HEADER)
    for row in build_rows(args.month, args.wage):
        sheet.append(row)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    print(f"工時表範例已產生: {output}")
    return output


if __name__ == "__main__":
    main()

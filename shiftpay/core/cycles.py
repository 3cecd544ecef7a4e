"""Monthly and pay-cycle aggregation over computed shift records."""

from __future__ import annotations

import calendar
from decimal import Decimal
from typing import Iterable

from shiftpay.core.defaults import DEFAULT_PAYDAY
from shiftpay.core.schema import PayCycle, PayCycleConfig, ShiftRecord
from shiftpay.core.validation import validate_pay_cycle_config


def month_totals(records: Iterable[ShiftRecord]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    for record in records:
        key = record.month_key
        totals[key] = totals.get(key, Decimal("0")) + record.total_pay
    return dict(sorted(totals.items()))


def grand_total(records: Iterable[ShiftRecord]) -> Decimal:
    return sum((record.total_pay for record in records), Decimal("0"))


def records_for_month(records: Iterable[ShiftRecord], year: int, month: int) -> list[ShiftRecord]:
    prefix = f"{year:04d}-{month:02d}"
    return [record for record in records if record.month_key == prefix]


def _split_points(cycles: int, last_day: int) -> list[int]:
    """Return the last day of every cycle except the final one."""

    if cycles == 1:
        return []
    if cycles == 2:
        return [15]
    return [step * last_day // cycles for step in range(1, cycles)]


def pay_cycles_for_month(config: PayCycleConfig, year: int, month: int) -> list[PayCycle]:
    validate_pay_cycle_config(config)
    last_day = calendar.monthrange(year, month)[1]
    ends = _split_points(config.cycles_per_month, last_day) + [last_day]

    cycles: list[PayCycle] = []
    start = 1
    for index, end in enumerate(ends):
        payday = config.paydays[index] if index < len(config.paydays) else DEFAULT_PAYDAY
        cycles.append(
            PayCycle(index=index, year=year, month=month, start_day=start, end_day=end, payday=payday)
        )
        start = end + 1
    return cycles


def pay_per_cycle(records: Iterable[ShiftRecord], cycles: Iterable[PayCycle]) -> list[PayCycle]:
    records = list(records)
    results: list[PayCycle] = []
    for cycle in cycles:
        amount = Decimal("0")
        for record in records_for_month(records, cycle.year, cycle.month):
            day = int(record.date[8:10])
            if cycle.start_day <= day <= cycle.end_day:
                amount += record.total_pay
        results.append(cycle.model_copy(update={"amount": amount}))
    return results

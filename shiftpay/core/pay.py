"""Hour and wage calculation for individual shifts.

All functions are pure: identical inputs always produce identical outputs and
nothing here reads the clock or touches storage.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from shiftpay.core.schema import OvertimeRule, PayBreakdown, ShiftInput, ShiftRecord, UserSettings
from shiftpay.core.validation import validate_non_negative, validate_time_of_day

DEFAULT_OVERTIME_RULE = OvertimeRule.default()

MINUTES_PER_DAY = 24 * 60
BAND_HOURS = Decimal("2")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def quantize_hours(value: Decimal) -> Decimal:
    return _quantize(value)


def parse_time_of_day(value: str) -> int:
    """Return minutes since midnight for a strict ``HH:mm`` string."""

    validate_time_of_day(value)
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def compute_worked_hours(start_time: str, end_time: str, break_minutes: int) -> Decimal:
    start = parse_time_of_day(start_time)
    end = parse_time_of_day(end_time)
    # An end before the start means the shift ran past midnight.
    raw_minutes = end - start
    if raw_minutes < 0:
        raw_minutes += MINUTES_PER_DAY
    minutes = max(raw_minutes - int(break_minutes), 0)
    return quantize_hours(Decimal(minutes) / Decimal(60))


def compute_pay(
    hours: Decimal,
    wage: Decimal,
    holiday: str = "none",
    overtime_rule: OvertimeRule = DEFAULT_OVERTIME_RULE,
    *,
    reject_negative: bool = False,
) -> PayBreakdown:
    hours = Decimal(str(hours))
    wage = Decimal(str(wage))
    if reject_negative:
        validate_non_negative(hours=hours, wage=wage)

    if holiday != "none":
        regular = wage * hours
        total = regular * 2
        return PayBreakdown(
            regular_pay=_quantize(regular),
            overtime_pay=_quantize(total - regular),
            total_pay=_quantize(total),
        )

    threshold = overtime_rule.threshold_hours
    base_hours = min(hours, threshold)
    remaining = max(hours - threshold, Decimal("0"))

    overtime = Decimal("0")
    for rate in (overtime_rule.level1_rate, overtime_rule.level2_rate):
        if remaining <= 0:
            break
        band = min(remaining, BAND_HOURS)
        overtime += band * wage * rate
        remaining -= band
    if remaining > 0:
        overtime += remaining * wage * overtime_rule.level3_rate

    regular = wage * base_hours
    return PayBreakdown(
        regular_pay=_quantize(regular),
        overtime_pay=_quantize(overtime),
        total_pay=_quantize(regular + overtime),
    )


def build_shift_record(shift: ShiftInput, settings: UserSettings, *, record_id: str) -> ShiftRecord:
    """Derive hours and pay for ``shift`` using the caller's settings snapshot."""

    wage = shift.wage if shift.wage is not None else settings.base_wage
    hours = compute_worked_hours(shift.start_time, shift.end_time, shift.break_minutes)
    pay = compute_pay(hours, wage, shift.holiday, settings.overtime_rule)
    return ShiftRecord(
        id=record_id,
        date=shift.date,
        start_time=shift.start_time,
        end_time=shift.end_time,
        break_minutes=shift.break_minutes,
        hours=hours,
        wage=wage,
        holiday=shift.holiday,
        overtime_pay=pay.overtime_pay,
        total_pay=pay.total_pay,
        note=shift.note,
    )

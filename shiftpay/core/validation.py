from __future__ import annotations

import re
from decimal import Decimal

from shiftpay.core.schema import TIME_PATTERN, OvertimeRule, PayCycleConfig


class ValidationError(Exception):
    """Raised when domain validation fails."""


class TimeFormatError(ValidationError):
    """Raised when a time of day is not a 24-hour ``HH:mm`` string."""


_TIME_RE = re.compile(TIME_PATTERN)


def validate_time_of_day(value: str) -> str:
    if not isinstance(value, str) or not _TIME_RE.fullmatch(value):
        raise TimeFormatError(f"invalid time of day: {value!r}")
    return value


def validate_overtime_rule(rule: OvertimeRule) -> None:
    if rule.threshold_hours <= 0:
        raise ValidationError("threshold_hours must be positive")
    for name in ("level1_rate", "level2_rate", "level3_rate"):
        if getattr(rule, name) < Decimal("1"):
            raise ValidationError(f"{name} must be at least 1")


def validate_pay_cycle_config(config: PayCycleConfig) -> None:
    if config.cycles_per_month not in {1, 2, 3, 4}:
        raise ValidationError("cycles_per_month must be between 1 and 4")
    if len(config.paydays) > config.cycles_per_month:
        raise ValidationError("paydays cannot outnumber cycles_per_month")
    if any(day < 1 or day > 31 for day in config.paydays):
        raise ValidationError("paydays must be calendar days (1-31)")


def validate_non_negative(**values: Decimal) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValidationError(f"{name} cannot be negative")

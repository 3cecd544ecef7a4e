from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from pydantic import BaseModel, Field, computed_field, conint, constr, model_validator

from shiftpay.core.defaults import DEFAULTS

TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

HolidayType = Literal["none", "typhoon", "national"]

# Column order of the spreadsheet exchange format.
TIMESHEET_COLUMNS: dict[str, str] = {
    "date": "日期",
    "start_time": "上班時間",
    "end_time": "下班時間",
    "break_minutes": "休息時間",
    "hours": "工作時數",
    "wage": "時薪",
    "total_pay": "工資",
    "note": "備註",
}
TIMESHEET_HEADER: list[str] = list(TIMESHEET_COLUMNS.values())


class OvertimeRule(BaseModel):
    threshold_hours: Decimal = Field(gt=0)
    level1_rate: Decimal = Field(ge=1)
    level2_rate: Decimal = Field(ge=1)
    level3_rate: Decimal = Field(ge=1)

    @classmethod
    def default(cls) -> "OvertimeRule":
        rule = DEFAULTS["overtime_rule"]
        return cls(**{key: Decimal(str(value)) for key, value in rule.items()})


class PayCycleConfig(BaseModel):
    cycles_per_month: conint(ge=1, le=4) = 1
    paydays: list[conint(ge=1, le=31)] = Field(default_factory=lambda: [5])

    @model_validator(mode="after")
    def _check_paydays(self) -> "PayCycleConfig":
        if len(self.paydays) > self.cycles_per_month:
            raise ValueError("paydays cannot outnumber cycles_per_month")
        return self

    @classmethod
    def default(cls) -> "PayCycleConfig":
        return cls(**DEFAULTS["pay_cycle"])


class UserSettings(BaseModel):
    base_wage: Decimal = Field(default_factory=lambda: Decimal(str(DEFAULTS["base_wage"])), ge=0)
    overtime_rule: OvertimeRule = Field(default_factory=OvertimeRule.default)
    pay_cycle: PayCycleConfig = Field(default_factory=PayCycleConfig.default)


class ShiftInput(BaseModel):
    """Raw shift entry as submitted by a client, before any pay is derived."""

    date: constr(pattern=DATE_PATTERN)
    start_time: constr(pattern=TIME_PATTERN)
    end_time: constr(pattern=TIME_PATTERN)
    break_minutes: conint(ge=0) = 0
    holiday: HolidayType = "none"
    note: str = ""
    wage: Decimal | None = Field(default=None, ge=0)


class ShiftRecord(BaseModel):
    id: str
    date: constr(pattern=DATE_PATTERN)
    start_time: constr(pattern=TIME_PATTERN)
    end_time: constr(pattern=TIME_PATTERN)
    break_minutes: conint(ge=0) = 0
    hours: Decimal = Field(ge=0)
    wage: Decimal
    holiday: HolidayType = "none"
    overtime_pay: Decimal = Decimal("0")
    total_pay: Decimal = Decimal("0")
    note: str = ""

    @property
    def month_key(self) -> str:
        return self.date[:7]


class PayBreakdown(BaseModel):
    regular_pay: Decimal
    overtime_pay: Decimal
    total_pay: Decimal


class PayCycle(BaseModel):
    index: int
    year: int
    month: conint(ge=1, le=12)
    start_day: int
    end_day: int
    payday: int
    amount: Decimal = Decimal("0")

    @computed_field  # type: ignore[misc]
    @property
    def rounded_amount(self) -> int:
        return int(self.amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

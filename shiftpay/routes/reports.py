from __future__ import annotations

import re

from fastapi import APIRouter, HTTPException, Query

from shiftpay.application import get_timesheet_service

router = APIRouter(prefix="/users", tags=["reports"])

_MONTH_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


@router.get("/{user_id}/totals")
async def get_totals(user_id: str) -> dict:
    service = get_timesheet_service()
    totals = service.month_totals(user_id)
    return {
        "user_id": user_id,
        "months": [{"month": month, "total_pay": amount} for month, amount in totals.items()],
        "grand_total": service.grand_total(user_id),
    }


@router.get("/{user_id}/cycles")
async def get_cycles(user_id: str, month: str = Query(...)) -> dict:
    match = _MONTH_RE.fullmatch(month)
    if not match:
        raise HTTPException(status_code=400, detail="month must be formatted as YYYY-MM")

    service = get_timesheet_service()
    cycles = service.cycle_breakdown(user_id, int(match.group(1)), int(match.group(2)))
    return {"user_id": user_id, "month": month, "items": [cycle.model_dump() for cycle in cycles]}

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError as SchemaValidationError

from shiftpay.application import get_timesheet_service
from shiftpay.core.schema import ShiftInput
from shiftpay.core.validation import ValidationError

router = APIRouter(prefix="/users", tags=["shifts"])


@router.get("/{user_id}/shifts")
async def list_shifts(user_id: str, month: str | None = Query(default=None)) -> dict:
    service = get_timesheet_service()
    records = service.list_shifts(user_id, month)
    return {"user_id": user_id, "month": month, "items": [record.model_dump() for record in records]}


@router.post("/{user_id}/shifts")
async def upsert_shift(user_id: str, payload: dict) -> dict:
    if not payload.get("date") or not payload.get("start_time") or not payload.get("end_time"):
        raise HTTPException(status_code=400, detail="請填寫日期與時間")

    service = get_timesheet_service()
    try:
        shift = ShiftInput(**payload)
        record = service.upsert_shift(user_id, shift)
    except SchemaValidationError as exc:
        detail = exc.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=400, detail=detail) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return record.model_dump()


@router.delete("/{user_id}/shifts/{shift_id}")
async def delete_shift(user_id: str, shift_id: str) -> dict:
    service = get_timesheet_service()
    try:
        record = service.delete_shift(user_id, shift_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="shift not found") from exc
    return {"deleted": record.id, "date": record.date}

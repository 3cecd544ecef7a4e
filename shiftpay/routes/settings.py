from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError as SchemaValidationError

from shiftpay.application import get_timesheet_service
from shiftpay.core.schema import UserSettings
from shiftpay.core.validation import ValidationError

router = APIRouter(prefix="/users", tags=["settings"])


@router.get("/{user_id}/settings")
async def get_settings(user_id: str) -> dict:
    service = get_timesheet_service()
    return service.load_settings(user_id).model_dump()


@router.put("/{user_id}/settings")
async def save_settings(user_id: str, payload: dict) -> dict:
    """Merge ``payload`` into the stored settings and persist the result."""
    service = get_timesheet_service()
    current = service.load_settings(user_id).model_dump()
    for key, value in payload.items():
        if isinstance(value, dict) and isinstance(current.get(key), dict):
            current[key] = {**current[key], **value}
        else:
            current[key] = value

    # Stored paydays follow a lowered cycle count unless new ones are sent.
    pay_cycle = payload.get("pay_cycle")
    if isinstance(pay_cycle, dict) and "paydays" not in pay_cycle:
        merged = current["pay_cycle"]
        cycles = merged.get("cycles_per_month")
        if isinstance(cycles, int) and isinstance(merged.get("paydays"), list):
            merged["paydays"] = merged["paydays"][:cycles]

    try:
        settings = UserSettings(**current)
        saved = service.save_settings(user_id, settings)
    except SchemaValidationError as exc:
        detail = exc.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=400, detail=detail) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return saved.model_dump()

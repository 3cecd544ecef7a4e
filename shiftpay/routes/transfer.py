from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from zipfile import BadZipFile

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse

from shiftpay.application import get_timesheet_service
from shiftpay.core.storage import export_path, save_raw_file

router = APIRouter(prefix="/users", tags=["transfer"])

SUPPORTED_SUFFIXES = {".xlsx", ".csv"}
MEDIA_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
}


@router.post("/{user_id}/import")
async def import_timesheet(user_id: str, file: UploadFile = File(...)) -> dict:
    """Replace the user's shifts with the rows of an uploaded spreadsheet."""
    try:
        if not file.filename:
            raise HTTPException(status_code=400, detail="Uploaded file must have a filename")
        safe_name = Path(file.filename).name
        if Path(safe_name).suffix.lower() not in SUPPORTED_SUFFIXES:
            raise HTTPException(status_code=400, detail="only .xlsx and .csv files are supported")
        raw_path = save_raw_file(user_id, safe_name, file.file)
    finally:
        await file.close()

    service = get_timesheet_service()
    try:
        result = service.import_timesheet(user_id, raw_path)
    except (ValueError, BadZipFile) as exc:
        raise HTTPException(status_code=400, detail=f"unable to read spreadsheet: {exc}") from exc
    return {
        "filename": safe_name,
        "imported": len(result.records),
        "skipped": [asdict(item) for item in result.skipped],
        "items": [record.model_dump() for record in service.list_shifts(user_id)],
    }


@router.get("/{user_id}/export")
async def export_timesheet(
    user_id: str,
    fmt: str = Query(default="xlsx", alias="format"),
    month: str | None = Query(default=None),
) -> FileResponse:
    if fmt not in MEDIA_TYPES:
        raise HTTPException(status_code=400, detail="format must be xlsx or csv")

    service = get_timesheet_service()
    if not service.list_shifts(user_id, month):
        raise HTTPException(status_code=400, detail="沒有資料可以匯出")

    filename = f"timesheet-{month}.{fmt}" if month else f"timesheet.{fmt}"
    path = service.export_timesheet(user_id, export_path(user_id, filename), month)
    return FileResponse(path, media_type=MEDIA_TYPES[fmt], filename=filename)

import io
import sys
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook, load_workbook

sys.path.append(str(Path(__file__).resolve().parents[1]))

from shiftpay.application import get_timesheet_service, reset_timesheet_state
from shiftpay.infrastructure import InMemoryTimesheetRepository

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
HEADER = ["日期", "上班時間", "下班時間", "休息時間", "工作時數", "時薪", "工資", "備註"]


def _amount(value) -> Decimal:
    return Decimal(str(value))


@pytest.fixture(autouse=True)
def reset_state():
    reset_timesheet_state()
    yield
    reset_timesheet_state()


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("TIMESHEETS_ROOT", str(tmp_path))
    from shiftpay.app import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _post_shift(client, user: str, **payload):
    return client.post(f"/api/users/{user}/shifts", json=payload)


def test_settings_default_and_partial_update(client):
    response = client.get("/api/users/amy/settings")
    assert response.status_code == 200
    data = response.json()
    assert _amount(data["base_wage"]) == 190
    assert _amount(data["overtime_rule"]["threshold_hours"]) == 8
    assert data["pay_cycle"]["cycles_per_month"] == 1

    response = client.put(
        "/api/users/amy/settings",
        json={"base_wage": 200, "pay_cycle": {"cycles_per_month": 2, "paydays": [10, 25]}},
    )
    assert response.status_code == 200

    data = client.get("/api/users/amy/settings").json()
    assert _amount(data["base_wage"]) == 200
    assert data["pay_cycle"] == {"cycles_per_month": 2, "paydays": [10, 25]}
    assert _amount(data["overtime_rule"]["level1_rate"]) == Decimal("1.33")

    other = client.get("/api/users/ben/settings").json()
    assert _amount(other["base_wage"]) == 190


def test_invalid_settings_are_rejected(client):
    response = client.put("/api/users/amy/settings", json={"overtime_rule": {"level1_rate": 0.5}})
    assert response.status_code == 400

    response = client.put("/api/users/amy/settings", json={"pay_cycle": {"cycles_per_month": 1, "paydays": [5, 20]}})
    assert response.status_code == 400

    assert _amount(client.get("/api/users/amy/settings").json()["overtime_rule"]["level1_rate"]) == Decimal("1.33")


def test_lowering_cycle_count_trims_stored_paydays(client):
    client.put("/api/users/amy/settings", json={"pay_cycle": {"cycles_per_month": 2, "paydays": [10, 25]}})

    response = client.put("/api/users/amy/settings", json={"pay_cycle": {"cycles_per_month": 1}})
    assert response.status_code == 200
    assert response.json()["pay_cycle"] == {"cycles_per_month": 1, "paydays": [10]}

    response = client.put("/api/users/amy/settings", json={"pay_cycle": {"cycles_per_month": 3}})
    assert response.status_code == 200
    assert response.json()["pay_cycle"] == {"cycles_per_month": 3, "paydays": [10]}


def test_shift_entry_is_edited_in_place_by_date(client):
    first = _post_shift(client, "amy", date="2025-01-02", start_time="09:00", end_time="18:00", break_minutes=60)
    assert first.status_code == 200
    created = first.json()
    assert _amount(created["hours"]) == 8
    assert _amount(created["total_pay"]) == 1520

    second = _post_shift(
        client, "amy", date="2025-01-02", start_time="09:00", end_time="22:00", break_minutes=0, note="加班"
    )
    assert second.status_code == 200
    updated = second.json()
    assert updated["id"] == created["id"]
    assert _amount(updated["overtime_pay"]) == Decimal("1647.30")
    assert _amount(updated["total_pay"]) == Decimal("3167.30")

    items = client.get("/api/users/amy/shifts").json()["items"]
    assert len(items) == 1
    assert items[0]["note"] == "加班"


def test_shift_wage_is_a_snapshot_of_settings(client):
    _post_shift(client, "amy", date="2025-01-02", start_time="09:00", end_time="17:00")
    client.put("/api/users/amy/settings", json={"base_wage": 250})
    _post_shift(client, "amy", date="2025-01-03", start_time="09:00", end_time="17:00")

    items = client.get("/api/users/amy/shifts").json()["items"]
    assert [_amount(item["wage"]) for item in items] == [190, 250]


def test_invalid_shift_input_returns_400(client):
    assert _post_shift(client, "amy", date="2025-01-02", start_time="9:00", end_time="18:00").status_code == 400
    assert _post_shift(client, "amy", date="", start_time="09:00", end_time="18:00").status_code == 400
    assert (
        _post_shift(client, "amy", date="2025-01-02", start_time="09:00", end_time="18:00", break_minutes=-5).status_code
        == 400
    )
    assert client.get("/api/users/amy/shifts").json()["items"] == []


def test_delete_shift(client):
    created = _post_shift(client, "amy", date="2025-01-02", start_time="09:00", end_time="18:00").json()

    assert client.delete("/api/users/amy/shifts/unknown").status_code == 404
    response = client.delete(f"/api/users/amy/shifts/{created['id']}")
    assert response.status_code == 200
    assert response.json()["date"] == "2025-01-02"
    assert client.get("/api/users/amy/shifts").json()["items"] == []


def test_delete_for_unknown_user_leaves_no_ledger_behind():
    repository = InMemoryTimesheetRepository()

    with pytest.raises(KeyError):
        repository.delete("ghost", "missing")
    repository.clear("ghost")

    assert repository.list_shifts("ghost") == []
    assert "ghost" not in repository._ledgers


def test_totals_and_cycle_breakdown(client):
    client.put("/api/users/amy/settings", json={"pay_cycle": {"cycles_per_month": 2, "paydays": [10, 25]}})
    _post_shift(client, "amy", date="2025-02-03", start_time="09:00", end_time="18:00", break_minutes=60)
    _post_shift(client, "amy", date="2025-02-20", start_time="10:00", end_time="15:00", holiday="typhoon")
    _post_shift(client, "amy", date="2025-03-01", start_time="09:00", end_time="13:00")

    totals = client.get("/api/users/amy/totals").json()
    months = {item["month"]: _amount(item["total_pay"]) for item in totals["months"]}
    assert months == {"2025-02": Decimal("3420"), "2025-03": Decimal("760")}
    assert _amount(totals["grand_total"]) == Decimal("4180")

    response = client.get("/api/users/amy/cycles", params={"month": "2025-02"})
    assert response.status_code == 200
    cycles = response.json()["items"]
    assert [(c["start_day"], c["end_day"], c["payday"]) for c in cycles] == [(1, 15, 10), (16, 28, 25)]
    assert [c["rounded_amount"] for c in cycles] == [1520, 1900]
    assert sum(_amount(c["amount"]) for c in cycles) == months["2025-02"]

    assert client.get("/api/users/amy/cycles", params={"month": "2025-13"}).status_code == 400


def test_export_requires_records(client):
    response = client.get("/api/users/amy/export")
    assert response.status_code == 400
    assert response.json()["detail"] == "沒有資料可以匯出"


def test_export_download(client, tmp_path):
    _post_shift(client, "amy", date="2025-01-02", start_time="09:00", end_time="18:00", break_minutes=60, note="早班")
    _post_shift(client, "amy", date="2025-02-02", start_time="09:00", end_time="18:00", break_minutes=60)

    response = client.get("/api/users/amy/export", params={"month": "2025-01"})
    assert response.status_code == 200
    rows = list(load_workbook(io.BytesIO(response.content)).worksheets[0].iter_rows(values_only=True))
    assert list(rows[0]) == HEADER
    assert len(rows) == 2
    assert rows[1][0] == "2025-01-02"
    assert rows[1][7] == "早班"
    assert (tmp_path / "amy" / "exports" / "timesheet-2025-01.xlsx").exists()

    response = client.get("/api/users/amy/export", params={"format": "csv"})
    assert response.status_code == 200
    assert response.content.decode("utf-8-sig").splitlines()[0] == ",".join(HEADER)

    assert client.get("/api/users/amy/export", params={"format": "pdf"}).status_code == 400


def test_import_replaces_shifts_and_collapses_duplicate_dates(client, tmp_path):
    client.put(
        "/api/users/amy/settings",
        json={"overtime_rule": {"threshold_hours": 4, "level1_rate": 2, "level2_rate": 2, "level3_rate": 2}},
    )
    _post_shift(client, "amy", date="2024-12-31", start_time="09:00", end_time="18:00")

    workbook = Workbook()
    sheet = workbook.active
    sheet.append(HEADER)
    sheet.append(["2025-01-02", "09:00", "12:00", 0, None, 100, None, "上午"])
    sheet.append(["2025-01-02", "13:00", "19:00", 0, None, 100, None, "下午"])
    sheet.append(["2025-01-03", None, "18:00", 0, None, 100, None, "漏打卡"])
    path = tmp_path / "import.xlsx"
    workbook.save(path)

    with path.open("rb") as fp:
        response = client.post("/api/users/amy/import", files={"file": ("import.xlsx", fp, XLSX_MIME)})
    assert response.status_code == 200
    data = response.json()
    assert data["imported"] == 2
    assert data["skipped"] == [{"row": 4, "reason": "missing date or time"}]

    items = data["items"]
    assert len(items) == 1
    assert items[0]["note"] == "下午"
    assert items[0]["id"] == "1-2025-01-02"
    # 6h under the saved rule: 4h base + 2h @ 2
    assert _amount(items[0]["total_pay"]) == Decimal("800")

    service = get_timesheet_service()
    assert [record.date for record in service.list_shifts("amy")] == ["2025-01-02"]
    assert (tmp_path / "amy" / "uploads" / "import.xlsx").exists()


def test_import_rejects_unsupported_files(client):
    response = client.post(
        "/api/users/amy/import",
        files={"file": ("notes.txt", io.BytesIO(b"hello"), "text/plain")},
    )
    assert response.status_code == 400

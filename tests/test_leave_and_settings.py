"""Tests for leave records and the attendance policy settings."""

import pytest
from httpx import AsyncClient

DAY = "2024-03-04"


async def _employee(client: AsyncClient) -> int:
    resp = await client.post("/api/v1/employees", json={"first_name": "Ada", "last_name": "Lovelace"})
    return resp.json()["id"]


# ── Leave ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_leave_lifecycle(async_client: AsyncClient):
    eid = await _employee(async_client)

    resp = await async_client.post(
        "/api/v1/leave",
        json={"employee_id": eid, "start_date": DAY, "end_date": "2024-03-06", "reason": "Holiday"},
    )
    assert resp.status_code == 201
    leave = resp.json()
    assert leave["status"] == "Pending"
    assert leave["leave_type"] == "Annual"

    resp = await async_client.post(f"/api/v1/leave/{leave['id']}/review", json={"approve": True})
    assert resp.status_code == 200
    assert resp.json()["status"] == "Approved"
    assert resp.json()["reviewed_by"] == 1

    again = await async_client.post(f"/api/v1/leave/{leave['id']}/review", json={"approve": False})
    assert again.status_code == 400

    listed = await async_client.get(f"/api/v1/leave?employee_id={eid}&status=Approved")
    assert [r["id"] for r in listed.json()] == [leave["id"]]


@pytest.mark.asyncio
async def test_approved_leave_blocks_scheduling(async_client: AsyncClient):
    eid = await _employee(async_client)
    leave = await async_client.post(
        "/api/v1/leave", json={"employee_id": eid, "start_date": DAY, "end_date": DAY}
    )
    await async_client.post(f"/api/v1/leave/{leave.json()['id']}/review", json={"approve": True})

    resp = await async_client.post(
        "/api/v1/shifts",
        json={"employee_id": eid, "date": DAY, "start_time": "09:00", "end_time": "17:00"},
    )

    assert resp.status_code == 400
    assert "leave" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_leave_with_inverted_range_is_422(async_client: AsyncClient):
    eid = await _employee(async_client)
    resp = await async_client.post(
        "/api/v1/leave", json={"employee_id": eid, "start_date": DAY, "end_date": "2024-03-01"}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_leave_for_unknown_employee_is_404(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/leave", json={"employee_id": 4040, "start_date": DAY, "end_date": DAY}
    )
    assert resp.status_code == 404


# ── Settings ───────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_settings_defaults(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/settings")
    assert resp.status_code == 200
    assert resp.json() == {
        "late_grace_minutes": 5,
        "early_arrival_minutes": 15,
        "timezone_offset": "+00:00",
    }


@pytest.mark.asyncio
async def test_grace_setting_changes_classification(async_client: AsyncClient):
    resp = await async_client.put("/api/v1/settings", json={"late_grace_minutes": 10})
    assert resp.status_code == 200
    assert resp.json()["late_grace_minutes"] == 10

    eid = await _employee(async_client)
    await async_client.post(
        "/api/v1/shifts",
        json={"employee_id": eid, "date": DAY, "start_time": "09:00", "end_time": "17:00"},
    )
    resp = await async_client.post(f"/api/v1/clock/{eid}/in", json={"at": f"{DAY}T09:10:00"})
    assert resp.json()["attendance_status"] == "On Time"


@pytest.mark.asyncio
async def test_timezone_offset_applies_to_clock_times(async_client: AsyncClient):
    await async_client.put("/api/v1/settings", json={"timezone_offset": "+05:00"})
    eid = await _employee(async_client)

    resp = await async_client.post(f"/api/v1/clock/{eid}/in", json={"at": f"{DAY}T04:00:00Z"})

    assert resp.json()["entry"]["clock_in"] == "09:00"


@pytest.mark.asyncio
async def test_invalid_settings_rejected(async_client: AsyncClient):
    resp = await async_client.put("/api/v1/settings", json={"timezone_offset": "UTC"})
    assert resp.status_code == 422
    resp = await async_client.put("/api/v1/settings", json={"late_grace_minutes": -1})
    assert resp.status_code == 422


# ── Health ─────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_health_reports_database(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["db"] is True

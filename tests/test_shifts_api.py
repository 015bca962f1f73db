"""Tests for the shift assignment endpoints."""

import pytest
from httpx import AsyncClient

DAY = "2024-03-04"


async def _employee(client: AsyncClient, first="Ada", last="Lovelace") -> int:
    resp = await client.post("/api/v1/employees", json={"first_name": first, "last_name": last})
    return resp.json()["id"]


def _shift(employee_id, start="09:00", end="17:00", on=DAY, **extra):
    return {"employee_id": employee_id, "date": on, "start_time": start, "end_time": end, **extra}


@pytest.mark.asyncio
async def test_create_and_get_shift(async_client: AsyncClient):
    eid = await _employee(async_client)
    resp = await async_client.post(
        "/api/v1/shifts", json=_shift(eid, location="Client Site", work_type="Overtime")
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["status"] == "Scheduled"
    assert data["location"] == "Client Site"
    assert data["work_type"] == "Overtime"
    assert data["assigned_by"] == 1

    fetched = await async_client.get(f"/api/v1/shifts/{data['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["start_time"] == "09:00"


@pytest.mark.asyncio
async def test_conflicting_shift_returns_409_with_details(async_client: AsyncClient):
    eid = await _employee(async_client)
    first = (await async_client.post("/api/v1/shifts", json=_shift(eid))).json()

    resp = await async_client.post("/api/v1/shifts", json=_shift(eid, "16:00", "20:00"))

    assert resp.status_code == 409
    body = resp.json()
    assert body["success"] is False
    assert body["conflicts"][0]["id"] == first["id"]


@pytest.mark.asyncio
async def test_malformed_time_returns_400(async_client: AsyncClient):
    eid = await _employee(async_client)
    resp = await async_client.post("/api/v1/shifts", json=_shift(eid, "9am", "17:00"))
    assert resp.status_code == 400
    assert "HH:MM" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_unknown_location_is_a_422(async_client: AsyncClient):
    eid = await _employee(async_client)
    resp = await async_client.post("/api/v1/shifts", json=_shift(eid, location="Moon"))
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_bulk_create_reports_every_failure(async_client: AsyncClient):
    eid = await _employee(async_client)
    resp = await async_client.post(
        "/api/v1/shifts/bulk",
        json={
            "assignments": [
                _shift(eid, "09:00", "17:00"),
                _shift(eid, "10:00", "11:00"),
                _shift(9999),
            ]
        },
    )
    assert resp.status_code == 409
    assert [e["index"] for e in resp.json()["errors"]] == [1, 2]

    listed = await async_client.get(f"/api/v1/shifts?employee_id={eid}")
    assert listed.json() == []


@pytest.mark.asyncio
async def test_list_filters(async_client: AsyncClient):
    a = await _employee(async_client)
    b = await _employee(async_client, "Grace", "Hopper")
    await async_client.post("/api/v1/shifts", json=_shift(a))
    await async_client.post("/api/v1/shifts", json=_shift(b, location="Home"))
    await async_client.post("/api/v1/shifts", json=_shift(a, on="2024-03-05"))

    day = await async_client.get(f"/api/v1/shifts?start_date={DAY}")
    assert len(day.json()) == 2

    week = await async_client.get(
        f"/api/v1/shifts?employee_id={a}&start_date={DAY}&end_date=2024-03-10"
    )
    assert len(week.json()) == 2

    home = await async_client.get("/api/v1/shifts?location=Home")
    assert [s["employee_id"] for s in home.json()] == [b]


@pytest.mark.asyncio
async def test_update_and_delete(async_client: AsyncClient):
    eid = await _employee(async_client)
    sid = (await async_client.post("/api/v1/shifts", json=_shift(eid))).json()["id"]

    resp = await async_client.put(f"/api/v1/shifts/{sid}", json={"end_time": "18:00", "notes": "Stocktake"})
    assert resp.status_code == 200
    assert resp.json()["end_time"] == "18:00"

    resp = await async_client.put(f"/api/v1/shifts/{sid}", json={"status": "In Progress"})
    assert resp.status_code == 400

    resp = await async_client.delete(f"/api/v1/shifts/{sid}")
    assert resp.status_code == 200
    assert (await async_client.get(f"/api/v1/shifts/{sid}")).status_code == 404


@pytest.mark.asyncio
async def test_swap_flow(async_client: AsyncClient):
    alice = await _employee(async_client, "Alice", "A")
    bob = await _employee(async_client, "Bob", "B")
    sid = (await async_client.post("/api/v1/shifts", json=_shift(alice))).json()["id"]

    resp = await async_client.post(
        f"/api/v1/shifts/{sid}/swap-request", json={"requested_with": bob, "reason": "Exam"}
    )
    assert resp.status_code == 200
    assert resp.json()["swap_status"] == "Pending"

    resp = await async_client.post(f"/api/v1/shifts/{sid}/swap-review", json={"approve": True})
    assert resp.status_code == 200
    assert resp.json()["employee_id"] == bob
    assert resp.json()["swap_status"] == "Approved"


@pytest.mark.asyncio
async def test_statistics(async_client: AsyncClient):
    eid = await _employee(async_client)
    await async_client.post("/api/v1/shifts", json=_shift(eid, "06:00", "10:00"))
    await async_client.post("/api/v1/shifts", json=_shift(eid, "12:00", "16:00", location="Field"))

    resp = await async_client.get(
        f"/api/v1/shifts/statistics?start_date={DAY}&end_date=2024-03-31"
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert data["by_location"] == {"Office": 1, "Field": 1}

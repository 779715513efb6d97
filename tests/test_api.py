"""End-to-end tests for the trip-activity HTTP routes."""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from tripplanner.domain.models import Activity, Destination, Trip
from tripplanner.main import (
    activity_repo,
    app,
    destination_repo,
    placement_repo,
    trip_repo,
)


@pytest.fixture(autouse=True)
def _clear_repos():
    """Reset in-memory repos before each test."""
    for repo in (trip_repo, destination_repo, activity_repo, placement_repo):
        repo._store.clear()
    yield
    for repo in (trip_repo, destination_repo, activity_repo, placement_repo):
        repo._store.clear()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def trip_data():
    paris = Destination(name="Paris", country="France", timezone="Europe/Paris")
    london = Destination(name="London", country="United Kingdom", timezone="Europe/London")
    destination_repo.add(paris)
    destination_repo.add(london)

    trip = Trip(
        name="Summer in Europe",
        start_date=date(2026, 6, 14),
        end_date=date(2026, 6, 18),
        destination_ids=[paris.id, london.id],
    )
    trip_repo.add(trip)

    louvre = Activity(
        name="Louvre",
        category="museum",
        destination_id=paris.id,
        duration_minutes=120,
        estimated_cost=22.0,
    )
    market = Activity(name="Borough Market", category="market", destination_id=london.id)
    activity_repo.add(louvre)
    activity_repo.add(market)
    return {"trip": trip, "louvre": louvre, "market": market}


def _schedule(client, trip_id: str, activity_id: str, day: str, start: str, **extra):
    payload = {
        "trip_id": trip_id,
        "activity_id": activity_id,
        "planned_date": day,
        "start_time": start,
        **extra,
    }
    return client.post("/trip-activities/schedule", json=payload)


# ---------------------------------------------------------------------------
# POST /trip-activities/schedule
# ---------------------------------------------------------------------------


def test_schedule_returns_201(client, trip_data):
    resp = _schedule(
        client, trip_data["trip"].id, trip_data["louvre"].id, "2026-06-15", "10:00"
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["planned_date"] == "2026-06-15"
    assert body["start_time"] == "10:00:00"
    assert body["duration_minutes"] == 120
    assert body["timezone"] == "Europe/Paris"
    assert body["activity_id"] == trip_data["louvre"].id


def test_schedule_conflict_returns_409_with_details(client, trip_data):
    _schedule(client, trip_data["trip"].id, trip_data["louvre"].id, "2026-06-15", "10:00")

    resp = _schedule(
        client, trip_data["trip"].id, trip_data["market"].id, "2026-06-15", "10:30"
    )

    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["kind"] == "scheduling_conflict"
    assert detail["conflicts"][0]["name"] == "Louvre"
    assert detail["conflicts"][0]["end_time"] == "12:00:00"
    assert detail["message"].startswith("Time conflict with: Louvre")


def test_schedule_unknown_trip_returns_404(client, trip_data):
    resp = _schedule(client, "missing", trip_data["louvre"].id, "2026-06-15", "10:00")
    assert resp.status_code == 404
    assert resp.json()["detail"]["kind"] == "trip_not_found"


def test_schedule_outside_trip_returns_400(client, trip_data):
    resp = _schedule(
        client, trip_data["trip"].id, trip_data["louvre"].id, "2026-06-20", "10:00"
    )
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["kind"] == "date_out_of_range"
    assert detail["trip_end"] == "2026-06-18"


def test_schedule_non_positive_duration_returns_422(client, trip_data):
    resp = _schedule(
        client,
        trip_data["trip"].id,
        trip_data["louvre"].id,
        "2026-06-15",
        "10:00",
        duration_minutes=0,
    )
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# POST /trip-activities/schedule-custom
# ---------------------------------------------------------------------------


def test_schedule_custom_defaults(client, trip_data):
    resp = client.post(
        "/trip-activities/schedule-custom",
        json={
            "trip_id": trip_data["trip"].id,
            "name": "Picnic",
            "category": "park",
            "planned_date": "2026-06-16",
            "start_time": "12:00",
            "estimated_cost": 12.5,
        },
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["activity_id"] is None
    assert body["custom_name"] == "Picnic"
    assert body["duration_minutes"] == 60
    assert body["timezone"] == "Europe/Paris"


def test_schedule_custom_unknown_timezone_returns_400(client, trip_data):
    resp = client.post(
        "/trip-activities/schedule-custom",
        json={
            "trip_id": trip_data["trip"].id,
            "name": "Call",
            "category": "custom",
            "planned_date": "2026-06-16",
            "start_time": "12:00",
            "timezone": "Moon/Base",
        },
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["kind"] == "invalid_timezone"


def _custom(client, trip_id: str, name: str, start: str):
    return client.post(
        "/trip-activities/schedule-custom",
        json={
            "trip_id": trip_id,
            "name": name,
            "category": "custom",
            "planned_date": "2026-06-16",
            "start_time": start,
        },
    )


def test_schedule_custom_with_utc_offset_returns_422(client, trip_data):
    trip_id = trip_data["trip"].id
    assert _custom(client, trip_id, "Breakfast", "10:00").status_code == 201

    resp = _custom(client, trip_id, "Call home", "14:00Z")
    assert resp.status_code == 422

    # the trip stays schedulable and readable
    assert _custom(client, trip_id, "Dinner", "18:00").status_code == 201
    listed = client.get(f"/trip-activities/trip/{trip_id}")
    assert listed.status_code == 200
    assert [p["custom_name"] for p in listed.json()] == ["Breakfast", "Dinner"]


# ---------------------------------------------------------------------------
# PUT / DELETE
# ---------------------------------------------------------------------------


def test_update_scheduled_activity(client, trip_data):
    created = _schedule(
        client, trip_data["trip"].id, trip_data["louvre"].id, "2026-06-15", "10:00"
    ).json()

    resp = client.put(
        f"/trip-activities/{created['id']}",
        json={"start_time": "10:00", "notes": "Skip the queue"},
    )

    assert resp.status_code == 200
    assert resp.json()["notes"] == "Skip the queue"


def test_update_into_conflict_returns_409(client, trip_data):
    _schedule(client, trip_data["trip"].id, trip_data["louvre"].id, "2026-06-15", "10:00")
    market = _schedule(
        client, trip_data["trip"].id, trip_data["market"].id, "2026-06-15", "14:00"
    ).json()

    resp = client.put(f"/trip-activities/{market['id']}", json={"start_time": "09:00"})

    assert resp.status_code == 409


def test_update_with_utc_offset_returns_422(client, trip_data):
    created = _schedule(
        client, trip_data["trip"].id, trip_data["louvre"].id, "2026-06-15", "10:00"
    ).json()

    resp = client.put(
        f"/trip-activities/{created['id']}", json={"start_time": "09:00+02:00"}
    )

    assert resp.status_code == 422
    stored = client.get(f"/trip-activities/trip/{trip_data['trip'].id}").json()
    assert stored[0]["start_time"] == "10:00:00"


def test_update_unknown_placement_returns_404(client):
    resp = client.put("/trip-activities/missing", json={"notes": "x"})
    assert resp.status_code == 404
    assert resp.json()["detail"]["kind"] == "placement_not_found"


def test_update_actual_cost(client, trip_data):
    created = _schedule(
        client, trip_data["trip"].id, trip_data["louvre"].id, "2026-06-15", "10:00"
    ).json()

    resp = client.put(
        f"/trip-activities/{created['id']}/actual-cost", json={"actual_cost": 19.0}
    )

    assert resp.status_code == 200
    assert resp.json()["actual_cost"] == 19.0


def test_delete_then_delete_again(client, trip_data):
    created = _schedule(
        client, trip_data["trip"].id, trip_data["louvre"].id, "2026-06-15", "10:00"
    ).json()

    assert client.delete(f"/trip-activities/{created['id']}").status_code == 204
    assert client.delete(f"/trip-activities/{created['id']}").status_code == 404


# ---------------------------------------------------------------------------
# Read routes
# ---------------------------------------------------------------------------


def test_read_routes(client, trip_data):
    trip_id = trip_data["trip"].id
    _schedule(client, trip_id, trip_data["louvre"].id, "2026-06-16", "10:00")
    _schedule(client, trip_id, trip_data["market"].id, "2026-06-15", "09:00")

    listed = client.get(f"/trip-activities/trip/{trip_id}").json()
    assert [p["planned_date"] for p in listed] == ["2026-06-15", "2026-06-16"]

    on_day = client.get(f"/trip-activities/trip/{trip_id}/date/2026-06-16").json()
    assert [p["activity_id"] for p in on_day] == [trip_data["louvre"].id]

    ranged = client.get(
        f"/trip-activities/trip/{trip_id}/date-range",
        params={"start_date": "2026-06-14", "end_date": "2026-06-15"},
    ).json()
    assert len(ranged) == 1

    dates = client.get(f"/trip-activities/trip/{trip_id}/dates").json()
    assert dates == ["2026-06-15", "2026-06-16"]


def test_costs_route(client, trip_data):
    trip_id = trip_data["trip"].id

    empty = client.get(f"/trip-activities/trip/{trip_id}/costs").json()
    assert empty == {"estimated_cost": 0, "actual_cost": 0, "activity_count": 0}

    _schedule(client, trip_id, trip_data["louvre"].id, "2026-06-15", "10:00")
    summary = client.get(f"/trip-activities/trip/{trip_id}/costs").json()
    assert summary["estimated_cost"] == 22.0
    assert summary["actual_cost"] == 0
    assert summary["activity_count"] == 1

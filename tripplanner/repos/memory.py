"""In-memory repositories for trips, catalog activities and placements."""

from __future__ import annotations

from datetime import date, time

from tripplanner.domain.models import (
    Activity,
    Destination,
    ScheduledPlacement,
    Trip,
    TripStatus,
)


class TripRepository:
    """Dict-backed store for Trip instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Trip] = {}

    def add(self, trip: Trip) -> None:
        self._store[trip.id] = trip

    def get(self, trip_id: str) -> Trip | None:
        return self._store.get(trip_id)


class DestinationRepository:
    """Dict-backed store for Destination instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Destination] = {}

    def add(self, destination: Destination) -> None:
        self._store[destination.id] = destination

    def get(self, destination_id: str) -> Destination | None:
        return self._store.get(destination_id)


class ActivityRepository:
    """Dict-backed store for catalog Activity instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Activity] = {}

    def add(self, activity: Activity) -> None:
        self._store[activity.id] = activity

    def get(self, activity_id: str) -> Activity | None:
        return self._store.get(activity_id)


class PlacementRepository:
    """Dict-backed store for ScheduledPlacement instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, ScheduledPlacement] = {}

    def save(self, placement: ScheduledPlacement) -> ScheduledPlacement:
        self._store[placement.id] = placement
        return placement

    def get(self, placement_id: str) -> ScheduledPlacement | None:
        return self._store.get(placement_id)

    def exists(self, placement_id: str) -> bool:
        return placement_id in self._store

    def list_for_trip(self, trip_id: str) -> list[ScheduledPlacement]:
        return sorted(
            [p for p in self._store.values() if p.trip_id == trip_id],
            key=lambda p: (p.planned_date, p.start_time),
        )

    def delete(self, placement_id: str) -> None:
        self._store.pop(placement_id, None)


# ---------------------------------------------------------------------------
# Seed data – a two-city trip useful for cross-timezone conflict testing
# ---------------------------------------------------------------------------


def seed_demo_data(
    trip_repo: TripRepository,
    destination_repo: DestinationRepository,
    activity_repo: ActivityRepository,
    placement_repo: PlacementRepository,
) -> Trip:
    """Load a Paris/London trip with one scheduled activity; returns the trip."""
    paris = Destination(name="Paris", country="France", timezone="Europe/Paris")
    london = Destination(name="London", country="United Kingdom", timezone="Europe/London")
    destination_repo.add(paris)
    destination_repo.add(london)

    louvre = Activity(
        name="Louvre Museum",
        category="museum",
        destination_id=paris.id,
        duration_minutes=120,
        estimated_cost=22.0,
    )
    activity_repo.add(louvre)
    activity_repo.add(
        Activity(
            name="Eiffel Tower",
            category="tourist_attraction",
            destination_id=paris.id,
            estimated_cost=29.4,
        )
    )
    activity_repo.add(
        Activity(
            name="British Museum",
            category="museum",
            destination_id=london.id,
            estimated_cost=0.0,
        )
    )
    activity_repo.add(
        Activity(name="Borough Market", category="market", destination_id=london.id)
    )

    trip = Trip(
        name="Paris & London",
        start_date=date(2026, 6, 14),
        end_date=date(2026, 6, 20),
        status=TripStatus.PLANNED,
        destination_ids=[paris.id, london.id],
    )
    trip_repo.add(trip)

    placement_repo.save(
        ScheduledPlacement(
            trip_id=trip.id,
            activity_id=louvre.id,
            planned_date=date(2026, 6, 15),
            start_time=time(10, 0),
            duration_minutes=120,
            timezone=paris.timezone,
        )
    )
    return trip

"""Persistence ports the scheduling service depends on."""

from __future__ import annotations

from typing import Protocol

from tripplanner.domain.models import Activity, Destination, ScheduledPlacement, Trip


class TripStore(Protocol):
    def get(self, trip_id: str) -> Trip | None: ...


class DestinationStore(Protocol):
    def get(self, destination_id: str) -> Destination | None: ...


class ActivityStore(Protocol):
    def get(self, activity_id: str) -> Activity | None: ...


class PlacementStore(Protocol):
    def get(self, placement_id: str) -> ScheduledPlacement | None: ...

    def exists(self, placement_id: str) -> bool: ...

    def list_for_trip(self, trip_id: str) -> list[ScheduledPlacement]:
        """Placements of a trip ordered by (planned_date, start_time)."""
        ...

    def save(self, placement: ScheduledPlacement) -> ScheduledPlacement: ...

    def delete(self, placement_id: str) -> None: ...

"""Read-only per-trip view over scheduled placements."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date

from tripplanner.domain.models import ProposedPlacement, ScheduledPlacement
from tripplanner.repos.base import PlacementStore
from tripplanner.services.conflicts import find_conflicts


def chronological_key(placement: ScheduledPlacement) -> tuple:
    return (placement.planned_date, placement.start_time)


class TripCalendar:
    """Placements of one trip, ordered by (planned_date, start_time).

    This is the conflict universe for scheduling a new placement and the
    source for every read projection.
    """

    def __init__(self, trip_id: str, placements: Iterable[ScheduledPlacement]) -> None:
        self.trip_id = trip_id
        self._placements = sorted(
            (p for p in placements if p.trip_id == trip_id), key=chronological_key
        )

    @classmethod
    def load(cls, trip_id: str, store: PlacementStore) -> TripCalendar:
        return cls(trip_id, store.list_for_trip(trip_id))

    def __iter__(self) -> Iterator[ScheduledPlacement]:
        return iter(self._placements)

    def __len__(self) -> int:
        return len(self._placements)

    @property
    def placements(self) -> list[ScheduledPlacement]:
        return list(self._placements)

    def on_date(self, day: date) -> list[ScheduledPlacement]:
        return [p for p in self._placements if p.planned_date == day]

    def between(self, start: date, end: date) -> list[ScheduledPlacement]:
        """Placements whose planned date is in ``[start, end]``."""
        return [p for p in self._placements if start <= p.planned_date <= end]

    def dates(self) -> list[date]:
        return sorted({p.planned_date for p in self._placements})

    def conflicts_with(
        self, proposal: ProposedPlacement, exclude_id: str | None = None
    ) -> list[ScheduledPlacement]:
        return find_conflicts(proposal, self._placements, exclude_id=exclude_id)

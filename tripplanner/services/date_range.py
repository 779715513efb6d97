"""Check that a planned date falls inside a trip's inclusive date span."""

from __future__ import annotations

from datetime import date

from tripplanner.domain.errors import SchedulingError


def validate_date_range(
    planned_date: date, trip_start: date, trip_end: date
) -> SchedulingError | None:
    if planned_date < trip_start or planned_date > trip_end:
        return SchedulingError.date_out_of_range(planned_date, trip_start, trip_end)
    return None

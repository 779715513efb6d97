"""Scheduling service: places activities on a trip calendar without overlaps.

Every mutating operation runs the same pipeline:

1. load the trip (and catalog activity) through the persistence ports,
2. resolve the default duration and timezone,
3. validate duration, timezone and the trip's date span,
4. build the TripCalendar and look for conflicts on the absolute timeline,
5. save, or return a tagged SchedulingError listing every conflict.

Domain failures come back as ``Result.error``; nothing is persisted when an
operation fails. Mutations of one trip are serialised with a per-trip lock so
two overlapping placements cannot both pass the conflict check in-process.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, time

from tripplanner.domain.errors import ConflictInfo, Result, SchedulingError
from tripplanner.domain.models import (
    Activity,
    DEFAULT_TIMEZONE,
    ProposedPlacement,
    ScheduledPlacement,
    Trip,
    TripCostSummary,
)
from tripplanner.repos.base import (
    ActivityStore,
    DestinationStore,
    PlacementStore,
    TripStore,
)
from tripplanner.services.date_range import validate_date_range
from tripplanner.services.durations import format_duration
from tripplanner.services.timeconv import get_zone, is_valid_timezone
from tripplanner.services.trip_calendar import TripCalendar

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60


class SchedulingService:
    """Places activities on trip calendars and keeps each trip free of overlaps."""

    def __init__(
        self,
        trip_store: TripStore,
        destination_store: DestinationStore,
        activity_store: ActivityStore,
        placement_store: PlacementStore,
        default_duration_minutes: int = DEFAULT_DURATION_MINUTES,
        fallback_timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        self.trip_store = trip_store
        self.destination_store = destination_store
        self.activity_store = activity_store
        self.placement_store = placement_store
        self.default_duration_minutes = default_duration_minutes
        self.fallback_timezone = fallback_timezone
        # Entries disappear once no operation holds the lock.
        self._trip_locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._trip_locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def schedule(
        self,
        trip_id: str,
        activity_id: str,
        planned_date: date,
        start_time: time,
        duration_minutes: int | None = None,
        notes: str | None = None,
    ) -> Result[ScheduledPlacement]:
        """Place a catalog activity on the trip calendar."""
        trip = self.trip_store.get(trip_id)
        if trip is None:
            return self._reject(SchedulingError.trip_not_found(trip_id), trip_id)
        activity = self.activity_store.get(activity_id)
        if activity is None:
            return self._reject(SchedulingError.activity_not_found(activity_id), trip_id)

        if duration_minutes is None:
            duration_minutes = activity.effective_duration_minutes
        timezone_id = self._activity_timezone(activity, trip)

        with self._trip_lock(trip.id):
            error = self._check_placement(
                trip, planned_date, start_time, duration_minutes, timezone_id
            )
            if error is not None:
                return self._reject(error, trip.id)
            placement = self.placement_store.save(
                ScheduledPlacement(
                    trip_id=trip.id,
                    activity_id=activity.id,
                    planned_date=planned_date,
                    start_time=start_time,
                    duration_minutes=duration_minutes,
                    timezone=timezone_id,
                    notes=notes,
                )
            )

        self._log_scheduled(placement, activity.name)
        return Result.success(placement)

    def schedule_custom(
        self,
        trip_id: str,
        name: str,
        category: str,
        planned_date: date,
        start_time: time,
        description: str | None = None,
        estimated_cost: float | None = None,
        duration_minutes: int | None = None,
        timezone: str | None = None,
        notes: str | None = None,
    ) -> Result[ScheduledPlacement]:
        """Place an inline custom activity (no catalog entry) on the trip calendar."""
        trip = self.trip_store.get(trip_id)
        if trip is None:
            return self._reject(SchedulingError.trip_not_found(trip_id), trip_id)

        if duration_minutes is None:
            duration_minutes = self.default_duration_minutes
        timezone_id = timezone if timezone is not None else self._trip_timezone(trip)

        with self._trip_lock(trip.id):
            error = self._check_placement(
                trip, planned_date, start_time, duration_minutes, timezone_id
            )
            if error is not None:
                return self._reject(error, trip.id)
            placement = self.placement_store.save(
                ScheduledPlacement(
                    trip_id=trip.id,
                    custom_name=name,
                    custom_category=category,
                    custom_description=description,
                    custom_estimated_cost=estimated_cost,
                    planned_date=planned_date,
                    start_time=start_time,
                    duration_minutes=duration_minutes,
                    timezone=timezone_id,
                    notes=notes,
                )
            )

        self._log_scheduled(placement, name)
        return Result.success(placement)

    def update_scheduled_activity(
        self,
        placement_id: str,
        planned_date: date | None = None,
        start_time: time | None = None,
        duration_minutes: int | None = None,
        notes: str | None = None,
        custom_name: str | None = None,
        custom_description: str | None = None,
        custom_estimated_cost: float | None = None,
    ) -> Result[ScheduledPlacement]:
        """Apply the provided fields to a placement.

        Changing the date, start time or duration re-runs the range and
        conflict checks with the placement itself excluded from the calendar.
        Notes and custom fields never trigger a re-check.
        """
        found = self.placement_store.get(placement_id)
        if found is None:
            return self._reject(SchedulingError.placement_not_found(placement_id), None)

        with self._trip_lock(found.trip_id):
            current = self.placement_store.get(placement_id)
            if current is None:
                return self._reject(
                    SchedulingError.placement_not_found(placement_id), found.trip_id
                )

            changes: dict = {}
            if any(v is not None for v in (planned_date, start_time, duration_minutes)):
                trip = self.trip_store.get(current.trip_id)
                if trip is None:
                    return self._reject(
                        SchedulingError.trip_not_found(current.trip_id), current.trip_id
                    )
                changes["planned_date"] = (
                    planned_date if planned_date is not None else current.planned_date
                )
                changes["start_time"] = (
                    start_time if start_time is not None else current.start_time
                )
                changes["duration_minutes"] = (
                    duration_minutes
                    if duration_minutes is not None
                    else current.duration_minutes
                )

                error = self._check_placement(
                    trip,
                    changes["planned_date"],
                    changes["start_time"],
                    changes["duration_minutes"],
                    current.timezone,
                    exclude_id=current.id,
                )
                if error is not None:
                    return self._reject(error, trip.id)

            if notes is not None:
                changes["notes"] = notes

            custom_changes = {
                field: value
                for field, value in (
                    ("custom_name", custom_name),
                    ("custom_description", custom_description),
                    ("custom_estimated_cost", custom_estimated_cost),
                )
                if value is not None
            }
            if custom_changes and current.is_custom:
                changes.update(custom_changes)
            elif custom_changes:
                logger.warning(
                    "Ignoring %s on catalog placement %s",
                    ", ".join(sorted(custom_changes)),
                    current.id,
                )

            updated = ScheduledPlacement.model_validate(current.model_dump() | changes)
            self.placement_store.save(updated)

        logger.info(
            "Updated placement %s (%s)", updated.id, ", ".join(sorted(changes)) or "no changes"
        )
        return Result.success(updated)

    def update_actual_cost(
        self, placement_id: str, cost: float | None
    ) -> Result[ScheduledPlacement]:
        found = self.placement_store.get(placement_id)
        if found is None:
            return self._reject(SchedulingError.placement_not_found(placement_id), None)
        with self._trip_lock(found.trip_id):
            current = self.placement_store.get(placement_id)
            if current is None:
                return self._reject(
                    SchedulingError.placement_not_found(placement_id), found.trip_id
                )
            updated = current.model_copy(update={"actual_cost": cost})
            self.placement_store.save(updated)
        return Result.success(updated)

    def remove_activity_from_trip(self, placement_id: str) -> Result[None]:
        found = self.placement_store.get(placement_id)
        if found is None:
            return self._reject(SchedulingError.placement_not_found(placement_id), None)
        with self._trip_lock(found.trip_id):
            if not self.placement_store.exists(placement_id):
                return self._reject(
                    SchedulingError.placement_not_found(placement_id), found.trip_id
                )
            self.placement_store.delete(placement_id)
        logger.info("Removed placement %s from trip %s", placement_id, found.trip_id)
        return Result.success(None)

    # ------------------------------------------------------------------
    # Read projections
    # ------------------------------------------------------------------

    def calendar(self, trip_id: str) -> TripCalendar:
        return TripCalendar.load(trip_id, self.placement_store)

    def get_scheduled_activities(self, trip_id: str) -> list[ScheduledPlacement]:
        return self.calendar(trip_id).placements

    def get_activities_for_date(self, trip_id: str, day: date) -> list[ScheduledPlacement]:
        return self.calendar(trip_id).on_date(day)

    def get_activities_in_date_range(
        self, trip_id: str, start: date, end: date
    ) -> list[ScheduledPlacement]:
        return self.calendar(trip_id).between(start, end)

    def get_trip_dates(self, trip_id: str) -> list[date]:
        return self.calendar(trip_id).dates()

    def get_scheduled_activity_count(self, trip_id: str) -> int:
        return len(self.calendar(trip_id))

    # ------------------------------------------------------------------
    # Cost aggregates
    # ------------------------------------------------------------------

    def calculate_total_estimated_cost(self, trip_id: str) -> float:
        return sum(
            (self._estimated_cost(p) or 0 for p in self.calendar(trip_id)), 0.0
        )

    def calculate_total_actual_cost(self, trip_id: str) -> float:
        return sum((p.actual_cost or 0 for p in self.calendar(trip_id)), 0.0)

    def get_cost_summary(self, trip_id: str) -> TripCostSummary:
        return TripCostSummary(
            estimated_cost=self.calculate_total_estimated_cost(trip_id),
            actual_cost=self.calculate_total_actual_cost(trip_id),
            activity_count=self.get_scheduled_activity_count(trip_id),
        )

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _check_placement(
        self,
        trip: Trip,
        planned_date: date,
        start_time: time,
        duration_minutes: int,
        timezone_id: str,
        exclude_id: str | None = None,
    ) -> SchedulingError | None:
        if duration_minutes <= 0:
            return SchedulingError.invalid_duration(duration_minutes)
        if not is_valid_timezone(timezone_id):
            return SchedulingError.invalid_timezone(timezone_id)

        error = validate_date_range(planned_date, trip.start_date, trip.end_date)
        if error is not None:
            return error

        proposal = ProposedPlacement(
            planned_date=planned_date,
            start_time=start_time,
            duration_minutes=duration_minutes,
            timezone=timezone_id,
        )
        conflicts = self.calendar(trip.id).conflicts_with(proposal, exclude_id=exclude_id)
        if conflicts:
            return SchedulingError.scheduling_conflict(
                [self._conflict_info(p) for p in conflicts]
            )
        return None

    def _conflict_info(self, placement: ScheduledPlacement) -> ConflictInfo:
        interval = placement.absolute_interval()
        local_end = interval.end.astimezone(get_zone(placement.timezone))
        return ConflictInfo(
            placement_id=placement.id,
            name=self._display_name(placement),
            planned_date=placement.planned_date,
            start_time=placement.start_time,
            end_time=local_end.time(),
            timezone=placement.timezone,
            starts_at=interval.start,
            ends_at=interval.end,
        )

    def _display_name(self, placement: ScheduledPlacement) -> str:
        if placement.custom_name is not None:
            return placement.custom_name
        activity = self.activity_store.get(placement.activity_id)
        return activity.name if activity is not None else f"Activity {placement.activity_id}"

    def _estimated_cost(self, placement: ScheduledPlacement) -> float | None:
        if placement.is_custom:
            return placement.custom_estimated_cost
        activity = self.activity_store.get(placement.activity_id)
        return activity.estimated_cost if activity is not None else None

    def _activity_timezone(self, activity: Activity, trip: Trip) -> str:
        """Activity's destination zone, else the trip's first destination zone."""
        if activity.destination_id is not None:
            destination = self.destination_store.get(activity.destination_id)
            if destination is not None:
                return destination.timezone
        return self._trip_timezone(trip)

    def _trip_timezone(self, trip: Trip) -> str:
        for destination_id in trip.destination_ids:
            destination = self.destination_store.get(destination_id)
            if destination is not None:
                return destination.timezone
        return self.fallback_timezone

    @contextmanager
    def _trip_lock(self, trip_id: str) -> Iterator[None]:
        with self._trip_locks_guard:
            lock = self._trip_locks.get(trip_id)
            if lock is None:
                lock = threading.Lock()
                self._trip_locks[trip_id] = lock
        with lock:
            yield

    def _reject(self, error: SchedulingError, trip_id: str | None) -> Result:
        logger.info("Rejected on trip %s [%s]: %s", trip_id, error.kind, error.message)
        return Result.failure(error)

    def _log_scheduled(self, placement: ScheduledPlacement, name: str) -> None:
        logger.info(
            "Scheduled %r on trip %s: %s %s for %s (%s)",
            name,
            placement.trip_id,
            placement.planned_date.isoformat(),
            placement.start_time.strftime("%H:%M"),
            format_duration(placement.duration_minutes),
            placement.timezone,
        )

"""Tagged scheduling errors and the Result wrapper returned by the service."""

from __future__ import annotations

from datetime import date, datetime, time
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(StrEnum):
    TRIP_NOT_FOUND = "trip_not_found"
    ACTIVITY_NOT_FOUND = "activity_not_found"
    PLACEMENT_NOT_FOUND = "placement_not_found"
    DATE_OUT_OF_RANGE = "date_out_of_range"
    SCHEDULING_CONFLICT = "scheduling_conflict"
    INVALID_TIMEZONE = "invalid_timezone"
    INVALID_DURATION = "invalid_duration"


class InvalidTimezoneError(ValueError):
    """Raised when a timezone identifier is not a known IANA zone."""

    def __init__(self, timezone_id: str | None) -> None:
        self.timezone_id = timezone_id
        super().__init__(f"Unknown timezone: {timezone_id!r}")


class ConflictInfo(BaseModel):
    """What a caller needs to render "conflicts with X (date start-end)"."""

    placement_id: str
    name: str
    planned_date: date
    start_time: time
    end_time: time
    timezone: str
    starts_at: datetime
    ends_at: datetime

    def describe(self) -> str:
        return (
            f"{self.name} ({self.planned_date.isoformat()} "
            f"{self.start_time:%H:%M}-{self.end_time:%H:%M} {self.timezone})"
        )


class SchedulingError(BaseModel):
    kind: ErrorKind
    message: str
    entity_id: str | None = None
    planned_date: date | None = None
    trip_start: date | None = None
    trip_end: date | None = None
    timezone: str | None = None
    duration_minutes: int | None = None
    conflicts: list[ConflictInfo] = Field(default_factory=list)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def trip_not_found(cls, trip_id: str) -> SchedulingError:
        return cls(
            kind=ErrorKind.TRIP_NOT_FOUND,
            message=f"Trip not found with id: {trip_id}",
            entity_id=trip_id,
        )

    @classmethod
    def activity_not_found(cls, activity_id: str) -> SchedulingError:
        return cls(
            kind=ErrorKind.ACTIVITY_NOT_FOUND,
            message=f"Activity not found with id: {activity_id}",
            entity_id=activity_id,
        )

    @classmethod
    def placement_not_found(cls, placement_id: str) -> SchedulingError:
        return cls(
            kind=ErrorKind.PLACEMENT_NOT_FOUND,
            message=f"Scheduled activity not found with id: {placement_id}",
            entity_id=placement_id,
        )

    @classmethod
    def date_out_of_range(
        cls, planned_date: date, trip_start: date, trip_end: date
    ) -> SchedulingError:
        return cls(
            kind=ErrorKind.DATE_OUT_OF_RANGE,
            message=(
                f"Activity date {planned_date.isoformat()} is outside trip dates "
                f"({trip_start.isoformat()} to {trip_end.isoformat()})"
            ),
            planned_date=planned_date,
            trip_start=trip_start,
            trip_end=trip_end,
        )

    @classmethod
    def scheduling_conflict(cls, conflicts: list[ConflictInfo]) -> SchedulingError:
        return cls(
            kind=ErrorKind.SCHEDULING_CONFLICT,
            message="Time conflict with: " + ", ".join(c.describe() for c in conflicts),
            conflicts=conflicts,
        )

    @classmethod
    def invalid_timezone(cls, timezone_id: str | None) -> SchedulingError:
        return cls(
            kind=ErrorKind.INVALID_TIMEZONE,
            message=f"Unknown timezone: {timezone_id!r}",
            timezone=timezone_id,
        )

    @classmethod
    def invalid_duration(cls, duration_minutes: int) -> SchedulingError:
        return cls(
            kind=ErrorKind.INVALID_DURATION,
            message=f"Duration must be positive, got {duration_minutes} minutes",
            duration_minutes=duration_minutes,
        )


class Result(BaseModel, Generic[T]):
    """Either a value or a SchedulingError, never both."""

    value: T | None = None
    error: SchedulingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: SchedulingError) -> Result[T]:
        return cls(error=error)

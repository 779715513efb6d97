"""Domain models for trip activity scheduling."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

from tripplanner.services.durations import default_duration
from tripplanner.services.timeconv import (
    AbsoluteInterval,
    get_zone,
    is_valid_timezone,
    to_absolute_interval,
)

DEFAULT_TIMEZONE = "UTC"


class TripStatus(StrEnum):
    DRAFT = "draft"
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _check_timezone(value: str) -> str:
    if not is_valid_timezone(value):
        raise ValueError(f"Unknown timezone: {value!r}")
    return value


def _check_civil_time(value: time | None) -> time | None:
    if value is not None and value.tzinfo is not None:
        raise ValueError("start_time must be a local time without a UTC offset")
    return value


# ---------------------------------------------------------------------------
# Catalog / trip models
# ---------------------------------------------------------------------------


class Destination(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    country: str | None = None
    timezone: str = DEFAULT_TIMEZONE

    @field_validator("timezone", mode="before")
    @classmethod
    def _default_unknown_timezone(cls, value: str | None) -> str:
        return DEFAULT_TIMEZONE if value is None else value

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        return _check_timezone(value)


class Trip(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    start_date: date
    end_date: date
    status: TripStatus = TripStatus.DRAFT
    owner_id: str | None = None
    destination_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> Trip:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class Activity(BaseModel):
    """Catalog entry that a placement can reference."""

    id: str = Field(default_factory=_new_id)
    name: str
    category: str | None = None
    description: str | None = None
    destination_id: str | None = None
    duration_minutes: int | None = Field(default=None, gt=0)
    estimated_cost: float | None = None

    @property
    def effective_duration_minutes(self) -> int:
        if self.duration_minutes is not None:
            return self.duration_minutes
        return default_duration(self.category)


# ---------------------------------------------------------------------------
# Scheduling models
# ---------------------------------------------------------------------------


class ProposedPlacement(BaseModel):
    """A placement under validation; never persisted."""

    planned_date: date
    start_time: time
    duration_minutes: int = Field(gt=0)
    timezone: str

    @field_validator("start_time")
    @classmethod
    def _civil_start(cls, value: time) -> time:
        return _check_civil_time(value)

    def absolute_interval(self) -> AbsoluteInterval:
        return to_absolute_interval(
            self.planned_date, self.start_time, self.duration_minutes, self.timezone
        )


class ScheduledPlacement(BaseModel):
    """An activity placed on a trip's calendar.

    References either a catalog Activity (``activity_id``) or carries an
    inline custom definition (``custom_*``), never both.
    """

    id: str = Field(default_factory=_new_id)
    trip_id: str
    activity_id: str | None = None
    custom_name: str | None = None
    custom_category: str | None = None
    custom_description: str | None = None
    custom_estimated_cost: float | None = None
    planned_date: date
    start_time: time
    duration_minutes: int = Field(gt=0)
    timezone: str
    actual_cost: float | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("start_time")
    @classmethod
    def _civil_start(cls, value: time) -> time:
        return _check_civil_time(value)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        return _check_timezone(value)

    @model_validator(mode="after")
    def _activity_xor_custom(self) -> ScheduledPlacement:
        has_activity = self.activity_id is not None
        has_custom = self.custom_name is not None
        if has_activity == has_custom:
            raise ValueError("exactly one of activity_id or custom_name must be set")
        if has_activity and any(
            v is not None
            for v in (
                self.custom_category,
                self.custom_description,
                self.custom_estimated_cost,
            )
        ):
            raise ValueError("custom fields are only allowed on custom placements")
        return self

    @property
    def is_custom(self) -> bool:
        return self.activity_id is None

    def absolute_interval(self) -> AbsoluteInterval:
        return to_absolute_interval(
            self.planned_date, self.start_time, self.duration_minutes, self.timezone
        )

    @property
    def end_time(self) -> time:
        """Local wall-clock end; may fall on the next day."""
        end = self.absolute_interval().end.astimezone(get_zone(self.timezone))
        return end.time()


class TripCostSummary(BaseModel):
    estimated_cost: float = 0
    actual_cost: float = 0
    activity_count: int = 0


# ---------------------------------------------------------------------------
# Request DTOs
# ---------------------------------------------------------------------------


class ScheduleActivityRequest(BaseModel):
    trip_id: str
    activity_id: str
    planned_date: date
    start_time: time
    duration_minutes: int | None = Field(default=None, gt=0)
    notes: str | None = None

    @field_validator("start_time")
    @classmethod
    def _civil_start(cls, value: time) -> time:
        return _check_civil_time(value)


class ScheduleCustomActivityRequest(BaseModel):
    trip_id: str
    name: str = Field(min_length=1)
    category: str
    description: str | None = None
    estimated_cost: float | None = Field(default=None, ge=0)
    planned_date: date
    start_time: time
    duration_minutes: int | None = Field(default=None, gt=0)
    timezone: str | None = None
    notes: str | None = None

    @field_validator("start_time")
    @classmethod
    def _civil_start(cls, value: time) -> time:
        return _check_civil_time(value)


class UpdateScheduledActivityRequest(BaseModel):
    planned_date: date | None = None
    start_time: time | None = None
    duration_minutes: int | None = Field(default=None, gt=0)
    notes: str | None = None
    custom_name: str | None = None
    custom_description: str | None = None
    custom_estimated_cost: float | None = Field(default=None, ge=0)

    @field_validator("start_time")
    @classmethod
    def _civil_start(cls, value: time | None) -> time | None:
        return _check_civil_time(value)


class ActualCostRequest(BaseModel):
    actual_cost: float = Field(ge=0)

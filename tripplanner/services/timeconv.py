"""Conversion of local (date, time, duration, zone) tuples to absolute UTC intervals."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, model_validator

from tripplanner.domain.errors import InvalidTimezoneError


class AbsoluteInterval(BaseModel):
    """Half-open ``[start, end)`` interval on the UTC timeline."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _end_after_start(self) -> AbsoluteInterval:
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


def get_zone(timezone_id: str | None) -> ZoneInfo:
    """Return the ZoneInfo for an IANA identifier.

    Raises InvalidTimezoneError instead of falling back to UTC; callers that
    want a default must substitute it themselves.
    """
    if not timezone_id:
        raise InvalidTimezoneError(timezone_id)
    try:
        return ZoneInfo(timezone_id)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(timezone_id) from exc


def is_valid_timezone(timezone_id: str | None) -> bool:
    try:
        get_zone(timezone_id)
    except InvalidTimezoneError:
        return False
    return True


def to_absolute_interval(
    planned_date: date,
    start_time: time,
    duration_minutes: int,
    timezone_id: str,
) -> AbsoluteInterval:
    """Resolve a locally-expressed placement to an absolute UTC interval.

    The zone offset is the one in force at that local datetime, so DST
    transitions are honoured. The duration is added on the UTC timeline.
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")
    zone = get_zone(timezone_id)
    local_start = datetime.combine(planned_date, start_time, tzinfo=zone)
    start = local_start.astimezone(timezone.utc)
    return AbsoluteInterval(start=start, end=start + timedelta(minutes=duration_minutes))


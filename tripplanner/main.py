"""FastAPI application — entry point for the trip activity scheduler."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import FastAPI, HTTPException, Response

from tripplanner.config import get_settings
from tripplanner.domain.errors import ErrorKind, Result
from tripplanner.domain.models import (
    ActualCostRequest,
    ScheduleActivityRequest,
    ScheduleCustomActivityRequest,
    ScheduledPlacement,
    TripCostSummary,
    UpdateScheduledActivityRequest,
)
from tripplanner.repos.memory import (
    ActivityRepository,
    DestinationRepository,
    PlacementRepository,
    TripRepository,
    seed_demo_data,
)
from tripplanner.services.scheduling import SchedulingService

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Trip Activity Scheduler")

# ── Singletons (created at import time for simplicity) ────────────────
trip_repo = TripRepository()
destination_repo = DestinationRepository()
activity_repo = ActivityRepository()
placement_repo = PlacementRepository()

scheduling_service = SchedulingService(
    trip_store=trip_repo,
    destination_store=destination_repo,
    activity_store=activity_repo,
    placement_store=placement_repo,
    default_duration_minutes=settings.default_duration_minutes,
    fallback_timezone=settings.fallback_timezone,
)

if settings.seed_demo_data:
    demo_trip = seed_demo_data(trip_repo, destination_repo, activity_repo, placement_repo)
    logger.info("Seeded demo trip %s", demo_trip.id)

_STATUS_BY_KIND = {
    ErrorKind.TRIP_NOT_FOUND: 404,
    ErrorKind.ACTIVITY_NOT_FOUND: 404,
    ErrorKind.PLACEMENT_NOT_FOUND: 404,
    ErrorKind.DATE_OUT_OF_RANGE: 400,
    ErrorKind.INVALID_TIMEZONE: 400,
    ErrorKind.INVALID_DURATION: 400,
    ErrorKind.SCHEDULING_CONFLICT: 409,
}


def _unwrap(result: Result) -> ScheduledPlacement | None:
    if result.error is not None:
        raise HTTPException(
            status_code=_STATUS_BY_KIND[result.error.kind],
            detail=result.error.model_dump(mode="json"),
        )
    return result.value


# ── Routes ────────────────────────────────────────────────────────────


@app.post(
    "/trip-activities/schedule", response_model=ScheduledPlacement, status_code=201
)
def schedule_activity(body: ScheduleActivityRequest) -> ScheduledPlacement:
    """Schedule a catalog activity on a trip."""
    return _unwrap(
        scheduling_service.schedule(
            trip_id=body.trip_id,
            activity_id=body.activity_id,
            planned_date=body.planned_date,
            start_time=body.start_time,
            duration_minutes=body.duration_minutes,
            notes=body.notes,
        )
    )


@app.post(
    "/trip-activities/schedule-custom",
    response_model=ScheduledPlacement,
    status_code=201,
)
def schedule_custom_activity(body: ScheduleCustomActivityRequest) -> ScheduledPlacement:
    """Schedule an inline custom activity on a trip."""
    return _unwrap(
        scheduling_service.schedule_custom(
            trip_id=body.trip_id,
            name=body.name,
            category=body.category,
            description=body.description,
            estimated_cost=body.estimated_cost,
            planned_date=body.planned_date,
            start_time=body.start_time,
            duration_minutes=body.duration_minutes,
            timezone=body.timezone,
            notes=body.notes,
        )
    )


@app.put("/trip-activities/{placement_id}", response_model=ScheduledPlacement)
def update_scheduled_activity(
    placement_id: str, body: UpdateScheduledActivityRequest
) -> ScheduledPlacement:
    return _unwrap(
        scheduling_service.update_scheduled_activity(
            placement_id,
            planned_date=body.planned_date,
            start_time=body.start_time,
            duration_minutes=body.duration_minutes,
            notes=body.notes,
            custom_name=body.custom_name,
            custom_description=body.custom_description,
            custom_estimated_cost=body.custom_estimated_cost,
        )
    )


@app.put(
    "/trip-activities/{placement_id}/actual-cost", response_model=ScheduledPlacement
)
def update_actual_cost(placement_id: str, body: ActualCostRequest) -> ScheduledPlacement:
    return _unwrap(scheduling_service.update_actual_cost(placement_id, body.actual_cost))


@app.delete("/trip-activities/{placement_id}", status_code=204)
def remove_activity_from_trip(placement_id: str) -> Response:
    _unwrap(scheduling_service.remove_activity_from_trip(placement_id))
    return Response(status_code=204)


@app.get("/trip-activities/trip/{trip_id}", response_model=list[ScheduledPlacement])
def get_scheduled_activities(trip_id: str) -> list[ScheduledPlacement]:
    """Return a trip's placements ordered by date then start time."""
    return scheduling_service.get_scheduled_activities(trip_id)


@app.get(
    "/trip-activities/trip/{trip_id}/date/{day}",
    response_model=list[ScheduledPlacement],
)
def get_activities_for_date(trip_id: str, day: date) -> list[ScheduledPlacement]:
    return scheduling_service.get_activities_for_date(trip_id, day)


@app.get(
    "/trip-activities/trip/{trip_id}/date-range",
    response_model=list[ScheduledPlacement],
)
def get_activities_in_date_range(
    trip_id: str, start_date: date, end_date: date
) -> list[ScheduledPlacement]:
    return scheduling_service.get_activities_in_date_range(trip_id, start_date, end_date)


@app.get("/trip-activities/trip/{trip_id}/dates", response_model=list[date])
def get_trip_dates(trip_id: str) -> list[date]:
    """Distinct dates that have at least one placement."""
    return scheduling_service.get_trip_dates(trip_id)


@app.get("/trip-activities/trip/{trip_id}/costs", response_model=TripCostSummary)
def get_trip_costs(trip_id: str) -> TripCostSummary:
    return scheduling_service.get_cost_summary(trip_id)

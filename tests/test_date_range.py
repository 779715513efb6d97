"""Tests for the trip date-span validator."""

from datetime import date

import pytest

from tripplanner.domain.errors import ErrorKind
from tripplanner.services.date_range import validate_date_range

_START = date(2026, 6, 14)
_END = date(2026, 6, 18)


@pytest.mark.parametrize("day", [_START, date(2026, 6, 16), _END])
def test_dates_inside_span_pass(day):
    assert validate_date_range(day, _START, _END) is None


@pytest.mark.parametrize("day", [date(2026, 6, 13), date(2026, 6, 19), date(2025, 6, 15)])
def test_dates_outside_span_fail(day):
    error = validate_date_range(day, _START, _END)
    assert error is not None
    assert error.kind == ErrorKind.DATE_OUT_OF_RANGE
    assert error.planned_date == day
    assert error.trip_start == _START
    assert error.trip_end == _END


def test_error_message_names_date_and_bounds():
    error = validate_date_range(date(2026, 6, 19), _START, _END)
    assert error.message == (
        "Activity date 2026-06-19 is outside trip dates (2026-06-14 to 2026-06-18)"
    )


def test_single_day_trip():
    day = date(2026, 6, 14)
    assert validate_date_range(day, day, day) is None
    assert validate_date_range(date(2026, 6, 15), day, day) is not None

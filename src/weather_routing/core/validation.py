"""Field-level and cross-field checks.

All checks are pure: they take plain values and return an
:class:`~weather_routing.core.outcome.Outcome`. Nothing here performs I/O.
"""

from __future__ import annotations

from datetime import date
import math
from typing import TYPE_CHECKING, Sized

from .outcome import ErrorKind, Outcome
from .units import HALF_TURN_DEGREES

if TYPE_CHECKING:
    from .config import RoutingConfiguration

MIN_DEGREE_STEPS = 4
# Largest fan: 0.1 degree steps over the full half turn
MAX_DEGREE_STEP_INTERVALS = 1800
HOURS_PER_DAY = 24


def check_time_step(seconds: int) -> Outcome:
    """Reject a zero time step."""
    if seconds == 0:
        return Outcome.of(ErrorKind.ZERO_DURATION, "zero time step")
    return Outcome.accepted()


def check_time_step_components(hours: int, minutes: int, seconds: int) -> Outcome:
    """Reject negative hour/minute/second components."""
    for name, value in (("hours", hours), ("minutes", minutes), ("seconds", seconds)):
        if value < 0:
            return Outcome.of(
                ErrorKind.RANGE_ERROR,
                "negative time step component",
                f"{name}={value}",
            )
    return Outcome.accepted()


def check_degree_step_count(degree_steps: Sized) -> Outcome:
    """Warn when fewer than four degree steps are given.

    The configuration stays usable; the search just has a coarse fan.
    """
    if len(degree_steps) < MIN_DEGREE_STEPS:
        return Outcome.of(
            ErrorKind.INSUFFICIENT_RESOLUTION,
            "insufficient directional resolution",
            f"{len(degree_steps)} < {MIN_DEGREE_STEPS}",
        )
    return Outcome.accepted()


def check_generation_range(
    from_degrees: float, to_degrees: float, by_degrees: float
) -> Outcome:
    """Check bounds for degree step generation.

    Requires ``0 <= from < 180``, ``0 < to <= 180``, ``from < to`` and
    ``0 < by < 180``, and at most 1800 steps between from and to.
    Comparisons are written so that NaN fails them.
    """
    valid = (
        0 <= from_degrees < HALF_TURN_DEGREES
        and 0 < to_degrees <= HALF_TURN_DEGREES
        and from_degrees < to_degrees
        and 0 < by_degrees < HALF_TURN_DEGREES
    )
    if not valid:
        return Outcome.of(
            ErrorKind.RANGE_ERROR,
            "invalid degree step range",
            f"from={from_degrees} to={to_degrees} by={by_degrees}",
        )
    intervals = (to_degrees - from_degrees) / by_degrees
    if intervals > MAX_DEGREE_STEP_INTERVALS + 1e-9:
        return Outcome.of(
            ErrorKind.RANGE_ERROR,
            "too many degree steps",
            f"from={from_degrees} to={to_degrees} by={by_degrees}",
        )
    return Outcome.accepted()


def check_start_time(start_date: date | None, hours: float) -> Outcome:
    """Check that a start date and decimal hour form a valid date-time."""
    if start_date is None or not isinstance(start_date, date):
        return Outcome.of(ErrorKind.INVALID_DATE_TIME, "invalid date-time", "no date")
    # hours are rounded to whole minutes downstream, so 23.999 is already 24:00
    if (
        not math.isfinite(hours)
        or hours < 0
        or round(hours * 60.0) >= HOURS_PER_DAY * 60
    ):
        return Outcome.of(
            ErrorKind.INVALID_DATE_TIME, "invalid date-time", f"hour={hours}"
        )
    return Outcome.accepted()


def check_boat_file(boat_file: str) -> Outcome:
    """Warn when no boat file is referenced. Content is never inspected."""
    if not boat_file:
        return Outcome.of(ErrorKind.MISSING_BOAT_FILE, "no boat file selected")
    return Outcome.accepted()


def validate(configuration: RoutingConfiguration) -> Outcome:
    """Run the configuration-level checks and combine their outcomes."""
    return Outcome.combine(
        (
            check_time_step(configuration.time_step),
            check_degree_step_count(configuration.degree_steps),
            check_boat_file(configuration.boat_file),
        )
    )

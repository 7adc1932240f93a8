import numpy as np
import pint

# Create unit registry once at module level
_ureg = pint.UnitRegistry()

# Canonical half-range for course deviations: [-180, 180)
HALF_TURN_DEGREES = 180.0
FULL_TURN_DEGREES = 360.0

# Generated angles are rounded to this many decimals to drop float drift
ANGLE_DECIMALS = 10


def knots_to_ms(speed_knots: float) -> float:
    """Convert speed from knots to meters per second."""
    return float((speed_knots * _ureg.knot) / _ureg.meter_per_second)


def ms_to_knots(speed_ms: float) -> float:
    """Convert speed from meters per second to knots."""
    return float((speed_ms * _ureg.meter_per_second) / _ureg.knot)


def canonical_degrees(angle_degrees):
    """Map angles to their equivalent in [-180, 180).

    Angles already inside the range are returned unchanged so that decimal
    inputs like 10.1 keep their exact float representation.

    Parameters
    ----------
    angle_degrees : float or array_like
        Angle(s) in degrees.

    Returns
    -------
    float or np.ndarray
        Canonical angle(s). Scalars in, float out.
    """
    angles = np.asarray(angle_degrees, dtype=float)
    inside = (angles >= -HALF_TURN_DEGREES) & (angles < HALF_TURN_DEGREES)
    wrapped = np.mod(angles + HALF_TURN_DEGREES, FULL_TURN_DEGREES) - HALF_TURN_DEGREES
    # adding 0.0 turns -0.0 into 0.0
    canonical = np.where(inside, angles, wrapped) + 0.0
    if canonical.ndim == 0:
        return float(canonical)
    return canonical


def decimal_hours(hour: int, minute: int) -> float:
    """Hour of day as decimal hours."""
    return hour + minute / 60.0


def split_decimal_hours(hours: float) -> tuple[int, int]:
    """Split decimal hours into whole (hour, minute).

    Minutes are rounded to the nearest whole minute so that a three-decimal
    display of e.g. 0:59 (``0.983``) recovers 59 rather than 58.
    """
    total_minutes = int(round(hours * 60.0))
    return total_minutes // 60, total_minutes % 60

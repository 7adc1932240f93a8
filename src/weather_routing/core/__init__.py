"""Core layer: configuration values, degree steps, outcomes and validation."""

from .outcome import ErrorKind, Issue, Outcome, Result, Severity
from .units import canonical_degrees, knots_to_ms, ms_to_knots
from .degree_steps import DegreeStepSet
from .config import (
    ClimatologyType,
    CycloneAvoidance,
    Integrator,
    RoutingConfiguration,
    compose_time_step,
    split_time_step,
)
from .validation import (
    MIN_DEGREE_STEPS,
    check_boat_file,
    check_degree_step_count,
    check_generation_range,
    check_start_time,
    check_time_step,
    check_time_step_components,
    validate,
)

__all__ = [
    "ErrorKind",
    "Issue",
    "Outcome",
    "Result",
    "Severity",
    "canonical_degrees",
    "knots_to_ms",
    "ms_to_knots",
    "DegreeStepSet",
    "ClimatologyType",
    "CycloneAvoidance",
    "Integrator",
    "RoutingConfiguration",
    "compose_time_step",
    "split_time_step",
    "MIN_DEGREE_STEPS",
    "check_boat_file",
    "check_degree_step_count",
    "check_generation_range",
    "check_start_time",
    "check_time_step",
    "check_time_step_components",
    "validate",
]

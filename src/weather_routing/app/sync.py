"""Two-way projection between the configuration form and the search engine.

``pull`` reads a :class:`FormState` into a validated
:class:`RoutingConfiguration`, ``push`` writes a configuration back into a
form. The controller never keeps a configuration of its own: the consumer's
slot is the only place a "current" configuration lives, and it is replaced
as a whole.
"""

from __future__ import annotations

from datetime import date, datetime, time
import logging
import math
from typing import Any, Callable, Protocol

import pandas as pd

from ..core.config import (
    ClimatologyType,
    CycloneAvoidance,
    Integrator,
    RoutingConfiguration,
    compose_time_step,
    split_time_step,
)
from ..core.degree_steps import DegreeStepSet
from ..core.outcome import ErrorKind, Outcome, Result
from ..core.units import decimal_hours, split_decimal_hours
from ..core.validation import (
    check_boat_file,
    check_start_time,
    check_time_step,
    check_time_step_components,
    validate,
)
from .form import FormState


class ConfigurationConsumer(Protocol):
    """Owner of the configuration the search engine reads on its next pass."""

    def current_configuration(self) -> RoutingConfiguration | None: ...

    def set_configuration_current_route(
        self, configuration: RoutingConfiguration
    ) -> None: ...


class ConfigurationSlot:
    """In-process consumer holding a single current configuration."""

    def __init__(self, configuration: RoutingConfiguration | None = None):
        self.current = configuration

    def current_configuration(self) -> RoutingConfiguration | None:
        return self.current

    def set_configuration_current_route(
        self, configuration: RoutingConfiguration
    ) -> None:
        self.current = configuration


def _parse_float(text: Any, what: str) -> Result[float]:
    try:
        value = float(text)
    except (TypeError, ValueError):
        return Result.rejected(ErrorKind.PARSE_ERROR, f"malformed {what}", str(text))
    if not math.isfinite(value):
        return Result.rejected(ErrorKind.PARSE_ERROR, f"malformed {what}", str(text))
    return Result(value=value)


def _format_hours(hour: int, minute: int) -> str:
    return f"{decimal_hours(hour, minute):.3f}"


class SyncController:
    """Keeps a configuration form and the consumer's slot in sync.

    Parameters
    ----------
    consumer : ConfigurationConsumer
        Receives every accepted configuration.
    boat_changed : callable, optional
        Called with the new configuration when the boat reference changes,
        so that other configurations using the old boat can be refreshed.
    """

    def __init__(
        self,
        consumer: ConfigurationConsumer,
        boat_changed: Callable[[RoutingConfiguration], None] | None = None,
    ):
        self.consumer = consumer
        self.boat_changed = boat_changed

    # Projection

    def pull(self, form: FormState) -> Result[RoutingConfiguration]:
        """Read the form into a new configuration.

        All fields are read and all checks run, so every problem is reported
        at once. When some field cannot be read the value is ``None``. When
        every field was read but a check rejects (zero time step), the
        assembled configuration is still returned for display, flagged
        Rejected.
        """
        outcomes = []

        start_time = None
        hours = _parse_float(form.start_hour, "start hour")
        outcomes.append(hours.outcome)
        if hours.ok:
            start_outcome = check_start_time(form.start_date, hours.value)
            outcomes.append(start_outcome)
            if not start_outcome.rejected:
                hour, minute = split_decimal_hours(hours.value)
                day = date(form.start_date.year, form.start_date.month, form.start_date.day)
                start_time = datetime.combine(day, time(hour, minute))

        components = (
            int(form.time_step_hours),
            int(form.time_step_minutes),
            int(form.time_step_seconds),
        )
        components_outcome = check_time_step_components(*components)
        outcomes.append(components_outcome)
        if not components_outcome.rejected:
            outcomes.append(check_time_step(compose_time_step(*components)))

        steps = DegreeStepSet.from_text(form.degree_steps)
        outcomes.append(steps.outcome)

        climatology_type = None
        try:
            climatology_type = ClimatologyType(int(form.climatology_selection))
        except ValueError:
            outcomes.append(
                Outcome.of(
                    ErrorKind.RANGE_ERROR,
                    "unknown climatology type",
                    str(form.climatology_selection),
                )
            )

        outcomes.append(check_boat_file(form.boat_path))
        outcome = Outcome.combine(outcomes)
        if (
            start_time is None
            or components_outcome.rejected
            or steps.value is None
            or climatology_type is None
        ):
            return Result(value=None, outcome=outcome)

        configuration = RoutingConfiguration(
            start=form.start,
            end=form.end,
            start_time=start_time,
            boat_file=form.boat_path,
            time_step=compose_time_step(*components),
            degree_steps=steps.value,
            integrator=Integrator.RUNGE_KUTTA if form.runge_kutta else Integrator.NEWTON,
            max_diverted_course=float(form.max_diverted_course),
            max_search_angle=float(form.max_search_angle),
            max_wind_knots=float(form.max_wind_knots),
            max_swell_meters=float(form.max_swell_meters),
            max_latitude=float(form.max_latitude),
            max_tacks=int(form.max_tacks),
            tacking_time=int(form.tacking_time),
            cyclones=CycloneAvoidance(
                enabled=bool(form.avoid_cyclone_tracks),
                months=int(form.cyclone_months),
                days=int(form.cyclone_days),
                wind_speed=int(form.cyclone_wind_speed),
                climatology_start_year=int(form.cyclone_climatology_start_year),
            ),
            detect_land=bool(form.detect_land),
            currents=bool(form.currents),
            inverted_regions=bool(form.inverted_regions),
            anchoring=bool(form.anchoring),
            allow_data_deficient=bool(form.allow_data_deficient),
            use_grib=bool(form.use_grib),
            climatology_type=climatology_type,
        )
        return Result(value=configuration, outcome=outcome)

    def push(self, configuration: RoutingConfiguration, form: FormState) -> FormState:
        """Write every field of ``configuration`` into ``form``."""
        form.start = configuration.start
        form.end = configuration.end

        form.start_date = configuration.start_time.date()
        form.start_hour = _format_hours(
            configuration.start_time.hour, configuration.start_time.minute
        )

        form.boat_path = configuration.boat_file

        (
            form.time_step_hours,
            form.time_step_minutes,
            form.time_step_seconds,
        ) = split_time_step(configuration.time_step)

        form.degree_steps = configuration.degree_steps.to_text()
        form.degree_step_selection = None

        form.runge_kutta = configuration.integrator is Integrator.RUNGE_KUTTA

        form.max_diverted_course = configuration.max_diverted_course
        form.max_search_angle = configuration.max_search_angle
        form.max_wind_knots = configuration.max_wind_knots
        form.max_swell_meters = configuration.max_swell_meters
        form.max_latitude = configuration.max_latitude
        form.max_tacks = configuration.max_tacks
        form.tacking_time = configuration.tacking_time

        cyclones = configuration.cyclones
        form.avoid_cyclone_tracks = cyclones.enabled
        form.cyclone_months = cyclones.months
        form.cyclone_days = cyclones.days
        form.cyclone_wind_speed = cyclones.wind_speed
        form.cyclone_climatology_start_year = cyclones.climatology_start_year

        form.detect_land = configuration.detect_land
        form.currents = configuration.currents
        form.inverted_regions = configuration.inverted_regions
        form.anchoring = configuration.anchoring
        form.allow_data_deficient = configuration.allow_data_deficient
        form.use_grib = configuration.use_grib
        form.climatology_selection = int(configuration.climatology_type)
        return form

    def generate_from_range(
        self,
        configuration: RoutingConfiguration,
        from_degrees: Any,
        to_degrees: Any,
        by_degrees: Any,
    ) -> Result[RoutingConfiguration]:
        """Replace the degree steps of ``configuration`` by a generated fan.

        Range values may be text as typed in the form. On rejection the value
        is ``None`` and ``configuration`` stays what it was.
        """
        parsed = [
            _parse_float(from_degrees, "from degrees"),
            _parse_float(to_degrees, "to degrees"),
            _parse_float(by_degrees, "by degrees"),
        ]
        failed = [p.outcome for p in parsed if not p.ok]
        if failed:
            return Result(value=None, outcome=Outcome.combine(failed))

        generated = DegreeStepSet.generate(*(p.value for p in parsed))
        if generated.value is None:
            return Result(value=None, outcome=generated.outcome)
        return Result(
            value=configuration.replace(degree_steps=generated.value),
            outcome=generated.outcome,
        )

    def notify_changed(self, configuration: RoutingConfiguration) -> None:
        """Hand ``configuration`` to the consumer, replacing its current one."""
        logging.info(
            "configuration updated: %s -> %s", configuration.start, configuration.end
        )
        self.consumer.set_configuration_current_route(configuration)

    # Form events

    def open(self, form: FormState) -> FormState:
        """Seed ``form`` from the consumer's configuration (or defaults)."""
        configuration = self.consumer.current_configuration()
        if configuration is None:
            configuration = RoutingConfiguration()
        return self.push(configuration, form)

    def update(self, form: FormState) -> Result[RoutingConfiguration]:
        """Pull the form and forward the result unless it is rejected."""
        return self._forward(self.pull(form))

    def on_generate_degree_steps(self, form: FormState) -> Result[RoutingConfiguration]:
        """Regenerate the degree steps from the form's range fields.

        Manually entered steps are discarded. Nothing changes on rejection.
        """
        pulled = self.pull(form)
        if pulled.value is None:
            return self._forward(pulled)

        generated = self.generate_from_range(
            pulled.value, form.from_degrees, form.to_degrees, form.by_degrees
        )
        if generated.value is None:
            logging.warning("degree steps not generated: %s", _describe(generated.outcome))
            return generated

        self.push(generated.value, form)
        return self._forward(
            Result(value=generated.value, outcome=validate(generated.value))
        )

    def set_start_date_time(self, form: FormState, when: Any) -> Result[RoutingConfiguration]:
        """Set the start from a date-time (e.g. the GRIB timeline time).

        Accepts anything ``pandas.Timestamp`` understands. Invalid input leaves
        the form untouched.
        """
        try:
            stamp = pd.Timestamp(when) if when is not None else pd.NaT
        except (TypeError, ValueError):
            stamp = pd.NaT
        if pd.isna(stamp):
            return Result.rejected(
                ErrorKind.INVALID_DATE_TIME, "invalid date-time", str(when)
            )

        form.start_date = stamp.date()
        form.start_hour = _format_hours(stamp.hour, stamp.minute)
        return self.update(form)

    def use_current_time(self, form: FormState) -> Result[RoutingConfiguration]:
        return self.set_start_date_time(form, datetime.now())

    def edit_boat(self, form: FormState, boat_path: str) -> Result[RoutingConfiguration]:
        """Point the form at another boat file and propagate the change."""
        changed = boat_path != form.boat_path
        form.boat_path = boat_path
        pulled = self.pull(form)
        if changed and pulled.value is not None and self.boat_changed is not None:
            logging.info("boat changed to %s", boat_path)
            self.boat_changed(pulled.value)
        return self._forward(pulled)

    def set_avoid_cyclones(self, form: FormState, enabled: bool) -> Result[RoutingConfiguration]:
        form.avoid_cyclone_tracks = enabled
        return self.update(form)

    def add_degree_step(self, form: FormState) -> Result[RoutingConfiguration]:
        """Insert the entry field's value at the selection, or append it."""
        step = _parse_float(form.degree_step_entry, "degree step")
        if not step.ok:
            return Result(value=None, outcome=step.outcome)

        index = form.degree_step_selection
        if index is None or index < 0:
            index = len(form.degree_steps)
        form.degree_steps.insert(index, f"{step.value:f}")
        form.degree_step_entry = ""
        return self.update(form)

    def remove_degree_step(self, form: FormState) -> Result[RoutingConfiguration] | None:
        """Remove the selected step. Returns ``None`` when nothing is selected."""
        index = form.degree_step_selection
        if index is None or index < 0:
            return None

        del form.degree_steps[index]
        form.degree_step_selection = index if index < len(form.degree_steps) else None
        return self.update(form)

    def clear_degree_steps(self, form: FormState) -> Result[RoutingConfiguration]:
        form.degree_steps.clear()
        form.degree_step_selection = None
        return self.update(form)

    def _forward(self, result: Result[RoutingConfiguration]) -> Result[RoutingConfiguration]:
        if result.outcome.rejected or result.value is None:
            logging.warning("configuration rejected: %s", _describe(result.outcome))
            return result
        for issue in result.outcome.warnings:
            logging.warning("configuration warning: %s", issue)
        self.notify_changed(result.value)
        return result


def _describe(outcome: Outcome) -> str:
    return "; ".join(str(issue) for issue in outcome.issues)

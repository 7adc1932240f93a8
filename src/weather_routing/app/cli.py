"""Command line interface for routing configurations.

Provides a Click-based CLI and a programmatic build_configuration() function
for creating RoutingConfiguration objects from individual parameters.
"""

import dataclasses
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import json
import logging
import sys

import click
import pandas as pd

from ..core.config import (
    ClimatologyType,
    CycloneAvoidance,
    Integrator,
    RoutingConfiguration,
)
from ..core.degree_steps import DegreeStepSet
from ..core.outcome import ErrorKind, Outcome, Result
from ..core.validation import validate


def build_configuration(
    # Route
    start: str = "",
    end: str = "",
    start_time: Optional[str] = None,
    boat_file: str = "",
    # Discretization
    time_step: Optional[int] = None,
    degree_steps: Optional[tuple[float, ...]] = None,
    integrator: str = "newton",
    # Limits
    max_diverted_course: float = 100.0,
    max_search_angle: float = 120.0,
    max_wind_knots: float = 100.0,
    max_swell_meters: float = 20.0,
    max_latitude: float = 90.0,
    max_tacks: int = -1,
    tacking_time: int = 0,
    # Cyclones
    avoid_cyclones: bool = False,
    cyclone_months: int = 1,
    cyclone_days: int = 0,
    cyclone_wind_speed: int = 30,
    cyclone_climatology_start_year: int = 1985,
    # Capabilities
    detect_land: bool = True,
    currents: bool = False,
    inverted_regions: bool = False,
    anchoring: bool = False,
    allow_data_deficient: bool = False,
    use_grib: bool = True,
    climatology_type: str = "DISABLED",
    # Config file override
    config_dict: Optional[dict[str, Any]] = None,
) -> RoutingConfiguration:
    """Build RoutingConfiguration from individual parameters.

    Parameters are merged with the RoutingConfiguration defaults. If
    config_dict is provided, its entries override individual parameters.

    Parameters
    ----------
    start, end : str
        Waypoint names
    start_time : str, optional
        Start time in ISO format
    boat_file : str
        Path to the boat performance profile
    time_step : int, optional
        Time step in seconds
    degree_steps : tuple[float, ...], optional
        Degree steps; canonicalized
    integrator : str
        ``newton`` or ``runge_kutta``
    climatology_type : str
        Name of a ClimatologyType member
    config_dict : dict, optional
        Configuration dictionary (as written by ``to_dict``) that overrides
        individual parameters. A partial ``cyclones`` entry only replaces
        the cyclone settings it names.

    Returns
    -------
    RoutingConfiguration
        Configuration object. It is not validated here.
    """
    params = dict(
        start=start,
        end=end,
        boat_file=boat_file,
        integrator=Integrator(integrator.lower()),
        max_diverted_course=max_diverted_course,
        max_search_angle=max_search_angle,
        max_wind_knots=max_wind_knots,
        max_swell_meters=max_swell_meters,
        max_latitude=max_latitude,
        max_tacks=max_tacks,
        tacking_time=tacking_time,
        cyclones=CycloneAvoidance(
            enabled=avoid_cyclones,
            months=cyclone_months,
            days=cyclone_days,
            wind_speed=cyclone_wind_speed,
            climatology_start_year=cyclone_climatology_start_year,
        ),
        detect_land=detect_land,
        currents=currents,
        inverted_regions=inverted_regions,
        anchoring=anchoring,
        allow_data_deficient=allow_data_deficient,
        use_grib=use_grib,
        climatology_type=ClimatologyType[climatology_type.upper()],
    )
    if start_time is not None:
        params["start_time"] = datetime.fromisoformat(start_time)
    if time_step is not None:
        params["time_step"] = time_step
    if degree_steps:
        params["degree_steps"] = DegreeStepSet.from_values(degree_steps)

    configuration = RoutingConfiguration(**params)
    if config_dict:
        config_dict = dict(config_dict)
        # a partial cyclones dict only overrides the keys it names
        cyclones = config_dict.pop("cyclones", None)
        overrides = RoutingConfiguration.from_dict(config_dict)
        changed = {key: getattr(overrides, key) for key in config_dict}
        if cyclones is not None:
            changed["cyclones"] = dataclasses.replace(configuration.cyclones, **cyclones)
        configuration = configuration.replace(**changed)
    return configuration


_MALFORMED_INPUT = (KeyError, TypeError, ValueError, json.JSONDecodeError)


def _malformed(path, exc: Exception) -> Result:
    return Result.rejected(
        ErrorKind.PARSE_ERROR, "malformed configuration file", f"{path}: {exc!r}"
    )


def _load_configuration(config_file) -> Result[RoutingConfiguration]:
    """Load CONFIG_FILE, reporting malformed content as a ParseError."""
    try:
        return Result(value=RoutingConfiguration.load_json(config_file))
    except _MALFORMED_INPUT as exc:
        return _malformed(config_file, exc)


def _echo_outcome(outcome: Outcome) -> None:
    for issue in outcome.errors:
        click.echo(f"error: {issue}", err=True)
    for issue in outcome.warnings:
        click.echo(f"warning: {issue}", err=True)


@click.group()
@click.option("--verbose", is_flag=True, help="Log at INFO level.")
def main(verbose):
    """Build, inspect and validate weather routing configurations."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@main.command("generate-steps")
@click.argument("from_degrees", type=float)
@click.argument("to_degrees", type=float)
@click.argument("by_degrees", type=float)
def generate_steps(from_degrees, to_degrees, by_degrees):
    """Print the symmetric degree steps FROM..TO by BY."""
    result = DegreeStepSet.generate(from_degrees, to_degrees, by_degrees)
    _echo_outcome(result.outcome)
    if result.value is None:
        sys.exit(1)
    click.echo(" ".join(result.value.to_text()))


@main.command("validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def validate_file(config_file):
    """Validate CONFIG_FILE; exit status 1 when rejected."""
    loaded = _load_configuration(config_file)
    if loaded.value is None:
        _echo_outcome(loaded.outcome)
        sys.exit(1)
    outcome = validate(loaded.value)
    _echo_outcome(outcome)
    if outcome.rejected:
        sys.exit(1)
    click.echo(f"{config_file}: {outcome.severity.name.lower()}")


@main.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def show(config_file):
    """Print the settings in CONFIG_FILE as a table."""
    loaded = _load_configuration(config_file)
    if loaded.value is None:
        _echo_outcome(loaded.outcome)
        sys.exit(1)
    configuration = loaded.value
    with pd.option_context("display.max_colwidth", 80):
        click.echo(configuration.data_frame.T.to_string(header=False))


@main.command()
@click.argument("output_file", type=click.Path(dir_okay=False))
@click.option("--start", type=str, default="", help="Start waypoint name.")
@click.option("--end", type=str, default="", help="End waypoint name.")
@click.option(
    "--start-time",
    type=str,
    default=None,
    help="Start time in ISO format (e.g., 2024-01-01T06:30).",
)
@click.option("--boat", "boat_file", type=str, default="", help="Boat profile path.")
@click.option("--time-step", type=int, default=None, help="Time step in seconds.")
@click.option(
    "--degree-step",
    "degree_steps",
    type=float,
    multiple=True,
    help="Degree step (e.g., --degree-step -30 --degree-step 30).",
)
@click.option(
    "--integrator",
    type=click.Choice([i.value for i in Integrator], case_sensitive=False),
    default=Integrator.NEWTON.value,
    help="Integration method.",
)
@click.option("--max-wind-knots", type=float, default=100.0, help="Max wind speed.")
@click.option("--max-swell-meters", type=float, default=20.0, help="Max swell height.")
@click.option("--avoid-cyclones/--no-avoid-cyclones", default=False)
@click.option("--detect-land/--no-detect-land", default=True)
@click.option("--currents/--no-currents", default=False)
@click.option(
    "--climatology-type",
    type=click.Choice([c.name for c in ClimatologyType], case_sensitive=False),
    default=ClimatologyType.DISABLED.name,
    help="Climatology data source.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON configuration whose entries override the options.",
)
def new(
    output_file,
    start,
    end,
    start_time,
    boat_file,
    time_step,
    degree_steps,
    integrator,
    max_wind_knots,
    max_swell_meters,
    avoid_cyclones,
    detect_land,
    currents,
    climatology_type,
    config_path,
):
    """Write a new configuration to OUTPUT_FILE."""
    config_dict = None
    try:
        if config_path:
            with Path(config_path).open("r", encoding="utf-8") as fh:
                config_dict = json.load(fh)
        configuration = build_configuration(
            start=start,
            end=end,
            start_time=start_time,
            boat_file=boat_file,
            time_step=time_step,
            degree_steps=degree_steps,
            integrator=integrator,
            max_wind_knots=max_wind_knots,
            max_swell_meters=max_swell_meters,
            avoid_cyclones=avoid_cyclones,
            detect_land=detect_land,
            currents=currents,
            climatology_type=climatology_type,
            config_dict=config_dict,
        )
    except _MALFORMED_INPUT as exc:
        _echo_outcome(_malformed(config_path or "options", exc).outcome)
        sys.exit(1)
    outcome = validate(configuration)
    _echo_outcome(outcome)
    if outcome.rejected:
        sys.exit(1)
    configuration.dump_json(output_file)
    click.echo(f"Configuration saved to {output_file}")


if __name__ == "__main__":
    main()

from __future__ import annotations

import dataclasses
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from enum import Enum, IntEnum
import json
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from .degree_steps import DegreeStepSet
from .units import knots_to_ms

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


class Integrator(Enum):
    """Numerical integration method used by the isochrone search."""

    NEWTON = "newton"
    RUNGE_KUTTA = "runge_kutta"


class ClimatologyType(IntEnum):
    """Climatology data source. Values are the form's selection indices."""

    DISABLED = 0
    CURRENTS_ONLY = 1
    CUMULATIVE_MAP = 2
    CUMULATIVE_MINUS_CALMS = 3
    MOST_LIKELY = 4
    AVERAGE = 5


@dataclass(frozen=True)
class CycloneAvoidance:
    """Cyclone track avoidance window.

    The four window fields are kept when ``enabled`` is false but have no
    effect then.
    """

    enabled: bool = False
    months: int = 1
    days: int = 0
    wind_speed: int = 30
    climatology_start_year: int = 1985

    @property
    def active(self) -> bool:
        return self.enabled


DEFAULT_START_TIME = datetime(2024, 1, 1, 0, 0)
DEFAULT_DEGREE_STEPS = DegreeStepSet.generate(10.0, 170.0, 10.0).value


def compose_time_step(hours: int, minutes: int, seconds: int) -> int:
    """Sum hour, minute and second components to seconds."""
    return SECONDS_PER_MINUTE * (SECONDS_PER_MINUTE * hours + minutes) + seconds


def split_time_step(time_step: int) -> tuple[int, int, int]:
    """Split seconds into (hours, minutes, seconds), e.g. 3725 -> (1, 2, 5)."""
    hours, remainder = divmod(time_step, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, SECONDS_PER_MINUTE)
    return hours, minutes, seconds


@dataclass(frozen=True)
class RoutingConfiguration:
    """Parameter set consumed by the isochrone search.

    Instances are values: they are built fresh for an editing session,
    replaced as a whole and never changed in place. ``start``, ``end`` and
    ``boat_file`` are references owned elsewhere (waypoint registry, boat
    profile store).
    """

    # Route
    start: str = ""
    end: str = ""
    start_time: datetime = DEFAULT_START_TIME
    boat_file: str = ""

    # Discretization
    time_step: int = SECONDS_PER_HOUR  # seconds
    degree_steps: DegreeStepSet = DEFAULT_DEGREE_STEPS
    integrator: Integrator = Integrator.NEWTON

    # Limits
    max_diverted_course: float = 100.0  # degrees
    max_search_angle: float = 120.0  # degrees
    max_wind_knots: float = 100.0
    max_swell_meters: float = 20.0
    max_latitude: float = 90.0  # degrees
    max_tacks: int = -1  # -1: unlimited
    tacking_time: int = 0  # seconds

    cyclones: CycloneAvoidance = CycloneAvoidance()

    # Capabilities
    detect_land: bool = True
    currents: bool = False
    inverted_regions: bool = False
    anchoring: bool = False
    allow_data_deficient: bool = False
    use_grib: bool = True

    climatology_type: ClimatologyType = ClimatologyType.DISABLED

    @property
    def time_step_components(self) -> tuple[int, int, int]:
        return split_time_step(self.time_step)

    @property
    def max_wind_ms(self) -> float:
        """Maximum wind speed in meters per second."""
        return knots_to_ms(self.max_wind_knots)

    def replace(self, **changes) -> RoutingConfiguration:
        """Copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["start_time"] = self.start_time.isoformat()
        data["degree_steps"] = self.degree_steps.to_list()
        data["integrator"] = self.integrator.value
        data["cyclones"] = asdict(self.cyclones)
        data["climatology_type"] = self.climatology_type.name
        return data

    @classmethod
    def from_dict(cls, data: dict) -> RoutingConfiguration:
        """Construct from dict as written by ``to_dict``.

        Missing keys fall back to the defaults.
        """
        data = dict(data)
        if "start_time" in data:
            data["start_time"] = datetime.fromisoformat(data["start_time"])
        if "degree_steps" in data:
            data["degree_steps"] = DegreeStepSet(values=tuple(data["degree_steps"]))
        if "integrator" in data:
            data["integrator"] = Integrator(data["integrator"])
        if "cyclones" in data:
            data["cyclones"] = CycloneAvoidance(**data["cyclones"])
        if "climatology_type" in data:
            data["climatology_type"] = ClimatologyType[data["climatology_type"]]
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)

    def to_msgpack(self) -> bytes:
        """Serialize to MessagePack binary format."""
        import msgpack

        def _default(obj: Any):
            if isinstance(obj, np.generic):
                return obj.item()
            raise TypeError(f"Object of type {type(obj)!r} is not serialisable")

        return msgpack.packb(self.to_dict(), use_bin_type=True, default=_default)

    @classmethod
    def from_msgpack(cls, data: bytes) -> RoutingConfiguration:
        """Deserialize from MessagePack binary format."""
        import msgpack

        return cls.from_dict(msgpack.unpackb(data, raw=False))

    def dump_json(self, path: Path | str, *, indent: int = 2) -> None:
        """Write configuration to JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(self.to_dict(), fh, indent=indent)

    @classmethod
    def load_json(cls, path: Path | str) -> RoutingConfiguration:
        """Load a configuration from disk."""
        with Path(path).open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        return cls.from_dict(data)

    @property
    def data_frame(self) -> pd.DataFrame:
        """Single-row data frame with one column per scalar setting."""
        data = self.to_dict()
        cyclones = data.pop("cyclones")
        data.update({f"cyclone_{k}": v for k, v in cyclones.items()})
        data["degree_steps"] = " ".join(self.degree_steps.to_text())
        data["max_wind_ms"] = self.max_wind_ms
        return pd.DataFrame(
            data,
            index=[
                0,
            ],
        )

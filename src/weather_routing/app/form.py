"""Editable form snapshot exchanged with the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class FormState:
    """Transient values of the configuration form.

    Free-text widgets are kept as text and only parsed on pull; spin
    controls, check boxes and choices hold their native values. Nothing here
    is validated.
    """

    # Waypoint choices offered for start and end, kept in step
    sources: list[str] = field(default_factory=list)
    start: str = ""
    end: str = ""

    start_date: date | None = None
    start_hour: str = "0.000"  # decimal hours

    boat_path: str = ""

    time_step_hours: int = 1
    time_step_minutes: int = 0
    time_step_seconds: int = 0

    degree_steps: list[str] = field(default_factory=list)
    degree_step_selection: int | None = None
    degree_step_entry: str = ""
    from_degrees: str = ""
    to_degrees: str = ""
    by_degrees: str = ""

    runge_kutta: bool = False

    max_diverted_course: float = 100.0
    max_search_angle: float = 120.0
    max_wind_knots: float = 100.0
    max_swell_meters: float = 20.0
    max_latitude: float = 90.0
    max_tacks: int = -1
    tacking_time: int = 0

    avoid_cyclone_tracks: bool = False
    cyclone_months: int = 1
    cyclone_days: int = 0
    cyclone_wind_speed: int = 30
    cyclone_climatology_start_year: int = 1985

    detect_land: bool = True
    currents: bool = False
    inverted_regions: bool = False
    anchoring: bool = False
    allow_data_deficient: bool = False
    use_grib: bool = True
    climatology_selection: int = 0

    @property
    def cyclone_fields_enabled(self) -> bool:
        """Whether the cyclone window widgets are editable."""
        return self.avoid_cyclone_tracks

    def add_source(self, name: str) -> None:
        """Offer ``name`` as start and end choice."""
        self.sources.append(name)

    def remove_source(self, name: str) -> None:
        """Withdraw ``name`` from the choices. Unknown names are ignored."""
        if name in self.sources:
            self.sources.remove(name)

    def clear_sources(self) -> None:
        self.sources.clear()

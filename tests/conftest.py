"""Pytest configuration and shared fixtures."""
from datetime import datetime

import pytest

from weather_routing.app import ConfigurationSlot, FormState, SyncController
from weather_routing.core import (
    ClimatologyType,
    CycloneAvoidance,
    DegreeStepSet,
    Integrator,
    RoutingConfiguration,
)


@pytest.fixture
def configuration():
    """Non-default configuration touching every field."""
    return RoutingConfiguration(
        start="Boston",
        end="Bermuda",
        start_time=datetime(2024, 6, 15, 7, 45),
        boat_file="/boats/first_40.xml",
        time_step=3725,
        degree_steps=DegreeStepSet.generate(5.0, 60.0, 7.5).value,
        integrator=Integrator.RUNGE_KUTTA,
        max_diverted_course=90.0,
        max_search_angle=110.5,
        max_wind_knots=35.0,
        max_swell_meters=4.5,
        max_latitude=60.0,
        max_tacks=6,
        tacking_time=600,
        cyclones=CycloneAvoidance(
            enabled=True,
            months=2,
            days=10,
            wind_speed=45,
            climatology_start_year=1990,
        ),
        detect_land=False,
        currents=True,
        inverted_regions=True,
        anchoring=True,
        allow_data_deficient=True,
        use_grib=False,
        climatology_type=ClimatologyType.MOST_LIKELY,
    )


@pytest.fixture
def slot():
    return ConfigurationSlot()


@pytest.fixture
def controller(slot):
    return SyncController(consumer=slot)


@pytest.fixture
def form(controller, configuration):
    """Form showing ``configuration``."""
    return controller.push(configuration, FormState())

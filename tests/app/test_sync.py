from datetime import date, datetime
import logging

import numpy as np
import pytest

from weather_routing.app import ConfigurationSlot, FormState, SyncController
from weather_routing.core import (
    ClimatologyType,
    DegreeStepSet,
    ErrorKind,
    RoutingConfiguration,
)


# push / pull


def test_round_trip(controller, configuration):
    result = controller.pull(controller.push(configuration, FormState()))
    assert result.ok
    assert result.value == configuration


def test_round_trip_default_configuration(controller):
    configuration = RoutingConfiguration(boat_file="boat.xml")
    assert controller.pull(controller.push(configuration, FormState())).value == configuration


def test_round_trip_every_minute_of_the_day(controller, configuration):
    form = FormState()
    for minute_of_day in range(0, 24 * 60, 7):
        hour, minute = divmod(minute_of_day, 60)
        c = configuration.replace(start_time=datetime(2024, 2, 29, hour, minute))
        assert controller.pull(controller.push(c, form)).value == c


def test_round_trip_drops_seconds(controller, configuration):
    c = configuration.replace(start_time=datetime(2024, 6, 15, 7, 45, 30))
    assert controller.pull(controller.push(c, FormState())).value.start_time == datetime(
        2024, 6, 15, 7, 45
    )


def test_round_trip_degree_steps_rounded_to_a_tenth(controller, configuration):
    c = configuration.replace(degree_steps=DegreeStepSet.from_values([-20.06, 20.06]))
    pulled = controller.pull(controller.push(c, FormState())).value
    assert pulled.degree_steps.to_list() == [-20.1, 20.1]


def test_push_fields(form):
    assert (form.time_step_hours, form.time_step_minutes, form.time_step_seconds) == (1, 2, 5)
    assert form.start_date == date(2024, 6, 15)
    assert form.start_hour == "7.750"
    assert form.degree_steps[0] == "-57.5"
    assert form.runge_kutta
    assert form.climatology_selection == ClimatologyType.MOST_LIKELY
    assert form.cyclone_fields_enabled
    assert form.boat_path == "/boats/first_40.xml"


def test_pull_composes_time_step(controller, form):
    form.time_step_hours, form.time_step_minutes, form.time_step_seconds = 1, 2, 5
    assert controller.pull(form).value.time_step == 3725


def test_pull_zero_time_step_returns_configuration_flagged_rejected(controller, form):
    form.time_step_hours = form.time_step_minutes = form.time_step_seconds = 0
    result = controller.pull(form)
    assert result.value is not None
    assert result.value.time_step == 0
    assert result.outcome.rejected
    assert result.outcome.has(ErrorKind.ZERO_DURATION)
    assert not result.ok


def test_pull_zero_time_step_reported_alongside_other_errors(controller, form):
    form.time_step_hours = form.time_step_minutes = form.time_step_seconds = 0
    form.start_hour = "noon"
    result = controller.pull(form)
    assert result.value is None
    assert result.outcome.has(ErrorKind.ZERO_DURATION)
    assert result.outcome.has(ErrorKind.PARSE_ERROR)


def test_pull_negative_time_step_component(controller, form):
    form.time_step_seconds = -1
    result = controller.pull(form)
    assert result.value is None
    assert result.outcome.has(ErrorKind.RANGE_ERROR)


def test_pull_missing_date(controller, form):
    form.start_date = None
    result = controller.pull(form)
    assert result.value is None
    assert result.outcome.kinds == (ErrorKind.INVALID_DATE_TIME,)


def test_pull_hour_out_of_range(controller, form):
    form.start_hour = "24.5"
    assert controller.pull(form).outcome.kinds == (ErrorKind.INVALID_DATE_TIME,)


def test_pull_decimal_hour(controller, form):
    form.start_hour = "18.5"
    assert controller.pull(form).value.start_time == datetime(2024, 6, 15, 18, 30)


def test_pull_malformed_degree_step(controller, form):
    form.degree_steps.append("ten")
    result = controller.pull(form)
    assert result.value is None
    assert result.outcome.issues[0].kind is ErrorKind.PARSE_ERROR
    assert result.outcome.issues[0].detail == "ten"


def test_pull_three_degree_steps_warns(controller, form):
    form.degree_steps = ["-10", "0", "10"]
    result = controller.pull(form)
    assert result.ok
    assert result.outcome.kinds == (ErrorKind.INSUFFICIENT_RESOLUTION,)


def test_pull_four_degree_steps_clean(controller, form):
    form.degree_steps = ["-20", "-10", "10", "20"]
    result = controller.pull(form)
    assert result.ok
    assert result.outcome.issues == ()


def test_pull_canonicalizes_degree_steps(controller, form):
    form.degree_steps = ["350.0", "10.0", "20.0", "-20.0", "10.0"]
    assert controller.pull(form).value.degree_steps.to_list() == [-20.0, -10.0, 10.0, 20.0]


def test_pull_unknown_climatology(controller, form):
    form.climatology_selection = 99
    result = controller.pull(form)
    assert result.value is None
    assert result.outcome.has(ErrorKind.RANGE_ERROR)


def test_pull_missing_boat_warns(controller, form):
    form.boat_path = ""
    result = controller.pull(form)
    assert result.ok
    assert result.outcome.kinds == (ErrorKind.MISSING_BOAT_FILE,)


def test_pull_keeps_cyclone_fields_when_disabled(controller, form):
    form.avoid_cyclone_tracks = False
    cyclones = controller.pull(form).value.cyclones
    assert not cyclones.active
    assert cyclones.months == 2
    assert cyclones.climatology_start_year == 1990


def test_pull_does_not_touch_consumer(controller, slot, form):
    controller.pull(form)
    assert slot.current is None


# generate from range


def test_generate_from_range(controller, configuration):
    result = controller.generate_from_range(configuration, "10", "30", "10")
    assert result.ok
    assert result.value.degree_steps.to_list() == [-30.0, -20.0, -10.0, 10.0, 20.0, 30.0]
    assert result.value.replace(degree_steps=configuration.degree_steps) == configuration
    assert len(configuration.degree_steps) == 16


def test_generate_from_range_rejects_bounds(controller, configuration):
    result = controller.generate_from_range(configuration, 200, 30, 10)
    assert result.value is None
    assert result.outcome.kinds == (ErrorKind.RANGE_ERROR,)


def test_generate_from_range_rejects_malformed_text(controller, configuration):
    result = controller.generate_from_range(configuration, "10", "x", "")
    assert result.value is None
    assert result.outcome.kinds == (ErrorKind.PARSE_ERROR, ErrorKind.PARSE_ERROR)


def test_on_generate_degree_steps_replaces_manual_entries(controller, slot, form):
    form.degree_steps = ["1.0", "2.0", "3.0", "4.0", "5.0"]
    form.from_degrees, form.to_degrees, form.by_degrees = "10", "30", "10"
    result = controller.on_generate_degree_steps(form)
    assert result.ok
    assert form.degree_steps == ["-30.0", "-20.0", "-10.0", "10.0", "20.0", "30.0"]
    assert slot.current == result.value


def test_on_generate_degree_steps_rejected_leaves_everything(controller, slot, form):
    before = list(form.degree_steps)
    form.from_degrees, form.to_degrees, form.by_degrees = "200", "30", "10"
    result = controller.on_generate_degree_steps(form)
    assert result.outcome.kinds == (ErrorKind.RANGE_ERROR,)
    assert form.degree_steps == before
    assert slot.current is None


# notify / update


def test_notify_changed_replaces_slot(controller, slot, configuration):
    controller.notify_changed(configuration)
    assert slot.current is configuration
    other = configuration.replace(start="Halifax")
    controller.notify_changed(other)
    assert slot.current is other


def test_update_forwards_accepted(controller, slot, form, configuration):
    result = controller.update(form)
    assert slot.current == configuration
    assert result.value == configuration


def test_update_forwards_warnings(controller, slot, form):
    form.degree_steps = ["-10", "10"]
    controller.update(form)
    assert slot.current.degree_steps.to_list() == [-10.0, 10.0]


def test_update_does_not_forward_rejected(controller, slot, form, configuration, caplog):
    controller.notify_changed(configuration)
    form.time_step_hours = form.time_step_minutes = form.time_step_seconds = 0
    with caplog.at_level(logging.WARNING):
        result = controller.update(form)
    assert result.outcome.rejected
    assert slot.current is configuration
    assert "ZeroDuration" in caplog.text


def test_open_seeds_form_from_consumer(configuration):
    controller = SyncController(consumer=ConfigurationSlot(configuration))
    form = controller.open(FormState())
    assert controller.pull(form).value == configuration


def test_open_without_current_uses_defaults(controller):
    form = controller.open(FormState())
    assert controller.pull(form).value == RoutingConfiguration()


# form events


def test_set_start_date_time(controller, slot, form):
    result = controller.set_start_date_time(form, datetime(2024, 3, 1, 18, 30))
    assert form.start_date == date(2024, 3, 1)
    assert form.start_hour == "18.500"
    assert result.value.start_time == datetime(2024, 3, 1, 18, 30)
    assert slot.current.start_time == datetime(2024, 3, 1, 18, 30)


def test_set_start_date_time_from_numpy(controller, form):
    result = controller.set_start_date_time(form, np.datetime64("2021-01-05T06:00"))
    assert result.value.start_time == datetime(2021, 1, 5, 6, 0)


@pytest.mark.parametrize("when", [None, "not a date", np.datetime64("NaT")])
def test_set_start_date_time_invalid(controller, slot, form, when):
    before = (form.start_date, form.start_hour)
    result = controller.set_start_date_time(form, when)
    assert result.outcome.kinds == (ErrorKind.INVALID_DATE_TIME,)
    assert (form.start_date, form.start_hour) == before
    assert slot.current is None


def test_use_current_time(controller, form):
    result = controller.use_current_time(form)
    assert result.value.start_time.date() == form.start_date


def test_edit_boat_propagates_change(slot, configuration):
    changed = []
    controller = SyncController(consumer=slot, boat_changed=changed.append)
    form = controller.push(configuration, FormState())
    controller.edit_boat(form, "/boats/swan_48.xml")
    assert [c.boat_file for c in changed] == ["/boats/swan_48.xml"]
    assert slot.current.boat_file == "/boats/swan_48.xml"


def test_edit_boat_same_path_does_not_propagate(slot, configuration):
    changed = []
    controller = SyncController(consumer=slot, boat_changed=changed.append)
    form = controller.push(configuration, FormState())
    controller.edit_boat(form, configuration.boat_file)
    assert changed == []
    assert slot.current == configuration


def test_set_avoid_cyclones(controller, slot, form):
    controller.set_avoid_cyclones(form, False)
    assert not form.cyclone_fields_enabled
    assert not slot.current.cyclones.active
    assert slot.current.cyclones.wind_speed == 45


def test_add_degree_step_appends(controller, slot, form):
    form.degree_steps = ["-10.0", "10.0", "20.0"]
    form.degree_step_entry = "-20"
    result = controller.add_degree_step(form)
    assert form.degree_steps == ["-10.0", "10.0", "20.0", "-20.000000"]
    assert form.degree_step_entry == ""
    assert result.outcome.issues == ()
    assert slot.current.degree_steps.to_list() == [-20.0, -10.0, 10.0, 20.0]


def test_add_degree_step_at_selection(controller, form):
    form.degree_steps = ["-10.0", "10.0"]
    form.degree_step_selection = 1
    form.degree_step_entry = "5"
    controller.add_degree_step(form)
    assert form.degree_steps == ["-10.0", "5.000000", "10.0"]


def test_add_degree_step_malformed(controller, slot, form):
    before = list(form.degree_steps)
    form.degree_step_entry = "five"
    result = controller.add_degree_step(form)
    assert result.outcome.kinds == (ErrorKind.PARSE_ERROR,)
    assert form.degree_steps == before
    assert slot.current is None


def test_remove_degree_step(controller, form):
    form.degree_steps = ["-10.0", "0.0", "10.0"]
    assert controller.remove_degree_step(form) is None

    form.degree_step_selection = 2
    controller.remove_degree_step(form)
    assert form.degree_steps == ["-10.0", "0.0"]
    assert form.degree_step_selection is None

    form.degree_step_selection = 0
    controller.remove_degree_step(form)
    assert form.degree_steps == ["0.0"]
    assert form.degree_step_selection == 0


def test_clear_degree_steps(controller, slot, form):
    result = controller.clear_degree_steps(form)
    assert form.degree_steps == []
    assert result.outcome.kinds == (ErrorKind.INSUFFICIENT_RESOLUTION,)
    assert len(slot.current.degree_steps) == 0

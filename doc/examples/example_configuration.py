"""Example editing session.

Demonstrates how a form layer drives SyncController: open a form from the
current configuration, edit it, regenerate the degree steps and forward the
result to the slot read by the search engine.
"""

import logging
from datetime import datetime

from weather_routing.app import ConfigurationSlot, FormState, SyncController, build_configuration


def run_example() -> ConfigurationSlot:
    """Run one editing session and return the updated slot."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    slot = ConfigurationSlot(
        build_configuration(
            start="Boston",
            end="Bermuda",
            start_time="2024-06-15T06:00",
            boat_file="boats/first_40.xml",
            time_step=1800,
        )
    )
    controller = SyncController(
        consumer=slot,
        boat_changed=lambda c: logging.info("refresh routes using %s", c.boat_file),
    )

    form = controller.open(FormState())
    form.add_source("Boston")
    form.add_source("Bermuda")

    # Regenerate a fan of +-5..+-60 degrees in 5 degree steps
    form.from_degrees, form.to_degrees, form.by_degrees = "5", "60", "5"
    controller.on_generate_degree_steps(form)

    controller.set_start_date_time(form, datetime(2024, 6, 16, 4, 30))
    controller.edit_boat(form, "boats/swan_48.xml")

    # A zero time step is refused and the slot keeps the previous value
    form.time_step_hours = form.time_step_minutes = form.time_step_seconds = 0
    result = controller.update(form)
    for issue in result.outcome.issues:
        print(issue)

    return slot


if __name__ == "__main__":
    slot = run_example()
    print(slot.current.data_frame.T.to_string(header=False))

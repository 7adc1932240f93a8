"""Form-facing layer: form snapshot, sync controller and CLI."""

from .form import FormState
from .sync import ConfigurationConsumer, ConfigurationSlot, SyncController
from .cli import build_configuration

__all__ = [
    "FormState",
    "ConfigurationConsumer",
    "ConfigurationSlot",
    "SyncController",
    "build_configuration",
]

"""
Weather routing configuration package.

Two-layer architecture:
- core: configuration values, degree steps, outcomes and validation
- app: form snapshot, form/configuration synchronization and CLI

Examples
--------
>>> from weather_routing.core import DegreeStepSet, RoutingConfiguration
>>> from weather_routing.app import FormState, SyncController, ConfigurationSlot
"""

__version__ = "2025dev"

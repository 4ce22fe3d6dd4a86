"""Configuration objects and helpers for LinAccel.

This package knows how to load/save the small YAML documents the app keeps:
- ``sensor_prefs.yaml`` with the chosen frequency tier and axis inversion
  (see :mod:`prefs`), handed to sessions explicitly rather than read globally
- an optional runtime config with refresh rates and synthetic-feed shaping
  (see :mod:`runtime`)
"""

from .prefs import SensorPrefs, load_prefs, save_prefs
from .runtime import LinAccelConfig, config_from_mapping, load_config
from .sampling import FrequencyTier

__all__ = [
    "FrequencyTier",
    "LinAccelConfig",
    "SensorPrefs",
    "config_from_mapping",
    "load_config",
    "load_prefs",
    "save_prefs",
]

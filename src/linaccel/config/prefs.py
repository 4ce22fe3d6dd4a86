"""Persisted user preferences (sensor frequency tier, axis inversion)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .sampling import DEFAULT_TIER, FrequencyTier

logger = logging.getLogger(__name__)

PREFS_FILENAME = "sensor_prefs.yaml"
KEY_FREQUENCY = "sensor_frequency"
KEY_INVERT_AXES = "invert_axes"


def default_config_dir() -> Path:
    """
    Directory holding user preferences.

    ``LINACCEL_CONFIG_DIR`` overrides the default ``~/.linaccel`` folder.
    """
    env_dir = os.environ.get("LINACCEL_CONFIG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path("~").expanduser() / ".linaccel"


def default_prefs_path() -> Path:
    return default_config_dir() / PREFS_FILENAME


@dataclass(frozen=True)
class SensorPrefs:
    """Preferences a session is constructed with and hands back on close."""

    frequency: FrequencyTier = DEFAULT_TIER
    invert_axes: bool = False

    def with_frequency(self, tier: FrequencyTier) -> "SensorPrefs":
        return SensorPrefs(frequency=tier, invert_axes=self.invert_axes)

    def with_invert_axes(self, invert: bool) -> "SensorPrefs":
        return SensorPrefs(frequency=self.frequency, invert_axes=bool(invert))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "SensorPrefs":
        """Build prefs from a flat key/value mapping, ignoring unknown keys."""
        payload: Mapping[str, Any] = mapping or {}
        tier = FrequencyTier.from_value(payload.get(KEY_FREQUENCY, DEFAULT_TIER.value))
        invert = payload.get(KEY_INVERT_AXES, False)
        if isinstance(invert, str):
            invert = invert.strip().lower() in {"1", "true", "yes", "on"}
        return cls(frequency=tier, invert_axes=bool(invert))

    def to_mapping(self) -> dict:
        return {
            KEY_FREQUENCY: self.frequency.value,
            KEY_INVERT_AXES: bool(self.invert_axes),
        }


def load_prefs(path: str | Path | None = None) -> SensorPrefs:
    """
    Load preferences from ``path`` (default location when ``None``).

    Missing files fall back to default :class:`SensorPrefs`.
    """
    prefs_path = Path(path) if path is not None else default_prefs_path()
    if not prefs_path.exists():
        logger.debug("No preferences at %s; using defaults", prefs_path)
        return SensorPrefs()
    with prefs_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {prefs_path}, got {type(raw).__name__}")
    return SensorPrefs.from_mapping(raw)


def save_prefs(prefs: SensorPrefs, path: str | Path | None = None) -> Path:
    """Write ``prefs`` as YAML, creating the parent directory when needed."""
    prefs_path = Path(path) if path is not None else default_prefs_path()
    if not prefs_path.parent.exists():
        prefs_path.parent.mkdir(parents=True, exist_ok=True)
    with prefs_path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(prefs.to_mapping(), fh, default_flow_style=False, sort_keys=False)
    logger.info("Saved sensor preferences to %s", prefs_path)
    return prefs_path


__all__ = [
    "SensorPrefs",
    "default_config_dir",
    "default_prefs_path",
    "load_prefs",
    "save_prefs",
]

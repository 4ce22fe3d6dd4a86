"""Runtime tuning knobs for sessions, feeds, and the GUI."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from ..analysis.gauge import GRAVITY_EARTH


@dataclass(slots=True)
class LinAccelConfig:
    """
    Tuning knobs for how samples are simulated, estimated, and drawn.

    The defaults use Earth gravity as full scale and a
    rate readout refreshed every 100 ms.
    """

    full_scale: float = GRAVITY_EARTH

    rate_refresh_ms: int = 100
    gauge_refresh_hz: float = 30.0
    plot_window_seconds: float = 10.0

    # Synthetic feed shaping
    synthetic_amplitude: float = 4.0
    synthetic_frequency_hz: float = 0.5
    synthetic_noise: float = 0.2
    synthetic_jitter: float = 0.1

    def sanitized(self) -> LinAccelConfig:
        """Return a copy with derived limits applied."""
        return LinAccelConfig(
            full_scale=max(1e-6, float(self.full_scale)),
            rate_refresh_ms=max(10, int(self.rate_refresh_ms)),
            gauge_refresh_hz=max(1.0, float(self.gauge_refresh_hz)),
            plot_window_seconds=max(0.5, float(self.plot_window_seconds)),
            synthetic_amplitude=max(0.0, float(self.synthetic_amplitude)),
            synthetic_frequency_hz=max(0.0, float(self.synthetic_frequency_hz)),
            synthetic_noise=max(0.0, float(self.synthetic_noise)),
            synthetic_jitter=min(0.9, max(0.0, float(self.synthetic_jitter))),
        )


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`LinAccelConfig`."""
    return {f.name for f in fields(LinAccelConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten known nesting patterns (e.g. top-level ``gauge`` key)."""
    if "gauge" in data and isinstance(data["gauge"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "gauge":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> LinAccelConfig:
    """Build :class:`LinAccelConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return LinAccelConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return LinAccelConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> LinAccelConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`LinAccelConfig`.
    """
    if path is None:
        return LinAccelConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return LinAccelConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["LinAccelConfig", "config_from_mapping", "load_config"]

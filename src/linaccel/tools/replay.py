"""Replay a recorded sample log through the rate estimator and gauge."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..analysis.gauge import GRAVITY_EARTH
from ..analysis.rate import format_rate_hz
from ..dataio.log_loader import ReplaySummary, merge_logs, replay_log
from .logsetup import configure_logging

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replay LinAccel sample logs offline")
    parser.add_argument(
        "logs",
        nargs="+",
        type=Path,
        help="CSV logs with timestamp_ns,x,y[,z] columns",
    )
    parser.add_argument(
        "--full-scale",
        type=float,
        default=GRAVITY_EARTH,
        help=f"Full-scale acceleration in m/s^2 (default: {GRAVITY_EARTH})",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def format_summary(summary: ReplaySummary) -> str:
    lines = [
        f"samples:          {summary.sample_count}",
        f"duration:         {summary.duration_s:.3f} s",
        f"sensor frequency: {format_rate_hz(summary.rate_hz)} Hz",
        f"sample period:    {summary.period_s * 1000.0:.3f} ms",
        f"peak magnitude:   {summary.peak_magnitude:.3f}",
        f"clamped samples:  {summary.clamped_fraction * 100.0:.1f} %",
    ]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    configure_logging(args.verbose)

    missing = [p for p in args.logs if not p.exists()]
    if missing:
        for path in missing:
            logger.error("Log not found: %s", path)
        return 2

    try:
        log = merge_logs(args.logs)
        summary = replay_log(log, full_scale=args.full_scale)
    except ValueError as exc:
        logger.error("Cannot replay %s: %s", ", ".join(map(str, args.logs)), exc)
        return 1

    print(format_summary(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Live probe: run a session and print the estimated sensor frequency."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from ..config.prefs import default_prefs_path, load_prefs, save_prefs
from ..config.runtime import LinAccelConfig, load_config
from ..config.sampling import FrequencyTier
from ..core.feed import SensorFeed, SyntheticSensorFeed
from ..core.session import AccelerationSession
from ..core.stream_reader import JsonlSensorFeed
from ..dataio.csv_writer import SampleRecorder
from .logsetup import configure_logging

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LinAccel sensor frequency probe")
    parser.add_argument(
        "--source",
        choices=("synthetic", "stdin"),
        default="synthetic",
        help="Sample source: simulated sensor or JSON lines on stdin (default: synthetic)",
    )
    parser.add_argument(
        "--tier",
        choices=[t.value for t in FrequencyTier],
        help="Override the stored sensor frequency tier",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=5.0,
        help="Seconds to run; 0 runs until the stream ends or Ctrl+C (default: 5)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=1.0,
        help="Seconds between status lines (default: 1.0)",
    )
    parser.add_argument("--prefs", type=Path, help="Preferences YAML (default: ~/.linaccel)")
    parser.add_argument("--config", type=Path, help="Optional runtime config YAML")
    parser.add_argument("--record", type=Path, help="Write received samples to this CSV log")
    parser.add_argument(
        "--save-prefs",
        action="store_true",
        help="Persist the tier used for this run",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def build_feed(source: str, cfg: LinAccelConfig) -> SensorFeed:
    if source == "stdin":
        return JsonlSensorFeed(sys.stdin)
    return SyntheticSensorFeed(
        amplitude=cfg.synthetic_amplitude,
        frequency_hz=cfg.synthetic_frequency_hz,
        noise=cfg.synthetic_noise,
        jitter=cfg.synthetic_jitter,
    )


def status_line(session: AccelerationSession) -> str:
    frame = session.latest_frame()
    if frame is None:
        vec = "waiting for samples"
    else:
        vec = (
            f"x={frame.vector.x:+.3f} y={frame.vector.y:+.3f} "
            f"|v|={frame.magnitude:.3f} angle={frame.angle_deg:.1f}"
        )
    return f"[{session.tier.value}] {session.rate_text()} Hz  {vec}"


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    configure_logging(args.verbose)

    prefs_path = args.prefs or default_prefs_path()
    try:
        prefs = load_prefs(prefs_path)
        cfg = load_config(args.config)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    if args.tier:
        prefs = prefs.with_frequency(FrequencyTier.from_value(args.tier))

    feed = build_feed(args.source, cfg)
    session = AccelerationSession(feed, prefs, full_scale=cfg.full_scale)
    recorder = SampleRecorder() if args.record else None
    if recorder is not None:
        session.add_frame_listener(recorder)

    interval = max(0.05, float(args.interval))
    deadline = time.monotonic() + args.duration if args.duration > 0 else None
    session.start()
    try:
        while True:
            time.sleep(interval)
            print(status_line(session), flush=True)
            if deadline is not None and time.monotonic() >= deadline:
                break
            if isinstance(feed, JsonlSensorFeed) and not feed.is_registered():
                break
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        final_prefs = session.close()

    if recorder is not None:
        count = recorder.save(args.record)
        logger.info("Recorded %d samples to %s", count, args.record)
    if args.save_prefs:
        save_prefs(final_prefs, prefs_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

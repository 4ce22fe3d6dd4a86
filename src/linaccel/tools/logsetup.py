"""Logging setup shared by the command-line entry points."""

from __future__ import annotations

import logging
import os

DEBUG_LINACCEL = os.getenv("LINACCEL_DEBUG", "").lower() in {"1", "true", "yes", "on"}


def configure_logging(verbose: bool = False) -> None:
    """Initialise the logging subsystem for a command-line run."""
    level = logging.DEBUG if (verbose or DEBUG_LINACCEL) else logging.INFO
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

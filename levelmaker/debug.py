"""levelmaker/debug.py — Debug flag from environment variable, log setup."""

import logging
import os

DEBUG = os.environ.get("LEVELMAKER_DEBUG", "") == "1"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route levelmaker diagnostics to stderr. Applications call this, the library never does."""
    level = logging.DEBUG if (verbose or DEBUG) else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)

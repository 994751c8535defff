from __future__ import annotations

import logging
import os

DEFAULT_DB = os.getenv("PUNTO_DB", os.path.join("data", "punto.db"))
DB_DIR_ENV = "PUNTO_DB_DIR"
DEFAULT_LOG_LEVEL = os.getenv("PUNTO_LOG_LEVEL", "WARNING")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Sets up root logging for the command line entry points."""
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)

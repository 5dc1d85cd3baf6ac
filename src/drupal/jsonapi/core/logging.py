# drupal/jsonapi/core/logging.py
"""
Logging setup for generation runs and the HTTP adapter.

JSON lines by default so that per-address fetch/retry records can be
filtered by the build tooling; plain text for local debugging.
"""
from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Per-request transport chatter; the resolver logs its own fetches.
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO", *, json_format: bool = True) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    # Avoid duplicate handlers on reload
    root.handlers = [handler]

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

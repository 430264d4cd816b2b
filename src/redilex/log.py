"""Logging setup for redilex."""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

LOGGER_NAME = "redilex"
_LEVEL_ENV = "REDILEX_LOG_LEVEL"
_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(model)s] %(message)s"


class _ModelFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "model"):
            record.model = "-"
        return True


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Attach a stream handler to the ``redilex`` logger.

    ``level`` falls back to ``$REDILEX_LOG_LEVEL`` and then ``INFO``.
    """

    if level is None:
        level = os.environ.get(_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = level.upper()
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if not any(getattr(h, "_redilex", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.addFilter(_ModelFilter())
        handler._redilex = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root


def model_logger(name: str) -> logging.LoggerAdapter:
    """Logger for one model; every record carries ``model=<name>``."""

    return logging.LoggerAdapter(logging.getLogger(f"{LOGGER_NAME}.model"), {"model": name})

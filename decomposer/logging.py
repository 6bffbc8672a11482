"""Logging setup for the decomposer command line.

Library code only creates module loggers; handlers are attached here.
"""

from __future__ import annotations

import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path

_LOGGER_NAME = "decomposer"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3
_setup_lock = threading.Lock()


def setup_logging(level: str | int = logging.WARNING, log_file: Path | None = None) -> logging.Logger:
    """Attach a stderr handler (and optionally a rotating file handler).

    Calling it again only updates the level and swaps the file handler when
    the path changes.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    with _setup_lock:
        logger.setLevel(level)

        if not any(getattr(h, "_decomposer_stderr", False) for h in logger.handlers):
            stream = logging.StreamHandler()
            stream.setFormatter(logging.Formatter(_FORMAT))
            stream._decomposer_stderr = True  # type: ignore[attr-defined]
            logger.addHandler(stream)

        if log_file is not None:
            target = str(Path(log_file).resolve())
            for h in logger.handlers[:]:
                if not isinstance(h, RotatingFileHandler):
                    continue
                if h.baseFilename == target:
                    return logger
                # Different path, drop the stale handler
                logger.removeHandler(h)
                h.close()

            handler = RotatingFileHandler(target, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT)
            handler.setFormatter(logging.Formatter(_FORMAT))
            logger.addHandler(handler)

    return logger

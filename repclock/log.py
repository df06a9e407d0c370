"""Logging setup.

Everything logs under the ``repclock`` logger tree.  ``setup_logging``
attaches a rotating file handler (and optionally a console handler) to
that root once; calling it again only updates the level.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .settings import APP_DIR


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_DIR = APP_DIR / "logs"

_FILE_HANDLER = "repclock:file"
_CONSOLE_HANDLER = "repclock:console"


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_dir: Path | None = None,
    console: bool = False,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    logger = logging.getLogger("repclock")
    logger.setLevel(level)
    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)
    names = {h.get_name() for h in logger.handlers}

    if _FILE_HANDLER not in names:
        log_dir = log_dir or LOG_DIR
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / "repclock.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(fmt)
        handler.set_name(_FILE_HANDLER)
        logger.addHandler(handler)

    if console and _CONSOLE_HANDLER not in names:
        handler = logging.StreamHandler()
        handler.setFormatter(fmt)
        handler.set_name(_CONSOLE_HANDLER)
        logger.addHandler(handler)

    return logger

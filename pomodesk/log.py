"""Application-wide logging to a rotating file in the app-support dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from .settings import APP_SUPPORT_DIR

LOG_PATH = APP_SUPPORT_DIR / "pomodesk.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_configured = False


def configure_logging(
    path: Path | None = None, level: int = logging.INFO,
) -> logging.Logger:
    """Attach the file handler to the ``pomodesk`` logger (once)."""
    global _configured
    logger = logging.getLogger("pomodesk")
    if _configured:
        return logger

    path = path or LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger.setLevel(level)
    logger.addHandler(handler)
    _configured = True
    return logger

import logging
import os
from typing import Dict, Optional

_LOGGERS: Dict[str, logging.Logger] = {}
_LEVEL: Optional[str] = None

# Module loggers (logging.getLogger(__name__)) propagate here.
PACKAGE_LOGGER = "teleguard"


def get_logger(name: str = "TeleGuard", level: Optional[str] = None) -> logging.Logger:
    if name in _LOGGERS:
        return _LOGGERS[name]

    logger = logging.getLogger(name)
    logger.setLevel((level or _LEVEL or os.getenv("LOG_LEVEL", "INFO")).upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _LOGGERS[name] = logger
    return logger


def set_level(level: str) -> None:
    """Apply `level` to every logger handed out so far and to later ones."""
    global _LEVEL
    _LEVEL = level.upper()
    get_logger(PACKAGE_LOGGER)
    for logger in _LOGGERS.values():
        logger.setLevel(_LEVEL)

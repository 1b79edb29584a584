import logging
import os
from typing import List, Optional, Union

ROOT_NAME = "grocery_scan"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Loggers handed out so far; set_level() retunes all of them.
_CONFIGURED: List[logging.Logger] = []


def coerce_level(value: Union[str, int, None]) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return _LEVELS.get(value.upper().strip(), logging.INFO)
    return logging.INFO


def _handlers(level: int) -> List[logging.Handler]:
    sh = logging.StreamHandler()
    out: List[logging.Handler] = [sh]
    log_file = os.environ.get("LOG_FILE")
    if log_file:
        try:
            out.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError:
            pass
    for h in out:
        h.setLevel(level)
        h.setFormatter(_FORMATTER)
    return out


def get_logger(name: str) -> logging.Logger:
    """Return the `grocery_scan.<name>` logger, configured on first use.

    Level comes from LOG_LEVEL (default INFO); LOG_FILE adds an appending
    file handler. Diagnostics go to stderr so CLI output on stdout stays
    machine-readable.
    """
    logger = logging.getLogger(f"{ROOT_NAME}.{name}")
    if logger in _CONFIGURED:
        return logger

    level = coerce_level(os.environ.get("LOG_LEVEL", "INFO"))
    logger.setLevel(level)
    handlers = _handlers(level)
    for h in handlers:
        logger.addHandler(h)
    logger.propagate = False
    _CONFIGURED.append(logger)

    if os.environ.get("LOG_FILE") and len(handlers) == 1:
        logger.warning("LOG_FILE could not be opened; continuing without file logging")
    return logger


def set_level(level: Union[str, int, None], name: Optional[str] = None) -> int:
    """Change the level of one grocery_scan logger, or of all of them when name is None."""
    lvl = coerce_level(level)
    targets = [get_logger(name)] if name else list(_CONFIGURED)
    for logger in targets:
        logger.setLevel(lvl)
        for h in logger.handlers:
            h.setLevel(lvl)
    return lvl

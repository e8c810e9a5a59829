"""Logging utilities for kaeter-ci commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "kaeter_ci"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

LOG_LEVEL_NAMES = ("trace", "debug", "info", "warning", "error")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the kaeter_ci hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def parse_level(name: str) -> int:
    """Translate a CLI level name into a logging level."""
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level '{name}'") from None


def configure_logging(
    *,
    level: str = "info",
    verbose: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the kaeter_ci logger with console output and optional file sink."""
    resolved = logging.DEBUG if verbose else parse_level(level)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolved)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved)
    stream_handler.setFormatter(logging.Formatter("[kaeter-ci] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(resolved)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["LOG_LEVEL_NAMES", "configure_logging", "get_logger", "parse_level"]

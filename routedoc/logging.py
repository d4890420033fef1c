"""Logging setup shared by the routedoc CLI, pipeline and service."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "routedoc"
_CONSOLE_FORMAT = "[routedoc] %(levelname)s %(message)s"
_VERBOSE_FORMAT = "[routedoc] %(levelname)s %(component)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _ComponentFormatter(logging.Formatter):
    """Adds ``component``, the logger name relative to ``routedoc``."""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith(f"{_LOGGER_NAME}."):
            name = name[len(_LOGGER_NAME) + 1 :]
        record.component = name
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the routedoc hierarchy, e.g. ``extractors.axum``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console and optional file handlers to the routedoc logger.

    Verbose mode lowers the level to DEBUG and prefixes console lines with
    the emitting component so extractor and resolver output can be told apart.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated calls replace handlers instead of stacking them.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(
        _ComponentFormatter(_VERBOSE_FORMAT if verbose else _CONSOLE_FORMAT)
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        # The file sink always records debug detail.
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["configure_logging", "get_logger"]

"""Logging setup shared by the library, the CLI, and the preview server."""

from __future__ import annotations

import logging

_LOGGER_NAME = "usefulreadme"

# Attributes present on every LogRecord; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime"}
)


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends ``extra={...}`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not extras:
            return message
        fields = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{message} [{fields}]"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the usefulreadme hierarchy.

    Module names that already live in the hierarchy (``usefulreadme.*``) are
    used as-is; anything else (e.g. ``server.*``) is nested below it.
    """
    if not name or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def configure_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Install a single stream handler on the package logger."""
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(ExtraFieldsFormatter("[usefulreadme] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger

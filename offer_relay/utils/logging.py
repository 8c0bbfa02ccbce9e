"""Logger tree for the offer letter relay.

Every module logs through ``get_logger(name)``, which hangs a child off the
``offer_relay`` root. Context passed with ``extra=`` is appended to the line as
``key=value`` pairs so it is visible on the console, not only to handlers
that inspect the record.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "offer_relay"

_LINE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class ContextFormatter(logging.Formatter):
    """Pipe-separated line followed by the record's ``extra`` context."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if not context:
            return line
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(context.items()))
        head, sep, tail = line.partition("\n")
        return f"{head} | {pairs}{sep}{tail}"


def _handlers() -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    log_dir = os.getenv("OFFER_RELAY_LOG_DIR")
    if log_dir:
        directory = Path(log_dir).expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                directory / os.getenv("OFFER_RELAY_LOG_FILE", "offer_relay.log"),
                maxBytes=int(os.getenv("OFFER_RELAY_LOG_MAX_BYTES", 5 * 1024 * 1024)),
                backupCount=int(os.getenv("OFFER_RELAY_LOG_BACKUP_COUNT", 5)),
                encoding="utf-8",
            )
        )

    formatter = ContextFormatter(_LINE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(level: Optional[str] = None) -> None:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return

    root.setLevel(level or os.getenv("OFFER_RELAY_LOG_LEVEL", "INFO").upper())
    for handler in _handlers():
        root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(ROOT_LOGGER).getChild(name)


__all__ = ["ContextFormatter", "ROOT_LOGGER", "configure_logging", "get_logger"]

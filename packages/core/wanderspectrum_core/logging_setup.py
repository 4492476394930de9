"""JSON file logging for the app plus crash hooks.

Everything logs under the ``wanderspectrum`` logger. Values passed through
``extra=`` (``event``, ``velocity``, ``vertical_offset`` and so on) are copied
into the JSON line as top-level keys.
"""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import sys
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import config_root


ROOT_LOGGER = "wanderspectrum"
LOG_FILE_NAME = "wanderspectrum.log"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def log_dir(directory: Path | None = None) -> Path:
    path = directory or config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class _OwnedHandler:
    """Marks handlers installed by ``configure_logging`` so a later call can replace them."""

    wanderspectrum_owned = True


class _RotatingFileHandler(_OwnedHandler, logging.handlers.TimedRotatingFileHandler):
    pass


class _ConsoleHandler(_OwnedHandler, logging.StreamHandler):
    pass


def _remove_owned_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, "wanderspectrum_owned", False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(
    keep_files: int = 7,
    console: bool = True,
    level: int = logging.INFO,
    directory: Path | None = None,
) -> logging.Logger:
    """Install the rotating JSON log (one file per day, ``keep_files`` kept).

    Calling again swaps the handlers, so retention or console output loaded
    from the config file applies even when logging was set up earlier.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    _remove_owned_handlers(logger)
    logger.setLevel(level)

    keep_files = max(2, int(keep_files))
    file_handler = _RotatingFileHandler(
        filename=str(log_dir(directory) / LOG_FILE_NAME),
        when="midnight",
        backupCount=keep_files,
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    if console:
        console_handler = _ConsoleHandler()
        console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(console_handler)

    logger.info("logging configured", extra={"event": "logging_configured", "keep_files": keep_files})
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def install_crash_hooks(directory: Path | None = None) -> None:
    logger = get_logger("crash")

    def _report(kind: str, exc_info: tuple) -> None:
        crash_id = uuid.uuid4().hex
        logger.critical(
            f"{kind.replace('_', ' ')} crash_id={crash_id}",
            exc_info=exc_info,
            extra={"event": kind, "crash_id": crash_id},
        )

    sys.excepthook = lambda exc_type, exc_value, exc_tb: _report(
        "uncaught_exception", (exc_type, exc_value, exc_tb)
    )
    threading.excepthook = lambda args: _report(
        "thread_exception", (args.exc_type, args.exc_value, args.exc_traceback)
    )

    # Native crashes bypass Python hooks; faulthandler writes them beside the log.
    fault_log = (log_dir(directory) / "fault.log").open("a", encoding="utf-8")
    faulthandler.enable(file=fault_log, all_threads=True)
    logger.info("crash hooks installed", extra={"event": "crash_hooks_installed"})

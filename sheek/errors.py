"""Exceptions, logging setup, and error reporting helpers.

The search engine never presents messages itself: it raises the exceptions
below and the CLI or app decides how to report them. Warnings logged while
the picker is running are forwarded to the UI through a notify callback.
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Callable, Literal

from sheek.config import CONFIG

# Configure package logger
log = logging.getLogger("sheek")

# Severity levels matching Textual's SeverityLevel
SeverityLevel = Literal["information", "warning", "error"]

# Callback for UI notifications, set by SheekApp on mount
_notify_callback: Callable[[str, SeverityLevel], None] | None = None


class SheekError(Exception):
    """Base class for errors raised by sheek."""


class HistoryNotFoundError(SheekError, FileNotFoundError):
    """The persisted history log does not exist yet (first run)."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"sheek history not found: {path}")


class ImportSourceError(SheekError):
    """A shell history file could not be read."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"cannot read {path}: {cause.strerror or cause}")


class NothingToImportError(SheekError):
    """A shell history file was read but held no usable commands."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"no commands were imported from {path}")


class UnsupportedShellError(SheekError, ValueError):
    """Import was requested for a shell we cannot parse."""

    def __init__(self, shell: str) -> None:
        self.shell = shell
        super().__init__(f"unsupported shell {shell!r}")


class EmptyCommandError(SheekError, ValueError):
    """Attempted to record a blank command."""

    def __init__(self) -> None:
        super().__init__("cannot record empty command")


class NotifyHandler(logging.Handler):
    """Logging handler that sends notifications to the UI."""

    def emit(self, record: logging.LogRecord) -> None:
        # Capture callback, it can be reset to None between check and call
        callback = _notify_callback
        if callback is None:
            return
        try:
            severity: SeverityLevel
            if record.levelno >= logging.ERROR:
                severity = "error"
            elif record.levelno >= logging.WARNING:
                severity = "warning"
            else:
                severity = "information"

            msg = self.format(record)
            if len(msg) > 200:
                msg = msg[:197] + "..."
            callback(msg, severity)
        except Exception as e:
            print(f"NotifyHandler.emit() failed: {e}", file=sys.stderr)


def set_notify_callback(
    callback: Callable[[str, SeverityLevel], None] | None,
) -> None:
    """Set the callback for UI notifications.

    Args:
        callback: Function(message, severity) where severity is
                  "information", "warning", or "error".
    """
    global _notify_callback
    _notify_callback = callback


def setup_logging() -> None:
    """Initialize logging. Call once at startup.

    Reads configuration from ~/.config/sheek/config.yaml:
    - logging.file: Path to log file, or null to disable (default: null)
    - logging.level: Minimum level to record (default: warning)
    """
    if log.handlers:
        return

    logging_config = CONFIG.get("logging") or {}
    level_name = str(logging_config.get("level") or "warning")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING

    log.setLevel(level)
    log.propagate = False

    log_file = logging_config.get("file")
    if log_file:
        log_file = str(Path(log_file).expanduser())
        try:
            file_handler = logging.FileHandler(log_file, mode="a")
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
            file_handler.setLevel(level)
            log.addHandler(file_handler)
        except OSError:
            log_file = None

    notify_handler = NotifyHandler()
    notify_handler.setFormatter(logging.Formatter("%(message)s"))
    notify_handler.setLevel(logging.WARNING)
    log.addHandler(notify_handler)

    if log_file:
        log.info("Logging initialized")


def log_exception(e: Exception, context: str = "") -> str:
    """Log an exception with context. Returns formatted message for display."""
    tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
    if context:
        log.error(f"{context}: {e}\n{tb}")
        return f"{context}: {e}"
    else:
        log.error(f"{e}\n{tb}")
        return str(e)

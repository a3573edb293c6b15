"""Loading and saving the sheek history log (~/.config/sheek/.sheek_history).

The log is JSON lines, one HistoryRecord per line, append-only. Loading skips
lines that fail to parse so a truncated last line never hides the rest.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from sheek.config import history_file
from sheek.context import resolve_context
from sheek.errors import EmptyCommandError, HistoryNotFoundError
from sheek.models import Command, HistoryRecord, ensure_timestamp

log = logging.getLogger(__name__)


@dataclass
class RecordPayload:
    """A command reported by a shell hook, plus optional context overrides."""

    command: str
    directory: str = ""
    repository: str = ""
    branch: str = ""
    workspace: str = ""
    timestamp: int = 0


def history_file_path() -> Path:
    """Return the configured path to the history log."""
    return history_file()


def load_history(path: Path | None = None) -> list[Command]:
    """Read the history log into commands indexed 1..n in file order.

    Raises HistoryNotFoundError if the log does not exist yet.
    """
    path = path or history_file_path()
    try:
        file = open(path, encoding="utf-8", errors="replace")
    except FileNotFoundError:
        raise HistoryNotFoundError(path) from None

    commands: list[Command] = []
    with file:
        for lineno, line in enumerate(file, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                log.debug("Skipping malformed JSON on line %d of %s", lineno, path)
                continue
            if not isinstance(data, dict):
                log.debug("Skipping non-object record on line %d of %s", lineno, path)
                continue

            record = HistoryRecord.from_dict(data)
            if not record.command.strip():
                continue
            commands.append(record.to_command(index=len(commands) + 1))

    log.debug("Loaded %d commands from %s", len(commands), path)
    return commands


def write_history_records(
    records: Iterable[HistoryRecord], append: bool = True, path: Path | None = None
) -> int:
    """Write records to the log, appending or truncating. Returns lines written.

    Blank commands are skipped. The directory is created owner-only.
    """
    records = list(records)
    if not records:
        return 0

    path = path or history_file_path()
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)

    flags = os.O_CREAT | os.O_WRONLY | (os.O_APPEND if append else os.O_TRUNC)
    fd = os.open(path, flags, 0o600)
    written = 0
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        for record in records:
            if not record.command.strip():
                continue
            f.write(json.dumps(record.to_dict()) + "\n")
            written += 1
    return written


def append_history_records(
    records: Iterable[HistoryRecord], path: Path | None = None
) -> int:
    """Append records to the log."""
    return write_history_records(records, append=True, path=path)


def replace_history_records(
    records: Iterable[HistoryRecord], path: Path | None = None
) -> int:
    """Overwrite the log with records."""
    return write_history_records(records, append=False, path=path)


def record_command(payload: RecordPayload, path: Path | None = None) -> HistoryRecord:
    """Append one command to the log, resolving its context.

    Context fields set on the payload override the resolved ones.
    """
    command = payload.command.strip()
    if not command:
        raise EmptyCommandError()

    directory = os.path.abspath(payload.directory or os.getcwd())
    timestamp = ensure_timestamp(payload.timestamp or int(time.time()))

    ctx = resolve_context(directory)
    record = HistoryRecord(
        command=command,
        timestamp=timestamp,
        directory=directory,
        repository=payload.repository or ctx.repository,
        branch=payload.branch or ctx.branch,
        workspace=payload.workspace or ctx.workspace,
    )
    write_history_records([record], append=True, path=path)
    return record

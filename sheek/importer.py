"""Import zsh, bash and fish history into the sheek log.

Each parser turns the raw lines of a shell's history file into
HistoryRecords in chronological order. Shell histories carry no directory or
git context, so imported records only have command text and a timestamp.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from sheek.enums import Shell
from sheek.errors import ImportSourceError, NothingToImportError, UnsupportedShellError
from sheek.history import append_history_records, replace_history_records
from sheek.models import HistoryRecord, ensure_timestamp

log = logging.getLogger(__name__)

DEFAULT_HISTORY_PATHS = {
    Shell.ZSH: Path(".zsh_history"),
    Shell.BASH: Path(".bash_history"),
    Shell.FISH: Path(".local") / "share" / "fish" / "fish_history",
}

# Extended zsh history format: `: <epoch>:<duration>;<command>`
ZSH_MARKER_RE = re.compile(r"^: (\d+):\d+;")

FISH_CMD_PREFIX = "- cmd:"
FISH_TIME_FIELDS = ("when:", "time:")


def _now() -> int:
    return int(time.time())


def trim_records(records: list[HistoryRecord], limit: int) -> list[HistoryRecord]:
    """Keep only the most recent limit records. limit <= 0 keeps all."""
    if limit <= 0 or limit >= len(records):
        return records
    return records[len(records) - limit :]


def read_lines(path: Path) -> list[str]:
    """Read a history file as lines split on \\n only.

    Raises ImportSourceError on failure.
    """
    try:
        with open(path, encoding="utf-8", errors="replace", newline="\n") as f:
            return [line.rstrip("\r\n") for line in f]
    except OSError as e:
        raise ImportSourceError(path, e) from e


@dataclass
class _Accumulator:
    """Collects one multi-line record at a time.

    Idle until start() is called; while accumulating, add() appends
    continuation lines. flush() emits the record (if non-blank) and goes idle.
    """

    records: list[HistoryRecord] = field(default_factory=list)
    lines: list[str] | None = None  # None while idle
    timestamp: int = 0

    @property
    def accumulating(self) -> bool:
        return self.lines is not None

    def start(self, text: str, timestamp: int) -> None:
        self.flush()
        self.lines = [text]
        self.timestamp = timestamp

    def add(self, line: str) -> None:
        if self.lines is not None:
            self.lines.append(line)

    def set_timestamp(self, timestamp: int) -> None:
        if self.lines is not None:
            self.timestamp = timestamp

    def flush(self) -> None:
        if self.lines is None:
            return
        text = "\n".join(self.lines).strip()
        if text:
            self.records.append(HistoryRecord(command=text, timestamp=self.timestamp))
        self.lines = None
        self.timestamp = 0


def parse_zsh_history(lines: Iterable[str]) -> list[HistoryRecord]:
    """Parse extended zsh history.

    Lines without the `: <epoch>:<duration>;` marker continue the current
    command; before the first marker they are dropped.
    """
    acc = _Accumulator()
    for line in lines:
        match = ZSH_MARKER_RE.match(line)
        if match:
            acc.start(line[match.end() :], ensure_timestamp(match.group(1)))
        else:
            acc.add(line)
    acc.flush()
    return acc.records


def parse_bash_history(lines: Iterable[str], now: int | None = None) -> list[HistoryRecord]:
    """Parse plain bash history (one command per line, newest last).

    Bash stores no timestamps, so the newest command gets `now` and each
    older one a second less.
    """
    ts = _now() if now is None else now
    records: list[HistoryRecord] = []
    for line in reversed(list(lines)):
        text = line.strip()
        if not text:
            continue
        records.append(HistoryRecord(command=text, timestamp=ensure_timestamp(ts)))
        ts -= 1
    records.reverse()
    return records


def _unescape_fish(text: str) -> str:
    """Decode fish's history escapes (\\n and \\\\)."""
    out: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        if nxt == "n":
            out.append("\n")
        elif nxt == "\\":
            out.append("\\")
        else:
            out.append(ch + nxt)
    return "".join(out)


def parse_fish_history(lines: Iterable[str], now: int | None = None) -> list[HistoryRecord]:
    """Parse fish's YAML-like history.

        - cmd: git status
          when: 1700000000
          paths:
            - src

    Records without a `when:`/`time:` field get `now`.
    """
    acc = _Accumulator()
    for raw in lines:
        line = raw.strip()
        if line.startswith(FISH_CMD_PREFIX):
            acc.start(_unescape_fish(line[len(FISH_CMD_PREFIX) :].strip()), 0)
            continue
        for prefix in FISH_TIME_FIELDS:
            if line.startswith(prefix):
                acc.set_timestamp(ensure_timestamp(line[len(prefix) :].strip()))
                break
    acc.flush()

    fallback = ensure_timestamp(_now() if now is None else now)
    for record in acc.records:
        if record.timestamp == 0:
            record.timestamp = fallback
    return acc.records


PARSERS: dict[Shell, Callable[[list[str]], list[HistoryRecord]]] = {
    Shell.ZSH: parse_zsh_history,
    Shell.BASH: parse_bash_history,
    Shell.FISH: parse_fish_history,
}


def parse_shell(shell: str) -> Shell:
    """Normalize a shell name. Raises UnsupportedShellError."""
    name = shell.strip().lower()
    try:
        return Shell(name)
    except ValueError:
        raise UnsupportedShellError(shell) from None


def resolve_history_path(shell: Shell, source: str | Path | None = None) -> Path:
    """Explicit source path, or the shell's default history location."""
    if source:
        return Path(source).expanduser()
    return Path.home() / DEFAULT_HISTORY_PATHS[shell]


def load_shell_history(
    shell: str | Shell, source: str | Path | None = None, limit: int = 0
) -> list[HistoryRecord]:
    """Read and parse a shell's history file, keeping the last limit records."""
    shell = parse_shell(str(shell))
    path = resolve_history_path(shell, source)
    records = PARSERS[shell](read_lines(path))
    log.debug("Parsed %d %s commands from %s", len(records), shell, path)
    return trim_records(records, limit)


def import_history(
    shell: str | Shell,
    source: str | Path | None = None,
    limit: int = 0,
    append: bool = True,
    history_path: Path | None = None,
) -> int:
    """Import shell history into the sheek log. Returns the number imported.

    Raises ImportSourceError if the file can't be read and
    NothingToImportError if it holds no commands.
    """
    shell = parse_shell(str(shell))
    records = load_shell_history(shell, source, limit)
    if not records:
        raise NothingToImportError(resolve_history_path(shell, source))

    if append:
        count = append_history_records(records, path=history_path)
    else:
        count = replace_history_records(records, path=history_path)
    log.info("Imported %d %s commands", count, shell)
    return count

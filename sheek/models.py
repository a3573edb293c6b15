"""Dataclasses for history records and commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from sheek.enums import CommandSource


def ensure_timestamp(value: object) -> int:
    """Coerce a timestamp to an int >= 1. Non-numeric values become 1."""
    if isinstance(value, bool):
        return 1
    try:
        ts = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 1
    return ts if ts >= 1 else 1


def _str_field(value: object) -> str:
    """Coerce a JSON field to str. None becomes ""."""
    return "" if value is None else str(value)


@dataclass(frozen=True)
class CommandContext:
    """Execution environment of a command. Empty fields mean unknown."""

    directory: str = ""
    repository: str = ""
    branch: str = ""
    workspace: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.directory or self.repository or self.branch or self.workspace)


@dataclass(frozen=True)
class Command:
    """One historical invocation, as loaded for a single run."""

    index: int
    text: str
    timestamp: int = 1
    context: CommandContext = field(default_factory=CommandContext)
    source: CommandSource = CommandSource.UNKNOWN
    context_boost: int = 0


@dataclass
class HistoryRecord:
    """One line of the persisted log: {cmd, ts, cwd, repo?, branch?, workspace?}."""

    command: str
    timestamp: int = 1
    directory: str = ""
    repository: str = ""
    branch: str = ""
    workspace: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> HistoryRecord:
        return cls(
            command=_str_field(data.get("cmd")),
            timestamp=ensure_timestamp(data.get("ts")),
            directory=_str_field(data.get("cwd")),
            repository=_str_field(data.get("repo")),
            branch=_str_field(data.get("branch")),
            workspace=_str_field(data.get("workspace")),
        )

    def to_dict(self) -> dict:
        """Wire form. Empty repo/branch/workspace are omitted."""
        data: dict = {
            "cmd": self.command,
            "ts": ensure_timestamp(self.timestamp),
            "cwd": self.directory,
        }
        if self.repository:
            data["repo"] = self.repository
        if self.branch:
            data["branch"] = self.branch
        if self.workspace:
            data["workspace"] = self.workspace
        return data

    @property
    def context(self) -> CommandContext:
        return CommandContext(
            directory=self.directory,
            repository=self.repository,
            branch=self.branch,
            workspace=self.workspace,
        )

    def to_command(self, index: int) -> Command:
        return Command(
            index=index,
            text=self.command,
            timestamp=ensure_timestamp(self.timestamp),
            context=self.context,
            source=CommandSource.SHEEK,
        )

    @classmethod
    def from_command(cls, command: Command) -> HistoryRecord:
        ctx = command.context
        return cls(
            command=command.text,
            timestamp=ensure_timestamp(command.timestamp),
            directory=ctx.directory,
            repository=ctx.repository,
            branch=ctx.branch,
            workspace=ctx.workspace,
        )

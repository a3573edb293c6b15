"""Entry point for the sheek CLI."""

from __future__ import annotations

import argparse
import os
import sys
from importlib.metadata import PackageNotFoundError, version

from sheek.config import CONFIG
from sheek.context import current_context
from sheek.enums import SearchMode, Shell
from sheek.errors import HistoryNotFoundError, SheekError, log_exception, setup_logging
from sheek.history import RecordPayload, load_history, record_command
from sheek.importer import import_history
from sheek.models import Command
from sheek.ranking import apply_context_boost
from sheek.search import search

NO_HISTORY_HINT = "No sheek history yet. Run `sheek import --shell zsh` to get started."


def _version() -> str:
    try:
        return version("sheek")
    except PackageNotFoundError:
        return "unknown"


def load_ranked_commands(contextual: bool | None = None) -> list[Command]:
    """Load the log and apply the context boost if enabled.

    Raises HistoryNotFoundError on first run.
    """
    commands = load_history()
    if contextual is None:
        contextual = bool(CONFIG.get("contextual", True))
    if contextual:
        commands = apply_context_boost(commands, current_context())
    return commands


def cmd_record(args: argparse.Namespace) -> int:
    payload = RecordPayload(
        command=args.cmd,
        directory=args.cwd or "",
        repository=args.repo or "",
        branch=args.branch or "",
        workspace=args.workspace or "",
        timestamp=args.ts or 0,
    )
    record_command(payload)
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    count = import_history(
        args.shell, source=args.source, limit=args.limit, append=not args.replace
    )
    print(f"Imported {count} commands into sheek history", file=sys.stderr)
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    try:
        commands = load_ranked_commands(False if args.no_context else None)
    except HistoryNotFoundError:
        print(NO_HISTORY_HINT, file=sys.stderr)
        return 1

    mode = SearchMode(args.mode or CONFIG.get("mode") or SearchMode.EXACT)
    results = search(commands, args.query, mode)
    limit = args.limit if args.limit is not None else CONFIG.get("max-items", 10)
    matched = results.commands[:limit] if limit > 0 else results.commands
    for cmd in matched:
        print(cmd.text)
    return 0 if matched else 1


def cmd_pick(args: argparse.Namespace) -> int:
    from sheek.app import SheekApp

    hint = None
    try:
        commands = load_ranked_commands()
    except HistoryNotFoundError:
        commands = []
        hint = NO_HISTORY_HINT

    query = args.initial_query or os.environ.get("SHEEK_INITIAL_QUERY", "")
    # Textual renders on stderr, leaving stdout for the selected command
    selected = SheekApp(commands, initial_query=query, empty_hint=hint).run(inline=True)
    if not selected:
        return 1
    print(selected)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheek", description="Search shell history by context"
    )
    parser.add_argument(
        "--version", "-V", action="version", version=f"sheek {_version()}"
    )
    parser.add_argument(
        "--query", "-q", dest="initial_query", default="", help="Prefill the search input"
    )
    parser.set_defaults(func=cmd_pick)
    subparsers = parser.add_subparsers(dest="command")

    record = subparsers.add_parser("record", help="Append a command to the history log")
    record.add_argument("--cmd", required=True, help="Command text to record")
    record.add_argument("--cwd", help="Working directory the command ran in")
    record.add_argument("--repo", help="Repository override")
    record.add_argument("--branch", help="Branch override")
    record.add_argument("--workspace", help="Workspace override")
    record.add_argument("--ts", type=int, default=0, help="Unix timestamp (seconds)")
    record.set_defaults(func=cmd_record)

    imp = subparsers.add_parser("import", help="Import an existing shell history")
    imp.add_argument(
        "--shell", required=True, choices=[s.value for s in Shell], help="Shell to import"
    )
    imp.add_argument("--source", help="Path to a custom history file")
    imp.add_argument(
        "--limit", type=int, default=0, help="Maximum commands to import (0 = all)"
    )
    imp.add_argument(
        "--replace",
        action="store_true",
        help="Replace the history log instead of appending",
    )
    imp.set_defaults(func=cmd_import)

    find = subparsers.add_parser("search", help="Print matching commands")
    find.add_argument("query", nargs="?", default="", help="Search query")
    mode = find.add_mutually_exclusive_group()
    mode.add_argument(
        "--fuzzy", dest="mode", action="store_const", const=SearchMode.FUZZY.value
    )
    mode.add_argument(
        "--exact", dest="mode", action="store_const", const=SearchMode.EXACT.value
    )
    find.add_argument("--limit", "-n", type=int, help="Maximum results (0 = all)")
    find.add_argument(
        "--no-context", action="store_true", help="Skip context-aware ranking"
    )
    find.set_defaults(func=cmd_search)

    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    prefix = f"sheek {args.command}" if args.command else "sheek"
    try:
        return args.func(args)
    except SheekError as e:
        print(f"{prefix}: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(log_exception(e, prefix), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())

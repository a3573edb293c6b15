"""Context-aware ranking of history entries.

Each command is scored against the current context by adding independent
bonuses for directory, repository, branch and workspace. A signal scores 0
when either side is empty.
"""

from __future__ import annotations

import os
from dataclasses import replace
from typing import Iterable

from sheek.models import Command, CommandContext

DIRECTORY_EXACT = 400
DIRECTORY_CHILD = 250  # command ran below the current directory
DIRECTORY_PARENT = 150  # command ran above the current directory
REPOSITORY_EXACT = 200
BRANCH_EXACT = 150
WORKSPACE_EXACT = 100


def _is_below(path: str, parent: str) -> bool:
    """True if path is strictly inside parent (segment-aware)."""
    prefix = parent if parent.endswith(os.sep) else parent + os.sep
    return path != parent and path.startswith(prefix)


def directory_boost(command_dir: str, current_dir: str) -> int:
    if not command_dir or not current_dir:
        return 0
    if command_dir == current_dir:
        return DIRECTORY_EXACT
    if _is_below(command_dir, current_dir):
        return DIRECTORY_CHILD
    if _is_below(current_dir, command_dir):
        return DIRECTORY_PARENT
    return 0


def _exact_boost(value: str, current: str, bonus: int) -> int:
    if value and current and value == current:
        return bonus
    return 0


def context_boost(command_ctx: CommandContext, current: CommandContext) -> int:
    """Additive relevance score of a command's context against the current one."""
    return (
        directory_boost(command_ctx.directory, current.directory)
        + _exact_boost(command_ctx.repository, current.repository, REPOSITORY_EXACT)
        + _exact_boost(command_ctx.branch, current.branch, BRANCH_EXACT)
        + _exact_boost(command_ctx.workspace, current.workspace, WORKSPACE_EXACT)
    )


def apply_context_boost(
    commands: Iterable[Command], current: CommandContext
) -> list[Command]:
    """Score commands against current and sort them.

    Returns new Command copies ordered by boost descending, then index
    descending so newer entries win ties.
    """
    boosted = [
        replace(cmd, context_boost=context_boost(cmd.context, current))
        for cmd in commands
    ]
    boosted.sort(key=lambda c: (c.context_boost, c.index), reverse=True)
    return boosted

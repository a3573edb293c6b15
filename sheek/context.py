"""Resolve the git context (workspace, repository, branch) of a directory.

All functions are synchronous and best-effort: any git failure becomes an
empty field, never an exception.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from sheek.models import CommandContext

log = logging.getLogger(__name__)

GIT_TIMEOUT = 5  # seconds


def git_output(directory: str, *args: str) -> str:
    """Run a git query in directory. Returns stripped stdout or "" on error."""
    env = {**os.environ, "GIT_OPTIONAL_LOCKS": "0"}
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=directory,
            env=env,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError):
        log.debug("git %s failed in %s", " ".join(args), directory, exc_info=True)
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def resolve_context(directory: str | os.PathLike[str]) -> CommandContext:
    """Build a CommandContext for an arbitrary directory."""
    directory = os.fspath(directory)
    if not directory:
        return CommandContext()

    abs_dir = os.path.normpath(os.path.abspath(directory))
    workspace = git_output(abs_dir, "rev-parse", "--show-toplevel")
    if not workspace:
        return CommandContext(directory=abs_dir)

    workspace = os.path.normpath(workspace)
    return CommandContext(
        directory=abs_dir,
        repository=Path(workspace).name,
        branch=git_output(abs_dir, "rev-parse", "--abbrev-ref", "HEAD"),
        workspace=workspace,
    )


def current_context() -> CommandContext:
    """Context of the process working directory."""
    try:
        cwd = os.getcwd()
    except OSError:
        return CommandContext()
    return resolve_context(cwd)

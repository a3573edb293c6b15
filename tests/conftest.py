"""Shared test fixtures."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any
from unittest.mock import patch

# Keep sheek.config away from the real ~/.config/sheek
os.environ["SHEEK_CONFIG"] = str(Path(tempfile.mkdtemp()) / "config.yaml")

import pytest  # noqa: E402

from sheek.models import Command, CommandContext  # noqa: E402


@pytest.fixture
def history_path(tmp_path) -> Path:
    """Location for a sheek log inside tmp_path (not created)."""
    return tmp_path / "sheek" / ".sheek_history"


@pytest.fixture
def write_log(history_path):
    """Write raw lines or record dicts to the history log.

    Usage::

        def test_example(write_log):
            path = write_log([{"cmd": "ls", "ts": 5}, "not json"])
    """

    def _write(entries: list[Any]) -> Path:
        history_path.parent.mkdir(parents=True, exist_ok=True)
        with open(history_path, "w", encoding="utf-8") as f:
            for entry in entries:
                line = entry if isinstance(entry, str) else json.dumps(entry)
                f.write(line + "\n")
        return history_path

    return _write


@pytest.fixture
def command_factory():
    """Create Command instances with sensible defaults.

    Usage::

        def test_example(command_factory):
            cmd = command_factory(3, "git status", directory="/a/b")
    """

    def _factory(index: int, text: str = "echo hi", **context: str) -> Command:
        return Command(
            index=index, text=text, timestamp=1_700_000_000, context=CommandContext(**context)
        )

    return _factory


@pytest.fixture
def no_git():
    """Make every git query fail, as outside a repository."""
    with patch("sheek.context.git_output", return_value="") as mock:
        yield mock


@pytest.fixture
def config_override():
    """Temporarily override CONFIG values.

    Usage::

        def test_example(config_override):
            config_override({"mode": "fuzzy"})
    """
    patches = []

    def _override(values: dict[str, Any]) -> None:
        p = patch.dict("sheek.config.CONFIG", values)
        p.start()
        patches.append(p)

    yield _override
    for p in reversed(patches):
        p.stop()

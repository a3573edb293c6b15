"""Tests for git context resolution."""

import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from sheek.context import current_context, git_output, resolve_context
from sheek.models import CommandContext


class TestGitOutput:
    def test_disables_optional_locks(self, tmp_path):
        result = MagicMock(returncode=0, stdout="main\n")
        with patch("subprocess.run", return_value=result) as mock_run:
            assert git_output(str(tmp_path), "rev-parse", "--abbrev-ref", "HEAD") == "main"

        args, kwargs = mock_run.call_args
        assert args[0] == ["git", "rev-parse", "--abbrev-ref", "HEAD"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["env"]["GIT_OPTIONAL_LOCKS"] == "0"

    def test_nonzero_exit_is_empty(self, tmp_path):
        result = MagicMock(returncode=128, stdout="", stderr="fatal: not a git repository")
        with patch("subprocess.run", return_value=result):
            assert git_output(str(tmp_path), "rev-parse", "--show-toplevel") == ""

    @pytest.mark.parametrize(
        "error",
        [FileNotFoundError("git"), subprocess.TimeoutExpired("git", 5), PermissionError()],
    )
    def test_failures_are_empty(self, tmp_path, error):
        with patch("subprocess.run", side_effect=error):
            assert git_output(str(tmp_path), "status") == ""


class TestResolveContext:
    def test_empty_directory(self):
        assert resolve_context("") == CommandContext()

    def test_outside_repository(self, tmp_path, no_git):
        ctx = resolve_context(tmp_path)
        assert ctx == CommandContext(directory=os.path.normpath(str(tmp_path)))
        # Branch is not queried without a workspace
        assert no_git.call_count == 1

    def test_inside_repository(self, tmp_path):
        workspace = str(tmp_path / "proj")
        answers = {
            ("rev-parse", "--show-toplevel"): workspace + "/",
            ("rev-parse", "--abbrev-ref", "HEAD"): "feature/x",
        }
        with patch("sheek.context.git_output", side_effect=lambda d, *a: answers[a]):
            ctx = resolve_context(tmp_path / "proj" / "src" / ".." / "src")

        assert ctx.directory == os.path.normpath(str(tmp_path / "proj" / "src"))
        assert ctx.workspace == os.path.normpath(workspace)
        assert ctx.repository == "proj"
        assert ctx.branch == "feature/x"

    def test_relative_directory_made_absolute(self, tmp_path, monkeypatch, no_git):
        monkeypatch.chdir(tmp_path)
        ctx = resolve_context("sub")
        assert ctx.directory == os.path.join(os.getcwd(), "sub")

    def test_missing_directory_never_raises(self, tmp_path):
        ctx = resolve_context(tmp_path / "does-not-exist")
        assert ctx.directory.endswith("does-not-exist")
        assert ctx.repository == ""

    def test_current_context_uses_cwd(self, tmp_path, monkeypatch, no_git):
        monkeypatch.chdir(tmp_path)
        assert current_context().directory == os.getcwd()

    def test_current_context_without_cwd(self):
        with patch("os.getcwd", side_effect=FileNotFoundError):
            assert current_context() == CommandContext()

"""Tests for the git command wrapper."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from report_todo.errors import GitCommandError
from report_todo.scanner.git import GitClient, parse_head_branch

REMOTE_SHOW = """\
* remote upstream
  Fetch URL: https://github.com/tangmi/report_todo.git
  Push  URL: https://github.com/tangmi/report_todo.git
  HEAD branch: main
  Remote branch:
    main tracked
"""


def _completed(stdout: str = "", returncode: int = 0, stderr: str = ""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestRemotes:
    def test_upstream_preferred(self):
        out = (
            "origin\tgit@github.com:me/fork.git (fetch)\n"
            "upstream\thttps://github.com/o/r.git (fetch)\n"
        )
        with patch("report_todo.scanner.git.subprocess.run", return_value=_completed(out)) as run:
            assert GitClient().upstream_remote() == "upstream"
        assert run.call_args.args[0] == ["git", "remote", "-v"]

    def test_origin_fallback(self):
        out = "origin\tgit@github.com:me/repo.git (fetch)\n"
        with patch("report_todo.scanner.git.subprocess.run", return_value=_completed(out)):
            assert GitClient().upstream_remote() == "origin"


class TestDefaultBranch:
    def test_head_branch(self):
        with patch("report_todo.scanner.git.subprocess.run", return_value=_completed(REMOTE_SHOW)) as run:
            assert GitClient().default_branch("upstream") == "main"
        assert run.call_args.args[0] == ["git", "remote", "show", "upstream"]

    def test_master_fallback(self):
        with patch("report_todo.scanner.git.subprocess.run", return_value=_completed("* remote origin\n")):
            assert GitClient().default_branch("origin") == "master"

    def test_unknown_head(self):
        assert parse_head_branch("  HEAD branch: (unknown)\n") is None


class TestForkPointAndDiff:
    def test_fork_point_is_stripped(self):
        with patch("report_todo.scanner.git.subprocess.run", return_value=_completed("abc123\n")) as run:
            assert GitClient().fork_point("origin/main") == "abc123"
        assert run.call_args.args[0] == ["git", "merge-base", "--fork-point", "origin/main"]

    def test_diff_has_zero_context(self):
        with patch("report_todo.scanner.git.subprocess.run", return_value=_completed("")) as run:
            GitClient(cwd="/repo").diff("abc123")
        command = run.call_args.args[0]
        assert command[:4] == ["git", "-c", "core.quotePath=false", "diff"]
        assert "--unified=0" in command
        assert command[-1] == "abc123"
        assert str(run.call_args.kwargs["cwd"]) == "/repo"


class TestErrors:
    def test_nonzero_exit(self):
        failed = _completed(returncode=128, stderr="fatal: not a git repository\n")
        with patch("report_todo.scanner.git.subprocess.run", return_value=failed):
            with pytest.raises(GitCommandError, match="not a git repository") as info:
                GitClient().fork_point("origin/master")
        assert info.value.returncode == 128

    def test_git_not_installed(self):
        with patch("report_todo.scanner.git.subprocess.run", side_effect=FileNotFoundError("git")):
            with pytest.raises(GitCommandError, match="could not run"):
                GitClient().upstream_remote()

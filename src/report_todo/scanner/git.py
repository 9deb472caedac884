"""Thin wrapper over the git commands used by the diff-scoped scan."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from report_todo.errors import GitCommandError

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"
UPSTREAM_REMOTE = "upstream"
DEFAULT_BRANCH = "master"

_HEAD_BRANCH_PREFIX = "HEAD branch: "


class GitClient:
    """Runs git in ``cwd``; every command blocks until git exits."""

    def __init__(self, cwd: str | Path = ".", executable: str = "git") -> None:
        self._cwd = Path(cwd)
        self._git = executable

    def run(self, *args: str) -> str:
        """Run a git subcommand and return its stdout."""
        command = [self._git, *args]
        logger.debug("Running `%s`", " ".join(command))
        try:
            result = subprocess.run(
                command,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (FileNotFoundError, OSError) as exc:
            raise GitCommandError(command, None, str(exc)) from exc
        if result.returncode != 0:
            raise GitCommandError(command, result.returncode, result.stderr)
        return result.stdout

    def upstream_remote(self) -> str:
        """``upstream`` when such a remote exists, else ``origin``."""
        for line in self.run("remote", "-v").splitlines():
            if line.strip().startswith(UPSTREAM_REMOTE):
                return UPSTREAM_REMOTE
        return DEFAULT_REMOTE

    def default_branch(self, remote: str) -> str:
        """HEAD branch reported by ``git remote show``, else ``master``."""
        return parse_head_branch(self.run("remote", "show", remote)) or DEFAULT_BRANCH

    def fork_point(self, ref: str) -> str:
        return self.run("merge-base", "--fork-point", ref).strip()

    def diff(self, base: str) -> str:
        """Zero-context diff of the work tree against ``base``."""
        return self.run(
            "-c",
            "core.quotePath=false",
            "diff",
            "--unified=0",
            "--no-color",
            "--no-ext-diff",
            "--src-prefix=a/",
            "--dst-prefix=b/",
            base,
        )


def parse_head_branch(text: str) -> str | None:
    """Extract the ``HEAD branch:`` value from ``git remote show`` output."""
    for line in text.splitlines():
        line = line.strip()
        if line.startswith(_HEAD_BRANCH_PREFIX):
            branch = line[len(_HEAD_BRANCH_PREFIX) :].strip()
            # Shown when the remote cannot be contacted
            if branch and branch != "(unknown)":
                return branch
    return None

"""Exception hierarchy shared by the scanner and the CLI."""

from __future__ import annotations


class ReportTodoError(Exception):
    """Base class for every error raised by report-todo."""


class ConfigurationError(ReportTodoError):
    """Invalid user configuration (bad regex, malformed config file)."""


class MalformedDiff(ReportTodoError):
    """Diff text does not follow the unified diff grammar."""

    def __init__(self, message: str, line: str | None = None) -> None:
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)
        self.line = line


class GitCommandError(ReportTodoError):
    """A git subprocess exited non-zero or could not be started."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str = "") -> None:
        cmd = " ".join(command)
        if returncode is None:
            message = f"could not run `{cmd}`"
        else:
            message = f"`{cmd}` exited with status {returncode}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class ScopeStackError(ReportTodoError):
    """The tokenizer produced unbalanced scope events (pop or restore underflow)."""


class ScanIOError(ReportTodoError):
    """The directory walk failed; the run cannot continue."""

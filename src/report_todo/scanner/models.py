"""Scanner data models — findings and scan results."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field


class Level(enum.Enum):
    """How a finding is reported."""

    TODO = "todo"
    ERROR = "error"


class ScanMode(enum.Enum):
    """The three ways of collecting candidate lines."""

    FULL_TREE = "tree"
    COMMENTS = "comments"
    DIFF = "diff"


@dataclass(frozen=True)
class Finding:
    """A single TODO marker found in a line of text."""

    issue: str | None
    file_path: str
    row: int
    column: int
    length: int
    message: str
    help_message: str | None
    line: str

    @property
    def is_tracked(self) -> bool:
        return self.issue is not None

    @property
    def level(self) -> Level:
        return Level.TODO if self.is_tracked else Level.ERROR

    def sort_key(self) -> tuple[str, int, int, str]:
        return (self.file_path, self.row, self.column, self.message)


@dataclass
class ScanResult:
    """Aggregate result of one scan."""

    root: str
    mode: ScanMode
    findings: list[Finding] = field(default_factory=list)
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)

    def reported(self, report_all: bool = False) -> list[Finding]:
        """Findings to show: untracked always, tracked only with ``report_all``."""
        return [f for f in self.findings if report_all or not f.is_tracked]

    @property
    def has_untracked(self) -> bool:
        return any(not f.is_tracked for f in self.findings)

    @property
    def tracked_count(self) -> int:
        return sum(1 for f in self.findings if f.is_tracked)

    @property
    def untracked_count(self) -> int:
        return len(self.findings) - self.tracked_count

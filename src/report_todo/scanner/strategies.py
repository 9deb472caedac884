"""Scan strategies — the three ways of producing findings for a run.

``FullTreeStrategy`` classifies every line of every file, ``CommentAwareStrategy``
only the text inside comments, and ``DiffScopedStrategy`` every line added
since the fork point from the upstream branch. The diff-scoped scan does not
look at comment scopes, so a TODO inside a string literal is reported there
but not by the comment-aware scan.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from report_todo.config import DEFAULT_IGNORE_FILENAME
from report_todo.errors import ScopeStackError
from report_todo.scanner.diff import UnifiedDiffParser
from report_todo.scanner.git import GitClient
from report_todo.scanner.matcher import classify, classify_span, classify_text
from report_todo.scanner.models import Finding, ScanMode
from report_todo.scanner.rules import ClassificationRules
from report_todo.scanner.scopes import CommentScopeTracker
from report_todo.scanner.text import TextBuffer
from report_todo.scanner.tokenizer import Tokenizer, find_tokenizer
from report_todo.scanner.walker import STANDARD_IGNORE_FILES, walk_files

logger = logging.getLogger(__name__)

# Cores left free for the rest of the system
_RESERVED_CPUS = 2


def default_workers() -> int:
    return max(1, (os.cpu_count() or 1) - _RESERVED_CPUS)


def read_source(path: Path) -> str | None:
    """File contents, or None for unreadable and non-UTF-8 files."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping %s: %s", path, exc)
        return None


def _parallel_map(
    func: Callable[[Path], list[Finding]],
    paths: Iterable[Path],
    workers: int | None,
) -> list[Finding]:
    """Run ``func`` over ``paths`` on a thread pool and concatenate results."""
    workers = workers or default_workers()
    logger.debug("Using %d worker threads", workers)
    findings: list[Finding] = []
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for result in pool.map(func, paths):
            findings.extend(result)
    return findings


@dataclass(frozen=True)
class FullTreeStrategy:
    """Classify every line of every text file; comments and code alike."""

    root: Path = Path(".")
    ignore_filename: str = DEFAULT_IGNORE_FILENAME
    workers: int | None = None

    mode = ScanMode.FULL_TREE

    def run(self, rules: ClassificationRules) -> list[Finding]:
        def scan_file(path: Path) -> list[Finding]:
            content = read_source(path)
            if content is None:
                return []
            return classify_text(rules, content, str(path))

        files = walk_files(self.root, (*STANDARD_IGNORE_FILES, self.ignore_filename))
        return _parallel_map(scan_file, files, self.workers)


@dataclass(frozen=True)
class CommentAwareStrategy:
    """Classify only text inside comments, as reported by a tokenizer."""

    root: Path = Path(".")
    ignore_filename: str = DEFAULT_IGNORE_FILENAME
    workers: int | None = None
    tokenizer_factory: Callable[[Path], Tokenizer | None] = field(
        default=find_tokenizer, compare=False
    )

    mode = ScanMode.COMMENTS

    def run(self, rules: ClassificationRules) -> list[Finding]:
        files = walk_files(self.root, (*STANDARD_IGNORE_FILES, self.ignore_filename))
        return _parallel_map(lambda p: self.scan_file(rules, p), files, self.workers)

    def scan_file(self, rules: ClassificationRules, path: Path) -> list[Finding]:
        tokenizer = self.tokenizer_factory(path)
        if tokenizer is None:
            logger.debug("Ignoring %s: no grammar found", path)
            return []
        content = read_source(path)
        if content is None:
            return []
        logger.debug("Scanning %s as %s", path, tokenizer.grammar)
        return scan_comments(rules, TextBuffer(content), tokenizer, str(path))


def scan_comments(
    rules: ClassificationRules,
    buffer: TextBuffer,
    tokenizer: Tokenizer,
    file_path: str = "",
) -> list[Finding]:
    """Route one file's scope events through a tracker and classify comments."""
    tracker = CommentScopeTracker()
    findings: list[Finding] = []
    try:
        for line, events in zip(buffer.lines(), tokenizer.scope_events(buffer)):
            for span in tracker.process_line(events, line):
                findings.extend(classify_span(rules, buffer, span, file_path))
    except ScopeStackError as exc:
        logger.warning("Abandoning %s: %s", file_path, exc)
        return []
    if not tracker.is_balanced:
        logger.warning(
            "%s: unbalanced comment structure at end of file (level %d)",
            file_path,
            tracker.comment_level,
        )
    return findings


@dataclass(frozen=True)
class DiffScopedStrategy:
    """Classify every line added since the fork point from upstream."""

    root: Path = Path(".")
    git: GitClient | None = field(default=None, compare=False)

    mode = ScanMode.DIFF

    def run(self, rules: ClassificationRules) -> list[Finding]:
        git = self.git or GitClient(self.root)

        remote = git.upstream_remote()
        branch = git.default_branch(remote)
        fork_point = git.fork_point(f"{remote}/{branch}")
        logger.debug("Fork point from %s/%s is %s", remote, branch, fork_point)

        return self.classify_diff(rules, git.diff(fork_point))

    def classify_diff(self, rules: ClassificationRules, diff_text: str) -> list[Finding]:
        findings: list[Finding] = []
        for hunk in UnifiedDiffParser(diff_text).hunks():
            path = str(self.root / hunk.file)
            for changed in hunk.added:
                findings.extend(classify(rules, changed.text, changed.row, path))
        return findings


ScanStrategy = Union[FullTreeStrategy, CommentAwareStrategy, DiffScopedStrategy]


def make_strategy(
    mode: ScanMode,
    root: str | Path = ".",
    ignore_filename: str = DEFAULT_IGNORE_FILENAME,
    workers: int | None = None,
) -> ScanStrategy:
    root = Path(root)
    if mode is ScanMode.DIFF:
        return DiffScopedStrategy(root=root)
    if mode is ScanMode.FULL_TREE:
        return FullTreeStrategy(root=root, ignore_filename=ignore_filename, workers=workers)
    return CommentAwareStrategy(root=root, ignore_filename=ignore_filename, workers=workers)

"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from report_todo.scanner.rules import ClassificationRules
from report_todo.scanner.scopes import ScopeOp
from report_todo.scanner.text import TextBuffer


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's config files and REPORT_TODO_* vars out of tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    for name in (
        "REPORT_TODO_MATCH_ISSUE",
        "REPORT_TODO_ISSUE_LINK_FORMAT",
        "REPORT_TODO_FORBID",
        "REPORT_TODO_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def default_rules() -> ClassificationRules:
    return ClassificationRules.compile()


@pytest.fixture
def linked_rules() -> ClassificationRules:
    return ClassificationRules.compile(
        issue_link_format="https://github.com/owner/repo/issues/${issue_number}",
        forbidden_keywords=("todo", "fixme"),
    )


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small project with tracked and untracked TODOs."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "main.rs").write_text(
        "// TODO(#7): fix this\n"
        "// TODO: no issue\n"
        "fn main() {}\n"
    )
    (root / "src" / "app.py").write_text(
        "import os\n"
        "\n"
        "x = 1  # fixme later\n"
        's = "TODO: inside a string"\n'
    )
    (root / "README.md").write_text("Nothing to see here.\n")
    return root


class FakeTokenizer:
    """Replays canned scope events, one list per line."""

    grammar = "fake"

    def __init__(self, events: list[list[tuple[int, ScopeOp]]]) -> None:
        self._events = events

    def scope_events(self, buffer: TextBuffer) -> Iterator[list[tuple[int, ScopeOp]]]:
        yield from self._events


@pytest.fixture
def fake_tokenizer():
    return FakeTokenizer

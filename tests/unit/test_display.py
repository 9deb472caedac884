"""Tests for diagnostic rendering."""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from report_todo.display import print_findings, render_finding
from report_todo.scanner.matcher import classify


def _render(findings) -> str:
    out = StringIO()
    console = Console(file=out, width=120, color_system=None)
    print_findings(console, findings)
    return out.getvalue()


def test_untracked_layout(default_rules):
    (finding,) = classify(default_rules, "// TODO: no issue", 2, "src/main.rs")
    lines = _render([finding]).splitlines()
    assert lines[0] == "error: TODO found without issue number"
    assert lines[1] == " --> src/main.rs:2:4"
    assert lines[3] == "2 | // TODO: no issue"
    assert lines[4] == "  |    ^^^^^^^^^^^^^^"
    assert lines[6].startswith("  = help: create a work item")


def test_tracked_with_link(linked_rules):
    (finding,) = classify(linked_rules, "# TODO(#42): ship it", 10, "app.py")
    text = render_finding(finding).plain
    assert text.startswith("TODO(#42): ship it\n")
    assert "  --> app.py:10:3\n" in text
    assert "   = link: https://github.com/owner/repo/issues/42\n" in text


def test_tracked_without_link_has_no_help(default_rules):
    (finding,) = classify(default_rules, "todo(#1): x", 1)
    assert "=" not in render_finding(finding).plain


def test_several_findings(default_rules):
    findings = classify(default_rules, "# TODO: a", 1, "a.py") + classify(
        default_rules, "# TODO: b", 5, "b.py"
    )
    out = _render(findings)
    assert "a.py:1:3" in out
    assert "b.py:5:3" in out

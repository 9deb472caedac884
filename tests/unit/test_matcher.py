"""Tests for line and comment classification."""

from __future__ import annotations

from report_todo.scanner.matcher import (
    UNTRACKED_HELP,
    classify,
    classify_span,
    classify_text,
)
from report_todo.scanner.models import Level
from report_todo.scanner.rules import ClassificationRules
from report_todo.scanner.text import CommentSpan, TextBuffer


class TestTrackedMatches:
    def test_issue_id_and_link(self):
        rules = ClassificationRules.compile(
            match_issue=r"todo\(#(?P<id>\d+)\):",
            issue_link_format="https://x/${id}",
        )
        findings = classify(rules, "    // TODO(#42): handle overflow", row=3)
        assert len(findings) == 1
        finding = findings[0]
        assert finding.issue == "42"
        assert finding.is_tracked
        assert finding.level == Level.TODO
        assert "https://x/42" in finding.help_message

    def test_message_column_and_length(self, default_rules):
        (finding,) = classify(default_rules, "// TODO(#7): fix this  ", row=1, file_path="a.rs")
        assert finding.message == "fix this"
        assert finding.column == 4
        assert finding.length == len("TODO(#7): fix this")
        assert finding.file_path == "a.rs"
        assert finding.row == 1

    def test_no_link_template_means_no_help(self, default_rules):
        (finding,) = classify(default_rules, "# todo(#1): x", row=1)
        assert finding.help_message is None

    def test_case_insensitive(self, default_rules):
        (finding,) = classify(default_rules, "# ToDo(#12): mixed case", row=1)
        assert finding.issue == "12"

    def test_first_match_only(self, default_rules):
        findings = classify(default_rules, "# todo(#1): a todo(#2): b", row=1)
        assert [f.issue for f in findings] == ["1"]

    def test_positional_placeholder(self):
        rules = ClassificationRules.compile(
            match_issue=r"todo\(([A-Z]+-\d+)\):",
            issue_link_format="https://jira/browse/$1",
        )
        (finding,) = classify(rules, "// TODO(ABC-12): ship it", row=1)
        assert finding.issue == "ABC-12"
        assert finding.help_message == "link: https://jira/browse/ABC-12"

    def test_tracked_wins_over_forbidden_keyword(self, linked_rules):
        findings = classify(linked_rules, "// TODO(#3): remove this todo fixme hack", row=1)
        assert len(findings) == 1
        assert findings[0].is_tracked


class TestUntrackedMatches:
    def test_fixme_without_issue(self, linked_rules):
        (finding,) = classify(linked_rules, "x = 1  # fixme: later", row=9)
        assert finding.issue is None
        assert finding.level == Level.ERROR
        assert "FIXME" in finding.message
        assert finding.message == "FIXME found without issue number"
        assert finding.help_message == UNTRACKED_HELP
        assert finding.column == 10

    def test_each_keyword_is_reported(self):
        rules = ClassificationRules.compile(forbidden_keywords=("fixme", "todo"))
        findings = classify(rules, "# fixme: and todo too", row=1)
        assert [f.message for f in findings] == [
            "FIXME found without issue number",
            "TODO found without issue number",
        ]

    def test_whole_word_only(self, default_rules):
        assert classify(default_rules, "todos = mastodon()", row=1) == []

    def test_uppercases_the_matched_text(self, default_rules):
        (finding,) = classify(default_rules, "// Todo: x", row=1)
        assert finding.message == "TODO found without issue number"

    def test_clean_line(self, default_rules):
        assert classify(default_rules, "let x = 1;", row=1) == []


class TestClassifyText:
    def test_rows_are_one_indexed(self, default_rules):
        findings = classify_text(
            default_rules,
            "// TODO(#7): fix this\n// TODO: no issue\n",
            "main.rs",
        )
        assert [(f.row, f.issue) for f in findings] == [(1, "7"), (2, None)]
        assert findings[0].message == "fix this"


class TestClassifySpan:
    def test_comment_starting_mid_line(self, default_rules):
        text = "x = 1  # TODO: a\n"
        buffer = TextBuffer(text)
        span = CommentSpan(text.index("#"), len(text) - 1)
        (finding,) = classify_span(default_rules, buffer, span, "a.py")
        assert finding.row == 1
        assert finding.column == 10
        assert finding.line == "x = 1  # TODO: a"

    def test_multi_line_comment_keeps_rows(self, default_rules):
        text = "int x;\n/*\n * TODO: a\n\n * todo(#2): b\n */\n"
        buffer = TextBuffer(text)
        span = CommentSpan(text.index("/*"), text.index("*/") + 2)
        findings = classify_span(default_rules, buffer, span, "a.c")
        assert [(f.row, f.issue) for f in findings] == [(3, None), (5, "2")]
        assert findings[0].column == 4
        assert findings[1].message == "b"

"""Line classification — turns a line of text into tracked/untracked findings."""

from __future__ import annotations

from report_todo.scanner.models import Finding
from report_todo.scanner.rules import ClassificationRules
from report_todo.scanner.text import CommentSpan, TextBuffer

UNTRACKED_HELP = (
    "help: create a work item and reference it here (e.g. `TODO(#1): ...`)"
)


def classify(
    rules: ClassificationRules,
    line: str,
    row: int,
    file_path: str = "",
    column_offset: int = 0,
    source_line: str | None = None,
) -> list[Finding]:
    """Classify one line.

    ``column_offset`` is the 0-indexed column of ``line`` inside
    ``source_line`` when ``line`` is only a piece of it (a comment that
    starts mid-line).
    """
    display_line = line if source_line is None else source_line

    match = rules.tracked.search(line)
    if match:
        link = rules.expand_link(match)
        return [
            Finding(
                issue=match.group(1),
                file_path=file_path,
                row=row,
                column=column_offset + match.start() + 1,
                length=len(line[match.start() :].rstrip()),
                message=line[match.end() :].strip(),
                help_message=f"link: {link.strip()}" if link is not None else None,
                line=display_line,
            )
        ]

    findings: list[Finding] = []
    for keyword in rules.forbidden:
        m = keyword.search(line)
        if m is None:
            continue
        findings.append(
            Finding(
                issue=None,
                file_path=file_path,
                row=row,
                column=column_offset + m.start() + 1,
                length=len(line[m.start() :].rstrip()),
                message=f"{m.group(0).upper()} found without issue number",
                help_message=UNTRACKED_HELP,
                line=display_line,
            )
        )
    return findings


def classify_text(
    rules: ClassificationRules,
    text: str,
    file_path: str = "",
) -> list[Finding]:
    """Classify every line of ``text``, comments and code alike."""
    findings: list[Finding] = []
    # Only "\n" ends a row, matching TextBuffer
    for row, line in enumerate(text.split("\n"), start=1):
        findings.extend(classify(rules, line.rstrip("\r"), row, file_path))
    return findings


def classify_span(
    rules: ClassificationRules,
    buffer: TextBuffer,
    span: CommentSpan,
    file_path: str = "",
) -> list[Finding]:
    """Classify each non-blank line of a comment with its true row/column."""
    findings: list[Finding] = []
    text = buffer.slice(span.start, span.end)
    offset = span.start
    for piece in text.split("\n"):
        start = offset
        offset += len(piece) + 1
        if not piece.strip():
            continue
        row, col = buffer.row_col(start)
        findings.extend(
            classify(
                rules,
                piece.rstrip("\r"),
                row,
                file_path,
                column_offset=col - 1,
                source_line=buffer.line_at(row),
            )
        )
    return findings

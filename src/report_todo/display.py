"""Console rendering of findings in a compiler-diagnostic layout."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from report_todo.scanner.models import Finding, Level

_LINE_NUMBER_STYLE = "bold bright_blue"

_LEVEL_STYLES = {
    Level.TODO: "bold blue",
    Level.ERROR: "bold red",
}


def render_finding(finding: Finding) -> Text:
    """Build the diagnostic block for one finding.

    ::

        error: TODO found without issue number
         --> src/main.rs:2:4
          |
        2 | // TODO: no issue
          |    ^^^^^^^^^^^^^^
          |
          = help: create a work item and reference it here
    """
    gutter = " " * len(str(finding.row))
    header = f"TODO(#{finding.issue})" if finding.is_tracked else "error"
    underline = " " * (finding.column - 1) + "^" * max(finding.length, 1)

    text = Text()
    text.append(header, style=_LEVEL_STYLES[finding.level])
    text.append(f": {finding.message}\n", style="bold")
    text.append(f"{gutter}--> ", style=_LINE_NUMBER_STYLE)
    text.append(f"{finding.file_path}:{finding.row}:{finding.column}\n")
    text.append(f"{gutter} |\n", style=_LINE_NUMBER_STYLE)
    text.append(f"{finding.row} | ", style=_LINE_NUMBER_STYLE)
    text.append(f"{finding.line.rstrip()}\n")
    text.append(f"{gutter} | ", style=_LINE_NUMBER_STYLE)
    text.append(f"{underline}\n", style=_LEVEL_STYLES[finding.level])
    if finding.help_message:
        text.append(f"{gutter} |\n", style=_LINE_NUMBER_STYLE)
        text.append(f"{gutter} = ", style=_LINE_NUMBER_STYLE)
        text.append(f"{finding.help_message}\n")
    return text


def print_findings(console: Console, findings: list[Finding]) -> None:
    for finding in findings:
        console.print(render_finding(finding), highlight=False, soft_wrap=True)

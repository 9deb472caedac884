"""CLI command: report-todo scan [ROOT_DIR] — find untracked TODOs."""

from __future__ import annotations

import sys

import click
from rich.console import Console

from report_todo.config import ReportConfig
from report_todo.display import print_findings
from report_todo.errors import (
    ConfigurationError,
    GitCommandError,
    MalformedDiff,
    ScanIOError,
)
from report_todo.scanner.engine import ScanEngine
from report_todo.scanner.models import ScanMode, ScanResult
from report_todo.scanner.rules import ClassificationRules
from report_todo.scanner.strategies import make_strategy

console = Console(stderr=True)


@click.command()
@click.argument(
    "root_dir",
    required=False,
    default=".",
    type=click.Path(exists=True, file_okay=False),
)
@click.option(
    "--match-issue",
    default=None,
    help=r"Regex for a tracked TODO; group 1 is the issue id. "
    r"[default: todo\(#(?P<issue_number>\d+)\):]",
)
@click.option(
    "--issue-link-format",
    default=None,
    help="Link printed for tracked TODOs, e.g. "
    "https://github.com/owner/repo/issues/${issue_number}",
)
@click.option(
    "--forbid",
    "forbidden",
    multiple=True,
    help="Keyword that must not appear without an issue id (repeatable). [default: todo]",
)
@click.option("--all", "report_all", is_flag=True, help="Report tracked TODOs as well.")
@click.option("--diff", "parse_diff", is_flag=True, help="Only scan lines added since the fork point.")
@click.option("--no-syntax", is_flag=True, help="Scan every line, not only comments.")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Worker threads for tree scans.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML config file (default: report_todo.yaml in ROOT_DIR).",
)
def scan(
    root_dir: str,
    match_issue: str | None,
    issue_link_format: str | None,
    forbidden: tuple[str, ...],
    report_all: bool,
    parse_diff: bool,
    no_syntax: bool,
    workers: int | None,
    config_path: str | None,
) -> None:
    """Scan ROOT_DIR (default: current directory) for TODOs without an issue.

    Files listed in .gitignore and .todoignore are skipped.
    """
    if parse_diff and no_syntax:
        raise click.UsageError("--diff and --no-syntax cannot be combined")

    try:
        config = ReportConfig.load(root_dir, config_path)
        if match_issue is not None:
            config.match_issue = match_issue
        if issue_link_format is not None:
            config.issue_link_format = issue_link_format
        if forbidden:
            config.forbidden_keywords = forbidden
        if report_all:
            config.report_all = True
        if workers is not None:
            config.workers = workers

        rules = ClassificationRules.compile(
            config.match_issue,
            config.issue_link_format,
            config.forbidden_keywords,
        )
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    if parse_diff:
        mode = ScanMode.DIFF
    elif no_syntax:
        mode = ScanMode.FULL_TREE
    else:
        mode = ScanMode.COMMENTS

    strategy = make_strategy(mode, root_dir, config.ignore_filename, config.workers)
    try:
        result = ScanEngine(rules).scan(strategy)
    except (GitCommandError, MalformedDiff, ScanIOError) as exc:
        raise click.ClickException(str(exc)) from exc

    reported = result.reported(config.report_all)
    print_findings(console, reported)
    _print_summary(result, len(reported))

    if result.has_untracked:
        console.print("[red]untracked issues found![/red]")
        sys.exit(1)


def _print_summary(result: ScanResult, reported_count: int) -> None:
    if reported_count > 0:
        console.print(f"{reported_count} issues found.")
    console.print(
        f"[dim]{result.tracked_count} tracked, {result.untracked_count} untracked "
        f"({result.mode.value} scan in {result.duration:.2f}s)[/dim]",
        highlight=False,
    )

"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from report_todo import __version__


@click.group()
@click.version_option(version=__version__, prog_name="report-todo")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """report-todo — find TODO comments that are not linked to an issue."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from report_todo.cli.scan import scan  # noqa: F811

    main.add_command(scan)


_register_commands()

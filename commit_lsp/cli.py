"""Typer application and main entry point for the CLI.

The language server loop itself lives in the editor integration; this CLI
provides the ``checkhealth`` diagnostics for the issue tracker integration.
"""

import asyncio
from typing import Annotated

import typer

from commit_lsp.config import ConfigError, UserConfig, demo_folder_from_env, load_user_config
from commit_lsp.healthcheck import HealthReport
from commit_lsp.integrations.builder import initialize_issue_tracker
from commit_lsp.integrations.exceptions import UpstreamError
from commit_lsp.integrations.tracker import IssueTracker
from commit_lsp.utils.console import show_version
from commit_lsp.utils.logging import setup_logging

app = typer.Typer(
    name="commit-lsp",
    help="Language server for commit messages",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Language server for commit messages."""
    setup_logging()


async def _check_tickets(tracker: IssueTracker, health: HealthReport) -> None:
    check = health.start("Request tickets")
    try:
        tickets = await tracker.request_ticket_information()
    except UpstreamError as e:
        check.error(str(e))
        return
    finally:
        await tracker.aclose()

    if not tickets:
        check.warn("Got empty list of tickets")
        return
    example = tickets[0]
    check.ok_with(f"Example ticket: #{example.id} '{example.title}'")


@app.command()
def checkhealth() -> None:
    """Check the issue tracker integration of the current repository."""
    health = HealthReport("commit-lsp")

    try:
        config = load_user_config(health=health)
    except ConfigError:
        # Already reported; continue so the remaining checks still run
        config = UserConfig()

    tracker = initialize_issue_tracker(config, health, demo_folder=demo_folder_from_env())
    if tracker is not None:
        asyncio.run(_check_tickets(tracker, health))


def run() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "run"]

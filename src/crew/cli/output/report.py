"""Outcome display functions for CLI."""

import typer

from ...domain.outcomes import OutcomeRecord, Outcomes
from ...events import WorkerMessageEvent


def display_message(event: WorkerMessageEvent) -> None:
    """Echo a message received from a worker."""
    typer.echo(f"[{event.uid}] {event.path}: {event.message}")


def display_completed(record: OutcomeRecord) -> None:
    typer.secho(f"✓ {record.path} (pid {record.pid})", fg=typer.colors.GREEN)


def display_error(record: OutcomeRecord) -> None:
    typer.secho(f"✗ {record.path} (pid {record.pid})", fg=typer.colors.RED)
    if record.error:
        typer.secho(f"  {record.error.message}", fg=typer.colors.RED)


def display_summary(outcomes: Outcomes, status: int) -> None:
    """Display every cached outcome followed by the pool exit status."""
    for record in outcomes.completed:
        display_completed(record)
    for record in outcomes.errors:
        display_error(record)

    colour = typer.colors.GREEN if status == 0 else typer.colors.RED
    typer.secho(
        f"{len(outcomes.completed)} completed, {len(outcomes.errors)} failed "
        f"(exit status {status})",
        fg=colour,
    )

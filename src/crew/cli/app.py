"""CLI application factory."""

from typing import Optional

import typer

from ..app import create_app
from ..config.settings import LogLevel, Settings, build_settings
from .commands.run import run
from .state import CLIState


def create_cli_app(
    settings: Settings | None = None, state: CLIState | None = None
) -> typer.Typer:
    """Create CLI application with optional settings or state override.

    Args:
        settings: Optional Settings override for testing
        state: Optional pre-built CLIState (takes precedence over settings)

    Returns:
        Configured Typer application with commands registered
    """
    app = typer.Typer(
        name="crew",
        help="crew - run worker scripts through a bounded process pool",
        no_args_is_help=True,
    )

    @app.callback()
    def setup(
        ctx: typer.Context,
        max_procs: Optional[int] = typer.Option(
            None,
            "--max-procs",
            "-j",
            help="Maximum concurrently running processes",
            min=1,
        ),
        oversubscribe: Optional[bool] = typer.Option(
            None,
            "--oversubscribe/--no-oversubscribe",
            help="Allow --max-procs above the CPU count",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose output (DEBUG logging)",
        ),
    ) -> None:
        """Global options available to all commands."""
        if state is not None:
            ctx.obj = state
            return

        if settings is not None:
            resolved_settings = settings
        else:
            resolved_settings = build_settings(
                Settings.from_env(),
                max_procs=max_procs,
                oversubscribe=oversubscribe,
                log_level=LogLevel.DEBUG if verbose else None,
            )

        create_app(resolved_settings)
        ctx.obj = CLIState(resolved_settings)

    app.command()(run)
    return app

"""Run command implementation."""

import asyncio
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic_core import from_json

from ...domain.exceptions import CrewError
from ...workers import Pool
from ..output.report import display_message, display_summary
from ..state import CLIState


def parse_data(data_str: str) -> Any:
    """Parse the --data option as JSON.

    Raises:
        typer.Exit: If the value is not valid JSON
    """
    try:
        return from_json(data_str)
    except ValueError as e:
        typer.secho(f"✗ Invalid JSON for --data: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2)


async def run_scripts(
    pool: Pool, scripts: list[Path], data: Any, quiet: bool = False
) -> int:
    """Submit every script to the pool and wait for its shutdown.

    Returns:
        The pool's exit status
    """
    for script in scripts:
        if pool.is_closed:
            break
        await pool.submit(
            {
                "path": script,
                "data": data,
                "on_message": None if quiet else display_message,
            }
        )
    status = await pool.wait_closed()
    display_summary(pool.get_outcomes(), status)
    return status


def run(
    ctx: typer.Context,
    scripts: List[Path] = typer.Argument(
        ..., help="Worker scripts to run", exists=True, dir_okay=False
    ),
    data: Optional[str] = typer.Option(
        None, "--data", help="JSON payload sent to every worker on spawn"
    ),
    die_on_error: Optional[bool] = typer.Option(
        None,
        "--die-on-error/--no-die-on-error",
        help="Stop the pool when a worker fails",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Do not echo worker messages"
    ),
) -> None:
    """Run worker scripts through the pool.

    Exits with the pool's shutdown status: 0 after a clean idle shutdown,
    non-zero when the pool died.

    Examples:
        crew run job.py other.py
        crew --max-procs 2 run job.py --data '{"n": 3}'
        crew run flaky.py steady.py --no-die-on-error
    """
    state: CLIState = ctx.obj
    payload = parse_data(data) if data is not None else None

    async def main() -> int:
        pool = state.create_pool(die_on_error=die_on_error, die_on_empty=True)
        return await run_scripts(pool, scripts, payload, quiet=quiet)

    try:
        status = asyncio.run(main())
    except CrewError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    raise typer.Exit(code=status)

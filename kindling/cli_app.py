"""
Kindling Command-Line Interface.

Provides the ``kindling`` entry point, a single command with two optional
positional arguments:

- ``DEBUG``   stream external command output and log at DEBUG level
  (``true``/``1``/``yes``/``on``; default ``false``)
- ``PROJECT`` project label passed to every worker (default ``aesop``)

An argument that is not given leaves the recipe value (or the built-in
default) in place.

Usage:
    kindling
    kindling true
    kindling false my-project
    KINDLING_RECIPE=host.yaml kindling
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .core.paths import RECIPE_ENV_VAR

app = typer.Typer(
    name="kindling",
    add_completion=False,
    rich_markup_mode="rich",
)

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off", ""})

BANNER = r"""
 _  _____ _   _ ____  _     ___ _   _  ____
| |/ /_ _| \ | |  _ \| |   |_ _| \ | |/ ___|
| ' / | ||  \| | | | | |    | ||  \| | |  _
| . \ | || |\  | |_| | |___ | || |\  | |_| |
|_|\_\___|_| \_|____/|_____|___|_| \_|\____|
"""


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from importlib.metadata import version as pkg_version

        typer.echo(f"kindling {pkg_version('kindling')}")
        raise typer.Exit()


def _parse_flag(value: str) -> bool:
    """
    Interpret a boolean-like positional argument.

    Raises:
        typer.BadParameter: If *value* is not a recognised spelling.
    """
    low = value.strip().lower()
    if low in _TRUE_VALUES:
        return True
    if low in _FALSE_VALUES:
        return False
    raise typer.BadParameter(f"DEBUG must be true/false (or 1/0, yes/no, on/off), got: '{value}'")


@app.command()
def bootstrap(
    debug: Annotated[
        str | None,
        typer.Argument(
            help="Stream command output and log at DEBUG level (true/false, default false).",
            show_default=False,
        ),
    ] = None,
    project: Annotated[
        str | None,
        typer.Argument(
            help="Project label passed to every worker (default aesop).", show_default=False
        ),
    ] = None,
    recipe: Annotated[
        Path | None,
        typer.Option(
            "--recipe",
            envvar=RECIPE_ENV_VAR,
            help="YAML recipe overriding the built-in defaults.",
        ),
    ] = None,
    _: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Provision this host and start one supervised miner per GPU."""
    from pydantic import ValidationError

    from kindling import BootstrapOrchestrator, Config, LogStyle, log_pipeline_summary, run_pipeline
    from kindling.exceptions import KindlingError

    debug_flag = _parse_flag(debug) if debug is not None else None
    if recipe is not None and not recipe.exists():
        typer.echo(f"Error: recipe not found: {recipe}", err=True)
        raise typer.Exit(code=1)

    try:
        cfg = Config.from_cli(debug=debug_flag, project=project, recipe=recipe)
    except (ValidationError, KindlingError, ValueError) as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(BANNER)

    with BootstrapOrchestrator(cfg) as orchestrator:
        run_logger = orchestrator.run_logger
        assert run_logger is not None  # nosec B101

        try:
            report = run_pipeline(orchestrator)
            log_pipeline_summary(
                report,
                duration=orchestrator.time_tracker.elapsed_formatted,
                manifest_path=report.manifest_path,
                logger_instance=run_logger,
            )

        except KeyboardInterrupt:
            run_logger.warning(f"{LogStyle.WARNING} Interrupted by user.")
            raise SystemExit(1)

        except Exception as e:  # top-level catch-all for logging; re-raises
            run_logger.error(f"{LogStyle.WARNING} Bootstrap failed: {e}", exc_info=True)
            raise

    if not report.ok:
        raise typer.Exit(code=1)

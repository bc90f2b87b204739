from __future__ import annotations

import os
from pathlib import Path  # noqa: TC003
from typing import Annotated

import typer
from typer.main import get_command

from skyreport import __version__
from skyreport.cli import bench, show, update
from skyreport.cli._shared import CliOptions
from skyreport.core.config import ENV_LOG, configure_logging, resolve_log_level


def _version_callback(value: bool) -> None:  # noqa: FBT001
    if value:
        typer.echo(f"skyreport {__version__}")
        raise typer.Exit


def create_app() -> typer.Typer:
    app = typer.Typer(
        help="Build, benchmark and compare Skytable commits against stored baselines.",
        add_completion=False,
        pretty_exceptions_enable=False,
    )

    @app.callback()
    def _root(
        ctx: typer.Context,
        *,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                help="Show version and exit",
                callback=_version_callback,
                is_eager=True,
            ),
        ] = False,
        quiet: Annotated[bool, typer.Option("-q", "--quiet", help="Emit only errors")] = False,
        verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Emit diagnostic logging")] = False,
        debug: Annotated[bool, typer.Option("--debug", help="Show full tracebacks for errors")] = False,
        publish: Annotated[
            bool,
            typer.Option("--publish/--no-publish", help="Commit, push and comment after writing results"),
        ] = True,
        config: Annotated[
            Path | None,
            typer.Option("--config", exists=True, dir_okay=False, help="Read settings from this TOML file"),
        ] = None,
    ) -> None:
        """Performance-regression reports for Skytable."""
        del version
        configure_logging(resolve_log_level(quiet=quiet, verbose=verbose, env_value=os.environ.get(ENV_LOG)))
        ctx.obj = CliOptions(debug=debug, quiet=quiet, publish=publish, config=config)

    bench.register(app)
    update.register(app)
    show.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]

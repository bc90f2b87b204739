from __future__ import annotations

import typer

from skyreport.cli._shared import CliOptions, load_cli_settings, use_color
from skyreport.cli.exit_codes import EXIT_IOERR
from skyreport.core.baseline import BaselineStore
from skyreport.core.model.types import Slot
from skyreport.errors import StorageError
from skyreport.render.tty import format_baselines_table


def register(app: typer.Typer) -> None:
    @app.command("show")
    def show(ctx: typer.Context) -> None:
        """Print the stored baselines."""
        opts: CliOptions = ctx.obj
        store = BaselineStore(load_cli_settings(opts).preset_dir)
        try:
            baselines = {slot: store.read_optional(slot) for slot in (Slot.NEXT, Slot.RELEASE)}
        except StorageError as exc:
            typer.echo(f"ERROR: {exc}", err=True)
            raise typer.Exit(code=EXIT_IOERR) from exc
        typer.echo(format_baselines_table(baselines, color=use_color()))


__all__ = ["register"]

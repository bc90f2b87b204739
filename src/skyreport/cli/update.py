from __future__ import annotations

from typing import Annotated

import typer

from skyreport.cli._shared import CliOptions, run_action
from skyreport.core.model.action import UpdateNext, UpdateRelease


def register(app: typer.Typer) -> None:
    update = typer.Typer(help="Re-measure a baseline.")

    @update.command("next")
    def update_next(ctx: typer.Context) -> None:
        """Benchmark the head of the mainline branch and store it as `next`."""
        opts: CliOptions = ctx.obj
        run_action(opts, UpdateNext())

    @update.command("release")
    def update_release(
        ctx: typer.Context,
        tag: Annotated[str, typer.Argument(help="Release tag, assumed to be the latest release.")],
    ) -> None:
        """Benchmark release TAG and store it as `release`."""
        opts: CliOptions = ctx.obj
        try:
            action = UpdateRelease(tag=tag)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="TAG") from exc
        run_action(opts, action)

    app.add_typer(update, name="update")


__all__ = ["register"]

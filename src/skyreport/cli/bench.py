from __future__ import annotations

from typing import Annotated

import typer

from skyreport.cli._shared import CliOptions, run_action, use_color
from skyreport.core.model.action import NewBench
from skyreport.core.pipeline import BenchResult
from skyreport.render.tty import format_comparison_table


def bench_cmd(
    ctx: typer.Context,
    commit: Annotated[str, typer.Argument(help="Commit to build and benchmark.")],
    pull_request: Annotated[
        int,
        typer.Argument(metavar="PR", help="Pull request to report the result on.", min=1),
    ],
) -> None:
    """Benchmark COMMIT and compare it against the next and release baselines."""
    opts: CliOptions = ctx.obj
    try:
        action = NewBench(commit=commit, pull_request=pull_request)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="COMMIT") from exc
    result = run_action(opts, action)
    if isinstance(result, BenchResult) and not opts.quiet:
        typer.echo(format_comparison_table(result.raw, color=use_color()))
        typer.echo(f"Report written to {result.paths.markdown_path}")


def register(app: typer.Typer) -> None:
    app.command("bench")(bench_cmd)


__all__ = ["register"]

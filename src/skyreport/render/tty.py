"""Terminal tables for bench results and stored baselines."""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from skyreport.core.model.types import METRICS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from skyreport.core.model.report import Baseline, Delta, RawReport
    from skyreport.core.model.types import Slot

_NOT_SET = "not set"


def _render_rich_table(table: Table, *, color: bool) -> str:
    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        color_system="standard" if color else None,
        no_color=not color,
        width=10_000,
    )
    console.print(table)
    return buf.getvalue().rstrip()


def _delta_cell(delta: Delta) -> str:
    text = delta.format()
    if delta.value is None:
        return f"[yellow]{text}[/yellow]"
    if delta.value < 0:
        return f"[red]{text}[/red]"
    return f"[green]{text}[/green]"


def format_comparison_table(raw: RawReport, *, color: bool = False) -> str:
    table = Table(title=f"{raw.commit} (PR #{raw.pull_request})")
    table.add_column("Metric")
    table.add_column("Current", justify="right")
    for comparison in raw.comparisons:
        table.add_column(f"v/s {comparison.against}", justify="right")
    for metric in METRICS:
        table.add_row(
            metric.label,
            f"{raw.raw.metric(metric):.2f}",
            *(_delta_cell(c.delta.metric(metric)) for c in raw.comparisons),
        )
    return _render_rich_table(table, color=color)


def format_baselines_table(baselines: Mapping[Slot, Baseline | None], *, color: bool = False) -> str:
    table = Table(title="Baselines")
    table.add_column("Slot")
    table.add_column("Commit")
    for metric in METRICS:
        table.add_column(metric.label, justify="right")
    for slot, baseline in baselines.items():
        if baseline is None:
            table.add_row(slot.value, _NOT_SET, *("-" for _ in METRICS))
            continue
        table.add_row(
            slot.value,
            baseline.commit,
            *(f"{baseline.report.metric(m):.2f}" for m in METRICS),
        )
    return _render_rich_table(table, color=color)


__all__ = ["format_baselines_table", "format_comparison_table"]

"""Markdown report for one bench run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from skyreport.core.model.types import METRICS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from skyreport.core.model.report import Comparison, RawReport, Report
    from skyreport.render.render import RenderOptions


def render_list(items: Iterable[str]) -> str:
    """Render ``["a", "b"]`` as ``"- a\\n- b\\n"``."""
    return "".join(f"- {item}\n" for item in items)


def render_nested_list(title: str, items: Iterable[str]) -> str:
    """Render one top-level entry with indented children.

    ``render_nested_list("Favorites", ["apples", "bananas"])`` gives::

        - Favorites
          - apples
          - bananas
    """
    return f"- {title}\n" + "".join(f"  - {item}\n" for item in items)


def _format_value(value: float) -> str:
    return f"{value:.2f}"


def _raw_items(report: Report) -> list[str]:
    return [f"**{m.label}**: {_format_value(report.metric(m))}" for m in METRICS]


def _delta_items(comparison: Comparison) -> list[str]:
    return [f"**{m.label}**: {comparison.delta.metric(m).format()}" for m in METRICS]


def format_markdown(raw: RawReport, options: RenderOptions) -> str:
    """Render the human-readable report.

    Sections appear in a fixed order: title, Meta, Summary, Raw Result. The
    summary holds one nested entry per comparison, in the order given.
    """
    parts: list[str] = [f"# {options.title}\n", "## Meta\n"]
    parts.append(
        render_list(
            [
                f"Commit: [{raw.commit}]({options.commit_base_url}/{raw.commit})",
                f"Pull request: [{raw.pull_request}]({options.pr_base_url}/{raw.pull_request})",
            ]
        )
    )

    parts.append("## Summary\n")
    for label, comparison in zip(options.comparison_labels, raw.comparisons, strict=True):
        parts.append(render_nested_list(f"v/s {label} ({comparison.against})", _delta_items(comparison)))

    parts.append("## Raw Result\n")
    parts.append(render_list(_raw_items(raw.raw)))
    return "".join(parts)


__all__ = ["format_markdown", "render_list", "render_nested_list"]

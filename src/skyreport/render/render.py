from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from skyreport.core.model.report import RawReport
from skyreport.core.model.types import Slot
from skyreport.render.json import format_json
from skyreport.render.markdown import format_markdown

if TYPE_CHECKING:
    from collections.abc import Sequence

    from skyreport.core.config import Settings
    from skyreport.core.model.report import Comparison, Report


@dataclass(frozen=True, slots=True)
class RenderOptions:
    title: str = "Skyreport"
    commit_base_url: str = "https://github.com/skytable/skytable/commit"
    pr_base_url: str = "https://github.com/skytable/skytable/pull"
    comparison_labels: tuple[str, ...] = (Slot.NEXT.value, Slot.RELEASE.value)

    @classmethod
    def from_settings(cls, settings: Settings) -> RenderOptions:
        return cls(
            title=settings.report_title,
            commit_base_url=settings.commit_base_url,
            pr_base_url=settings.pr_base_url,
        )


@dataclass(frozen=True, slots=True)
class Artifacts:
    """Rendered outputs of a bench run, ready to be written as-is."""

    raw: RawReport
    json: bytes
    markdown: bytes


def build_raw_report(
    current: Report,
    comparisons: Sequence[Comparison],
    *,
    commit: str,
    pull_request: int,
) -> RawReport:
    return RawReport(commit=commit, pull_request=pull_request, raw=current, comparisons=tuple(comparisons))


def render_artifacts(raw: RawReport, options: RenderOptions | None = None) -> Artifacts:
    """Render both artifacts. The same input always yields the same bytes."""
    options = options or RenderOptions()
    if len(raw.comparisons) != len(options.comparison_labels):
        msg = f"expected {len(options.comparison_labels)} comparisons, got {len(raw.comparisons)}"
        raise ValueError(msg)
    return Artifacts(
        raw=raw,
        json=format_json(raw).encode("utf-8"),
        markdown=format_markdown(raw, options).encode("utf-8"),
    )


__all__ = ["Artifacts", "RenderOptions", "build_raw_report", "render_artifacts"]

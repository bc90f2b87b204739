"""Write run artifacts to disk, then push and announce them.

Local files are always written first. A failure while pushing or commenting
raises :class:`NetworkError` but never touches files already on disk.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from skyreport import logger
from skyreport.core.model.types import Slot
from skyreport.io import atomic_write_bytes

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from skyreport.core.config import Settings
    from skyreport.core.model.report import Baseline
    from skyreport.render.render import Artifacts

STAMP_FORMAT = "%d%m%Y-%H%M%S"


class VersionControl(Protocol):
    def commit_and_push(self, messages: Sequence[str]) -> None: ...


class ReviewSystem(Protocol):
    def comment(self, pull_request: int, body: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class ArtifactPaths:
    stamp: str
    json_path: Path
    markdown_path: Path
    report_url: str


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class Publisher:
    def __init__(
        self,
        settings: Settings,
        *,
        vcs: VersionControl | None = None,
        review: ReviewSystem | None = None,
        clock: Callable[[], datetime.datetime] = _utcnow,
    ) -> None:
        self.settings = settings
        self.vcs = vcs
        self.review = review
        self.clock = clock

    def paths_for(self, stamp: str) -> ArtifactPaths:
        name = f"result-{stamp}"
        return ArtifactPaths(
            stamp=stamp,
            json_path=self.settings.results_dir / f"{name}.json",
            markdown_path=self.settings.reports_dir / f"{name}.md",
            report_url=f"{self.settings.report_base_url}/{name}.md",
        )

    def persist(self, artifacts: Artifacts) -> ArtifactPaths:
        paths = self.paths_for(self.clock().strftime(STAMP_FORMAT))
        atomic_write_bytes(paths.json_path, artifacts.json)
        logger.info("Writing report ...")
        atomic_write_bytes(paths.markdown_path, artifacts.markdown)
        logger.info("Finished writing report: %s", paths.markdown_path)
        return paths

    def publish_bench(self, artifacts: Artifacts) -> ArtifactPaths:
        paths = self.persist(artifacts)
        raw = artifacts.raw
        s = self.settings
        if self.vcs is not None:
            self.vcs.commit_and_push(
                [
                    f"Added result for {s.org}/{s.repo}#{raw.pull_request} [skip ci]",
                    f"Triggered by {raw.commit}",
                ]
            )
        if self.review is not None:
            self.review.comment(
                raw.pull_request,
                f"The benchmark has completed. Review [the benchmark here]({paths.report_url})",
            )
        return paths

    def publish_baseline(self, slot: Slot, baseline: Baseline) -> None:
        if self.vcs is None:
            logger.info("Skipping push of the %s baseline", slot.value)
            return
        if slot is Slot.RELEASE:
            message = f"Update results for release `{baseline.commit}` [skip ci]"
        else:
            message = f"Update results for {slot.value} [skip ci]"
        self.vcs.commit_and_push([message])


__all__ = ["STAMP_FORMAT", "ArtifactPaths", "Publisher", "ReviewSystem", "VersionControl"]

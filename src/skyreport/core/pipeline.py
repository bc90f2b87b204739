"""One function per action, plus the wiring they share.

A bench run records the HEAD hash resolved from the requested ref, not the ref
itself, so the raw report and the "Triggered by" line always name a full hash.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from skyreport import logger
from skyreport.core.baseline import BaselineStore
from skyreport.core.compare import compare_all
from skyreport.core.model.action import NewBench, UpdateNext, UpdateRelease
from skyreport.core.model.types import Slot
from skyreport.core.orchestrator import SubprocessRunner, measure
from skyreport.core.parse import parse_bench_output
from skyreport.errors import StorageError
from skyreport.publish.publisher import Publisher
from skyreport.publish.review import GitHubReview
from skyreport.publish.vcs import GitRepository
from skyreport.render.render import RenderOptions, build_raw_report, render_artifacts

if TYPE_CHECKING:
    from collections.abc import Callable

    from skyreport.core.config import Settings
    from skyreport.core.model.action import Action
    from skyreport.core.model.report import Baseline, RawReport, Report
    from skyreport.core.orchestrator import CommandRunner
    from skyreport.publish.publisher import ArtifactPaths


@dataclass(frozen=True, slots=True)
class BenchResult:
    raw: RawReport
    paths: ArtifactPaths


@dataclass(frozen=True, slots=True)
class UpdateResult:
    slot: Slot
    baseline: Baseline


RunResult = BenchResult | UpdateResult


@dataclass(slots=True)
class Runtime:
    """Collaborators for one run. Tests replace the runner and publisher."""

    settings: Settings
    runner: CommandRunner
    store: BaselineStore
    publisher: Publisher
    readiness: Callable[..., None] | None = None

    @classmethod
    def create(
        cls,
        settings: Settings,
        *,
        publish: bool = True,
        runner: CommandRunner | None = None,
    ) -> Runtime:
        runner = runner or SubprocessRunner()
        if publish:
            settings.require_token()
            publisher = Publisher(
                settings,
                vcs=GitRepository(settings, runner=runner, cwd=settings.data_dir),
                review=GitHubReview(settings),
            )
        else:
            publisher = Publisher(settings)
        return cls(
            settings=settings,
            runner=runner,
            store=BaselineStore(settings.preset_dir),
            publisher=publisher,
        )


def prepare_data_dirs(settings: Settings) -> None:
    for directory in (settings.preset_dir, settings.results_dir, settings.reports_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"failed to create {directory}: {exc}"
            raise StorageError(msg) from exc


def measure_ref(ref: str, runtime: Runtime) -> tuple[str, Report]:
    """Build and benchmark *ref*; return the resolved commit and parsed report."""
    measurement = measure(ref, runtime.settings, runner=runtime.runner, readiness=runtime.readiness)
    return measurement.commit, parse_bench_output(measurement.output)


def run_bench(action: NewBench, runtime: Runtime) -> BenchResult:
    logger.info("New bench for commit: `%s` in PR#%d", action.commit, action.pull_request)
    # Both baselines must exist before spending a build on the comparison.
    next_ = runtime.store.read(Slot.NEXT)
    release = runtime.store.read(Slot.RELEASE)

    commit, current = measure_ref(action.commit, runtime)
    comparisons = compare_all(current, next_=next_, release=release)
    raw = build_raw_report(current, comparisons, commit=commit, pull_request=action.pull_request)
    artifacts = render_artifacts(raw, RenderOptions.from_settings(runtime.settings))
    paths = runtime.publisher.publish_bench(artifacts)
    return BenchResult(raw=raw, paths=paths)


def run_update_next(runtime: Runtime) -> UpdateResult:
    logger.info("Updating results for %s ...", runtime.settings.next_branch)
    commit, report = measure_ref(runtime.settings.next_branch, runtime)
    baseline = runtime.store.write(Slot.NEXT, commit, report)
    runtime.publisher.publish_baseline(Slot.NEXT, baseline)
    return UpdateResult(slot=Slot.NEXT, baseline=baseline)


def run_update_release(action: UpdateRelease, runtime: Runtime) -> UpdateResult:
    logger.info("Updating results for latest release (assuming `%s` is latest)", action.tag)
    _commit, report = measure_ref(action.tag, runtime)
    baseline = runtime.store.write(Slot.RELEASE, action.tag, report)
    runtime.publisher.publish_baseline(Slot.RELEASE, baseline)
    return UpdateResult(slot=Slot.RELEASE, baseline=baseline)


def dispatch(action: Action, runtime: Runtime) -> RunResult:
    """Run exactly one action end to end."""
    prepare_data_dirs(runtime.settings)
    if isinstance(action, NewBench):
        return run_bench(action, runtime)
    if isinstance(action, UpdateNext):
        return run_update_next(runtime)
    if isinstance(action, UpdateRelease):
        return run_update_release(action, runtime)
    msg = f"unknown action: {action!r}"
    raise TypeError(msg)


__all__ = [
    "BenchResult",
    "RunResult",
    "Runtime",
    "UpdateResult",
    "dispatch",
    "measure_ref",
    "prepare_data_dirs",
    "run_bench",
    "run_update_next",
    "run_update_release",
]

from __future__ import annotations

import dataclasses
import socket
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from fakes import FakeRunner, RecordingReview, RecordingVCS, no_wait
from click.testing import CliRunner

from skyreport.core.baseline import BaselineStore
from skyreport.core.config import Settings
from skyreport.core.model.report import Report
from skyreport.core.model.types import Slot
from skyreport.core.pipeline import Runtime
from skyreport.publish.publisher import Publisher


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def listening_port() -> Iterator[int]:
    """A local TCP port that accepts connections, standing in for a ready server."""
    with socket.create_server(("127.0.0.1", 0)) as server:
        yield server.getsockname()[1]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "perf",
        workspace_root=tmp_path / "work",
        ready_timeout=1.0,
        ready_interval=0.01,
        token="s3cr3t-token",
    )


@pytest.fixture
def store(settings: Settings) -> BaselineStore:
    return BaselineStore(settings.preset_dir)


@pytest.fixture
def seed_baselines(store: BaselineStore) -> Callable[..., None]:
    def seed(
        *,
        next_: Report | None = None,
        release: Report | None = None,
        next_commit: str = "feedface",
        release_tag: str = "v0.7.0",
    ) -> None:
        store.write(Slot.NEXT, next_commit, next_ or Report(get=100.0, set=100.0, update=100.0))
        store.write(Slot.RELEASE, release_tag, release or Report(get=100.0, set=100.0, update=100.0))

    return seed


@pytest.fixture
def make_runtime(settings: Settings, store: BaselineStore) -> Callable[..., Runtime]:
    def build(
        runner: FakeRunner,
        *,
        vcs: RecordingVCS | None = None,
        review: RecordingReview | None = None,
        **overrides: Any,
    ) -> Runtime:
        active = dataclasses.replace(settings, **overrides) if overrides else settings
        return Runtime(
            settings=active,
            runner=runner,
            store=store,
            publisher=Publisher(active, vcs=vcs, review=review),
            readiness=no_wait,
        )

    return build

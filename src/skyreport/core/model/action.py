"""The three things a single invocation can do."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NewBench:
    """Benchmark ``commit`` and report the result on pull request ``pull_request``."""

    commit: str
    pull_request: int

    def __post_init__(self) -> None:
        """Validate the commit and pull request id."""
        if not self.commit.strip():
            msg = "commit must be non-empty"
            raise ValueError(msg)
        if self.pull_request < 1:
            msg = f"pull request id must be positive, got {self.pull_request}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class UpdateNext:
    """Re-measure the head of the mainline branch and store it as the ``next`` baseline."""


@dataclass(frozen=True, slots=True)
class UpdateRelease:
    """Measure release ``tag`` and store it as the ``release`` baseline."""

    tag: str

    def __post_init__(self) -> None:
        """Validate the tag."""
        if not self.tag.strip():
            msg = "release tag must be non-empty"
            raise ValueError(msg)


Action = NewBench | UpdateNext | UpdateRelease


__all__ = ["Action", "NewBench", "UpdateNext", "UpdateRelease"]

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from skyreport.core.model.types import METRICS, Metric

if TYPE_CHECKING:
    from collections.abc import Mapping

# -----------------------------------------------------------------------------
# Measurements
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Report:
    """Throughput for one benchmark run, in operations per second."""

    get: float
    set: float
    update: float

    def __post_init__(self) -> None:
        """Validate that every metric is a finite, non-negative number."""
        for metric in METRICS:
            value = getattr(self, metric.value)
            if isinstance(value, bool) or not isinstance(value, int | float):
                msg = f"Report.{metric.value} must be a number, got {value!r}"
                raise TypeError(msg)
            try:
                finite = math.isfinite(value)
            except OverflowError as exc:
                msg = f"Report.{metric.value} is too large to represent"
                raise ValueError(msg) from exc
            if not finite or value < 0:
                msg = f"Report.{metric.value} must be finite and >= 0, got {value!r}"
                raise ValueError(msg)

    def metric(self, metric: Metric) -> float:
        return float(getattr(self, metric.value))

    def to_dict(self) -> dict[str, float]:
        return {metric.value: self.metric(metric) for metric in METRICS}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Report:
        return cls(get=data["get"], set=data["set"], update=data["update"])  # type: ignore[arg-type]


# -----------------------------------------------------------------------------
# Comparisons
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Delta:
    """Signed percentage change of one metric.

    ``value`` is ``None`` when the change is undefined (the baseline was zero);
    ``reason`` then says why. Non-finite floats never reach this type.
    """

    value: float | None
    reason: str | None = None

    def __post_init__(self) -> None:
        """Keep the valid and invalid shapes apart."""
        if self.value is None and not self.reason:
            msg = "an invalid Delta needs a reason"
            raise ValueError(msg)
        if self.value is not None and not math.isfinite(self.value):
            msg = f"Delta.value must be finite, got {self.value!r}"
            raise ValueError(msg)

    @classmethod
    def invalid(cls, reason: str) -> Delta:
        return cls(value=None, reason=reason)

    @property
    def is_valid(self) -> bool:
        return self.value is not None

    def format(self) -> str:
        if self.value is None:
            return f"n/a ({self.reason})"
        return f"{self.value:+.2f}%"


@dataclass(frozen=True, slots=True)
class DeltaReport:
    """Per-metric deltas against one baseline."""

    get: Delta
    set: Delta
    update: Delta

    def metric(self, metric: Metric) -> Delta:
        return getattr(self, metric.value)

    def to_dict(self) -> dict[str, float | None]:
        return {metric.value: self.metric(metric).value for metric in METRICS}


@dataclass(frozen=True, slots=True)
class Comparison:
    """Deltas of the current run against the baseline recorded for ``against``."""

    against: str
    delta: DeltaReport


# -----------------------------------------------------------------------------
# Persisted shapes
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Baseline:
    """The single live reference point for a slot."""

    commit: str
    report: Report

    def __post_init__(self) -> None:
        """Reject empty commit identifiers."""
        if not self.commit:
            msg = "Baseline.commit must be non-empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, object]:
        return {"commit": self.commit, "report": self.report.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Baseline:
        report = data["report"]
        return cls(commit=str(data["commit"]), report=Report.from_dict(report))  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class RawReport:
    """Machine-readable record of one bench run."""

    commit: str
    pull_request: int
    raw: Report
    comparisons: tuple[Comparison, ...]

    def to_dict(self) -> dict[str, object]:
        # Key order is part of the on-disk format.
        return {
            "commit": self.commit,
            "pr": str(self.pull_request),
            "raw": self.raw.to_dict(),
            "results": [{"against": c.against, "result": c.delta.to_dict()} for c in self.comparisons],
        }


__all__ = ["Baseline", "Comparison", "Delta", "DeltaReport", "RawReport", "Report"]

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from skyreport.core.model.report import Comparison, Delta, DeltaReport
from skyreport.core.model.types import METRICS

if TYPE_CHECKING:
    from skyreport.core.model.report import Baseline, Report

ZERO_BASELINE = "zero baseline"
OUT_OF_RANGE = "out of range"


def delta(current: float, baseline: float) -> Delta:
    """Percentage change from *baseline* to *current*; positive means faster."""
    if baseline == 0:
        return Delta.invalid(ZERO_BASELINE)
    value = (current - baseline) / baseline * 100.0
    if not math.isfinite(value):
        return Delta.invalid(OUT_OF_RANGE)
    return Delta(value)


def delta_report(current: Report, baseline: Report) -> DeltaReport:
    get, set_, update = (delta(current.metric(m), baseline.metric(m)) for m in METRICS)
    return DeltaReport(get=get, set=set_, update=update)


def compare(current: Report, baseline: Baseline) -> Comparison:
    return Comparison(against=baseline.commit, delta=delta_report(current, baseline.report))


def compare_all(current: Report, *, next_: Baseline, release: Baseline) -> tuple[Comparison, Comparison]:
    """Compare against both reference points; ``next`` first, then ``release``."""
    return compare(current, next_), compare(current, release)


__all__ = ["OUT_OF_RANGE", "ZERO_BASELINE", "compare", "compare_all", "delta", "delta_report"]

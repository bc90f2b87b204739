import math

import pytest

from skyreport.core.model.action import NewBench, UpdateRelease
from skyreport.core.model.report import Baseline, Comparison, Delta, DeltaReport, RawReport, Report


@pytest.mark.parametrize("bad", [-1.0, math.nan, math.inf])
def test_report_rejects_negative_or_non_finite(bad: float) -> None:
    with pytest.raises(ValueError, match="finite and >= 0"):
        Report(get=bad, set=1, update=1)


def test_report_rejects_non_numbers() -> None:
    with pytest.raises(TypeError):
        Report(get="1", set=1, update=1)  # type: ignore[arg-type]


def test_report_is_immutable() -> None:
    report = Report(get=1, set=2, update=3)
    with pytest.raises(AttributeError):
        report.get = 5  # type: ignore[misc]


def test_raw_report_field_order() -> None:
    delta = DeltaReport(get=Delta(1.0), set=Delta.invalid("zero baseline"), update=Delta(-1.0))
    raw = RawReport(
        commit="abc",
        pull_request=7,
        raw=Report(get=1, set=2, update=3),
        comparisons=(Comparison("n", delta), Comparison("r", delta)),
    )
    payload = raw.to_dict()
    assert list(payload) == ["commit", "pr", "raw", "results"]
    assert payload["pr"] == "7"
    assert payload["results"][0] == {"against": "n", "result": {"get": 1.0, "set": None, "update": -1.0}}


def test_baseline_requires_commit() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        Baseline(commit="", report=Report(get=1, set=1, update=1))


def test_actions_validate_their_arguments() -> None:
    with pytest.raises(ValueError, match="positive"):
        NewBench(commit="abc", pull_request=0)
    with pytest.raises(ValueError, match="non-empty"):
        NewBench(commit=" ", pull_request=1)
    with pytest.raises(ValueError, match="non-empty"):
        UpdateRelease(tag="")


def test_report_rejects_integers_beyond_float_range() -> None:
    with pytest.raises(ValueError, match="too large"):
        Report(get=10**400, set=1, update=1)

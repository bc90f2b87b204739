from skyreport.core.model.action import Action, NewBench, UpdateNext, UpdateRelease
from skyreport.core.model.report import Baseline, Comparison, Delta, DeltaReport, RawReport, Report
from skyreport.core.model.types import METRICS, Metric, Slot

__all__ = [
    "METRICS",
    "Action",
    "Baseline",
    "Comparison",
    "Delta",
    "DeltaReport",
    "Metric",
    "NewBench",
    "RawReport",
    "Report",
    "Slot",
    "UpdateNext",
    "UpdateRelease",
]

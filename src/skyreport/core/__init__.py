from skyreport.core.baseline import BaselineStore
from skyreport.core.compare import compare, compare_all, delta
from skyreport.core.config import LOG_FORMAT, Settings, get_schema, load_settings
from skyreport.core.model import (
    METRICS,
    Action,
    Baseline,
    Comparison,
    Delta,
    DeltaReport,
    Metric,
    NewBench,
    RawReport,
    Report,
    Slot,
    UpdateNext,
    UpdateRelease,
)
from skyreport.core.parse import parse_bench_output, parse_stats

__all__ = [
    "LOG_FORMAT",
    "METRICS",
    "Action",
    "Baseline",
    "BaselineStore",
    "Comparison",
    "Delta",
    "DeltaReport",
    "Metric",
    "NewBench",
    "RawReport",
    "Report",
    "Settings",
    "Slot",
    "UpdateNext",
    "UpdateRelease",
    "compare",
    "compare_all",
    "delta",
    "get_schema",
    "load_settings",
    "parse_bench_output",
    "parse_stats",
]

"""Shared type aliases and enumerations used across skyreport."""

from __future__ import annotations

from enum import StrEnum


class Slot(StrEnum):
    """Named baseline slots."""

    RELEASE = "release"
    NEXT = "next"


class Metric(StrEnum):
    """Throughput metrics reported by the benchmark, in benchmark output order."""

    GET = "get"
    SET = "set"
    UPDATE = "update"

    @property
    def label(self) -> str:
        return self.value.upper()


METRICS: tuple[Metric, ...] = (Metric.GET, Metric.SET, Metric.UPDATE)

# Benchmark output carries one stat per metric, in METRICS order.
MIN_STAT_ENTRIES = len(METRICS)


__all__ = ["METRICS", "MIN_STAT_ENTRIES", "Metric", "Slot"]

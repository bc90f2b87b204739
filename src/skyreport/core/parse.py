"""Turn ``sky-bench --json`` output into a :class:`Report`.

The benchmark prints an ordered array of ``{"name": ..., "stat": ...}``
entries. Entries are assigned positionally: the first is GET, the second SET
and the third UPDATE, whatever their ``name`` says. Extra entries are ignored.
"""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING

from skyreport import logger
from skyreport.core.model.report import Report
from skyreport.core.model.types import METRICS, MIN_STAT_ENTRIES
from skyreport.errors import ParseError

if TYPE_CHECKING:
    from collections.abc import Sequence


def _stat(entry: object, index: int) -> float:
    if not isinstance(entry, dict):
        msg = f"stat entry {index} is not an object: {entry!r}"
        raise ParseError(msg)
    value = entry.get("stat")
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"stat entry {index} has no numeric 'stat': {entry!r}"
        raise ParseError(msg)
    try:
        stat = float(value)
    except OverflowError as exc:
        msg = f"stat entry {index} is too large to represent"
        raise ParseError(msg) from exc
    if not math.isfinite(stat) or stat < 0:
        msg = f"stat entry {index} is not a finite, non-negative number: {value!r}"
        raise ParseError(msg)
    return stat


def _check_names(entries: Sequence[dict[str, object]]) -> None:
    for metric, entry in zip(METRICS, entries, strict=False):
        name = entry.get("name", entry.get("report"))
        if isinstance(name, str) and name.strip().lower() != metric.value:
            logger.warning("benchmark entry %r is recorded as %s (position wins)", name, metric.label)


def parse_stats(entries: object) -> Report:
    """Build a report from an already-decoded stat array."""
    if not isinstance(entries, list):
        msg = f"expected a JSON array of stat entries, got {type(entries).__name__}"
        raise ParseError(msg)
    if len(entries) < MIN_STAT_ENTRIES:
        msg = f"expected at least {MIN_STAT_ENTRIES} stat entries, got {len(entries)}"
        raise ParseError(msg)

    values = [_stat(entry, i) for i, entry in enumerate(entries[:MIN_STAT_ENTRIES])]
    _check_names(entries[:MIN_STAT_ENTRIES])
    get, set_, update = values
    return Report(get=get, set=set_, update=update)


def parse_bench_output(output: str | bytes) -> Report:
    """Parse raw benchmark stdout."""
    text = output.decode("utf-8", errors="replace") if isinstance(output, bytes) else output
    try:
        entries = json.loads(text.strip())
    except ValueError as exc:
        msg = f"benchmark output is not valid JSON: {exc}"
        raise ParseError(msg) from exc
    return parse_stats(entries)


__all__ = ["parse_bench_output", "parse_stats"]

"""Persistence for the ``release`` and ``next`` reference points.

Each slot is one JSON file under ``preset/``. A write replaces the file
atomically; there is no history and no locking, so callers must not run two
pipelines against the same data directory at once.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from jsonschema import ValidationError, validate

from skyreport import logger
from skyreport.core.config import get_schema
from skyreport.core.model.report import Baseline, Report
from skyreport.core.model.types import Slot
from skyreport.errors import BaselineNotFoundError, StorageError
from skyreport.io import atomic_write_bytes, read_text

if TYPE_CHECKING:
    from pathlib import Path


def encode_baseline(baseline: Baseline) -> bytes:
    payload = baseline.to_dict()
    validate(payload, get_schema("baseline"))
    return json.dumps(payload, indent=2).encode("utf-8")


def decode_baseline(text: str, *, source: str = "<baseline>") -> Baseline:
    try:
        payload = json.loads(text)
        validate(payload, get_schema("baseline"))
    except ValueError as exc:
        msg = f"{source} is not valid JSON: {exc}"
        raise StorageError(msg) from exc
    except ValidationError as exc:
        msg = f"{source} is not a valid baseline: {exc.message}"
        raise StorageError(msg) from exc
    try:
        return Baseline.from_dict(payload)
    except (TypeError, ValueError) as exc:
        msg = f"{source} is not a valid baseline: {exc}"
        raise StorageError(msg) from exc


class BaselineStore:
    """Read and replace the baseline of each :class:`Slot`."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path(self, slot: Slot) -> Path:
        return self.directory / f"{Slot(slot).value}.json"

    def read(self, slot: Slot) -> Baseline:
        path = self.path(slot)
        if not path.is_file():
            raise BaselineNotFoundError(Slot(slot).value)
        return decode_baseline(read_text(path), source=str(path))

    def read_optional(self, slot: Slot) -> Baseline | None:
        try:
            return self.read(slot)
        except BaselineNotFoundError:
            return None

    def write(self, slot: Slot, commit: str, report: Report) -> Baseline:
        baseline = Baseline(commit=commit, report=report)
        path = self.path(slot)
        atomic_write_bytes(path, encode_baseline(baseline))
        logger.info("Stored %s baseline for `%s`", Slot(slot).value, commit)
        return baseline


__all__ = ["BaselineStore", "decode_baseline", "encode_baseline"]

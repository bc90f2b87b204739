from __future__ import annotations

import json
from typing import TYPE_CHECKING

from jsonschema import validate

from skyreport.core.config import get_schema

if TYPE_CHECKING:
    from skyreport.core.model.report import RawReport


def format_json(raw: RawReport) -> str:
    """Render a :class:`RawReport` as schema-validated, pretty-printed JSON.

    Field order follows :meth:`RawReport.to_dict`; keys are never sorted.
    Invalid deltas are written as ``null``.
    """
    payload = raw.to_dict()
    validate(payload, get_schema("raw-report"))
    return json.dumps(payload, indent=2, allow_nan=False)


__all__ = ["format_json"]

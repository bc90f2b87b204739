from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from skyreport.core.baseline import BaselineStore, decode_baseline
from skyreport.core.model.report import Baseline, Report
from skyreport.core.model.types import Slot
from skyreport.errors import BaselineNotFoundError, StorageError

if TYPE_CHECKING:
    from pathlib import Path


def test_write_then_read_round_trips(store: BaselineStore) -> None:
    report = Report(get=444555.12, set=398276.52, update=389244.75)
    store.write(Slot.RELEASE, "v0.7.0", report)
    assert store.read(Slot.RELEASE) == Baseline(commit="v0.7.0", report=report)


def test_slots_are_independent(store: BaselineStore) -> None:
    store.write(Slot.NEXT, "abc", Report(get=1, set=2, update=3))
    with pytest.raises(BaselineNotFoundError, match="update release"):
        store.read(Slot.RELEASE)
    assert store.read_optional(Slot.RELEASE) is None
    assert store.read(Slot.NEXT).commit == "abc"


def test_write_overwrites_in_place(store: BaselineStore) -> None:
    store.write(Slot.NEXT, "old", Report(get=1, set=1, update=1))
    store.write(Slot.NEXT, "new", Report(get=2, set=2, update=2))
    assert store.read(Slot.NEXT) == Baseline("new", Report(get=2, set=2, update=2))
    assert sorted(p.name for p in store.directory.iterdir()) == ["next.json"]


def test_file_format(store: BaselineStore) -> None:
    store.write(Slot.NEXT, "abc", Report(get=1.5, set=2, update=3))
    text = store.path(Slot.NEXT).read_text(encoding="utf-8")
    assert json.loads(text) == {"commit": "abc", "report": {"get": 1.5, "set": 2.0, "update": 3.0}}
    assert text.startswith('{\n  "commit": "abc",\n  "report": {\n    "get": 1.5,')


def test_failed_write_leaves_previous_value(store: BaselineStore, monkeypatch: pytest.MonkeyPatch) -> None:
    store.write(Slot.NEXT, "old", Report(get=1, set=1, update=1))

    def broken_replace(self: Path, target: Path) -> None:
        msg = "disk full"
        raise OSError(msg)

    monkeypatch.setattr("pathlib.Path.replace", broken_replace)
    with pytest.raises(StorageError, match="disk full"):
        store.write(Slot.NEXT, "new", Report(get=2, set=2, update=2))
    monkeypatch.undo()

    assert store.read(Slot.NEXT).commit == "old"
    assert [p.name for p in store.directory.iterdir()] == ["next.json"]


@pytest.mark.parametrize(
    ("text", "pattern"),
    [
        ("{", "not valid JSON"),
        ('{"commit": "abc"}', "not a valid baseline"),
        ('{"commit": "abc", "report": {"get": 1, "set": 1, "update": -1}}', "not a valid baseline"),
        ('{"commit": "", "report": {"get": 1, "set": 1, "update": 1}}', "not a valid baseline"),
        ('{"commit": "abc", "report": {"get": 1' + "0" * 400 + ', "set": 1, "update": 1}}', "too large"),
    ],
)
def test_corrupt_baseline_raises_storage_error(text: str, pattern: str) -> None:
    with pytest.raises(StorageError, match=pattern):
        decode_baseline(text)


def test_read_reports_corrupt_file(store: BaselineStore) -> None:
    store.directory.mkdir(parents=True)
    store.path(Slot.RELEASE).write_text("[]", encoding="utf-8")
    with pytest.raises(StorageError, match="release.json"):
        store.read(Slot.RELEASE)

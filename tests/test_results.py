"""Tests for vegam.core.results – result persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from vegam.core.config import Mode
from vegam.core.diff import CharacterStats
from vegam.core.metrics import SpeedSample
from vegam.core.results import ResultStore
from vegam.core.session import SessionResult


def _result(wpm: int = 42, mode: Mode = Mode.TIME) -> SessionResult:
    return SessionResult(
        mode=mode,
        wpm=wpm,
        raw_wpm=wpm + 3,
        accuracy=96,
        consistency=81,
        cpm=225,
        duration_seconds=30,
        speed_samples=(SpeedSample(0, 0, 0), SpeedSample(30, wpm, wpm + 3)),
        error_count=4,
        character_count=110,
        character_stats=CharacterStats(correct=105, incorrect=4, extra=1),
    )


@pytest.fixture()
def store(tmp_path: Path) -> ResultStore:
    """ResultStore backed by a temp file so tests don't touch ~/.vegam."""
    return ResultStore(tmp_path / "results.json")


class TestResultStoreFresh:
    def test_no_file_is_empty(self, store: ResultStore):
        assert store.load() == []


class TestAppend:
    def test_append_writes_record(self, store: ResultStore):
        assert store.append(_result()) is True
        records = store.load()
        assert len(records) == 1
        record = records[0]
        assert record["wpm"] == 42
        assert record["accuracy"] == 96
        assert record["duration"] == 30
        assert record["errors"] == 4
        assert record["characters"] == 110
        assert record["mode"] == "time"
        assert "created_at" in record

    def test_append_keeps_previous(self, store: ResultStore):
        store.append(_result(wpm=30))
        store.append(_result(wpm=50, mode=Mode.WORDS))
        assert [r["wpm"] for r in store.load()] == [30, 50]

    def test_file_is_json_list(self, store: ResultStore):
        store.append(_result())
        payload = json.loads(store.file_path.read_text(encoding="utf-8"))
        assert isinstance(payload, list)

    def test_write_failure_returns_false(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = ResultStore(blocker / "results.json")
        assert store.append(_result()) is False

    def test_write_failure_is_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        store = ResultStore(blocker / "results.json")
        with caplog.at_level("WARNING"):
            store.append(_result())
        assert "Could not save result" in caplog.text


class TestLoadCorrupt:
    def test_corrupt_json(self, store: ResultStore):
        store.file_path.write_text("{not json", encoding="utf-8")
        assert store.load() == []

    def test_corrupt_file_is_replaced_on_append(self, store: ResultStore):
        store.file_path.write_text("{not json", encoding="utf-8")
        assert store.append(_result()) is True
        assert len(store.load()) == 1

    def test_non_list_payload(self, store: ResultStore):
        store.file_path.write_text('{"wpm": 1}', encoding="utf-8")
        assert store.load() == []

    def test_skips_non_dict_items(self, store: ResultStore):
        store.file_path.write_text('[1, {"wpm": 5}, "x"]', encoding="utf-8")
        assert store.load() == [{"wpm": 5}]

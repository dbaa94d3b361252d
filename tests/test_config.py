"""Tests for vegam.core.config – session configuration and settings persistence."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from vegam.core.config import Mode, SessionConfig, SettingsStore, data_dir


# ---------------------------------------------------------------------------
# SessionConfig
# ---------------------------------------------------------------------------

class TestSessionConfig:
    def test_defaults(self):
        c = SessionConfig()
        assert c.mode is Mode.TIME
        assert c.time_limit == 30
        assert c.word_count == 25
        assert c.custom_text is None

    def test_mode_from_string(self):
        assert SessionConfig(mode="words").mode is Mode.WORDS

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            SessionConfig(mode="marathon")

    @pytest.mark.parametrize("limit", [15, 30, 60, 120])
    def test_allowed_time_limits(self, limit):
        assert SessionConfig(time_limit=limit).time_limit == limit

    @pytest.mark.parametrize("limit", [0, 10, 45, 300])
    def test_rejected_time_limits(self, limit):
        with pytest.raises(ValueError, match="time_limit"):
            SessionConfig(time_limit=limit)

    @pytest.mark.parametrize("count", [5, 20, 1000])
    def test_rejected_word_counts(self, count):
        with pytest.raises(ValueError, match="word_count"):
            SessionConfig(mode=Mode.WORDS, word_count=count)

    def test_custom_requires_text(self):
        with pytest.raises(ValueError, match="custom_text"):
            SessionConfig(mode=Mode.CUSTOM)

    def test_custom_rejects_empty_text(self):
        with pytest.raises(ValueError):
            SessionConfig(mode=Mode.CUSTOM, custom_text="")

    def test_parameter_per_mode(self):
        assert SessionConfig(mode=Mode.TIME, time_limit=60).parameter == 60
        assert SessionConfig(mode=Mode.WORDS, word_count=50).parameter == 50

    def test_frozen(self):
        c = SessionConfig()
        with pytest.raises(AttributeError):
            c.time_limit = 60  # type: ignore[misc]


# ---------------------------------------------------------------------------
# data_dir
# ---------------------------------------------------------------------------

class TestDataDir:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VEGAM_HOME", str(tmp_path))
        assert data_dir() == tmp_path

    def test_default_under_home(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("VEGAM_HOME", raising=False)
        assert data_dir() == Path.home() / ".vegam"


# ---------------------------------------------------------------------------
# SettingsStore
# ---------------------------------------------------------------------------

@pytest.fixture()
def store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings.yaml")


class TestSettingsStore:
    def test_missing_file_defaults(self, store: SettingsStore):
        assert store.load() == SessionConfig()

    def test_round_trip(self, store: SettingsStore):
        config = SessionConfig(mode=Mode.CUSTOM, time_limit=60, word_count=100, custom_text="hello there")
        store.save(config)
        assert store.load() == config

    def test_saved_as_yaml(self, store: SettingsStore):
        store.save(SessionConfig(mode=Mode.WORDS, word_count=50))
        raw = yaml.safe_load(store.file_path.read_text(encoding="utf-8"))
        assert raw["mode"] == "words"
        assert raw["word_count"] == 50

    def test_creates_parent_dir(self, tmp_path: Path):
        store = SettingsStore(tmp_path / "nested" / "dir" / "settings.yaml")
        store.save(SessionConfig())
        assert store.file_path.exists()

    def test_corrupt_yaml_defaults(self, store: SettingsStore):
        store.file_path.write_text("mode: [unclosed\n", encoding="utf-8")
        assert store.load() == SessionConfig()

    def test_invalid_values_default(self, store: SettingsStore):
        store.file_path.write_text("mode: time\ntime_limit: 42\n", encoding="utf-8")
        assert store.load() == SessionConfig()

    def test_non_mapping_defaults(self, store: SettingsStore):
        store.file_path.write_text("- time\n", encoding="utf-8")
        assert store.load() == SessionConfig()

    def test_env_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VEGAM_HOME", str(tmp_path))
        assert SettingsStore().file_path == tmp_path / "settings.yaml"

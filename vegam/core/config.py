"""Test configuration: modes, allowed parameters, and persisted settings."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

TIME_LIMITS = (15, 30, 60, 120)
WORD_COUNTS = (10, 25, 50, 100)


class Mode(str, Enum):
    TIME = "time"
    WORDS = "words"
    QUOTE = "quote"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SessionConfig:
    """Parameters for one typing test. Changing any of them means a reset."""

    mode: Mode = Mode.TIME
    time_limit: int = 30
    word_count: int = 25
    custom_text: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept plain strings ("time", "words", ...) from settings files.
        object.__setattr__(self, "mode", Mode(self.mode))
        if self.time_limit not in TIME_LIMITS:
            raise ValueError(f"time_limit must be one of {TIME_LIMITS}, got {self.time_limit!r}")
        if self.word_count not in WORD_COUNTS:
            raise ValueError(f"word_count must be one of {WORD_COUNTS}, got {self.word_count!r}")
        if self.mode is Mode.CUSTOM and not self.custom_text:
            raise ValueError("custom mode needs non-empty custom_text")

    @property
    def parameter(self) -> int:
        """The numeric parameter the text generator keys on for this mode."""
        if self.mode is Mode.TIME:
            return self.time_limit
        return self.word_count


def data_dir() -> Path:
    """Directory holding settings and results. Override with ``VEGAM_HOME``."""
    override = os.environ.get("VEGAM_HOME")
    if override:
        return Path(override)
    return Path.home() / ".vegam"


class SettingsStore:
    """Remembers the last used SessionConfig across app restarts.
    File: ~/.vegam/settings.yaml."""

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or data_dir() / "settings.yaml"

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> SessionConfig:
        if not self._file_path.exists():
            return SessionConfig()
        try:
            raw = yaml.safe_load(self._file_path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Could not load settings from %s: %s", self._file_path, e)
            return SessionConfig()
        if not isinstance(raw, dict):
            return SessionConfig()
        try:
            return SessionConfig(
                mode=Mode(str(raw.get("mode", Mode.TIME.value))),
                time_limit=int(raw.get("time_limit", 30)),
                word_count=int(raw.get("word_count", 25)),
                custom_text=raw.get("custom_text") or None,
            )
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid settings in %s: %s", self._file_path, e)
            return SessionConfig()

    def save(self, config: SessionConfig) -> None:
        payload = asdict(config)
        payload["mode"] = config.mode.value
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self._file_path, e)

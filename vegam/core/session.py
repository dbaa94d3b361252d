from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from vegam.core.clock import ClockDriver
from vegam.core.config import Mode, SessionConfig
from vegam.core.diff import (
    CharacterStats,
    classify,
    completed_word_count,
    finalize_missed,
    has_uncorrected_error,
)
from vegam.core.metrics import (
    SpeedSample,
    accuracy,
    consistency,
    cpm,
    net_wpm,
    raw_wpm,
    round_half_up,
    with_sample,
    with_terminal_sample,
)
from vegam.core.text import WordBank, generate_text

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETE = "complete"


class KeyKind(Enum):
    CHARACTER = "character"
    BACKSPACE = "backspace"
    TERMINATOR = "terminator"


@dataclass(frozen=True)
class KeyEvent:
    """A single keystroke delivered by the host UI."""

    kind: KeyKind
    char: str = ""

    @classmethod
    def character(cls, char: str) -> "KeyEvent":
        return cls(KeyKind.CHARACTER, char)

    @classmethod
    def backspace(cls) -> "KeyEvent":
        return cls(KeyKind.BACKSPACE)

    @classmethod
    def terminator(cls) -> "KeyEvent":
        return cls(KeyKind.TERMINATOR)


@dataclass(frozen=True)
class SessionResult:
    """Final metrics of a completed test. Computed exactly once per session."""

    mode: Mode
    wpm: int
    raw_wpm: int
    accuracy: int
    consistency: int
    cpm: int
    duration_seconds: int
    speed_samples: Tuple[SpeedSample, ...]
    error_count: int
    character_count: int
    character_stats: CharacterStats

    def to_record(self) -> Dict[str, object]:
        """Row handed to the persistence collaborator."""
        return {
            "wpm": self.wpm,
            "accuracy": self.accuracy,
            "duration": self.duration_seconds,
            "errors": self.error_count,
            "characters": self.character_count,
            "mode": self.mode.value,
        }


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the live session for display."""

    config: SessionConfig
    phase: Phase
    target_text: str
    typed_text: str
    character_stats: CharacterStats
    speed_samples: Tuple[SpeedSample, ...]
    started_at: Optional[float]
    clock_value: int
    wpm: int = 0
    raw_wpm: int = 0
    accuracy: int = 100
    cpm: int = 0


class _Outcome(Enum):
    COMPLETE = "complete"
    REGENERATE = "regenerate"


def _time_after_keystroke(config: SessionConfig, target: str, typed: str) -> Optional[_Outcome]:
    if len(typed) < len(target):
        return None
    if has_uncorrected_error(target, typed):
        return _Outcome.COMPLETE
    return _Outcome.REGENERATE


def _words_after_keystroke(config: SessionConfig, target: str, typed: str) -> Optional[_Outcome]:
    if completed_word_count(target, typed) >= config.word_count:
        return _Outcome.COMPLETE
    return None


def _no_outcome(config: SessionConfig, target: str, typed: str) -> Optional[_Outcome]:
    return None


@dataclass(frozen=True)
class _ModeRules:
    countdown: bool
    ends_on_terminator: bool
    after_keystroke: Callable[[SessionConfig, str, str], Optional[_Outcome]]


_MODE_RULES: Dict[Mode, _ModeRules] = {
    Mode.TIME: _ModeRules(countdown=True, ends_on_terminator=False, after_keystroke=_time_after_keystroke),
    Mode.WORDS: _ModeRules(countdown=False, ends_on_terminator=True, after_keystroke=_words_after_keystroke),
    Mode.QUOTE: _ModeRules(countdown=False, ends_on_terminator=True, after_keystroke=_no_outcome),
    Mode.CUSTOM: _ModeRules(countdown=False, ends_on_terminator=True, after_keystroke=_no_outcome),
}


class TypingSession:
    """State machine for one typing test: idle -> active -> complete.

    Keystrokes (``handle_keystroke``) and one-second clock ticks (``tick``)
    are the only events. Both are handled synchronously; the session owns
    all mutable state and hands out snapshots.

    ``clock`` returns the current time in seconds and is injectable so
    tests can control elapsed time.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        bank: Optional[WordBank] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._clock = clock
        self._bank = bank
        self._rng = rng or random.Random()
        self._listeners: List[Callable[[SessionResult], None]] = []
        self._driver: Optional[ClockDriver] = None
        self._config = config or SessionConfig()
        self._init_state()

    # -- read access --------------------------------------------------------

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def target_text(self) -> str:
        return self._target

    @property
    def typed_text(self) -> str:
        return self._typed

    @property
    def character_stats(self) -> CharacterStats:
        return self._stats

    @property
    def speed_samples(self) -> Tuple[SpeedSample, ...]:
        return self._samples

    @property
    def clock_value(self) -> int:
        return self._clock_value

    @property
    def result(self) -> Optional[SessionResult]:
        """The final result once the session is complete, otherwise None."""
        return self._result

    def snapshot(self) -> SessionSnapshot:
        elapsed = self._elapsed(self._clock())
        return SessionSnapshot(
            config=self._config,
            phase=self._phase,
            target_text=self._target,
            typed_text=self._typed,
            character_stats=self._stats,
            speed_samples=self._samples,
            started_at=self._started_at,
            clock_value=self._clock_value,
            wpm=net_wpm(self._stats, elapsed),
            raw_wpm=raw_wpm(self._stats, elapsed),
            accuracy=accuracy(self._stats),
            cpm=cpm(self._stats, elapsed),
        )

    def subscribe(self, callback: Callable[[SessionResult], None]) -> None:
        """Register ``callback`` to receive the result when the session completes."""
        self._listeners.append(callback)

    # -- events -------------------------------------------------------------

    def reset(self, config: Optional[SessionConfig] = None) -> None:
        """Stop the clock, clear all progress and generate fresh text."""
        self._cancel_clock()
        if config is not None:
            self._config = config
        self._init_state()
        logger.debug("Session reset: mode=%s", self._config.mode.value)

    def start(self) -> None:
        """Start the clock without waiting for the first keystroke."""
        if self._phase is Phase.IDLE:
            self._activate(self._clock())

    def handle_keystroke(self, event: KeyEvent) -> None:
        if self._phase is Phase.COMPLETE:
            return

        if event.kind is KeyKind.BACKSPACE:
            if self._phase is Phase.ACTIVE and self._typed:
                self._typed = self._typed[:-1]
            return

        if event.kind is KeyKind.TERMINATOR:
            if self._phase is Phase.ACTIVE and self._rules.ends_on_terminator:
                self._complete(self._clock())
            return

        if not event.char:
            return
        # One clock read per keystroke: activation, sampling and completion share it.
        now = self._clock()
        if self._phase is Phase.IDLE:
            self._activate(now)

        position = len(self._typed)
        self._stats = classify(self._stats, self._target, position, event.char)
        self._typed += event.char
        self._samples = with_sample(self._samples, self._stats, self._elapsed(now))

        outcome = self._rules.after_keystroke(self._config, self._target, self._typed)
        if outcome is _Outcome.COMPLETE:
            self._complete(now)
        elif outcome is _Outcome.REGENERATE:
            self._regenerate()

    def tick(self) -> None:
        if self._phase is not Phase.ACTIVE or self._driver is None:
            return
        reached_zero = self._driver.tick()
        self._clock_value = self._driver.value
        if reached_zero:
            self._complete(self._clock())

    # -- internals ----------------------------------------------------------

    @property
    def _rules(self) -> _ModeRules:
        return _MODE_RULES[self._config.mode]

    def _init_state(self) -> None:
        self._phase = Phase.IDLE
        self._target = self._generate()
        self._typed = ""
        self._stats = CharacterStats()
        self._samples: Tuple[SpeedSample, ...] = ()
        self._started_at: Optional[float] = None
        self._ended_at: Optional[float] = None
        self._clock_value = self._initial_clock_value()
        self._result: Optional[SessionResult] = None

    def _initial_clock_value(self) -> int:
        return self._config.time_limit if self._rules.countdown else 0

    def _generate(self) -> str:
        return generate_text(
            self._config.mode,
            self._config.parameter,
            custom_text=self._config.custom_text,
            bank=self._bank,
            rng=self._rng,
        )

    def _elapsed(self, now: float) -> float:
        if self._started_at is None:
            return 0.0
        if self._ended_at is not None:
            now = self._ended_at
        return max(0.0, now - self._started_at)

    def _activate(self, now: float) -> None:
        self._started_at = now
        self._driver = ClockDriver(self._rules.countdown, self._initial_clock_value())
        self._clock_value = self._driver.value
        self._phase = Phase.ACTIVE
        logger.debug("Session started: mode=%s", self._config.mode.value)

    def _cancel_clock(self) -> None:
        if self._driver is not None:
            self._driver.cancel()
            self._driver = None

    def _regenerate(self) -> None:
        self._target = self._generate()
        self._typed = ""
        self._stats = CharacterStats()
        logger.debug("Target text exhausted; generated %d new characters", len(self._target))

    def _complete(self, now: float) -> None:
        if self._result is not None:
            return
        self._cancel_clock()
        self._phase = Phase.COMPLETE
        self._ended_at = now

        elapsed = self._elapsed(now)
        if self._config.mode is Mode.TIME:
            duration = self._config.time_limit
        else:
            duration = round_half_up(elapsed)
            self._stats = finalize_missed(self._stats, self._target, self._typed)
        self._samples = with_terminal_sample(self._samples, self._stats, elapsed, duration)

        stats = self._stats
        self._result = SessionResult(
            mode=self._config.mode,
            wpm=net_wpm(stats, elapsed),
            raw_wpm=raw_wpm(stats, elapsed),
            accuracy=accuracy(stats),
            consistency=consistency(self._samples),
            cpm=cpm(stats, elapsed),
            duration_seconds=duration,
            speed_samples=self._samples,
            error_count=stats.incorrect,
            character_count=stats.correct + stats.incorrect + stats.extra,
            character_stats=stats,
        )
        logger.info(
            "Test complete: mode=%s wpm=%d accuracy=%d%% duration=%ds",
            self._config.mode.value,
            self._result.wpm,
            self._result.accuracy,
            duration,
        )
        for callback in list(self._listeners):
            try:
                callback(self._result)
            except Exception:
                logger.exception("Completion listener %r failed", callback)

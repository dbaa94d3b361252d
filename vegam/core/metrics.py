from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Sequence, Tuple

from vegam.core.diff import CharacterStats

CHARS_PER_WORD = 5.0
MAX_WPM = 250


@dataclass(frozen=True)
class SpeedSample:
    at_second: int
    net_wpm: float
    raw_wpm: float


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching typing-test conventions."""
    return int(math.floor(value + 0.5))


def _wpm(chars: int, elapsed_seconds: float) -> int:
    if elapsed_seconds <= 0:
        return 0
    minutes = elapsed_seconds / 60.0
    return max(0, min(MAX_WPM, round_half_up(chars / CHARS_PER_WORD / minutes)))


def net_wpm(stats: CharacterStats, elapsed_seconds: float) -> int:
    """Words per minute over correctly typed characters only, clamped to [0, 250]."""
    return _wpm(stats.correct, elapsed_seconds)


def raw_wpm(stats: CharacterStats, elapsed_seconds: float) -> int:
    """Gross words per minute over every classified character."""
    return _wpm(stats.classified, elapsed_seconds)


def cpm(stats: CharacterStats, elapsed_seconds: float) -> int:
    """Classified characters per minute."""
    if elapsed_seconds <= 0:
        return 0
    return round_half_up(stats.classified / (elapsed_seconds / 60.0))


def accuracy(stats: CharacterStats) -> int:
    """Percentage of classified characters that were correct; 100 when none."""
    if stats.classified == 0:
        return 100
    return round_half_up(stats.correct / stats.classified * 100.0)


def consistency(samples: Sequence[SpeedSample]) -> int:
    """0-100 score that drops as the per-second net WPM series varies.

    Uses the coefficient of variation (population std-dev / mean); each
    percentage point of variation costs two points of consistency. Samples
    with no measured typing (raw WPM of 0, e.g. the first keystroke at zero
    elapsed time) carry no speed and are left out.
    """
    values = [s.net_wpm for s in samples if s.raw_wpm > 0]
    if len(values) < 2:
        return 100
    mean = statistics.fmean(values)
    if mean == 0:
        return 100
    cv = statistics.pstdev(values, mu=mean) / mean * 100.0
    return max(0, min(100, round_half_up(100.0 - 2.0 * cv)))


def with_sample(
    samples: Tuple[SpeedSample, ...],
    stats: CharacterStats,
    elapsed_seconds: float,
) -> Tuple[SpeedSample, ...]:
    """Append a sample for the current second unless one is already recorded."""
    at_second = max(0, int(math.floor(elapsed_seconds)))
    if any(s.at_second == at_second for s in samples):
        return samples
    sample = SpeedSample(
        at_second=at_second,
        net_wpm=net_wpm(stats, elapsed_seconds),
        raw_wpm=raw_wpm(stats, elapsed_seconds),
    )
    return samples + (sample,)


def with_terminal_sample(
    samples: Tuple[SpeedSample, ...],
    stats: CharacterStats,
    elapsed_seconds: float,
    duration_seconds: int,
) -> Tuple[SpeedSample, ...]:
    """Close the series at ``duration_seconds`` if it does not reach it yet."""
    if samples and samples[-1].at_second >= duration_seconds:
        return samples
    sample = SpeedSample(
        at_second=duration_seconds,
        net_wpm=net_wpm(stats, elapsed_seconds),
        raw_wpm=raw_wpm(stats, elapsed_seconds),
    )
    return samples + (sample,)

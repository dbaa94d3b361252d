from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from vegam.core.config import Mode

# (upper bound in seconds, min words, max words) for Time mode.
TIME_WORD_BUCKETS: Tuple[Tuple[int, int, int], ...] = (
    (15, 8, 10),
    (30, 15, 19),
    (60, 25, 34),
)
LONG_TIME_WORDS = (40, 54)


@dataclass(frozen=True)
class WordBank:
    words: Tuple[str, ...]
    quotes: Tuple[str, ...]

    @classmethod
    def load(cls, base_dir: Optional[Path] = None) -> "WordBank":
        """Load the word list and quote pool from ``words.yaml`` / ``quotes.yaml``."""
        base_dir = base_dir or Path(__file__).resolve().parent.parent / "data"
        if not base_dir.exists():
            raise FileNotFoundError(f"Data directory not found: {base_dir}")
        words = _load_list(base_dir / "words.yaml", "words")
        quotes = _load_list(base_dir / "quotes.yaml", "quotes")
        return cls(words=tuple(words), quotes=tuple(quotes))


def _load_list(path: Path, key: str) -> List[str]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected YAML with '{key}'")
    content = raw.get(key)
    if not isinstance(content, list):
        raise ValueError(f"{path.name}: missing or invalid '{key}'")
    items = [str(item).strip() for item in content if str(item).strip()]
    if not items:
        raise ValueError(f"{path.name}: '{key}' is empty")
    return items


_default_bank: Optional[WordBank] = None


def default_bank() -> WordBank:
    global _default_bank
    if _default_bank is None:
        _default_bank = WordBank.load()
    return _default_bank


def time_mode_word_count(time_limit: int, rng: random.Random) -> int:
    """Word count for a Time test: a random draw from the bucket for the limit."""
    for upper, low, high in TIME_WORD_BUCKETS:
        if time_limit <= upper:
            return rng.randint(low, high)
    return rng.randint(*LONG_TIME_WORDS)


def generate_text(
    mode: Mode,
    parameter: int,
    custom_text: Optional[str] = None,
    bank: Optional[WordBank] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Produce target text for ``mode``.

    ``parameter`` is the time limit in seconds for Time mode and the word
    count for Words mode; Quote and Custom ignore it. Custom text is returned
    verbatim.
    """
    mode = Mode(mode)
    if mode is Mode.CUSTOM:
        return custom_text or ""

    bank = bank or default_bank()
    rng = rng or random.Random()

    if mode is Mode.QUOTE:
        return rng.choice(bank.quotes)

    if mode is Mode.TIME:
        count = time_mode_word_count(parameter, rng)
    else:
        count = parameter
    return " ".join(rng.choice(bank.words) for _ in range(count))

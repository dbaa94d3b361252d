"""Per-keystroke classification of typed characters against the target text."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class CharacterStats:
    correct: int = 0
    incorrect: int = 0
    extra: int = 0
    missed: int = 0

    @property
    def classified(self) -> int:
        """Characters compared against the target (correct + incorrect)."""
        return self.correct + self.incorrect

    @property
    def total(self) -> int:
        return self.correct + self.incorrect + self.extra + self.missed


def classify(stats: CharacterStats, target: str, position: int, typed_char: str) -> CharacterStats:
    """Return ``stats`` updated for ``typed_char`` typed at ``position``.

    ``position`` is the typed length before the character is appended.
    Positions past the end of ``target`` count as extra. ``missed`` is only
    set at the last in-bounds position.
    """
    if position >= len(target):
        return replace(stats, extra=stats.extra + 1)

    if typed_char == target[position]:
        updated = replace(stats, correct=stats.correct + 1)
    else:
        updated = replace(stats, incorrect=stats.incorrect + 1)

    if position == len(target) - 1:
        updated = replace(updated, missed=max(0, len(target) - (position + 1)))
    return updated


def finalize_missed(stats: CharacterStats, target: str, typed: str) -> CharacterStats:
    """Seal ``missed`` as the target characters never reached."""
    return replace(stats, missed=max(0, len(target) - len(typed)))


def has_uncorrected_error(target: str, typed: str) -> bool:
    """True if any in-bounds typed character differs from the target."""
    return any(a != b for a, b in zip(typed, target))


def completed_word_count(target: str, typed: str) -> int:
    """Number of words the typist has finished.

    A word followed by whitespace is finished; the trailing word is finished
    once it is as long as the target word at the same index.
    """
    typed_words = typed.split()
    if not typed_words:
        return 0
    if typed[-1].isspace():
        return len(typed_words)
    done = len(typed_words) - 1
    target_words = target.split()
    index = len(typed_words) - 1
    if index < len(target_words) and len(typed_words[-1]) >= len(target_words[index]):
        done += 1
    return done

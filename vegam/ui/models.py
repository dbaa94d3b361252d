"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List


class CharState(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    EXTRA = "extra"
    PENDING = "pending"


@dataclass
class CharView:
    """Display state for one character of the typing area."""

    char: str
    state: CharState
    is_cursor: bool = False


def build_char_views(target: str, typed: str) -> List[CharView]:
    """Per-character view of ``typed`` against ``target``.

    Target characters are correct, incorrect or still pending; typed
    characters past the end of the target follow as extra. The cursor sits
    on the next character to type.
    """
    views: List[CharView] = []
    for i, expected in enumerate(target):
        if i < len(typed):
            state = CharState.CORRECT if typed[i] == expected else CharState.INCORRECT
        else:
            state = CharState.PENDING
        views.append(CharView(char=expected, state=state, is_cursor=i == len(typed)))
    for ch in typed[len(target):]:
        views.append(CharView(char=ch, state=CharState.EXTRA))
    return views


def normalize_custom_text(text: str) -> str:
    """Prepare pasted text for a custom test.

    Enter ends a test and Tab is not delivered as a keystroke, so each line
    break or tab becomes a single space. Everything else is kept as entered.
    Returns an empty string when nothing typeable is left.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\n", " ").replace("\t", " ")
    return text if text.strip() else ""

"""Tests for vegam.ui.colors – palette, character colors and the countdown fade."""

from __future__ import annotations

import pytest

from vegam.ui.colors import TypingColors, blend_hex, char_color, timer_color
from vegam.ui.models import CharState


def _rgb(color: str) -> tuple:
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


# ===========================================================================
# TypingColors – constants
# ===========================================================================

class TestTypingColors:
    @pytest.mark.parametrize(
        "name", ["BACKGROUND", "CONTAINER_BG", "TEXT", "TEXT_DARK", "PRIMARY", "ERROR", "EXTRA"]
    )
    def test_is_hex(self, name):
        value = getattr(TypingColors, name)
        assert value.startswith("#")
        assert len(value) == 7


# ===========================================================================
# blend_hex
# ===========================================================================

class TestBlendHex:
    def test_endpoints(self):
        assert blend_hex("#FF0000", "#0000FF", 0.0) == "#FF0000"
        assert blend_hex("#FF0000", "#0000FF", 1.0) == "#0000FF"

    def test_midpoint(self):
        r, g, b = _rgb(blend_hex("#000000", "#FFFFFF", 0.5))
        assert all(126 <= c <= 128 for c in (r, g, b))

    def test_t_clamped(self):
        assert blend_hex("#FF0000", "#0000FF", -3.0) == "#FF0000"
        assert blend_hex("#FF0000", "#0000FF", 7.0) == "#0000FF"

    def test_strips_whitespace(self):
        assert blend_hex("  #FF0000 ", " #0000FF", 0.0) == "#FF0000"

    @pytest.mark.parametrize("a, b", [("FF0000", "#0000FF"), ("#FFF", "#000000"), ("#FF0000", "0000FF")])
    def test_malformed_returns_a(self, a, b):
        assert blend_hex(a, b, 0.5) == a

    def test_invalid_hex_digits_returns_a(self):
        assert blend_hex("#GGHHII", "#000000", 0.5) == "#GGHHII"


# ===========================================================================
# char_color
# ===========================================================================

class TestCharColor:
    def test_correct(self):
        assert char_color(CharState.CORRECT) == TypingColors.TEXT

    def test_incorrect(self):
        assert char_color(CharState.INCORRECT) == TypingColors.ERROR

    def test_extra(self):
        assert char_color(CharState.EXTRA) == TypingColors.EXTRA

    def test_pending(self):
        assert char_color(CharState.PENDING) == TypingColors.TEXT_DARK


# ===========================================================================
# timer_color
# ===========================================================================

class TestTimerColor:
    def test_full_time_is_primary(self):
        assert timer_color(30, 30) == TypingColors.PRIMARY

    def test_two_thirds_left_is_primary(self):
        assert timer_color(20, 30) == TypingColors.PRIMARY

    def test_zero_left_is_error(self):
        assert timer_color(0, 30) == TypingColors.ERROR

    def test_fades_in_last_third(self):
        color = timer_color(5, 30)
        assert color not in (TypingColors.PRIMARY, TypingColors.ERROR)
        # red channel moves from PRIMARY toward ERROR
        assert _rgb(TypingColors.ERROR)[0] <= _rgb(color)[0] <= _rgb(TypingColors.PRIMARY)[0]

    def test_zero_limit(self):
        assert timer_color(0, 0) == TypingColors.PRIMARY

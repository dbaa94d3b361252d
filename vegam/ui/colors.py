"""Theme colors and color utilities for the UI."""

from vegam.ui.models import CharState


class TypingColors:
    """Dark palette for the typing screen."""

    BACKGROUND = "#323437"
    CONTAINER_BG = "#2C2E31"

    TEXT = "#D1D0C5"
    TEXT_DARK = "#646669"
    PRIMARY = "#E2B714"
    ERROR = "#CA4754"
    EXTRA = "#7E2A33"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a


def char_color(state: CharState) -> str:
    """Text color for a character in the given classification state."""
    if state is CharState.CORRECT:
        return TypingColors.TEXT
    if state is CharState.INCORRECT:
        return TypingColors.ERROR
    if state is CharState.EXTRA:
        return TypingColors.EXTRA
    return TypingColors.TEXT_DARK


def timer_color(remaining: int, limit: int) -> str:
    """Countdown color: primary while time is plentiful, fading to the error
    color over the last third of the limit."""
    if limit <= 0:
        return TypingColors.PRIMARY
    fraction_left = max(0.0, min(1.0, remaining / limit))
    if fraction_left >= 1 / 3:
        return TypingColors.PRIMARY
    return blend_hex(TypingColors.PRIMARY, TypingColors.ERROR, 1.0 - fraction_left * 3)

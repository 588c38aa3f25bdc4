"""Relative luminance, the WCAG contrast ratio, and the APCA lightness contrast."""

from __future__ import annotations

from accessmerge.contrast.colors import RGB
from accessmerge.schemas.issues import ContrastMetric

# WCAG 2.x relative luminance coefficients.
_WCAG_WEIGHTS = (0.2126, 0.7152, 0.0722)

# APCA 0.0.98G-4g constants.
_APCA_COEFFS = (0.2126729, 0.7151522, 0.0721750)
_APCA_MAIN_TRC = 2.4
_BLACK_THRESHOLD = 0.022
_BLACK_CLAMP = 1.414
_NORM_BG = 0.56
_NORM_TXT = 0.57
_REV_TXT = 0.62
_REV_BG = 0.65
_SCALE = 1.14
_LOW_OFFSET = 0.027
_LOW_CLIP = 0.1
_DELTA_Y_MIN = 0.0005


def _linearize(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: RGB) -> float:
    """WCAG relative luminance in [0, 1]; black is 0, white is 1."""
    return sum(w * _linearize(c) for w, c in zip(_WCAG_WEIGHTS, rgb))


def contrast_ratio(a: RGB, b: RGB) -> float:
    """WCAG 2.x contrast ratio in [1, 21]. Order of arguments does not matter."""
    la = relative_luminance(a)
    lb = relative_luminance(b)
    lighter, darker = max(la, lb), min(la, lb)
    return (lighter + 0.05) / (darker + 0.05)


def _apca_y(rgb: RGB) -> float:
    y = sum(w * (c / 255) ** _APCA_MAIN_TRC for w, c in zip(_APCA_COEFFS, rgb))
    # Soft clamp near black.
    if y < _BLACK_THRESHOLD:
        y += (_BLACK_THRESHOLD - y) ** _BLACK_CLAMP
    return y


def apca_lightness(text: RGB, background: RGB) -> float:
    """APCA lightness contrast (Lc) of ``text`` drawn on ``background``.

    Positive for dark text on a light background, negative for light text
    on a dark background. Swapping the arguments flips the sign and, in
    general, changes the magnitude.
    """
    y_txt = _apca_y(text)
    y_bg = _apca_y(background)

    if abs(y_bg - y_txt) < _DELTA_Y_MIN:
        return 0.0

    if y_bg > y_txt:
        sapc = (y_bg**_NORM_BG - y_txt**_NORM_TXT) * _SCALE
        out = 0.0 if sapc < _LOW_CLIP else sapc - _LOW_OFFSET
    else:
        sapc = (y_bg**_REV_BG - y_txt**_REV_TXT) * _SCALE
        out = 0.0 if sapc > -_LOW_CLIP else sapc + _LOW_OFFSET

    return out * 100


def measure(foreground: RGB, background: RGB, metric: ContrastMetric) -> float:
    """Evaluate ``metric`` for a foreground/background pair."""
    if metric is ContrastMetric.LIGHTNESS:
        return apca_lightness(foreground, background)
    return contrast_ratio(foreground, background)

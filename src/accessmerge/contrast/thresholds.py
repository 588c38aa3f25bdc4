"""Text-size classification, pass/fail thresholds and severity tiers.

Every issue producer goes through these functions so the numbers live in
one place.
"""

from __future__ import annotations

from accessmerge.schemas.issues import ConformanceLevel, ContrastMetric, Severity, TextClass

BOLD_WEIGHT = 700
LARGE_BOLD_PX = 18.5  # 14pt
LARGE_REGULAR_PX = 24.0  # 18pt

RATIO_THRESHOLDS: dict[ConformanceLevel, dict[TextClass, float]] = {
    ConformanceLevel.AA: {TextClass.NORMAL: 4.5, TextClass.LARGE: 3.0},
    ConformanceLevel.AAA: {TextClass.NORMAL: 7.0, TextClass.LARGE: 4.5},
}
RATIO_NON_TEXT = 3.0

# APCA thresholds do not depend on the conformance level.
LIGHTNESS_THRESHOLDS: dict[TextClass, float] = {
    TextClass.NORMAL: 75.0,
    TextClass.LARGE: 60.0,
}
LIGHTNESS_NON_TEXT = 45.0

# (minimum deficit, severity), checked top-down.
_RATIO_SEVERITY_STEPS = ((3.0, Severity.CRITICAL), (2.0, Severity.SERIOUS), (1.0, Severity.MODERATE))
_LIGHTNESS_SEVERITY_STEPS = ((30.0, Severity.CRITICAL), (20.0, Severity.SERIOUS), (10.0, Severity.MODERATE))


def classify_text_size(font_size_px: float, font_weight: int) -> TextClass:
    """Return ``LARGE`` for text that qualifies for the relaxed thresholds."""
    if font_weight >= BOLD_WEIGHT:
        return TextClass.LARGE if font_size_px >= LARGE_BOLD_PX else TextClass.NORMAL
    return TextClass.LARGE if font_size_px >= LARGE_REGULAR_PX else TextClass.NORMAL


def required_value(
    metric: ContrastMetric,
    level: ConformanceLevel,
    text_class: TextClass,
) -> float:
    """Minimum passing value (absolute, for the lightness metric)."""
    if metric is ContrastMetric.LIGHTNESS:
        return LIGHTNESS_THRESHOLDS[text_class]
    return RATIO_THRESHOLDS[level][text_class]


def non_text_threshold(metric: ContrastMetric) -> float:
    """Minimum for icons, borders and other non-text UI parts."""
    return LIGHTNESS_NON_TEXT if metric is ContrastMetric.LIGHTNESS else RATIO_NON_TEXT


def meets_ratio(ratio: float, level: ConformanceLevel, text_class: TextClass) -> bool:
    return ratio >= RATIO_THRESHOLDS[level][text_class]


def meets_lightness(lightness: float, text_class: TextClass) -> bool:
    return abs(lightness) >= LIGHTNESS_THRESHOLDS[text_class]


def meets_non_text(value: float, metric: ContrastMetric) -> bool:
    return abs(value) >= non_text_threshold(metric)


def passes(
    value: float,
    metric: ContrastMetric,
    level: ConformanceLevel,
    text_class: TextClass,
) -> bool:
    if metric is ContrastMetric.LIGHTNESS:
        return meets_lightness(value, text_class)
    return meets_ratio(value, level, text_class)


def classify_severity(current: float, required: float, metric: ContrastMetric) -> Severity:
    """Map the shortfall between ``current`` and ``required`` to a tier.

    Both values are compared as magnitudes for the signed lightness metric.
    Callers report passing samples as ``minor`` regardless.
    """
    if metric is ContrastMetric.LIGHTNESS:
        deficit = abs(required) - abs(current)
        steps = _LIGHTNESS_SEVERITY_STEPS
    else:
        deficit = required - current
        steps = _RATIO_SEVERITY_STEPS

    for minimum, severity in steps:
        if deficit >= minimum:
            return severity
    return Severity.MINOR

"""Tests for text-size classification, thresholds and severity tiers."""

from __future__ import annotations

import pytest

from accessmerge.contrast.thresholds import (
    classify_severity,
    classify_text_size,
    meets_lightness,
    meets_non_text,
    meets_ratio,
    non_text_threshold,
    passes,
    required_value,
)
from accessmerge.schemas.issues import ConformanceLevel, ContrastMetric, Severity, TextClass

AA = ConformanceLevel.AA
AAA = ConformanceLevel.AAA
RATIO = ContrastMetric.RATIO
LIGHTNESS = ContrastMetric.LIGHTNESS


class TestTextSize:
    @pytest.mark.parametrize(
        ("size", "weight", "expected"),
        [
            (24, 400, TextClass.LARGE),
            (23.9, 400, TextClass.NORMAL),
            (18.5, 700, TextClass.LARGE),
            (18.4, 700, TextClass.NORMAL),
            (18.5, 600, TextClass.NORMAL),
            (16, 900, TextClass.NORMAL),
        ],
    )
    def test_boundaries(self, size: float, weight: int, expected: TextClass) -> None:
        assert classify_text_size(size, weight) is expected


class TestRatioThresholds:
    def test_boundaries(self) -> None:
        assert meets_ratio(4.5, AA, TextClass.NORMAL)
        assert not meets_ratio(4.49, AA, TextClass.NORMAL)
        assert meets_ratio(3.0, AA, TextClass.LARGE)
        assert meets_ratio(7.0, AAA, TextClass.NORMAL)
        assert not meets_ratio(6.99, AAA, TextClass.NORMAL)
        assert meets_ratio(4.5, AAA, TextClass.LARGE)

    def test_required_values(self) -> None:
        assert required_value(RATIO, AA, TextClass.NORMAL) == 4.5
        assert required_value(RATIO, AA, TextClass.LARGE) == 3.0
        assert required_value(RATIO, AAA, TextClass.NORMAL) == 7.0
        assert required_value(RATIO, AAA, TextClass.LARGE) == 4.5


class TestLightnessThresholds:
    def test_level_independent(self) -> None:
        for level in (AA, AAA):
            assert required_value(LIGHTNESS, level, TextClass.NORMAL) == 75
            assert required_value(LIGHTNESS, level, TextClass.LARGE) == 60

    def test_uses_magnitude(self) -> None:
        assert meets_lightness(-80, TextClass.NORMAL)
        assert meets_lightness(75, TextClass.NORMAL)
        assert not meets_lightness(-74.9, TextClass.NORMAL)
        assert meets_lightness(-60, TextClass.LARGE)

    def test_passes_dispatch(self) -> None:
        assert passes(-90, LIGHTNESS, AA, TextClass.NORMAL)
        assert not passes(4.0, RATIO, AA, TextClass.NORMAL)


class TestNonText:
    def test_thresholds(self) -> None:
        assert non_text_threshold(RATIO) == 3.0
        assert non_text_threshold(LIGHTNESS) == 45
        assert meets_non_text(3.0, RATIO)
        assert not meets_non_text(2.9, RATIO)
        assert meets_non_text(-45, LIGHTNESS)


class TestSeverity:
    @pytest.mark.parametrize(
        ("current", "required", "expected"),
        [
            (1.5, 4.5, Severity.CRITICAL),
            (1.77, 4.5, Severity.SERIOUS),
            (2.5, 4.5, Severity.SERIOUS),
            (3.0, 4.5, Severity.MODERATE),
            (4.0, 4.5, Severity.MINOR),
            (6.0, 7.0, Severity.MODERATE),
        ],
    )
    def test_ratio_tiers(self, current: float, required: float, expected: Severity) -> None:
        assert classify_severity(current, required, RATIO) is expected

    @pytest.mark.parametrize(
        ("current", "expected"),
        [
            (40.0, Severity.CRITICAL),
            (-50.0, Severity.SERIOUS),
            (60.0, Severity.MODERATE),
            (-70.0, Severity.MINOR),
        ],
    )
    def test_lightness_tiers_use_magnitude(self, current: float, expected: Severity) -> None:
        assert classify_severity(current, 75.0, LIGHTNESS) is expected

    def test_ordering(self) -> None:
        ranks = [s.rank for s in (Severity.MINOR, Severity.MODERATE, Severity.SERIOUS, Severity.CRITICAL)]
        assert ranks == [0, 1, 2, 3]

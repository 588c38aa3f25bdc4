"""Tests for CSS color parsing."""

from __future__ import annotations

import pytest

from accessmerge.contrast.colors import NAMED_COLORS, RGB, parse_color


class TestHex:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("#fff", RGB(255, 255, 255)),
            ("FFF", RGB(255, 255, 255)),
            ("#336699", RGB(51, 102, 153)),
            ("336699", RGB(51, 102, 153)),
            ("#11223380", RGB(17, 34, 51)),
        ],
    )
    def test_hex_forms(self, text: str, expected: RGB) -> None:
        assert parse_color(text) == expected

    def test_whitespace_is_ignored(self) -> None:
        assert parse_color("  #000000 ") == RGB(0, 0, 0)


class TestFunctional:
    def test_rgb_commas(self) -> None:
        assert parse_color("rgb(255, 0, 0)") == RGB(255, 0, 0)

    def test_rgba_drops_alpha(self) -> None:
        assert parse_color("rgba(10, 20, 30, 0.5)") == RGB(10, 20, 30)

    def test_space_separated_with_slash_alpha(self) -> None:
        assert parse_color("rgb(10 20 30 / 50%)") == RGB(10, 20, 30)

    def test_percent_channels(self) -> None:
        assert parse_color("rgb(100%, 0%, 0%)") == RGB(255, 0, 0)

    def test_channels_are_clamped(self) -> None:
        assert parse_color("rgb(300, -5, 12.4)") == RGB(255, 0, 12)

    def test_hsl_primary(self) -> None:
        assert parse_color("hsl(0, 100%, 50%)") == RGB(255, 0, 0)

    def test_hsla_drops_alpha(self) -> None:
        assert parse_color("hsla(240, 100%, 50%, 0.3)") == RGB(0, 0, 255)

    def test_hsl_deg_suffix(self) -> None:
        assert parse_color("hsl(120deg, 100%, 50%)") == RGB(0, 255, 0)

    def test_hsl_grey(self) -> None:
        assert parse_color("hsl(0, 0%, 100%)") == RGB(255, 255, 255)


class TestNamed:
    def test_case_insensitive(self) -> None:
        assert parse_color("RebeccaPurple") == RGB(102, 51, 153)

    def test_table_is_complete(self) -> None:
        assert len(NAMED_COLORS) >= 148
        assert NAMED_COLORS["white"] == RGB(255, 255, 255)

    def test_transparent_is_black(self) -> None:
        assert parse_color("transparent") == RGB(0, 0, 0)


class TestInvalid:
    @pytest.mark.parametrize(
        "text",
        ["", None, "notacolor", "#12", "#ggg", "rgb(1, 2)", "hsl(a, b, c)", "rgb(1, 2, 3", "var(--fg)"],
    )
    def test_returns_none(self, text: str | None) -> None:
        assert parse_color(text) is None


class TestRGB:
    def test_hex_property(self) -> None:
        assert RGB(255, 0, 16).hex == "#ff0010"

    def test_clamped_rounds(self) -> None:
        assert RGB.clamped(254.6, -3, 999) == RGB(255, 0, 255)

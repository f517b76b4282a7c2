"""Tests for pi.style.color."""

from __future__ import annotations

import pytest

from pi.style.color import (
    AdaptiveColor,
    ColorProfile,
    CompleteColor,
    ThemeColor,
    ansi256_to_ansi16,
    attribute_codes,
    color_code,
    detect_color_depth,
    has_dark_background,
    parse_hex,
    resolve_profile,
    rgb_to_ansi256,
    sgr_prologue,
)
from pi.style.theme import Theme


# ---------------------------------------------------------------------------
# Profile resolution and detection
# ---------------------------------------------------------------------------


class TestResolveProfile:
    """Pick a color profile from overrides and the TTY probe."""

    def test_no_color_wins_over_everything(self) -> None:
        assert resolve_profile(True, True, True, ColorProfile.TRUE_COLOR) == ColorProfile.NO_COLOR

    def test_force_color_gives_highest_tier(self) -> None:
        assert resolve_profile(True, False, False) == ColorProfile.TRUE_COLOR

    def test_not_a_tty_gets_no_color(self) -> None:
        assert resolve_profile(None, False, False, ColorProfile.ANSI256) == ColorProfile.NO_COLOR

    def test_tty_uses_detected_profile(self) -> None:
        assert resolve_profile(None, False, True, ColorProfile.ANSI256) == ColorProfile.ANSI256

    def test_inconclusive_detection_defaults_to_ansi16(self) -> None:
        assert resolve_profile(None, False, True, None) == ColorProfile.ANSI16

    def test_profiles_are_ordered(self) -> None:
        assert ColorProfile.NO_COLOR < ColorProfile.ANSI16 < ColorProfile.ANSI256
        assert ColorProfile.ANSI256 < ColorProfile.TRUE_COLOR


class TestDetectColorDepth:
    """Guess the color depth from the environment."""

    def test_truecolor(self) -> None:
        assert detect_color_depth({"COLORTERM": "truecolor"}) == ColorProfile.TRUE_COLOR

    def test_24bit(self) -> None:
        assert detect_color_depth({"COLORTERM": "24bit", "TERM": "xterm"}) == ColorProfile.TRUE_COLOR

    def test_256color_term(self) -> None:
        assert detect_color_depth({"TERM": "xterm-256color"}) == ColorProfile.ANSI256

    def test_plain_term(self) -> None:
        assert detect_color_depth({"TERM": "xterm"}) == ColorProfile.ANSI16

    def test_dumb_term(self) -> None:
        assert detect_color_depth({"TERM": "dumb"}) == ColorProfile.NO_COLOR

    def test_nothing_set_is_inconclusive(self) -> None:
        assert detect_color_depth({}) is None


class TestHasDarkBackground:
    """Read the background hint from COLORFGBG."""

    def test_light_background(self) -> None:
        assert has_dark_background({"COLORFGBG": "0;15"}) is False
        assert has_dark_background({"COLORFGBG": "0;7"}) is False

    def test_dark_background(self) -> None:
        assert has_dark_background({"COLORFGBG": "15;0"}) is True

    def test_defaults_to_dark(self) -> None:
        assert has_dark_background({}) is True
        assert has_dark_background({"COLORFGBG": "garbage"}) is True


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


class TestConversions:
    """Palette conversions between color depths."""

    def test_parse_hex(self) -> None:
        assert parse_hex("#ff5733") == (255, 87, 51)

    def test_parse_short_hex(self) -> None:
        assert parse_hex("#f53") == (255, 85, 51)

    def test_parse_hex_rejects_malformed(self) -> None:
        assert parse_hex("ff5733") is None
        assert parse_hex("#zzzzzz") is None
        assert parse_hex("#12345") is None

    @pytest.mark.parametrize(
        ("rgb", "index"),
        [
            ((255, 0, 0), 196),
            ((0, 0, 255), 21),
            ((0, 0, 0), 16),
            ((255, 255, 255), 231),
            ((128, 128, 128), 244),
        ],
    )
    def test_rgb_to_ansi256(self, rgb: tuple[int, int, int], index: int) -> None:
        assert rgb_to_ansi256(*rgb) == index

    def test_ansi256_to_ansi16(self) -> None:
        assert ansi256_to_ansi16(196) == 1
        assert ansi256_to_ansi16(231) == 15
        assert ansi256_to_ansi16(16) == 0

    def test_basic_indices_unchanged(self) -> None:
        assert ansi256_to_ansi16(9) == 9


# ---------------------------------------------------------------------------
# color_code
# ---------------------------------------------------------------------------


class TestColorCode:
    """Turn color specs into SGR fragments."""

    def test_named_color(self) -> None:
        assert color_code("red", ColorProfile.TRUE_COLOR) == "\x1b[31m"

    def test_named_background(self) -> None:
        assert color_code("red", ColorProfile.TRUE_COLOR, background=True) == "\x1b[41m"

    def test_bright_named_color(self) -> None:
        assert color_code("bright_blue", ColorProfile.ANSI16) == "\x1b[94m"
        assert color_code("gray", ColorProfile.ANSI16) == "\x1b[90m"

    def test_rgb_true_color(self) -> None:
        assert color_code((255, 0, 0), ColorProfile.TRUE_COLOR) == "\x1b[38;2;255;0;0m"

    def test_hex_true_color(self) -> None:
        assert color_code("#00ff00", ColorProfile.TRUE_COLOR) == "\x1b[38;2;0;255;0m"

    def test_rgb_downgraded_to_256(self) -> None:
        assert color_code((255, 0, 0), ColorProfile.ANSI256) == "\x1b[38;5;196m"

    def test_rgb_downgraded_to_16(self) -> None:
        assert color_code((255, 0, 0), ColorProfile.ANSI16) == "\x1b[31m"

    def test_index(self) -> None:
        assert color_code(208, ColorProfile.ANSI256) == "\x1b[38;5;208m"
        assert color_code(208, ColorProfile.ANSI256, background=True) == "\x1b[48;5;208m"

    def test_index_downgraded_to_16(self) -> None:
        assert color_code(196, ColorProfile.ANSI16) == "\x1b[31m"

    def test_low_index_uses_basic_code(self) -> None:
        assert color_code(3, ColorProfile.ANSI256) == "\x1b[33m"

    def test_no_color_profile_emits_nothing(self) -> None:
        assert color_code("red", ColorProfile.NO_COLOR) == ""
        assert color_code((1, 2, 3), ColorProfile.NO_COLOR) == ""

    @pytest.mark.parametrize("spec", ["chartreuse-ish", 300, -1, (1, 2), (256, 0, 0), True])
    def test_unknown_specs_emit_nothing(self, spec: object) -> None:
        assert color_code(spec, ColorProfile.TRUE_COLOR) == ""  # type: ignore[arg-type]

    def test_none(self) -> None:
        assert color_code(None, ColorProfile.TRUE_COLOR) == ""


class TestWrappedColors:
    """Theme roles, adaptive and complete colors."""

    def test_theme_role(self) -> None:
        theme = Theme("t", ansi_1=(200, 10, 10))
        assert color_code("error", ColorProfile.TRUE_COLOR, theme=theme) == "\x1b[38;2;200;10;10m"

    def test_theme_role_without_theme(self) -> None:
        assert color_code("error", ColorProfile.TRUE_COLOR) == ""

    def test_theme_color_fallback(self) -> None:
        assert color_code(ThemeColor("error", "red"), ColorProfile.TRUE_COLOR) == "\x1b[31m"

    def test_theme_color_prefers_theme(self) -> None:
        theme = Theme("t", error=(1, 2, 3))
        spec = ThemeColor("error", "red")
        assert color_code(spec, ColorProfile.TRUE_COLOR, theme=theme) == "\x1b[38;2;1;2;3m"

    def test_adaptive_color(self) -> None:
        spec = AdaptiveColor(light="black", dark="white")
        assert color_code(spec, ColorProfile.ANSI16, dark_background=True) == "\x1b[37m"
        assert color_code(spec, ColorProfile.ANSI16, dark_background=False) == "\x1b[30m"

    def test_complete_color_per_profile(self) -> None:
        spec = CompleteColor(ansi="red", ansi256=196, true_color=(255, 0, 0))
        assert color_code(spec, ColorProfile.TRUE_COLOR) == "\x1b[38;2;255;0;0m"
        assert color_code(spec, ColorProfile.ANSI256) == "\x1b[38;5;196m"
        assert color_code(spec, ColorProfile.ANSI16) == "\x1b[31m"


class TestPrologue:
    """Combine fragments into one prologue."""

    def test_skips_empty_fragments(self) -> None:
        assert sgr_prologue(["\x1b[1m", "", "\x1b[31m"]) == "\x1b[1m\x1b[31m"

    def test_attribute_codes_in_parameter_order(self) -> None:
        assert attribute_codes({"underline", "bold"}) == ["\x1b[1m", "\x1b[4m"]

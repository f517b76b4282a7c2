"""Tests for pi.style.render -- the box rendering pipeline."""

from __future__ import annotations

import pytest

from pi.style.color import ColorProfile
from pi.style.config import Settings, set_settings, set_terminal_width, set_theme
from pi.style.render import content_width, render
from pi.style.style import Style, style
from pi.style.utils import get_height, get_width, strip_ansi, visible_width


def _widths(block: str) -> set[int]:
    return {visible_width(line) for line in block.split("\n")}


# ---------------------------------------------------------------------------
# Box model
# ---------------------------------------------------------------------------


class TestBoxModel:
    """Padding, border and margin around the content."""

    def test_plain_content_unchanged(self) -> None:
        assert render(style(), "hi") == "hi"

    def test_rounded_border_with_padding(self) -> None:
        block = render(style().border("rounded").padding(1), "X")
        assert block == "╭───╮\n│   │\n│ X │\n│   │\n╰───╯"
        assert get_width(block) == 5
        assert get_height(block) == 5

    def test_lines_padded_to_widest(self) -> None:
        assert render(style(), "a\nabc") == "a  \nabc"

    def test_asymmetric_padding(self) -> None:
        block = render(style().padding(0, 1, 1, 2), "x")
        assert block == "  x \n    "

    def test_margin_surrounds_block(self) -> None:
        assert render(style().margin(1, 2), "x") == "     \n  x  \n     "

    def test_margin_outside_border(self) -> None:
        block = render(style().border("normal").margin(0, 1), "x")
        assert block == " ┌─┐ \n │x│ \n └─┘ "

    def test_hidden_border_reserves_space(self) -> None:
        assert render(style().border("hidden"), "x") == "   \n x \n   "

    def test_border_sides(self) -> None:
        block = render(style().border("normal").border_top(False).border_bottom(False), "x")
        assert block == "│x│"
        block = render(style().border("normal").border_left(False), "x")
        assert block == "─┐\nx│\n─┘"

    def test_custom_border(self) -> None:
        block = render(style().custom_border(top="=", bottom="="), "ab")
        assert block == "┌==┐\n│ab│\n└==┘"

    def test_every_line_same_width(self) -> None:
        s = style().border("double").padding(1, 2).margin(1).align("center")
        block = render(s, "short\na much longer line\n世界")
        assert len(_widths(block)) == 1


# ---------------------------------------------------------------------------
# Sizing
# ---------------------------------------------------------------------------


class TestSizing:
    """Fixed width/height, max clipping and wrapping."""

    def test_width_wraps_and_pads(self) -> None:
        assert render(style().width(5), "hello world") == "hello\nworld"

    def test_width_center_alignment(self) -> None:
        assert render(style().width(6).align("center"), "ab") == "  ab  "
        assert render(style().width(7).align("center"), "ab") == "  ab   "

    def test_width_right_alignment(self) -> None:
        assert render(style().width(6).align("right"), "ab") == "    ab"

    def test_width_includes_frame(self) -> None:
        block = render(style().width(10).border("rounded").padding(0, 1), "hello world")
        assert _widths(block) == {10}
        assert strip_ansi(block).split("\n")[1] == "│ hello  │"

    def test_height_with_vertical_alignment(self) -> None:
        assert render(style().height(3).align("left", "middle"), "x") == " \nx\n "
        assert render(style().height(3).vertical_align("bottom"), "x") == " \n \nx"
        assert render(style().height(4).vertical_align("middle"), "x") == " \nx\n \n "

    def test_height_truncates(self) -> None:
        assert render(style().height(2), "a\nb\nc") == "a\nb"

    def test_fixed_size_with_border(self) -> None:
        block = render(style().border("rounded").width(7).height(4), "hi")
        assert get_width(block) == 7
        assert get_height(block) == 4
        assert _widths(block) == {7}

    def test_width_smaller_than_frame(self) -> None:
        block = render(style().width(3).padding(0, 2).border("normal"), "hello")
        assert _widths(block) == {3}
        assert get_height(block) == 3

    def test_zero_width(self) -> None:
        assert render(style().width(0), "abc") == ""

    def test_max_height_drops_trailing_lines(self) -> None:
        assert render(style().max_height(2), "a\nb\nc") == "a\nb"

    def test_max_width_wraps_long_content(self) -> None:
        block = render(style().max_width(5), "hello wonderful world")
        assert block.split("\n") == ["hello", "wond-", "erful", "world"]

    @pytest.mark.parametrize("limit", [1, 2, 3, 4, 7, 10])
    def test_max_width_exact(self, limit: int) -> None:
        block = render(style().border("normal").max_width(limit + 2), "x" * 25)
        assert _widths(block) == {limit + 2}

    def test_max_width_truncation_keeps_color(self) -> None:
        block = render(style().padding(0, 3).max_width(4), "\x1b[31mabc\x1b[0m")
        assert block == "   \x1b[31ma\x1b[0m"
        assert visible_width(block) == 4

    def test_max_width_larger_than_content(self) -> None:
        assert render(style().max_width(10), "hi") == "hi"

    def test_max_width_fills_wrapped_lines(self) -> None:
        block = render(style().max_width(8), "hello world")
        assert block == "hello   \nworld   "
        assert _widths(block) == {8}

    def test_max_width_fill_respects_alignment(self) -> None:
        block = render(style().max_width(8).align("right").border("normal"), "hello world")
        assert _widths(block) == {8}
        assert strip_ansi(block).split("\n")[1] == "│ hello│"

    def test_terminal_width_wraps(self) -> None:
        set_terminal_width(5)
        assert render(style(), "hello world") == "hello\nworld"

    def test_leading_indentation_does_not_overflow(self) -> None:
        set_terminal_width(5)
        assert render(style(), "        hello") == "hello"
        block = render(style(), "   ab cd efghijkl")
        assert max(_widths(block)) <= 5

    def test_wide_glyphs_fit_narrow_terminal(self) -> None:
        set_terminal_width(2)
        assert render(style(), "\u4e16\u754c\u4e16\u754c") == "\u4e16\n\u754c\n\u4e16\n\u754c"

    def test_content_width(self) -> None:
        s = style().width(10).padding(1)
        assert content_width(s) == 8
        assert content_width(s.max_width(6)) == 4
        assert content_width(s, terminal_width=4) == 2
        assert content_width(style().width(1).padding(2)) == 0
        assert content_width(style()) is None


# ---------------------------------------------------------------------------
# Colors and attributes
# ---------------------------------------------------------------------------


class TestColor:
    """Text attributes, colors and their suppression."""

    def test_bold(self) -> None:
        assert render(style().bold(), "hi") == "\x1b[1mhi\x1b[0m"

    def test_prologue_per_line(self) -> None:
        block = render(style().foreground("red"), "a\nbb")
        assert block == "\x1b[31ma \x1b[0m\n\x1b[31mbb\x1b[0m"

    def test_combined_prologue(self) -> None:
        block = render(style().bold().underline().foreground("red").background("blue"), "x")
        assert block == "\x1b[1m\x1b[4m\x1b[31m\x1b[44mx\x1b[0m"

    def test_border_colors(self) -> None:
        block = render(style().border("normal").border_foreground("red"), "x")
        lines = block.split("\n")
        assert lines[0] == "\x1b[31m┌─┐\x1b[0m"
        assert lines[1] == "\x1b[31m│\x1b[0mx\x1b[31m│\x1b[0m"

    def test_color_does_not_change_size(self) -> None:
        text = "some text\nthat spans\nlines 世界"
        plain = render(style().border("thick").padding(1), text)
        colored = render(
            style().border("thick").padding(1).bold().foreground((1, 2, 3)).background(200),
            text,
        )
        assert get_width(colored) == get_width(plain)
        assert get_height(colored) == get_height(plain)
        assert strip_ansi(colored) == plain

    def test_nested_block_keeps_outer_style(self) -> None:
        inner = render(style().foreground("red"), "in")
        outer = render(style().bold().border("normal"), inner)
        assert get_width(outer) == 4
        assert outer.split("\n")[1] == "\x1b[1m│\x1b[31min\x1b[0m\x1b[1m│\x1b[0m"

    def test_no_color_strips_everything(self) -> None:
        s = (
            style()
            .bold()
            .foreground("red")
            .background((1, 2, 3))
            .border("rounded")
            .border_foreground("blue")
            .no_color()
        )
        block = render(s, "\x1b[32mnested\x1b[0m\n\x1b]8;;x\x07link\x1b]8;;\x07")
        assert "\x1b" not in block
        assert get_width(block) == 8

    def test_no_color_strips_two_byte_escapes(self) -> None:
        block = render(style().bold().no_color(), "a\x1b7b\x1b(Bc\x1b8")
        assert block == "abc"

    def test_not_a_tty_renders_plain(self, no_tty: Settings) -> None:
        assert render(style().bold().foreground("red"), "x") == "x"

    def test_profile_downgrade(self) -> None:
        set_settings(Settings(is_tty=True, detected_profile=ColorProfile.ANSI256))
        assert render(style().foreground((255, 0, 0)), "x") == "\x1b[38;5;196mx\x1b[0m"

    def test_theme_role(self) -> None:
        set_theme({"error": "#ff0000"})
        assert render(style().foreground("error"), "x") == "\x1b[38;2;255;0;0mx\x1b[0m"

    def test_unknown_color_is_ignored(self) -> None:
        assert render(style().foreground("no-such-color"), "x") == "x"


# ---------------------------------------------------------------------------
# Inline, tabs and custom renderers
# ---------------------------------------------------------------------------


class TestInline:
    """Inline mode produces a single unboxed line."""

    def test_joins_lines(self) -> None:
        assert render(style().inline(), "a\nb\nc") == "abc"

    def test_ignores_box_model(self) -> None:
        s = style().inline().padding(2).border("normal").margin(1).width(20).height(5)
        assert render(s, "a\nb") == "ab"

    def test_color_still_applies(self) -> None:
        assert render(style().inline().bold(), "a\nb") == "\x1b[1mab\x1b[0m"

    def test_inline_no_color(self) -> None:
        assert render(style().inline().bold().no_color(), "\x1b[31ma\x1b[0m\nb") == "ab"


class TestTabs:
    """Tab expansion."""

    def test_default_tab_width(self) -> None:
        assert render(style(), "a\tb") == "a    b"

    def test_custom_tab_width(self) -> None:
        assert render(style().tab_width(2), "a\tb\t") == "a  b  "

    def test_zero_leaves_tabs(self) -> None:
        assert render(style().tab_width(0), "a\tb") == "a\tb"


class TestCustomRenderer:
    """A renderer function replaces the default pipeline."""

    def test_receives_expanded_text_and_style(self) -> None:
        seen: list[tuple[str, Style]] = []

        def fn(text: str, s: Style) -> str:
            seen.append((text, s))
            return f"<{text}>"

        s = style().renderer(fn).border("normal").bold().tab_width(1)
        assert render(s, "a\tb") == "<a b>"
        assert seen == [("a b", s)]

    def test_takes_precedence_over_inline(self) -> None:
        s = style().inline().renderer(lambda text, _: text.upper())
        assert render(s, "a\nb") == "A\nB"

    def test_errors_propagate(self) -> None:
        def fn(text: str, s: Style) -> str:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            render(style().renderer(fn), "x")

    def test_style_render_method(self) -> None:
        assert style().bold().render("x") == render(style().bold(), "x")

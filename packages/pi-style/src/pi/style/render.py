"""Render a :class:`~pi.style.style.Style` and content into a block string.

The pipeline works on a list of lines and always runs in this order:

1. tab expansion (a custom renderer takes over right after it)
2. inline short-circuit (only coloring applies)
3. word wrap to the effective content width
4. horizontal and vertical alignment
5. padding
6. border
7. margin
8. fixed width/height enforcement
9. max width/height clipping
10. color and text attributes (or stripping of all codes)
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pi.style.color import ColorProfile, attribute_codes, color_code, sgr_prologue
from pi.style.config import Settings, color_profile, get_settings
from pi.style.utils import (
    RESET,
    get_width,
    pad_line,
    pad_lines,
    strip_ansi,
    truncate_to_width,
    wrap_text_with_ansi,
)

if TYPE_CHECKING:
    from pi.style.border import Border
    from pi.style.style import Style

# Full resets inside already styled content ("\x1b[0m" and "\x1b[m")
_INNER_RESET_RE = re.compile(r"\x1b\[0*m")


def render(style: Style, content: str) -> str:
    """Render *content* with *style* and return the decorated block.

    Every line of a non-inline block has the same visible width. A custom
    renderer's exceptions propagate unchanged.
    """
    profile = color_profile(style)
    settings = get_settings()

    text = content.replace("\r\n", "\n")
    if style.tab_size > 0:
        text = text.replace("\t", " " * style.tab_size)

    if style.render_fn is not None:
        return style.render_fn(text, style)

    if style.is_inline:
        return _apply_color([text.replace("\n", "")], style, profile, settings)[0]

    wrap_at = content_width(style, settings.terminal_width)
    lines = _wrap(text, wrap_at)
    lines = _align(lines, style, wrap_at, get_width(text))
    lines = _apply_padding(lines, style)
    lines = _apply_border(lines, style, profile, settings)
    lines = _apply_margin(lines, style)
    lines = _apply_fixed_size(lines, style)
    lines = _apply_max_size(lines, style)
    return "\n".join(_apply_color(lines, style, profile, settings))


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def content_width(style: Style, terminal_width: int | None = None) -> int | None:
    """Columns left for content by ``width``, ``max_width`` and the terminal.

    Returns ``None`` when nothing limits the width. The result is clamped at 0.
    """
    limits = [
        limit
        for limit in (style.fixed_width, style.width_limit, terminal_width)
        if limit is not None
    ]
    if not limits:
        return None
    return max(0, min(limits) - style.horizontal_frame_size())


def _wrap(text: str, wrap_at: int | None) -> list[str]:
    if not wrap_at:
        return text.split("\n")
    return wrap_text_with_ansi(text, wrap_at)


def _align(
    lines: list[str], style: Style, wrap_at: int | None, text_width: int
) -> list[str]:
    target = get_width("\n".join(lines))
    if style.fixed_width is not None:
        target = max(target, max(0, style.fixed_width - style.horizontal_frame_size()))
    # Content wrapped at max_width fills the wrap width
    if style.width_limit is not None and wrap_at and text_width > wrap_at:
        target = max(target, wrap_at)
    lines = [pad_line(line, target, style.align_horizontal) for line in lines]
    if style.fixed_height is not None:
        rows = max(0, style.fixed_height - style.vertical_frame_size())
        lines = pad_lines(lines, rows, target, style.align_vertical)
    return lines


def _surround(lines: list[str], sides: tuple[int, int, int, int]) -> list[str]:
    """Add blank rows and columns around a rectangular block."""
    top, right, bottom, left = sides
    if not any(sides):
        return lines
    inner = get_width("\n".join(lines)) if lines else 0
    blank = " " * (left + inner + right)
    body = [" " * left + line + " " * right for line in lines]
    return [blank] * top + body + [blank] * bottom


def _apply_padding(lines: list[str], style: Style) -> list[str]:
    return _surround(lines, style.paddings)


def _apply_border(
    lines: list[str], style: Style, profile: ColorProfile, settings: Settings
) -> list[str]:
    border = style.border_style
    if border is None or not any(style.border_sides):
        return lines
    top, right, bottom, left = style.border_sides

    prologue = sgr_prologue(
        [
            color_code(style.border_fg, profile, False, settings.theme, settings.dark_background),
            color_code(style.border_bg, profile, True, settings.theme, settings.dark_background),
        ]
    )

    def paint(glyphs: str) -> str:
        if not prologue or not glyphs:
            return glyphs
        return prologue + glyphs + RESET

    inner = get_width("\n".join(lines)) if lines else 0
    result = [
        (paint(border.left) if left else "") + line + (paint(border.right) if right else "")
        for line in lines
    ]
    if top:
        result.insert(0, paint(_edge(border, inner, left, right, top=True)))
    if bottom:
        result.append(paint(_edge(border, inner, left, right, top=False)))
    return result


def _edge(border: Border, inner: int, left: bool, right: bool, top: bool) -> str:
    if top:
        start, fill, end = border.top_left, border.top, border.top_right
    else:
        start, fill, end = border.bottom_left, border.bottom, border.bottom_right
    return (start if left else "") + fill * inner + (end if right else "")


def _apply_margin(lines: list[str], style: Style) -> list[str]:
    return _surround(lines, style.margins)


def _apply_fixed_size(lines: list[str], style: Style) -> list[str]:
    if style.fixed_width is not None:
        lines = [truncate_to_width(line, style.fixed_width, pad=True) for line in lines]
    if style.fixed_height is not None:
        width = style.fixed_width if style.fixed_width is not None else get_width("\n".join(lines))
        lines = pad_lines(lines[: style.fixed_height], style.fixed_height, width)
    return lines


def _apply_max_size(lines: list[str], style: Style) -> list[str]:
    if style.height_limit is not None:
        lines = lines[: style.height_limit]
    if style.width_limit is not None:
        lines = [truncate_to_width(line, style.width_limit) for line in lines]
    return lines


def _apply_color(
    lines: list[str], style: Style, profile: ColorProfile, settings: Settings
) -> list[str]:
    if style.color_disabled or profile == ColorProfile.NO_COLOR:
        return [strip_ansi(line) for line in lines]

    prologue = sgr_prologue(
        attribute_codes(style.attributes)
        + [
            color_code(style.fg, profile, False, settings.theme, settings.dark_background),
            color_code(style.bg, profile, True, settings.theme, settings.dark_background),
        ]
    )
    if not prologue:
        return lines
    return [
        prologue + _INNER_RESET_RE.sub(lambda m: m.group(0) + prologue, line) + RESET
        for line in lines
    ]

"""Immutable style values built by chained calls.

Every builder method returns a new :class:`Style`; nothing is mutated::

    box = style().bold().foreground("cyan").border("rounded").padding(0, 1)
    print(box.render("hello"))

Invalid values are rejected when the builder call is made, never at render
time.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable

from pi.style.border import Border, get_border
from pi.style.color import TEXT_ATTRIBUTES, ColorSpec
from pi.style.render import render as render_style
from pi.style.utils import (
    HORIZONTAL_ALIGNMENTS,
    VERTICAL_ALIGNMENTS,
    HorizontalAlign,
    VerticalAlign,
)

Renderer = Callable[[str, "Style"], str]
Sides = tuple[int, int, int, int]

_ZERO_SIDES: Sides = (0, 0, 0, 0)
_ALL_SIDES = (True, True, True, True)

_TOP, _RIGHT, _BOTTOM, _LEFT = range(4)


def expand_sides(values: tuple[Any, ...], what: str) -> tuple[Any, Any, Any, Any]:
    """Expand CSS-style shorthand into ``(top, right, bottom, left)``.

    One value applies to all sides, two are vertical/horizontal, three are
    top/horizontal/bottom and four are given clockwise from the top.
    """
    if len(values) == 1:
        (v,) = values
        return (v, v, v, v)
    if len(values) == 2:
        vertical, horizontal = values
        return (vertical, horizontal, vertical, horizontal)
    if len(values) == 3:
        top, horizontal, bottom = values
        return (top, horizontal, bottom, horizontal)
    if len(values) == 4:
        return (values[0], values[1], values[2], values[3])
    raise ValueError(f"{what} takes 1 to 4 values, got {len(values)}")


def _check_size(name: str, value: Any, optional: bool = False) -> None:
    if value is None and optional:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class Style:
    """A declarative description of how to render a block of text.

    Attributes are stored under names distinct from the builder methods:
    ``attributes`` holds the enabled text attributes, ``paddings`` and
    ``margins`` are ``(top, right, bottom, left)`` tuples, ``fixed_width`` /
    ``fixed_height`` are the exact outer size and ``width_limit`` /
    ``height_limit`` the maximum one.
    """

    attributes: frozenset[str] = frozenset()
    fg: ColorSpec | None = None
    bg: ColorSpec | None = None
    border_style: Border | None = None
    border_sides: tuple[bool, bool, bool, bool] = _ALL_SIDES
    border_fg: ColorSpec | None = None
    border_bg: ColorSpec | None = None
    align_horizontal: HorizontalAlign = "left"
    align_vertical: VerticalAlign = "top"
    paddings: Sides = _ZERO_SIDES
    margins: Sides = _ZERO_SIDES
    fixed_width: int | None = None
    fixed_height: int | None = None
    width_limit: int | None = None
    height_limit: int | None = None
    is_inline: bool = False
    tab_size: int = 4
    color_disabled: bool = False
    color_forced: bool | None = None
    render_fn: Renderer | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        unknown = set(self.attributes) - set(TEXT_ATTRIBUTES)
        if unknown:
            raise ValueError(f"Unknown text attribute(s): {', '.join(sorted(unknown))}")
        if self.border_style is not None and not isinstance(self.border_style, Border):
            raise TypeError(
                f"border_style must be a Border or None, got {type(self.border_style).__name__}"
            )
        if len(self.border_sides) != 4 or not all(isinstance(s, bool) for s in self.border_sides):
            raise TypeError("border_sides must be four booleans")
        if self.align_horizontal not in HORIZONTAL_ALIGNMENTS:
            raise ValueError(
                f"Invalid horizontal alignment {self.align_horizontal!r}; "
                f"expected one of {', '.join(HORIZONTAL_ALIGNMENTS)}"
            )
        if self.align_vertical not in VERTICAL_ALIGNMENTS:
            raise ValueError(
                f"Invalid vertical alignment {self.align_vertical!r}; "
                f"expected one of {', '.join(VERTICAL_ALIGNMENTS)}"
            )
        for name in ("paddings", "margins"):
            sides = getattr(self, name)
            if len(sides) != 4:
                raise ValueError(f"{name} must have four sides, got {len(sides)}")
            for side in sides:
                _check_size(name, side)
        for name in ("fixed_width", "fixed_height", "width_limit", "height_limit"):
            _check_size(name, getattr(self, name), optional=True)
        _check_size("tab_size", self.tab_size)
        if self.render_fn is not None and not callable(self.render_fn):
            raise TypeError(f"renderer must be callable, got {type(self.render_fn).__name__}")

    # ------------------------------------------------------------------
    # Text attributes
    # ------------------------------------------------------------------

    def _with_attribute(self, name: str, enabled: bool) -> Style:
        attributes = self.attributes | {name} if enabled else self.attributes - {name}
        return replace(self, attributes=frozenset(attributes))

    def bold(self, enabled: bool = True) -> Style:
        return self._with_attribute("bold", enabled)

    def italic(self, enabled: bool = True) -> Style:
        return self._with_attribute("italic", enabled)

    def underline(self, enabled: bool = True) -> Style:
        return self._with_attribute("underline", enabled)

    def strikethrough(self, enabled: bool = True) -> Style:
        return self._with_attribute("strikethrough", enabled)

    def faint(self, enabled: bool = True) -> Style:
        return self._with_attribute("faint", enabled)

    def blink(self, enabled: bool = True) -> Style:
        return self._with_attribute("blink", enabled)

    def reverse(self, enabled: bool = True) -> Style:
        return self._with_attribute("reverse", enabled)

    # ------------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------------

    def foreground(self, color: ColorSpec | None) -> Style:
        return replace(self, fg=color)

    def background(self, color: ColorSpec | None) -> Style:
        return replace(self, bg=color)

    def border_foreground(self, color: ColorSpec | None) -> Style:
        return replace(self, border_fg=color)

    def border_background(self, color: ColorSpec | None) -> Style:
        return replace(self, border_bg=color)

    # ------------------------------------------------------------------
    # Box model
    # ------------------------------------------------------------------

    def padding(self, *values: int) -> Style:
        """Set padding with CSS shorthand: ``padding(1)``, ``padding(1, 2)``, ..."""
        return replace(self, paddings=expand_sides(values, "padding"))

    def _with_padding(self, index: int, value: int) -> Style:
        sides = list(self.paddings)
        sides[index] = value
        return replace(self, paddings=tuple(sides))

    def padding_top(self, value: int) -> Style:
        return self._with_padding(_TOP, value)

    def padding_right(self, value: int) -> Style:
        return self._with_padding(_RIGHT, value)

    def padding_bottom(self, value: int) -> Style:
        return self._with_padding(_BOTTOM, value)

    def padding_left(self, value: int) -> Style:
        return self._with_padding(_LEFT, value)

    def margin(self, *values: int) -> Style:
        """Set margin with CSS shorthand, like :meth:`padding`."""
        return replace(self, margins=expand_sides(values, "margin"))

    def _with_margin(self, index: int, value: int) -> Style:
        sides = list(self.margins)
        sides[index] = value
        return replace(self, margins=tuple(sides))

    def margin_top(self, value: int) -> Style:
        return self._with_margin(_TOP, value)

    def margin_right(self, value: int) -> Style:
        return self._with_margin(_RIGHT, value)

    def margin_bottom(self, value: int) -> Style:
        return self._with_margin(_BOTTOM, value)

    def margin_left(self, value: int) -> Style:
        return self._with_margin(_LEFT, value)

    # ------------------------------------------------------------------
    # Borders
    # ------------------------------------------------------------------

    def border(self, kind: str | Border = "normal", *sides: bool) -> Style:
        """Draw a border of *kind*; *sides* selects edges with CSS shorthand.

        ``border("rounded")`` draws all four edges, ``border("normal", True,
        False)`` only the top and bottom ones. ``border("none")`` removes it.
        """
        glyphs = get_border(kind)
        if sides:
            return replace(self, border_style=glyphs, border_sides=expand_sides(sides, "border"))
        return replace(self, border_style=glyphs)

    def custom_border(self, **glyphs: str) -> Style:
        """Use a custom glyph set; glyphs not given come from the normal border."""
        return replace(self, border_style=Border.custom(**glyphs))

    def _with_border_side(self, index: int, enabled: bool) -> Style:
        sides = list(self.border_sides)
        sides[index] = enabled
        return replace(self, border_sides=tuple(sides))

    def border_top(self, enabled: bool = True) -> Style:
        return self._with_border_side(_TOP, enabled)

    def border_right(self, enabled: bool = True) -> Style:
        return self._with_border_side(_RIGHT, enabled)

    def border_bottom(self, enabled: bool = True) -> Style:
        return self._with_border_side(_BOTTOM, enabled)

    def border_left(self, enabled: bool = True) -> Style:
        return self._with_border_side(_LEFT, enabled)

    # ------------------------------------------------------------------
    # Alignment and size
    # ------------------------------------------------------------------

    def align(self, horizontal: HorizontalAlign, vertical: VerticalAlign | None = None) -> Style:
        if vertical is None:
            return replace(self, align_horizontal=horizontal)
        return replace(self, align_horizontal=horizontal, align_vertical=vertical)

    def vertical_align(self, vertical: VerticalAlign) -> Style:
        return replace(self, align_vertical=vertical)

    def width(self, value: int) -> Style:
        """Fix the outer width, including padding, border and margin."""
        return replace(self, fixed_width=value)

    def height(self, value: int) -> Style:
        """Fix the outer height, including padding, border and margin."""
        return replace(self, fixed_height=value)

    def max_width(self, value: int) -> Style:
        return replace(self, width_limit=value)

    def max_height(self, value: int) -> Style:
        return replace(self, height_limit=value)

    # ------------------------------------------------------------------
    # Rendering options
    # ------------------------------------------------------------------

    def inline(self, enabled: bool = True) -> Style:
        return replace(self, is_inline=enabled)

    def tab_width(self, value: int) -> Style:
        return replace(self, tab_size=value)

    def no_color(self, enabled: bool = True) -> Style:
        return replace(self, color_disabled=enabled)

    def force_color(self, enabled: bool | None = True) -> Style:
        """Force color on (``True``), off (``False``) or defer to config (``None``)."""
        return replace(self, color_forced=enabled)

    def renderer(self, fn: Renderer | None) -> Style:
        """Replace wrapping, layout and coloring with ``fn(text, style)``."""
        return replace(self, render_fn=fn)

    # ------------------------------------------------------------------
    # Inheritance and unsetting
    # ------------------------------------------------------------------

    def inherit(self, base: Style) -> Style:
        """Fill every field still at its default from *base*.

        Fields set on this style win. Text attributes are merged.
        """
        changes: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "attributes":
                changes[f.name] = self.attributes | base.attributes
            elif getattr(self, f.name) == f.default:
                changes[f.name] = getattr(base, f.name)
        return replace(self, **changes)

    def unset_bold(self) -> Style:
        return self._with_attribute("bold", False)

    def unset_foreground(self) -> Style:
        return replace(self, fg=None)

    def unset_background(self) -> Style:
        return replace(self, bg=None)

    def unset_padding(self) -> Style:
        return replace(self, paddings=_ZERO_SIDES)

    def unset_margin(self) -> Style:
        return replace(self, margins=_ZERO_SIDES)

    def unset_border(self) -> Style:
        return replace(
            self,
            border_style=None,
            border_sides=_ALL_SIDES,
            border_fg=None,
            border_bg=None,
        )

    def unset_width(self) -> Style:
        return replace(self, fixed_width=None)

    def unset_height(self) -> Style:
        return replace(self, fixed_height=None)

    def unset_max_width(self) -> Style:
        return replace(self, width_limit=None)

    def unset_max_height(self) -> Style:
        return replace(self, height_limit=None)

    # ------------------------------------------------------------------
    # Frame sizes
    # ------------------------------------------------------------------

    def _border_extent(self, first: int, second: int) -> int:
        if self.border_style is None:
            return 0
        return int(self.border_sides[first]) + int(self.border_sides[second])

    def horizontal_frame_size(self) -> int:
        """Columns taken by left/right padding, border and margin."""
        return (
            self.paddings[_LEFT]
            + self.paddings[_RIGHT]
            + self._border_extent(_LEFT, _RIGHT)
            + self.margins[_LEFT]
            + self.margins[_RIGHT]
        )

    def vertical_frame_size(self) -> int:
        """Rows taken by top/bottom padding, border and margin."""
        return (
            self.paddings[_TOP]
            + self.paddings[_BOTTOM]
            + self._border_extent(_TOP, _BOTTOM)
            + self.margins[_TOP]
            + self.margins[_BOTTOM]
        )

    def render(self, content: str) -> str:
        return render_style(self, content)


def style() -> Style:
    """Return an empty style to build on."""
    return Style()

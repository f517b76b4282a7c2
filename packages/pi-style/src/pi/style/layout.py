"""Compose rendered blocks: joins and placement on a blank canvas.

Blocks are treated as rectangles of cells. Shorter lines and shorter blocks
are filled with spaces; on an odd remainder the extra cell goes to the right
(horizontally) or to the bottom (vertically).
"""

from __future__ import annotations

from typing import Sequence

from pi.style.utils import (
    HORIZONTAL_ALIGNMENTS,
    VERTICAL_ALIGNMENTS,
    HorizontalAlign,
    VerticalAlign,
    get_width,
    pad_line,
    pad_lines,
)


def _check_horizontal(align: str) -> None:
    if align not in HORIZONTAL_ALIGNMENTS:
        raise ValueError(
            f"Invalid horizontal alignment {align!r}; "
            f"expected one of {', '.join(HORIZONTAL_ALIGNMENTS)}"
        )


def _check_vertical(align: str) -> None:
    if align not in VERTICAL_ALIGNMENTS:
        raise ValueError(
            f"Invalid vertical alignment {align!r}; "
            f"expected one of {', '.join(VERTICAL_ALIGNMENTS)}"
        )


def join_horizontal(blocks: Sequence[str], align: VerticalAlign = "top") -> str:
    """Place *blocks* side by side, aligning shorter ones vertically.

    Each block is first squared up to its own width, then padded with blank
    rows of that width up to the tallest block. Rows are concatenated with
    no gutter.
    """
    _check_vertical(align)
    if not blocks:
        return ""

    columns: list[list[str]] = []
    for block in blocks:
        width = get_width(block)
        columns.append([pad_line(line, width) for line in block.split("\n")])

    height = max(len(column) for column in columns)
    columns = [
        pad_lines(column, height, get_width("\n".join(column)), align) for column in columns
    ]
    return "\n".join("".join(row) for row in zip(*columns))


def join_vertical(blocks: Sequence[str], align: HorizontalAlign = "left") -> str:
    """Stack *blocks* top to bottom, aligning every line to the widest one."""
    _check_horizontal(align)
    if not blocks:
        return ""

    width = max(get_width(block) for block in blocks)
    lines = [pad_line(line, width, align) for block in blocks for line in block.split("\n")]
    return "\n".join(lines)


def place_horizontal(width: int, align: HorizontalAlign, content: str) -> str:
    """Place *content* in a row of at least *width* columns."""
    _check_horizontal(align)
    block_width = max(width, get_width(content))
    return "\n".join(pad_line(line, block_width, align) for line in content.split("\n"))


def place_vertical(height: int, align: VerticalAlign, content: str) -> str:
    """Place *content* in a column of at least *height* rows."""
    _check_vertical(align)
    lines = content.split("\n")
    return "\n".join(pad_lines(lines, height, get_width(content), align))


def place(
    width: int,
    height: int,
    h_align: HorizontalAlign,
    v_align: VerticalAlign,
    content: str,
) -> str:
    """Place *content* on a ``width`` x ``height`` canvas of blank cells.

    Content larger than the canvas is not clipped: *width* and *height* are
    lower bounds on the result.
    """
    _check_horizontal(h_align)
    _check_vertical(v_align)
    return place_vertical(height, v_align, place_horizontal(width, h_align, content))

"""Terminal text utilities: ANSI handling, width measurement, word wrapping.

Provides functions for stripping ANSI sequences, measuring visible terminal
widths of (multi-line) text, tracking ANSI SGR state, word-wrapping text with
ANSI codes preserved, and column-exact truncation and padding.
"""

from __future__ import annotations

import functools
import re
import unicodedata
from typing import Literal

import grapheme
import wcwidth as _wcwidth

HorizontalAlign = Literal["left", "center", "right"]
VerticalAlign = Literal["top", "middle", "bottom"]

HORIZONTAL_ALIGNMENTS: tuple[str, ...] = ("left", "center", "right")
VERTICAL_ALIGNMENTS: tuple[str, ...] = ("top", "middle", "bottom")

RESET = "\x1b[0m"


# ---------------------------------------------------------------------------
# Regex patterns for ANSI / OSC / APC sequences
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"                   # CSI
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"        # OSC
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"         # APC
    r"|\x1b[ -/]*[0-OQ-WYZ\\`-~]"               # two-byte and nF escapes
)

# Final bytes that open a CSI or a string sequence rather than end an escape
_STRING_INTRODUCERS = "PX[]^_"

# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------

# Ambiguous symbols that terminals draw in a single cell even when
# wcwidth or the emoji heuristics below would say otherwise.
_NARROW_OVERRIDES: tuple[tuple[int, int], ...] = (
    (0x2190, 0x21FF),  # Arrows
    (0x2713, 0x2718),  # Check marks and ballot x
    (0x2700, 0x27BF),  # Dingbats
)


def _is_narrow_override(cp: int) -> bool:
    for start, end in _NARROW_OVERRIDES:
        if start <= cp <= end:
            return True
    return False


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (contains VS16 U+FE0F, ZWJ sequences, etc.) -> 2
    3. Arrows, check marks and dingbats in text presentation -> 1
    4. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    # Single codepoint fast path
    if len(g) == 1:
        cp = ord(g)
        # Control characters
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        if _is_narrow_override(cp):
            return 1
        w = _wcwidth.wcwidth(g)
        return max(w, 0)

    codepoints = list(g)

    # Emoji indicators: VS16, ZWJ, skin tone modifiers, regional indicators
    for ch in codepoints:
        cp = ord(ch)
        if cp == 0xFE0F:
            return 2
        if cp == 0x200D:
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(codepoints[0])
    if first_cp >= 0x1F000:
        return 2
    if _is_narrow_override(first_cp):
        return 1

    cat = unicodedata.category(codepoints[0])
    if cat.startswith("M"):  # Mark
        return 0
    if cat == "Cf":  # Format
        return 0

    w = _wcwidth.wcwidth(codepoints[0])
    return max(w, 0)


# ---------------------------------------------------------------------------
# strip_ansi / visible_width / get_width / get_height
# ---------------------------------------------------------------------------

def strip_ansi(text: str) -> str:
    """Remove every ANSI escape sequence from *text*, keeping all other content.

    Stripping repeats until nothing matches, so sequences that only appear
    once an inner one is removed are dropped too and the result is stable.
    """
    while "\x1b" in text:
        stripped = _STRIP_RE.sub("", text)
        if stripped == text:
            break
        text = stripped
    return text


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of a single line of *text*.

    * Strips ANSI escape sequences.
    * Uses a fast ASCII path when possible.
    * Caches results for non-ASCII strings.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    # Fast ASCII path: all codepoints in 0x20..0x7E
    is_ascii = True
    for ch in stripped:
        cp = ord(ch)
        if cp < 0x20 or cp > 0x7E:
            is_ascii = False
            break

    if is_ascii:
        return len(stripped)

    return _measure(stripped)


# Width cache, capped at 512 entries and shared safely across threads
@functools.lru_cache(maxsize=512)
def _measure(stripped: str) -> int:
    return sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))


def get_width(text: str) -> int:
    """Return the width of the widest line in *text*, ignoring ANSI codes."""
    return max((visible_width(line) for line in text.split("\n")), default=0)


def get_height(text: str) -> int:
    """Return the number of lines in *text* (at least 1)."""
    return text.count("\n") + 1


# ---------------------------------------------------------------------------
# extract_ansi_code / tokenize
# ---------------------------------------------------------------------------

def extract_ansi_code(text: str, pos: int) -> tuple[str, int] | None:
    """Extract an ANSI escape sequence starting at *pos* in *text*.

    Returns ``(code, length)`` where *code* is the full escape sequence string
    and *length* is the number of characters consumed, or ``None`` if there is
    no escape sequence at *pos*.

    Handles:
    * CSI sequences: ``ESC[`` <params> <final byte>
    * OSC sequences: ``ESC]`` ... ``BEL`` / ``ST``
    * APC sequences: ``ESC_`` ... ``BEL`` / ``ST``
    * Two-byte and nF escapes: ``ESC`` <intermediates> <final byte>
    """
    if pos >= len(text) or text[pos] != "\x1b":
        return None

    if pos + 1 >= len(text):
        return None

    next_ch = text[pos + 1]

    if next_ch == "[":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if "@" <= ch <= "~":
                code = text[pos : i + 1]
                return (code, len(code))
            if "0" <= ch <= "?" or " " <= ch <= "/":
                i += 1
                continue
            break
        return None

    if next_ch in "]_":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch == "\x07":  # BEL
                code = text[pos : i + 1]
                return (code, len(code))
            if ch == "\x1b" and i + 1 < len(text) and text[i + 1] == "\\":
                code = text[pos : i + 2]
                return (code, len(code))
            i += 1
        return None

    # Two-byte (ESC 7, ESC M, ...) and nF (ESC ( B, ...) escapes
    i = pos + 1
    while i < len(text) and " " <= text[i] <= "/":
        i += 1
    if i < len(text) and "0" <= text[i] <= "~" and text[i] not in _STRING_INTRODUCERS:
        code = text[pos : i + 1]
        return (code, len(code))
    return None


def tokenize(text: str) -> list[tuple[bool, str]]:
    """Split *text* into ``(is_escape, fragment)`` runs.

    Escape runs are single ANSI sequences; printable runs are single grapheme
    clusters, so width arithmetic never has to look at raw code units.
    """
    tokens: list[tuple[bool, str]] = []
    plain: list[str] = []
    i = 0

    def flush() -> None:
        if plain:
            for g in grapheme.graphemes("".join(plain)):
                tokens.append((False, g))
            plain.clear()

    while i < len(text):
        extracted = extract_ansi_code(text, i)
        if extracted is not None:
            flush()
            code, length = extracted
            tokens.append((True, code))
            i += length
            continue
        plain.append(text[i])
        i += 1

    flush()
    return tokens


# ---------------------------------------------------------------------------
# AnsiCodeTracker
# ---------------------------------------------------------------------------

class AnsiCodeTracker:
    """Track active ANSI SGR (Select Graphic Rendition) state.

    Processes CSI SGR sequences (``ESC[...m``) and maintains which attributes
    are currently active so that they can be re-applied after line breaks.
    """

    _ATTRIBUTES = {
        1: "bold",
        2: "dim",
        3: "italic",
        4: "underline",
        5: "blink",
        7: "inverse",
        8: "hidden",
        9: "strikethrough",
    }
    _RESETS = {
        23: ("italic",),
        24: ("underline",),
        25: ("blink",),
        27: ("inverse",),
        28: ("hidden",),
        29: ("strikethrough",),
        22: ("bold", "dim"),
    }

    def __init__(self) -> None:
        self.attributes: dict[str, str] = {}
        self.fg_color: str | None = None
        self.bg_color: str | None = None

    def process(self, code: str) -> None:
        """Update tracked state from an SGR sequence like ``\\x1b[1;31m``."""
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return

        params_str = code[2:-1]
        if not params_str:
            # ESC[m is equivalent to reset
            self.clear()
            return

        params = params_str.split(";")
        i = 0
        while i < len(params):
            p = params[i]
            if p and not p.isdigit():
                i += 1
                continue
            val = int(p) if p else 0

            if val == 0:
                self.clear()
            elif val in self._ATTRIBUTES:
                self.attributes[self._ATTRIBUTES[val]] = f"\x1b[{val}m"
            elif val in self._RESETS:
                for name in self._RESETS[val]:
                    self.attributes.pop(name, None)
            elif 30 <= val <= 37 or 90 <= val <= 97:
                self.fg_color = f"\x1b[{val}m"
            elif 40 <= val <= 47 or 100 <= val <= 107:
                self.bg_color = f"\x1b[{val}m"
            elif val == 39:
                self.fg_color = None
            elif val == 49:
                self.bg_color = None
            elif val in (38, 48):
                # 256-color (38;5;N) or RGB (38;2;R;G;B)
                color, consumed = self._extended_color(val, params, i)
                if color is not None:
                    if val == 38:
                        self.fg_color = color
                    else:
                        self.bg_color = color
                i += consumed

            i += 1

    @staticmethod
    def _extended_color(
        val: int, params: list[str], i: int
    ) -> tuple[str | None, int]:
        if i + 1 >= len(params):
            return None, 0
        mode = params[i + 1]
        if mode == "5" and i + 2 < len(params):
            return f"\x1b[{val};5;{params[i + 2]}m", 2
        if mode == "2" and i + 4 < len(params):
            r, g, b = params[i + 2 : i + 5]
            return f"\x1b[{val};2;{r};{g};{b}m", 4
        return None, 1

    def clear(self) -> None:
        """Reset all tracked attributes to off."""
        self.attributes.clear()
        self.fg_color = None
        self.bg_color = None

    def get_active_codes(self) -> str:
        """Return a string of ANSI codes that reactivate the current state."""
        parts = list(self.attributes.values())
        if self.fg_color is not None:
            parts.append(self.fg_color)
        if self.bg_color is not None:
            parts.append(self.bg_color)
        return "".join(parts)

    def has_active_codes(self) -> bool:
        """Return ``True`` if any SGR attribute is currently active."""
        return bool(self.attributes) or self.fg_color is not None or self.bg_color is not None

    def get_line_end_reset(self) -> str:
        """Return a reset sequence if any attribute is active, else empty."""
        if self.has_active_codes():
            return RESET
        return ""


# ---------------------------------------------------------------------------
# wrap_text_with_ansi
# ---------------------------------------------------------------------------

def wrap_text_with_ansi(text: str, width: int) -> list[str]:
    """Word-wrap *text* to *width* columns, preserving ANSI escape codes.

    Handles embedded newlines by processing each physical line separately.
    ANSI state is tracked across lines so that colours/attributes persist
    correctly after wrapping. A single word wider than *width* is broken with
    a hyphen inserted at each break point.

    Returns a list of wrapped lines (without trailing newlines).
    """
    if width <= 0:
        return text.split("\n")

    result: list[str] = []
    tracker = AnsiCodeTracker()

    for physical_line in text.split("\n"):
        if visible_width(physical_line) > width:
            result.extend(_wrap_single_line(physical_line, width, tracker))
            continue
        # Fits already; only carry the ANSI state over from earlier lines.
        prefix = tracker.get_active_codes()
        for is_escape, fragment in tokenize(physical_line):
            if is_escape:
                tracker.process(fragment)
        result.append(prefix + physical_line + tracker.get_line_end_reset())

    return result


Token = tuple[bool, str]


def _split_words(line: str) -> list[tuple[bool, list[Token]]]:
    """Group tokens into alternating ``(is_space, tokens)`` runs.

    Escape sequences stick to the run they appear in.
    """
    runs: list[tuple[bool, list[Token]]] = []
    for token in tokenize(line):
        is_escape, fragment = token
        if is_escape and runs:
            runs[-1][1].append(token)
            continue
        is_space = not is_escape and fragment == " "
        if runs and runs[-1][0] == is_space:
            runs[-1][1].append(token)
        else:
            runs.append((is_space, [token]))
    return runs


def _run_width(tokens: list[Token]) -> int:
    return sum(_grapheme_width(frag) for is_escape, frag in tokens if not is_escape)


class _LineBuilder:
    """Accumulates one wrapped line at a time while tracking SGR state."""

    def __init__(self, tracker: AnsiCodeTracker) -> None:
        self.tracker = tracker
        self.lines: list[str] = []
        self.parts: list[str] = [tracker.get_active_codes()]
        self.width = 0

    def emit(self, tokens: list[Token]) -> None:
        for is_escape, fragment in tokens:
            if is_escape:
                self.tracker.process(fragment)
            else:
                self.width += _grapheme_width(fragment)
            self.parts.append(fragment)

    def emit_escapes(self, tokens: list[Token]) -> None:
        self.emit([token for token in tokens if token[0]])

    def finish(self) -> None:
        self.lines.append("".join(self.parts) + self.tracker.get_line_end_reset())
        self.parts = [self.tracker.get_active_codes()]
        self.width = 0


def _wrap_single_line(
    line: str,
    width: int,
    tracker: AnsiCodeTracker,
) -> list[str]:
    """Wrap a single line (no embedded newlines) to *width* columns."""
    builder = _LineBuilder(tracker)
    pending_space: list[Token] = []

    for is_space, tokens in _split_words(line):
        if is_space:
            pending_space = tokens
            continue

        word_width = _run_width(tokens)
        if builder.width == 0:
            if builder.lines:
                builder.emit_escapes(pending_space)
            else:
                # Leading indentation of the first line is kept while the
                # word still fits after it
                room = width - word_width if word_width <= width else 0
                builder.emit(_fit_indent(pending_space, room))
        elif builder.width + _run_width(pending_space) + word_width <= width:
            builder.emit(pending_space)
        else:
            builder.emit_escapes(pending_space)
            builder.finish()
        pending_space = []

        if builder.width + word_width <= width:
            builder.emit(tokens)
        else:
            _emit_hyphenated(builder, tokens, width)

    builder.emit_escapes(pending_space)
    if strip_ansi("".join(builder.parts)) or not builder.lines:
        builder.finish()
    else:
        # Trailing escapes (usually a reset) belong to the last line
        trailing = "".join(builder.parts[1:])
        if trailing:
            builder.lines[-1] += trailing

    return builder.lines


def _fit_indent(tokens: list[Token], room: int) -> list[Token]:
    """Keep every escape in *tokens* but at most *room* spaces."""
    kept: list[Token] = []
    for token in tokens:
        if not token[0]:
            if room <= 0:
                continue
            room -= 1
        kept.append(token)
    return kept


def _emit_hyphenated(builder: _LineBuilder, tokens: list[Token], width: int) -> None:
    """Break an over-long word into chunks ending with a hyphen."""
    remaining = list(tokens)

    while remaining:
        available = width - builder.width
        if _run_width(remaining) <= available:
            builder.emit(remaining)
            return

        limit = available - 1 if width > 1 else available
        taken: list[Token] = []
        taken_width = 0
        while remaining:
            is_escape, fragment = remaining[0]
            w = 0 if is_escape else _grapheme_width(fragment)
            # An empty line always takes one grapheme so the loop progresses
            if taken_width + w > limit and (taken_width > 0 or builder.width > 0):
                break
            taken.append(remaining.pop(0))
            taken_width += w

        if taken_width == 0 and builder.width > 0:
            remaining = taken + remaining
            builder.finish()
            continue

        builder.emit(taken)
        # No hyphen when a wide glyph already fills the line
        if width > 1 and builder.width < width:
            builder.parts.append("-")
        builder.finish()


# ---------------------------------------------------------------------------
# truncate_to_width / pad_line
# ---------------------------------------------------------------------------

def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "",
    pad: bool = False,
) -> str:
    """Truncate *text* to fit within *max_width* visible columns.

    If the text is wider than *max_width*, it is cut at a grapheme boundary
    and *ellipsis* is appended (the ellipsis counts towards the width). ANSI
    codes before the cut are kept and a reset is emitted if a style was still
    active. A wide glyph straddling the cut is replaced by spaces, so the
    result of cutting wider text is exactly *max_width* columns. If *pad* is
    ``True``, shorter text is right-padded with spaces to *max_width*.
    """
    if max_width <= 0:
        return ""

    text_width = visible_width(text)
    if text_width <= max_width:
        if pad:
            return text + " " * (max_width - text_width)
        return text

    ellipsis_width = visible_width(ellipsis)
    target_width = max_width - ellipsis_width
    if target_width <= 0:
        return _take_columns(ellipsis, max_width)

    return _take_columns(text, target_width) + ellipsis


def _take_columns(text: str, max_cols: int) -> str:
    """Return a prefix of *text* exactly *max_cols* wide (if *text* is wider).

    ANSI codes up to the cut are preserved and a reset is appended if any SGR
    state is still active at the cut.
    """
    result: list[str] = []
    tracker = AnsiCodeTracker()
    cols = 0

    for is_escape, fragment in tokenize(text):
        if is_escape:
            tracker.process(fragment)
            result.append(fragment)
            continue
        w = _grapheme_width(fragment)
        if cols + w > max_cols:
            result.append(" " * (max_cols - cols))
            break
        result.append(fragment)
        cols += w
        if cols == max_cols:
            break

    return "".join(result) + tracker.get_line_end_reset()


def split_remainder(n: int) -> tuple[int, int]:
    """Split *n* cells into two halves, the extra cell going to the second."""
    first = n // 2
    return first, n - first


def pad_line(line: str, width: int, align: HorizontalAlign = "left") -> str:
    """Pad *line* with spaces to *width* visible columns according to *align*.

    Lines already at least *width* wide are returned unchanged.
    """
    gap = width - visible_width(line)
    if gap <= 0:
        return line
    if align == "right":
        return " " * gap + line
    if align == "center":
        left, right = split_remainder(gap)
        return " " * left + line + " " * right
    return line + " " * gap


def pad_lines(
    lines: list[str], height: int, width: int, align: VerticalAlign = "top"
) -> list[str]:
    """Pad *lines* with blank lines of *width* spaces up to *height* rows."""
    gap = height - len(lines)
    if gap <= 0:
        return lines
    blank = " " * width
    if align == "bottom":
        return [blank] * gap + lines
    if align == "middle":
        top, bottom = split_remainder(gap)
        return [blank] * top + lines + [blank] * bottom
    return lines + [blank] * gap

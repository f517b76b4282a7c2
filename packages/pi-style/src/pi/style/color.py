"""Color specs, color-profile tiers and SGR escape generation.

A color spec is any of:

* a named ANSI color (``"red"``, ``"bright_blue"``, ``"gray"``)
* an ANSI 256 palette index (``0..255``)
* an ``(r, g, b)`` tuple or a hex string (``"#ff5733"`` / ``"#f53"``)
* a theme role name (``"error"``), or :class:`ThemeColor` with a fallback
* :class:`AdaptiveColor` (light/dark variants) or :class:`CompleteColor`
  (explicit values per profile, never degraded)

Specs that cannot be resolved produce no escape code rather than an error.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from pi.style.theme import Theme

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]


class ColorProfile(enum.IntEnum):
    """Color depth supported by the output, ordered by capability."""

    NO_COLOR = 0
    ANSI16 = 1
    ANSI256 = 2
    TRUE_COLOR = 3


ANSI_COLORS: dict[str, int] = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "bright_black": 8,
    "bright_red": 9,
    "bright_green": 10,
    "bright_yellow": 11,
    "bright_blue": 12,
    "bright_magenta": 13,
    "bright_cyan": 14,
    "bright_white": 15,
    "gray": 8,
    "grey": 8,
}

# SGR parameters for the text attributes a style can switch on
TEXT_ATTRIBUTES: dict[str, int] = {
    "bold": 1,
    "faint": 2,
    "italic": 3,
    "underline": 4,
    "blink": 5,
    "reverse": 7,
    "strikethrough": 9,
}


@dataclass(frozen=True)
class ThemeColor:
    """A theme role, with a literal color to use when the role is unresolved."""

    role: str
    fallback: ColorSpec | None = None


@dataclass(frozen=True)
class AdaptiveColor:
    """Picks *light* on light terminal backgrounds and *dark* on dark ones."""

    light: ColorSpec
    dark: ColorSpec


@dataclass(frozen=True)
class CompleteColor:
    """Explicit colors per profile tier; missing tiers fall back downwards."""

    ansi: ColorSpec | None = None
    ansi256: ColorSpec | None = None
    true_color: ColorSpec | None = None

    def resolve(self, profile: ColorProfile) -> ColorSpec | None:
        if profile >= ColorProfile.TRUE_COLOR and self.true_color is not None:
            return self.true_color
        if profile >= ColorProfile.ANSI256 and self.ansi256 is not None:
            return self.ansi256
        return self.ansi


ColorSpec = str | int | RGB | ThemeColor | AdaptiveColor | CompleteColor


# ---------------------------------------------------------------------------
# Profile resolution and detection
# ---------------------------------------------------------------------------


def resolve_profile(
    force_color: bool | None,
    no_color: bool,
    is_tty: bool,
    detected: ColorProfile | None = None,
) -> ColorProfile:
    """Pick the color profile for one render.

    ``no_color`` beats ``force_color``, which beats the TTY probe. A TTY with
    an inconclusive detection result gets the conservative 16-color tier.
    """
    if no_color:
        return ColorProfile.NO_COLOR
    if force_color:
        return ColorProfile.TRUE_COLOR
    if not is_tty:
        return ColorProfile.NO_COLOR
    if detected is None:
        return ColorProfile.ANSI16
    return detected


def detect_color_depth(environ: Mapping[str, str] | None = None) -> ColorProfile | None:
    """Guess the color depth from ``COLORTERM`` and ``TERM``.

    Returns ``None`` when the environment says nothing useful.
    """
    env = os.environ if environ is None else environ
    color_term = env.get("COLORTERM", "").lower()
    term = env.get("TERM", "").lower()

    if color_term in ("truecolor", "24bit"):
        return ColorProfile.TRUE_COLOR
    if "256color" in term:
        return ColorProfile.ANSI256
    if term == "dumb":
        return ColorProfile.NO_COLOR
    if term:
        return ColorProfile.ANSI16
    return None


def has_dark_background(environ: Mapping[str, str] | None = None) -> bool:
    """Best-effort background detection via ``COLORFGBG`` (``"fg;bg"``).

    Defaults to dark when the variable is absent or unparseable.
    """
    env = os.environ if environ is None else environ
    value = env.get("COLORFGBG")
    if not value:
        return True
    parts = value.split(";")
    if len(parts) < 2:
        return True
    try:
        bg = int(parts[-1])
    except ValueError:
        return True
    return bg not in (7, 15)


# ---------------------------------------------------------------------------
# Palette conversions
# ---------------------------------------------------------------------------

_ANSI16_RGB: tuple[RGB, ...] = (
    (0, 0, 0),
    (170, 0, 0),
    (0, 170, 0),
    (170, 85, 0),
    (0, 0, 170),
    (170, 0, 170),
    (0, 170, 170),
    (170, 170, 170),
    (85, 85, 85),
    (255, 85, 85),
    (85, 255, 85),
    (255, 255, 85),
    (85, 85, 255),
    (255, 85, 255),
    (85, 255, 255),
    (255, 255, 255),
)

_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


def parse_hex(value: str) -> RGB | None:
    """Parse ``#rrggbb`` or ``#rgb``; ``None`` if malformed."""
    if not value.startswith("#"):
        return None
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        return None
    try:
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
    except ValueError:
        return None


def _cube_index(value: int) -> int:
    if value < 48:
        return 0
    if value < 115:
        return 1
    return min(5, (value - 35) // 40)


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    """Map an RGB color to the nearest ANSI 256 palette entry.

    Near-gray colors go to the grayscale ramp (232-255), everything else to
    the 6x6x6 color cube (16-231).
    """
    avg = (r + g + b) // 3
    if abs(r - avg) < 10 and abs(g - avg) < 10 and abs(b - avg) < 10:
        if avg < 8:
            return 16
        if avg > 248:
            return 231
        return 232 + min(23, (avg - 8) // 10)
    return 16 + 36 * _cube_index(r) + 6 * _cube_index(g) + _cube_index(b)


def ansi256_to_rgb(n: int) -> RGB:
    if n < 16:
        return _ANSI16_RGB[n]
    if n >= 232:
        level = 8 + (n - 232) * 10
        return (level, level, level)
    n -= 16
    return (_CUBE_LEVELS[n // 36], _CUBE_LEVELS[(n // 6) % 6], _CUBE_LEVELS[n % 6])


def nearest_ansi16(rgb: RGB) -> int:
    r, g, b = rgb
    best, best_distance = 0, None
    for index, (cr, cg, cb) in enumerate(_ANSI16_RGB):
        distance = (r - cr) ** 2 + (g - cg) ** 2 + (b - cb) ** 2
        if best_distance is None or distance < best_distance:
            best, best_distance = index, distance
    return best


def ansi256_to_ansi16(n: int) -> int:
    """Map an ANSI 256 palette index to the nearest of the 16 basic colors."""
    if n < 16:
        return n
    return nearest_ansi16(ansi256_to_rgb(n))


# ---------------------------------------------------------------------------
# SGR generation
# ---------------------------------------------------------------------------


def _basic_code(index: int, background: bool) -> str:
    base = 40 if background else 30
    if index >= 8:
        base += 60
        index -= 8
    return f"\x1b[{base + index}m"


def _indexed_code(index: int, profile: ColorProfile, background: bool) -> str:
    if profile == ColorProfile.ANSI16 or index < 16:
        return _basic_code(ansi256_to_ansi16(index), background)
    return f"\x1b[{48 if background else 38};5;{index}m"


def _rgb_code(rgb: RGB, profile: ColorProfile, background: bool) -> str:
    if profile == ColorProfile.TRUE_COLOR:
        r, g, b = rgb
        return f"\x1b[{48 if background else 38};2;{r};{g};{b}m"
    if profile == ColorProfile.ANSI16:
        return _basic_code(nearest_ansi16(rgb), background)
    return _indexed_code(rgb_to_ansi256(*rgb), profile, background)


def _is_rgb(value: object) -> bool:
    return (
        isinstance(value, tuple)
        and len(value) == 3
        and all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value)
    )


def resolve_color(
    spec: ColorSpec | None,
    profile: ColorProfile,
    theme: Theme | None = None,
    dark_background: bool = True,
) -> RGB | int | None:
    """Reduce *spec* to a literal RGB tuple or palette index, or ``None``."""
    # Theme roles and adaptive/complete wrappers can nest, so unwrap in a loop.
    for _ in range(8):
        if spec is None:
            return None
        if isinstance(spec, ThemeColor):
            themed = theme.color(spec.role) if theme is not None else None
            spec = themed if themed is not None else spec.fallback
            continue
        if isinstance(spec, AdaptiveColor):
            spec = spec.dark if dark_background else spec.light
            continue
        if isinstance(spec, CompleteColor):
            spec = spec.resolve(profile)
            continue
        if isinstance(spec, str):
            themed = theme.color(spec) if theme is not None else None
            if themed is not None:
                return themed
            if spec.startswith("#"):
                return parse_hex(spec)
            return ANSI_COLORS.get(spec.lower())
        if isinstance(spec, bool):
            return None
        if isinstance(spec, int):
            return spec if 0 <= spec <= 255 else None
        if _is_rgb(spec):
            return spec  # type: ignore[return-value]
        return None
    return None


def sgr_prologue(codes: list[str]) -> str:
    """Join the non-empty SGR fragments in *codes* into one prologue."""
    return "".join(code for code in codes if code)


def attribute_codes(attributes: frozenset[str] | set[str]) -> list[str]:
    """SGR fragments for text attribute names, in parameter order."""
    return [
        f"\x1b[{TEXT_ATTRIBUTES[name]}m"
        for name in sorted(attributes, key=TEXT_ATTRIBUTES.__getitem__)
    ]


def color_code(
    spec: ColorSpec | None,
    profile: ColorProfile,
    background: bool = False,
    theme: Theme | None = None,
    dark_background: bool = True,
) -> str:
    """Return the SGR fragment for *spec* under *profile*.

    Returns ``""`` for the ``NO_COLOR`` profile and for anything unresolvable.
    Colors deeper than the profile are downgraded to the nearest supported one.
    """
    if profile == ColorProfile.NO_COLOR or spec is None:
        return ""

    resolved = resolve_color(spec, profile, theme, dark_background)
    if resolved is None:
        logger.debug("Unresolved color %r; no code emitted", spec)
        return ""
    if isinstance(resolved, int):
        if isinstance(spec, str) and resolved < 16:
            # Named colors always use the basic SGR codes
            return _basic_code(resolved, background)
        return _indexed_code(resolved, profile, background)
    return _rgb_code(resolved, profile, background)

"""Theme palettes: role names mapped to concrete colors."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from pi.style.color import RGB, parse_hex

# Semantic roles fall back to these palette slots when not set explicitly.
SEMANTIC_DEFAULTS: dict[str, str] = {
    "header": "ansi_6",
    "emphasis": "ansi_4",
    "warning": "ansi_3",
    "error": "ansi_1",
    "success": "ansi_2",
    "muted": "ansi_8",
}


def _to_rgb(value: Any) -> RGB | None:
    if value is None:
        return None
    if isinstance(value, str):
        rgb = parse_hex(value)
        if rgb is None:
            raise ValueError(f"Invalid theme color: {value!r}")
        return rgb
    if (
        isinstance(value, (tuple, list))
        and len(value) == 3
        and all(isinstance(c, int) and 0 <= c <= 255 for c in value)
    ):
        return (value[0], value[1], value[2])
    raise ValueError(f"Invalid theme color: {value!r}")


@dataclass(frozen=True)
class Theme:
    """A named palette of 16 ANSI colors, terminal colors and semantic roles.

    Semantic roles (``header``, ``emphasis``, ``warning``, ``error``,
    ``success``, ``muted``) that are left unset are derived from the ANSI
    palette, e.g. ``error`` uses ``ansi_1``.
    """

    name: str
    ansi_0: RGB | None = None
    ansi_1: RGB | None = None
    ansi_2: RGB | None = None
    ansi_3: RGB | None = None
    ansi_4: RGB | None = None
    ansi_5: RGB | None = None
    ansi_6: RGB | None = None
    ansi_7: RGB | None = None
    ansi_8: RGB | None = None
    ansi_9: RGB | None = None
    ansi_10: RGB | None = None
    ansi_11: RGB | None = None
    ansi_12: RGB | None = None
    ansi_13: RGB | None = None
    ansi_14: RGB | None = None
    ansi_15: RGB | None = None
    background: RGB | None = None
    foreground: RGB | None = None
    header: RGB | None = None
    emphasis: RGB | None = None
    warning: RGB | None = None
    error: RGB | None = None
    success: RGB | None = None
    muted: RGB | None = None
    extra: Mapping[str, RGB] = field(default_factory=dict)

    def color(self, name: str) -> RGB | None:
        """Return the color for role *name*, or ``None`` if the theme lacks it."""
        value = getattr(self, name) if name in _ROLE_FIELDS else None
        if value is None and name in SEMANTIC_DEFAULTS:
            value = getattr(self, SEMANTIC_DEFAULTS[name])
        if value is None:
            value = self.extra.get(name)
        return value

    @classmethod
    def from_mapping(cls, name: str, mapping: Mapping[str, Any]) -> Theme:
        """Build a theme from a plain ``{role: color}`` mapping.

        Colors may be ``(r, g, b)`` sequences or hex strings. Unknown role
        names are kept as extra roles.
        """
        kwargs: dict[str, Any] = {}
        extra: dict[str, RGB] = {}
        for role, value in mapping.items():
            rgb = _to_rgb(value)
            if rgb is None:
                continue
            if role in _ROLE_FIELDS:
                kwargs[role] = rgb
            else:
                extra[role] = rgb
        return cls(name=name, extra=extra, **kwargs)


_ROLE_FIELDS = frozenset(f.name for f in fields(Theme)) - {"name", "extra"}

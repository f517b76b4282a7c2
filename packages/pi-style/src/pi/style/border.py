"""Border glyph sets for boxed blocks."""

from __future__ import annotations

from dataclasses import dataclass, fields

from pi.style.utils import visible_width


@dataclass(frozen=True)
class Border:
    """The eight glyphs drawn around a block. Every glyph is one cell wide."""

    top: str
    bottom: str
    left: str
    right: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str

    def __post_init__(self) -> None:
        for f in fields(self):
            glyph = getattr(self, f.name)
            if not isinstance(glyph, str) or visible_width(glyph) != 1:
                raise ValueError(
                    f"Border glyph {f.name!r} must be a single-cell string, got {glyph!r}"
                )

    @classmethod
    def custom(cls, **glyphs: str) -> Border:
        """Build a border from keyword glyphs; missing ones come from ``normal``."""
        unknown = set(glyphs) - {f.name for f in fields(cls)}
        if unknown:
            raise ValueError(f"Unknown border glyph(s): {', '.join(sorted(unknown))}")
        base = BORDERS["normal"]
        return cls(**{f.name: glyphs.get(f.name, getattr(base, f.name)) for f in fields(cls)})


BORDERS: dict[str, Border] = {
    "normal": Border("─", "─", "│", "│", "┌", "┐", "└", "┘"),
    "rounded": Border("─", "─", "│", "│", "╭", "╮", "╰", "╯"),
    "thick": Border("━", "━", "┃", "┃", "┏", "┓", "┗", "┛"),
    "double": Border("═", "═", "║", "║", "╔", "╗", "╚", "╝"),
    "hidden": Border(" ", " ", " ", " ", " ", " ", " ", " "),
    "ascii": Border("-", "-", "|", "|", "+", "+", "+", "+"),
    "markdown": Border("-", "-", "|", "|", "|", "|", "|", "|"),
}

BORDER_STYLES: tuple[str, ...] = ("none", *BORDERS)


def get_border(kind: str | Border | None) -> Border | None:
    """Resolve a border kind name (or a :class:`Border`) to its glyph set.

    ``None`` and ``"none"`` mean no border. Unknown names raise ``ValueError``.
    """
    if kind is None or isinstance(kind, Border):
        return kind
    if not isinstance(kind, str):
        raise ValueError(f"Invalid border kind: {kind!r}")
    if kind == "none":
        return None
    try:
        return BORDERS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown border kind {kind!r}; expected one of {', '.join(BORDER_STYLES)}"
        ) from None

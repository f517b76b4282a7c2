"""Process-wide styling configuration.

Holds the active theme, the ``no_color``/``force_color`` overrides, an
optional ambient wrap width and the cached terminal probe. The state is a
single frozen :class:`Settings` value swapped under a lock: readers always
see a consistent snapshot, and concurrent writers follow last-write-wins.

Settings are read lazily from the environment on first use:

* ``NO_COLOR`` (any non-empty value) disables color
* ``FORCE_COLOR`` / ``CLICOLOR_FORCE`` (anything but ``0``/``false``) forces it
* ``COLORTERM`` / ``TERM`` select the color depth
* ``COLORFGBG`` selects light or dark background
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Mapping, TextIO

from pi.style.color import (
    RGB,
    ColorProfile,
    detect_color_depth,
    has_dark_background,
    resolve_profile,
)
from pi.style.theme import Theme

if TYPE_CHECKING:
    from pi.style.style import Style

logger = logging.getLogger(__name__)

_FALSY = ("", "0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    """Snapshot of the process-wide styling configuration."""

    theme: Theme | None = None
    no_color: bool = False
    force_color: bool | None = None
    terminal_width: int | None = None
    is_tty: bool = False
    detected_profile: ColorProfile | None = None
    dark_background: bool = True

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        stream: TextIO | None = None,
    ) -> Settings:
        env = os.environ if environ is None else environ
        out = sys.stdout if stream is None else stream

        force_value = env.get("FORCE_COLOR", env.get("CLICOLOR_FORCE"))
        force_color = None
        if force_value is not None:
            force_color = force_value.strip().lower() not in _FALSY

        try:
            is_tty = bool(out.isatty())
        except (AttributeError, ValueError):
            is_tty = False

        settings = cls(
            no_color=bool(env.get("NO_COLOR")),
            force_color=force_color,
            is_tty=is_tty,
            detected_profile=detect_color_depth(env),
            dark_background=has_dark_background(env),
        )
        logger.debug(
            "Detected terminal: tty=%s profile=%s dark=%s",
            settings.is_tty,
            settings.detected_profile,
            settings.dark_background,
        )
        return settings


class _SettingsHolder:
    """A lock-guarded reference to the current :class:`Settings`."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._settings: Settings | None = None

    def get(self) -> Settings:
        settings = self._settings
        if settings is not None:
            return settings
        with self._lock:
            if self._settings is None:
                self._settings = Settings.from_env()
            return self._settings

    def set(self, settings: Settings) -> None:
        with self._lock:
            self._settings = settings

    def update(self, **changes: Any) -> Settings:
        with self._lock:
            current = self._settings if self._settings is not None else Settings.from_env()
            self._settings = replace(current, **changes)
            return self._settings

    def reset(self) -> None:
        with self._lock:
            self._settings = None


_holder = _SettingsHolder()


def get_settings() -> Settings:
    return _holder.get()


def set_settings(settings: Settings) -> None:
    _holder.set(settings)


def update_settings(**changes: Any) -> Settings:
    """Replace selected fields of the current settings; returns the new value."""
    return _holder.update(**changes)


def reset_settings() -> None:
    """Drop all overrides; the environment is probed again on next access."""
    _holder.reset()


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


def set_theme(theme: Theme | Mapping[str, Any], name: str = "custom") -> Theme:
    """Install *theme* process-wide. A plain mapping is converted first."""
    if isinstance(theme, Mapping):
        theme = Theme.from_mapping(name, theme)
    elif not isinstance(theme, Theme):
        raise TypeError(f"Expected a Theme or mapping, got {type(theme).__name__}")
    update_settings(theme=theme)
    logger.debug("Theme set to %s", theme.name)
    return theme


def get_theme() -> Theme | None:
    return get_settings().theme


def clear_theme() -> None:
    update_settings(theme=None)


def theme_color(name: str) -> RGB | None:
    """Look up role *name* in the active theme; ``None`` without a theme."""
    theme = get_theme()
    if theme is None:
        return None
    return theme.color(name)


# ---------------------------------------------------------------------------
# Color overrides and profile
# ---------------------------------------------------------------------------


def set_no_color(enabled: bool) -> None:
    update_settings(no_color=enabled)


def set_force_color(enabled: bool | None) -> None:
    update_settings(force_color=enabled)


def set_terminal_width(width: int | None) -> None:
    """Set the ambient width that rendered blocks wrap to (``None`` disables)."""
    if width is not None and (
        isinstance(width, bool) or not isinstance(width, int) or width < 0
    ):
        raise ValueError(f"terminal width must be a non-negative int, got {width!r}")
    update_settings(terminal_width=width)


def color_profile(style: Style | None = None) -> ColorProfile:
    """Resolve the color profile for one render.

    A style's own ``no_color``/``force_color`` take precedence over the
    process-wide flags.
    """
    settings = get_settings()
    no_color = settings.no_color
    force_color = settings.force_color
    if style is not None:
        if style.color_forced is not None:
            force_color = style.color_forced
            no_color = not force_color
        if style.color_disabled:
            no_color = True
    return resolve_profile(force_color, no_color, settings.is_tty, settings.detected_profile)

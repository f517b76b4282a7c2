"""pi-style: Declarative terminal styling, box layout and block composition."""

# Borders
from pi.style.border import BORDER_STYLES, BORDERS, Border, get_border

# Colors
from pi.style.color import (
    ANSI_COLORS,
    AdaptiveColor,
    ColorProfile,
    ColorSpec,
    CompleteColor,
    ThemeColor,
    color_code,
    detect_color_depth,
    has_dark_background,
    resolve_profile,
)

# Process-wide configuration
from pi.style.config import (
    Settings,
    clear_theme,
    color_profile,
    get_settings,
    get_theme,
    reset_settings,
    set_force_color,
    set_no_color,
    set_settings,
    set_terminal_width,
    set_theme,
    theme_color,
    update_settings,
)

# Composition
from pi.style.layout import (
    join_horizontal,
    join_vertical,
    place,
    place_horizontal,
    place_vertical,
)

# Rendering
from pi.style.render import render

# Styles
from pi.style.style import Style, style

# Themes
from pi.style.theme import Theme

# Utilities
from pi.style.utils import (
    get_height,
    get_width,
    strip_ansi,
    truncate_to_width,
    visible_width,
    wrap_text_with_ansi,
)

__all__ = [
    # Borders
    "BORDER_STYLES",
    "BORDERS",
    "Border",
    "get_border",
    # Colors
    "ANSI_COLORS",
    "AdaptiveColor",
    "ColorProfile",
    "ColorSpec",
    "CompleteColor",
    "ThemeColor",
    "color_code",
    "detect_color_depth",
    "has_dark_background",
    "resolve_profile",
    # Configuration
    "Settings",
    "clear_theme",
    "color_profile",
    "get_settings",
    "get_theme",
    "reset_settings",
    "set_force_color",
    "set_no_color",
    "set_settings",
    "set_terminal_width",
    "set_theme",
    "theme_color",
    "update_settings",
    # Composition
    "join_horizontal",
    "join_vertical",
    "place",
    "place_horizontal",
    "place_vertical",
    # Rendering
    "render",
    # Styles
    "Style",
    "style",
    # Themes
    "Theme",
    # Utilities
    "get_height",
    "get_width",
    "strip_ansi",
    "truncate_to_width",
    "visible_width",
    "wrap_text_with_ansi",
]

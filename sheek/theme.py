"""Theme definitions for sheek.

Custom themes can be defined in ~/.config/sheek/config.yaml:

    themes:
      gold:
        primary: "#ffd700"
        accent: "#04b575"
        background: "#1a1a1a"

    theme: gold  # Set as active theme
"""

from textual.theme import Theme

from sheek.config import CONFIG

# Default sheek theme - purple primary, green accent, gold match highlight
SHEEK_THEME = Theme(
    name="sheek",
    primary="#7d56f4",
    secondary="#04b575",
    accent="#ffd700",  # Matched characters
    foreground="#ffffff",
    background="#1a1a1a",
    surface="#3a3a5c",  # Selected row
    panel="#626262",  # Muted text and borders
    success="#04b575",
    warning="#aaaa00",
    error="#cc3333",
    dark=True,
)

# Fields that custom themes can override
_THEME_FIELDS = (
    "primary",
    "secondary",
    "warning",
    "error",
    "success",
    "accent",
    "foreground",
    "background",
    "surface",
    "panel",
    "boost",
    "dark",
)
_SHEEK_DEFAULTS = {f: getattr(SHEEK_THEME, f) for f in _THEME_FIELDS}


def load_custom_themes() -> list[Theme]:
    """Load custom themes from the config file.

    Missing values inherit from SHEEK_THEME.
    """
    custom_themes = []
    for name, colors in CONFIG.get("themes", {}).items():
        if not isinstance(colors, dict):
            continue
        custom_themes.append(Theme(name=name, **{**_SHEEK_DEFAULTS, **colors}))
    return custom_themes

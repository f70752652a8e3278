"""Resolve a FormatConfig into concrete display colors."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import FormatConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Palette:
    background: str
    foreground: str
    border: str
    accent: str
    muted: str
    highlight: str


# Base colors per theme; the accent always comes from the config
_THEME_COLORS = {
    "light": {
        "background": "#ffffff",
        "foreground": "#1f2937",
        "border": "#e5e7eb",
        "muted": "#6b7280",
        "highlight": "#f3f4f6",
    },
    "dark": {
        "background": "#111827",
        "foreground": "#f9fafb",
        "border": "#374151",
        "muted": "#9ca3af",
        "highlight": "#1f2937",
    },
}


def resolve_palette(config: FormatConfig) -> Palette:
    """Return the palette for config.theme, falling back to light for unknown themes."""
    colors = _THEME_COLORS.get(config.theme)
    if colors is None:
        logger.debug("[theme] Unknown theme %r, using light palette", config.theme)
        colors = _THEME_COLORS["light"]
    return Palette(accent=config.accent_color, **colors)


__all__ = ["Palette", "resolve_palette"]

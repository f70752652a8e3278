"""Configuration constants for the chat response formatter.

This module centralizes all tunable parameters. To modify behavior:
- Edit values in this file directly
- Override via environment variables where supported (CHAT_FORMAT_* prefix)
- Pass an options mapping to format_message() for per-call overrides

Common reasons to modify:
- Theme defaults: Switch the default palette or accent color
- Font class: Match the host page's typography utility classes
- Detection keywords: Widen or narrow what counts as a product listing
"""
from __future__ import annotations

# =============================================================================
# Display Defaults
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")

DEFAULT_THEME = os.environ.get("CHAT_FORMAT_THEME", "light").strip().lower()
DEFAULT_ACCENT_COLOR = os.environ.get("CHAT_FORMAT_ACCENT_COLOR", "#2563eb")
DEFAULT_FONT_CLASS = os.environ.get("CHAT_FORMAT_FONT_CLASS", "font-sans")

# Animations are on unless explicitly disabled (e.g. CHAT_FORMAT_ANIMATIONS=false)
_FALSE_STRINGS = ("false", "0", "no", "off")
DEFAULT_ENABLE_ANIMATIONS = os.environ.get("CHAT_FORMAT_ANIMATIONS", "true").strip().lower() not in _FALSE_STRINGS


# =============================================================================
# Content Detection
# =============================================================================

# Words that mark a numbered list as a product listing (matched case-insensitively)
PRODUCT_KEYWORDS = ("available", "color", "options", "finish", "size", "material", "dimensions")

# Bold spans at most this long and at least half digits are treated as product codes
PRODUCT_CODE_MAX_CHARS = 12


# =============================================================================
# Markup Classes
# =============================================================================

CONTAINER_CLASS = "chat-response"
LIST_CONTAINER_CLASS = "list-container"
ANIMATION_CLASS = "animate-fade-in"


# =============================================================================
# Per-call Configuration
# =============================================================================

# Option names accepted from callers, mapped to FormatConfig fields
OPTION_ALIASES = {
    "theme": "theme",
    "accentColor": "accent_color",
    "accent_color": "accent_color",
    "fontClass": "font_class",
    "font_class": "font_class",
    "enableAnimations": "enable_animations",
    "enable_animations": "enable_animations",
}


@dataclass(frozen=True)
class FormatConfig:
    theme: str = DEFAULT_THEME
    accent_color: str = DEFAULT_ACCENT_COLOR
    font_class: str = DEFAULT_FONT_CLASS
    enable_animations: bool = DEFAULT_ENABLE_ANIMATIONS


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def resolve_config(options: Optional[Mapping[str, Any] | FormatConfig] = None) -> FormatConfig:
    """Merge caller options over the defaults.

    The merge is shallow: keys that are missing or None keep their default.
    Unrecognized keys are ignored.
    """
    if options is None:
        return FormatConfig()
    if isinstance(options, FormatConfig):
        return options
    if not isinstance(options, Mapping):
        logger.debug("[config] Ignoring non-mapping options: %r", type(options).__name__)
        return FormatConfig()

    overrides: dict[str, Any] = {}
    for key, value in options.items():
        field_name = OPTION_ALIASES.get(key)
        if field_name is None:
            logger.debug("[config] Ignoring unknown option %r", key)
            continue
        if value is None:
            continue
        overrides[field_name] = value

    if "theme" in overrides:
        overrides["theme"] = str(overrides["theme"]).strip().lower()
    for name in ("accent_color", "font_class"):
        if name in overrides:
            overrides[name] = str(overrides[name]).strip()
            if not overrides[name]:
                del overrides[name]
    if "enable_animations" in overrides:
        overrides["enable_animations"] = _coerce_bool(overrides["enable_animations"])

    return FormatConfig(**overrides)


__all__ = ["FormatConfig", "resolve_config", "THEMES", "PRODUCT_KEYWORDS"]

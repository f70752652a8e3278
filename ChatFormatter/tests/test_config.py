from __future__ import annotations

from ChatFormatter.config import FormatConfig, resolve_config
from ChatFormatter.theme import resolve_palette


def test_resolve_config_defaults():
    assert resolve_config(None) == FormatConfig()
    assert resolve_config({}) == FormatConfig()


def test_resolve_config_partial_merge_keeps_siblings():
    defaults = FormatConfig()
    config = resolve_config({"accentColor": "#ff0000"})
    assert config.accent_color == "#ff0000"
    assert config.theme == defaults.theme
    assert config.font_class == defaults.font_class
    assert config.enable_animations == defaults.enable_animations


def test_resolve_config_ignores_unknown_and_none():
    config = resolve_config({"theme": "DARK ", "colour": "red", "fontClass": None})
    assert config.theme == "dark"
    assert config.font_class == FormatConfig().font_class


def test_resolve_config_accepts_snake_case_and_bool_strings():
    config = resolve_config({"font_class": "font-serif", "enableAnimations": "false"})
    assert config.font_class == "font-serif"
    assert config.enable_animations is False


def test_resolve_config_passes_through_format_config():
    config = FormatConfig(theme="dark")
    assert resolve_config(config) is config


def test_resolve_config_non_mapping_uses_defaults():
    assert resolve_config("dark") == FormatConfig()  # type: ignore[arg-type]


def test_palette_accent_follows_config_in_both_themes():
    light = resolve_palette(FormatConfig(theme="light", accent_color="#123456"))
    dark = resolve_palette(FormatConfig(theme="dark", accent_color="#123456"))
    assert light.accent == dark.accent == "#123456"
    assert light.background != dark.background


def test_palette_unknown_theme_falls_back_to_light():
    light = resolve_palette(FormatConfig(theme="light", accent_color="red"))
    sepia = resolve_palette(FormatConfig(theme="sepia", accent_color="red"))
    assert sepia == light

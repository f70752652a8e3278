"""Format raw chat responses into themed HTML fragments.

format_message() is the single entry point: clean, classify, segment, render
each item, assemble and wrap in the themed container.
"""
from __future__ import annotations

import html
import logging
from typing import Any, Callable, Dict, Mapping, Optional

from bs4 import BeautifulSoup

from .config import ANIMATION_CLASS, CONTAINER_CLASS, LIST_CONTAINER_CLASS, FormatConfig, resolve_config
from .content_detector import ContentProfile, ContentShape, detect_content
from .item_renderers import render_bullet_blocks, render_generic_item, render_product_item
from .segmenters import (
    Segmentation,
    convert_markdown,
    format_plain_text,
    segment_bullet_blocks,
    segment_numbered_list,
)
from .text_cleanup import clean_response_text, validate_response_text
from .theme import Palette, resolve_palette

logger = logging.getLogger(__name__)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _render_text_block(text: str, css: str) -> str:
    return f'<p class="{css}">' + "<br>".join(line.strip() for line in text.split("\n")) + "</p>"


def assemble_numbered_list(segmentation: Segmentation, items_html: str) -> str:
    intro = _render_text_block(segmentation.intro, "mb-3") if segmentation.intro else ""
    conclusion = _render_text_block(segmentation.conclusion, "mt-3") if segmentation.conclusion else ""
    return f'{intro}<div class="{LIST_CONTAINER_CLASS}">{items_html}</div>{conclusion}'


def _render_numbered_list(text: str, profile: ContentProfile, palette: Palette) -> str:
    segmentation = segment_numbered_list(text)
    if segmentation is None:
        logger.debug("[render] Numbered list not segmentable, using plain text")
        return format_plain_text(text)

    render_item = render_product_item if profile.product_like else render_generic_item
    items_html = "".join(render_item(item, palette) for item in segmentation.items)
    return assemble_numbered_list(segmentation, items_html)


def _render_bullet_list(text: str, profile: ContentProfile, palette: Palette) -> str:
    return render_bullet_blocks(segment_bullet_blocks(text))


def _render_headings(text: str, profile: ContentProfile, palette: Palette) -> str:
    return convert_markdown(text, palette)


def _render_plain_text(text: str, profile: ContentProfile, palette: Palette) -> str:
    return format_plain_text(text)


SHAPE_RENDERERS: Dict[ContentShape, Callable[[str, ContentProfile, Palette], str]] = {
    ContentShape.NUMBERED_LIST: _render_numbered_list,
    ContentShape.BULLET_LIST: _render_bullet_list,
    ContentShape.HEADING: _render_headings,
    ContentShape.PLAIN_TEXT: _render_plain_text,
}


def render_container(body: str, config: FormatConfig, palette: Palette) -> str:
    """Wrap rendered fragments in the outer themed container."""
    classes = [CONTAINER_CLASS, config.font_class]
    if config.enable_animations:
        classes.append(ANIMATION_CLASS)
    style = (
        f"background-color: {palette.background}; "
        f"color: {palette.foreground}; "
        f"border: 1px solid {palette.border}; "
        f"--chat-accent: {palette.accent}"
    )
    return f'<div class="{_attr(" ".join(c for c in classes if c))}" style="{_attr(style)}">{body}</div>'


def format_message(raw_text: Any, options: Optional[Mapping[str, Any] | FormatConfig] = None) -> str:
    """Turn a raw chat API response into an HTML fragment.

    Empty or missing input returns "". Embedded markup in the text is not
    escaped; sanitizing is the caller's job. Never raises.
    """
    if raw_text is None:
        return ""
    text = clean_response_text(raw_text if isinstance(raw_text, str) else str(raw_text))
    if not text.strip():
        return ""

    for warning in validate_response_text(text):
        logger.debug("[validate] %s", warning)

    config = resolve_config(options)
    palette = resolve_palette(config)

    try:
        profile = detect_content(text)
        body = SHAPE_RENDERERS[profile.shape](text, profile, palette)
    except Exception:
        logger.exception("[render] Formatting failed, falling back to plain text")
        body = format_plain_text(text)

    if not body:
        return ""
    return render_container(body, config, palette)


# =============================================================================
# Plaintext and standalone page
# =============================================================================

_TEXT_BLOCK_TAGS = ("h1", "h2", "h3", "h4", "p", "li")


def _is_text_block(tag) -> bool:
    if tag.name in _TEXT_BLOCK_TAGS:
        return True
    return tag.name == "div" and "feature-row" in (tag.get("class") or [])


def render_message_text(markup: str) -> str:
    """Flatten formatted markup back into readable plaintext, one block per line."""
    if not markup:
        return ""

    soup = BeautifulSoup(markup, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")

    lines = []
    for element in soup.find_all(_is_text_block):
        if element.find(_is_text_block):
            continue
        parts = [" ".join(part.split()) for part in element.get_text().split("\n")]
        parts = [part for part in parts if part]
        if not parts:
            continue
        if element.name == "li":
            parts[0] = f"- {parts[0]}"
        lines.extend(parts)

    return "\n".join(lines).strip() + "\n" if lines else ""


_PREVIEW_STYLES = (
    "    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; margin: 2rem; }\n"
    "    .chat-response { max-width: 40rem; padding: 0.75rem 1rem; border-radius: 1rem; line-height: 1.5; }\n"
    "    .chat-response h4 { margin: 0 0 0.25rem; font-size: 1rem; }\n"
    "    .list-disc { list-style: disc; }\n"
    "    .pl-3 { padding-left: 0.75rem; }\n"
    "    .pl-4 { padding-left: 1rem; }\n"
    "    .pl-5 { padding-left: 1.25rem; }\n"
    "    .mb-2 { margin-bottom: 0.5rem; }\n"
    "    .mb-3 { margin-bottom: 0.75rem; }\n"
    "    .mb-4 { margin-bottom: 1rem; }\n"
    "    .mt-1 { margin-top: 0.25rem; }\n"
    "    .mt-3 { margin-top: 0.75rem; }\n"
    "    .product-item { padding: 0.75rem; border-radius: 0.5rem; }\n"
    "    .feature-row { display: flex; flex-wrap: wrap; padding: 0.25rem 0; }\n"
    "    .feature-key { font-weight: 500; min-width: 150px; margin-right: 0.5rem; }\n"
    "    .animate-fade-in { animation: fade-in 0.3s ease-in; }\n"
    "    @keyframes fade-in { from { opacity: 0; } to { opacity: 1; } }\n"
)


def render_preview_page(markup: str, config: Optional[FormatConfig] = None, *, title: str = "Chat response preview") -> str:
    """Embed a formatted fragment in a complete HTML document for viewing in a browser."""
    palette = resolve_palette(config or FormatConfig())
    return (
        "<!DOCTYPE html>\n"
        "<html lang=\"en\">\n"
        "<head>\n"
        "  <meta charset=\"utf-8\" />\n"
        f"  <title>{html.escape(title)}</title>\n"
        "  <style>\n"
        f"{_PREVIEW_STYLES}"
        f"    body {{ background: {palette.highlight}; color: {palette.foreground}; }}\n"
        "  </style>\n"
        "</head>\n"
        "<body>\n"
        f"{markup}\n"
        "</body>\n"
        "</html>\n"
    )


__all__ = [
    "format_message",
    "render_container",
    "render_message_text",
    "render_preview_page",
    "SHAPE_RENDERERS",
]

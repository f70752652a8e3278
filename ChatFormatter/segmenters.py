"""Split cleaned responses into intro, items and conclusion.

Numbered lists are segmented by an ordered list of strategies, each of which
either returns a Segmentation or None so the next one can try:

1. bold numbers on their own line (``**1.**`` then the body on the next line)
2. simple numbering with no bold markers anywhere in the text
3. a general scan for every ``N.`` marker, bold-wrapped or not

Bullet lists, markdown headings and plain prose have their own single-pass
segmenters further down.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .theme import Palette

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListItem:
    label: str
    raw_content: str


@dataclass(frozen=True)
class Segmentation:
    intro: str
    items: Tuple[ListItem, ...]
    conclusion: str
    strategy: str = ""


@dataclass(frozen=True)
class _Marker:
    start: int
    end: int
    label: str
    # Bold opener that belongs to the item's content, e.g. "**" from "**1. Name**"
    prefix: str = ""


BULLET_LINE = re.compile(r"^\s*(?:•|[*-](?=\s|$))\s*(?P<text>.*)$")

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")

_BOLD_NUMBER_MARKER = re.compile(r"\*\*(\d+)\.\*\*[ \t]*\n\s*(?=[^\d*\s])")
_BOLD_NUMBER_ANY = re.compile(r"\*\*\d+\.\*\*")
_SIMPLE_MARKER = re.compile(r"^[ \t]*(\d+)\.[ \t]+(?=[^\d\s])", re.MULTILINE)
_GENERAL_MARKER = re.compile(r"(?<!\S)(\*\*)?(\d+)\.(\*\*)?\s+")


def split_paragraphs(text: str) -> List[str]:
    return [part.strip() for part in _PARAGRAPH_BREAK.split(text) if part.strip()]


def _final_item_end(text: str, start: int) -> int:
    """The last item stops at the first blank line after its body; the rest is conclusion."""
    while start < len(text) and text[start].isspace():
        start += 1

    match = _PARAGRAPH_BREAK.search(text, start)
    return match.start() if match else len(text)


def _segment_at_markers(text: str, markers: Sequence[_Marker], strategy: str) -> Optional[Segmentation]:
    if not markers:
        return None

    intro = text[:markers[0].start].strip()
    items: List[ListItem] = []
    for marker, following in zip(markers, markers[1:]):
        content = marker.prefix + text[marker.end:following.start]
        items.append(ListItem(marker.label, content.strip()))

    last = markers[-1]
    boundary = _final_item_end(text, last.end)
    items.append(ListItem(last.label, (last.prefix + text[last.end:boundary]).strip()))
    conclusion = text[boundary:].lstrip("\n").strip()

    return Segmentation(intro=intro, items=tuple(items), conclusion=conclusion, strategy=strategy)


def segment_bold_number_items(text: str) -> Optional[Segmentation]:
    """Items marked ``**N.**`` with the body starting on the following line."""
    markers = [
        _Marker(match.start(), match.end(), match.group(1))
        for match in _BOLD_NUMBER_MARKER.finditer(text)
    ]
    if not markers:
        return None
    # Every bold number must use the own-line shape, otherwise items would swallow each other
    if len(markers) != len(_BOLD_NUMBER_ANY.findall(text)):
        return None
    return _segment_at_markers(text, markers, "bold_number")


def segment_simple_items(text: str) -> Optional[Segmentation]:
    """Plain ``N. text`` lines in a response with no bold markers at all."""
    if "**" in text:
        return None
    markers = [
        _Marker(match.start(), match.end(), match.group(1))
        for match in _SIMPLE_MARKER.finditer(text)
    ]
    return _segment_at_markers(text, markers, "simple")


def segment_general_items(text: str) -> Optional[Segmentation]:
    """Every ``N.`` marker in the text, with or without bold wrapping.

    Markers that open a line or carry bold wrapping are always accepted. A bare
    number mid-sentence only counts when it continues the sequence
    ("1. a 2. b"), so measurements like "80 x 35. Available" stay in the body.
    """
    markers: List[_Marker] = []
    for match in _GENERAL_MARKER.finditer(text):
        opened, label, closed = match.groups()
        line_start = text.rfind("\n", 0, match.start()) + 1
        at_line_start = not text[line_start:match.start()].strip()
        expected = str(int(markers[-1].label) + 1) if markers else "1"
        if not (at_line_start or opened or closed or label == expected):
            continue
        prefix = "**" if opened and not closed else ""
        markers.append(_Marker(match.start(), match.end(), label, prefix))
    return _segment_at_markers(text, markers, "general")


NUMBERED_STRATEGIES: Tuple[Callable[[str], Optional[Segmentation]], ...] = (
    segment_bold_number_items,
    segment_simple_items,
    segment_general_items,
)


def segment_numbered_list(text: str) -> Optional[Segmentation]:
    """Try each numbered-list strategy in order; None when none finds an item."""
    for strategy in NUMBERED_STRATEGIES:
        segmentation = strategy(text)
        if segmentation is not None and segmentation.items:
            logger.debug(
                "[segment] %s matched %d items (intro=%d chars, conclusion=%d chars)",
                segmentation.strategy,
                len(segmentation.items),
                len(segmentation.intro),
                len(segmentation.conclusion),
            )
            return segmentation
    logger.debug("[segment] No numbered-list strategy matched")
    return None


# =============================================================================
# Bullet lists
# =============================================================================


@dataclass(frozen=True)
class Block:
    kind: str  # "list" or "paragraph"
    lines: Tuple[str, ...]


def segment_bullet_blocks(text: str) -> List[Block]:
    """Group bullet lines into list blocks and everything else into paragraphs.

    A non-bullet line inside a bullet paragraph closes the current list and is
    emitted as its own paragraph; later bullets start a new list.
    """
    blocks: List[Block] = []
    for paragraph in split_paragraphs(text):
        lines = [line.strip() for line in paragraph.split("\n") if line.strip()]
        if not any(BULLET_LINE.match(line) for line in lines):
            blocks.append(Block("paragraph", tuple(lines)))
            continue

        run: List[str] = []
        for line in lines:
            match = BULLET_LINE.match(line)
            if match:
                item = match.group("text").strip()
                if item:
                    run.append(item)
                continue
            if run:
                blocks.append(Block("list", tuple(run)))
                run = []
            blocks.append(Block("paragraph", (line,)))
        if run:
            blocks.append(Block("list", tuple(run)))
    return blocks


# =============================================================================
# Markdown headings
# =============================================================================

# Longest prefix first
_HEADING_RULES = (
    (re.compile(r"^###+[ \t]+(.+?)[ \t]*$", re.MULTILINE), 3),
    (re.compile(r"^##[ \t]+(.+?)[ \t]*$", re.MULTILINE), 2),
    (re.compile(r"^#[ \t]+(.+?)[ \t]*$", re.MULTILINE), 1),
)
_HEADING_CLASSES = {
    1: "text-xl font-bold mb-3",
    2: "text-lg font-bold mb-2",
    3: "text-base font-semibold mb-2",
}
BOLD_SPAN = re.compile(r"\*\*(.+?)\*\*")
_EMPHASIS_SPAN = re.compile(r"(?<![*\w])\*(?![\s*])(.+?)(?<![\s*])\*(?![*\w])")
_INLINE_CODE = re.compile(r"`([^`\n]+)`")
_BLOCK_TAG = re.compile(r"^<(?:h[1-6]|ul|ol)\b")


def _wrap_paragraph(lines: Sequence[str]) -> str:
    return '<p class="mb-2">' + "<br>".join(lines) + "</p>"


def convert_markdown(text: str, palette: Palette) -> str:
    """Convert headings, bold, emphasis and inline code, then wrap paragraphs.

    Substitutions run in a fixed order so later ones never touch markup
    produced by earlier ones.
    """
    for pattern, level in _HEADING_RULES:
        css = _HEADING_CLASSES[level]
        text = pattern.sub(lambda m, lv=level, c=css: f'<h{lv} class="{c}">{m.group(1)}</h{lv}>', text)

    text = BOLD_SPAN.sub(r"<strong>\1</strong>", text)
    text = _EMPHASIS_SPAN.sub(r"<em>\1</em>", text)
    text = _INLINE_CODE.sub(
        lambda m: (
            f'<code class="px-1 rounded" style="background-color: {palette.highlight}">'
            f"{m.group(1)}</code>"
        ),
        text,
    )

    fragments: List[str] = []
    for paragraph in split_paragraphs(text):
        pending: List[str] = []
        for line in (line.strip() for line in paragraph.split("\n")):
            if not line:
                continue
            if _BLOCK_TAG.match(line):
                if pending:
                    fragments.append(_wrap_paragraph(pending))
                    pending = []
                fragments.append(line)
            else:
                pending.append(line)
        if pending:
            fragments.append(_wrap_paragraph(pending))
    return "".join(fragments)


# =============================================================================
# Plain text
# =============================================================================


def format_plain_text(text: str) -> str:
    """Wrap blank-line separated paragraphs, keeping single newlines as <br>."""
    return "".join(
        _wrap_paragraph([line.strip() for line in paragraph.split("\n")])
        for paragraph in split_paragraphs(text)
    )


__all__ = [
    "ListItem",
    "Segmentation",
    "Block",
    "NUMBERED_STRATEGIES",
    "segment_numbered_list",
    "segment_bold_number_items",
    "segment_simple_items",
    "segment_general_items",
    "segment_bullet_blocks",
    "convert_markdown",
    "format_plain_text",
    "split_paragraphs",
]

"""Render segmented list items and bullet blocks into HTML fragments.

Two item renderers exist. The product renderer mines key/value features
(sizes, colors, materials...) out of bullet lines; without bullets only the
"Available in" clause is labeled and the rest of the body is kept as written.
The generic renderer looks for nested ``**Category:**`` blocks first and
otherwise falls back to a title plus interleaved paragraphs and bullet lists.
Neither raises: anything they cannot recognize is rendered as plain body text.
"""
from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .config import PRODUCT_CODE_MAX_CHARS
from .segmenters import BOLD_SPAN, BULLET_LINE, Block, ListItem
from .theme import Palette

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Feature:
    key: str  # empty for an unlabeled description line
    value: str


def _clean_value(match: re.Match) -> str:
    return match.group(1).strip().strip("*").strip().rstrip(".").strip()


@dataclass(frozen=True)
class FeaturePattern:
    pattern: re.Pattern
    key: str
    extractor: Callable[[re.Match], str] = _clean_value


# Evaluated top to bottom, first match wins; order is precedence.
FEATURE_PATTERNS: Tuple[FeaturePattern, ...] = (
    FeaturePattern(re.compile(r"\bAvailable in\s*(.*)", re.IGNORECASE), "Available Sizes"),
    FeaturePattern(re.compile(r"\bColor options(?:\s*include)?[:\s]\s*(.*)", re.IGNORECASE), "Color Options"),
    FeaturePattern(re.compile(r"\b(?:You can )?choose between\s*(.*)", re.IGNORECASE), "Options"),
    FeaturePattern(re.compile(r"\b(?:Leg|Finish) (?:options|finish)[:\s]\s*(.*)", re.IGNORECASE), "Leg Finish"),
    FeaturePattern(re.compile(r"\bMaterial[:\s]\s*(.*)", re.IGNORECASE), "Material"),
    FeaturePattern(re.compile(r"\bComes with\s*(.*)", re.IGNORECASE), "Includes"),
    FeaturePattern(re.compile(r"\b(?:(?:is|are) )?made of\s*(.*)", re.IGNORECASE), "Material"),
    FeaturePattern(re.compile(r"\bSize[:\s]\s*(.*)", re.IGNORECASE), "Size"),
    FeaturePattern(re.compile(r"\bDimensions[:\s]\s*(.*)", re.IGNORECASE), "Dimensions"),
    FeaturePattern(re.compile(r"\bFeatures?[:\s]\s*(.*)", re.IGNORECASE), "Features"),
    FeaturePattern(re.compile(r"\bSpecial Features?[:\s]\s*(.*)", re.IGNORECASE), "Special Features"),
)

AVAILABILITY_PATTERN = FEATURE_PATTERNS[0]

_KEY_VALUE_LINE = re.compile(r"^(?P<key>[^:]{1,40}):\s*(?P<value>.+)$")


def _match_feature_pattern(line: str) -> Optional[Tuple[FeaturePattern, re.Match]]:
    for feature_pattern in FEATURE_PATTERNS:
        match = feature_pattern.pattern.search(line)
        if match:
            return feature_pattern, match
    return None


def extract_feature(line: str) -> List[Feature]:
    """Turn one body line into features.

    A labeled pattern yields its key; any text preceding the labeled clause on
    the same line is kept as a description. Otherwise ``key: value`` lines become a
    generic pair and everything else an unlabeled description.
    """
    line = line.strip()
    if not line:
        return []

    matched = _match_feature_pattern(line)
    if matched:
        feature_pattern, match = matched
        features = []
        lead = line[:match.start()].strip(" *")
        if lead:
            features.append(Feature("", lead))
        features.append(Feature(feature_pattern.key, feature_pattern.extractor(match)))
        return features

    pair = _KEY_VALUE_LINE.match(line)
    if pair and not pair.group("value").startswith("//"):
        key = pair.group("key").strip("* ").strip()
        value = pair.group("value").strip("* ").strip()
        if key and value:
            return [Feature(key, value)]
    return [Feature("", line)]


def extract_availability(line: str) -> List[Feature]:
    """Label only the "Available in" clause of a line; everything else stays a description."""
    line = line.strip()
    if not line:
        return []

    match = AVAILABILITY_PATTERN.pattern.search(line)
    if not match:
        return [Feature("", line)]
    lead = line[:match.start()].strip(" *")
    features = [Feature("", lead)] if lead else []
    features.append(Feature(AVAILABILITY_PATTERN.key, AVAILABILITY_PATTERN.extractor(match)))
    return features


# =============================================================================
# Body line grouping
# =============================================================================


class ScanState(Enum):
    OUTSIDE_LIST = "outside_list"
    INSIDE_LIST = "inside_list"


@dataclass
class BodyBlock:
    kind: str  # "text" or "bullets"
    lines: List[str] = field(default_factory=list)


def group_body_lines(lines: Iterable[str]) -> List[BodyBlock]:
    """Group body lines into text lines and bullet runs.

    While inside a bullet run, a plain line continues the last bullet.
    A blank line ends the run.
    """
    blocks: List[BodyBlock] = []
    state = ScanState.OUTSIDE_LIST

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            state = ScanState.OUTSIDE_LIST
            continue

        bullet = BULLET_LINE.match(line)
        if bullet:
            text = bullet.group("text").strip()
            if not text:
                continue
            if state is ScanState.OUTSIDE_LIST:
                blocks.append(BodyBlock("bullets"))
                state = ScanState.INSIDE_LIST
            blocks[-1].lines.append(text)
        elif state is ScanState.INSIDE_LIST:
            blocks[-1].lines[-1] = f"{blocks[-1].lines[-1]} {line}"
        else:
            blocks.append(BodyBlock("text", [line]))

    return blocks


# =============================================================================
# Titles
# =============================================================================

_NUMBERED_BOLD_TITLE = re.compile(r"\*\*(?P<inner>\s*\d+\.\s*(?P<title>[^*\n]+?)\s*)\*\*")
_LEADING_BOLD_SPAN = re.compile(r"^\s*(?:(?:and|&|,|/|-(?=\s))\s*)?\*\*(.+?)\*\*")
_LINE_SEPARATOR = re.compile(r"^\s*[:\-–—]*\s*")
_ORPHAN_COLON = re.compile(r"^\s*:\s*")
_TITLE_BREAK = re.compile(r"(?<=[.!?])\s+|:\s+|\s+[-–—]\s+")


def is_product_code(span: str) -> bool:
    """Short bold spans that are mostly digits (SKUs, model numbers)."""
    compact = re.sub(r"\s", "", span)
    if not compact or len(compact) > PRODUCT_CODE_MAX_CHARS:
        return False
    digits = sum(ch.isdigit() for ch in compact)
    return digits * 2 >= len(compact)


def _tidy_title(text: str) -> str:
    return text.strip().rstrip(":").strip()


def _strip_consumed_spans(content: str, consumed: Sequence[str]) -> str:
    """Remove title spans that open a line; unwrap the ones that sit mid-sentence."""
    kept_lines = []
    for line in content.split("\n"):
        removed = False
        while True:
            leading = _LEADING_BOLD_SPAN.match(line)
            if not leading or leading.group(1) not in consumed:
                break
            line = line[leading.end():]
            removed = True
        if removed:
            line = _LINE_SEPARATOR.sub("", line, count=1)
        line = BOLD_SPAN.sub(lambda m: m.group(1) if m.group(1) in consumed else m.group(0), line)
        kept_lines.append(line)
    return _ORPHAN_COLON.sub("", "\n".join(kept_lines).strip(), count=1)


def extract_bold_title(content: str) -> Tuple[str, str]:
    """Return (title, body) from the bold spans of an item.

    A ``**N. Name**`` heading wins. Otherwise every bold span that is not a
    product code is joined with "and". The title is empty when no usable bold
    span exists, in which case the body is the untouched content.
    """
    numbered = _NUMBERED_BOLD_TITLE.search(content)
    if numbered:
        title = _tidy_title(numbered.group("title"))
        return title, _strip_consumed_spans(content, [numbered.group("inner")])

    spans = [span for span in BOLD_SPAN.findall(content) if not is_product_code(span)]
    # Repeated spans name the same thing once
    titles = list(dict.fromkeys(_tidy_title(span) for span in spans if _tidy_title(span)))
    if not titles:
        return "", content
    return " and ".join(titles), _strip_consumed_spans(content, spans)


def _split_first_line(content: str) -> Tuple[str, str]:
    lines = [line for line in content.split("\n") if line.strip()]
    if not lines:
        return "", ""
    return lines[0].strip(), "\n".join(lines[1:])


# =============================================================================
# Fragments
# =============================================================================


def inline_bold(text: str) -> str:
    return BOLD_SPAN.sub(r"<strong>\1</strong>", text)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _render_title(label: str, title: str, color: str) -> str:
    return f'<h4 class="item-title font-bold" style="color: {_attr(color)}">{label}. {inline_bold(title)}</h4>'


def _render_feature(feature: Feature) -> str:
    value = inline_bold(feature.value)
    if not feature.key:
        return value
    return f'<span class="feature-key font-medium">{feature.key}:</span> <span class="feature-value">{value}</span>'


def _render_feature_rows(features: Sequence[Feature], palette: Palette) -> str:
    rows = []
    for feature in features:
        if feature.key:
            rows.append(f'<div class="feature-row flex py-1 flex-wrap">{_render_feature(feature)}</div>')
        else:
            rows.append(f'<p class="feature-description" style="color: {_attr(palette.muted)}">{inline_bold(feature.value)}</p>')
    return '<div class="feature-list mt-2">' + "".join(rows) + "</div>"


def _render_list(entries: Iterable[str]) -> str:
    return '<ul class="list-disc pl-5 my-2">' + "".join(f"<li>{entry}</li>" for entry in entries) + "</ul>"


def _render_paragraph(lines: Sequence[str]) -> str:
    return '<p class="mb-2">' + "<br>".join(lines) + "</p>"


def render_product_item(item: ListItem, palette: Palette) -> str:
    """Render a product with a title and its mined features."""
    title, body = extract_bold_title(item.raw_content)
    if not title:
        title, body = _split_first_line(item.raw_content)
        if not body and title:
            parts = _TITLE_BREAK.split(title, maxsplit=1)
            title = parts[0].rstrip(".").strip()
            body = parts[1] if len(parts) > 1 else ""

    body_lines = [line.strip() for line in body.split("\n") if line.strip()]
    blocks = group_body_lines(body_lines)

    if any(block.kind == "bullets" for block in blocks):
        fragments = []
        for block in blocks:
            if block.kind == "bullets":
                fragments.append(_render_list(
                    " ".join(_render_feature(f) for f in extract_feature(line)) for line in block.lines
                ))
            else:
                fragments.append(f'<p class="mt-1" style="color: {_attr(palette.muted)}">{inline_bold(block.lines[0])}</p>')
        details = "".join(fragments)
    elif any(AVAILABILITY_PATTERN.pattern.search(line) for line in body_lines):
        features = [feature for line in body_lines for feature in extract_availability(line)]
        details = _render_feature_rows(features, palette)
    elif body_lines:
        details = f'<p class="pl-3 mt-1">{"<br>".join(inline_bold(line) for line in body_lines)}</p>'
    else:
        details = ""

    return (
        f'<div class="product-item mb-4 p-3 rounded-lg shadow-sm" style="border: 1px solid {_attr(palette.border)}">'
        f"{_render_title(item.label, title, palette.foreground)}"
        f"{details}"
        "</div>"
    )


_CATEGORY_HEADING = re.compile(r"^\s*\*\*(?P<heading>[^*\n]+?)(?::\*\*|\*\*\s*:)")
_CATEGORY_SUBITEM = re.compile(r"^\s*[-•*]\s+\*\*(?P<name>[^*\n]+?)(?::\*\*|\*\*\s*:)\s*(?P<description>.*)$")


def _render_category_item(item: ListItem, palette: Palette) -> Optional[str]:
    """Render ``**Heading:**`` followed by ``- **Sub:** text`` lines, or None."""
    heading = _CATEGORY_HEADING.match(item.raw_content)
    if not heading:
        return None

    remainder = item.raw_content[heading.end():]
    fragments: List[str] = []
    subitems: List[str] = []
    found = 0
    for line in (line.strip() for line in remainder.split("\n")):
        if not line:
            continue
        sub = _CATEGORY_SUBITEM.match(line)
        if sub:
            found += 1
            subitems.append(
                f"<strong>{sub.group('name').strip()}:</strong> {inline_bold(sub.group('description').strip())}"
            )
            continue
        if subitems:
            fragments.append(_render_list(subitems))
            subitems = []
        fragments.append(_render_paragraph([inline_bold(line)]))
    if subitems:
        fragments.append(_render_list(subitems))

    if not found:
        return None
    logger.debug("[render] Item %s rendered as category with %d sub-items", item.label, found)
    return (
        '<div class="list-item mb-4">'
        f"{_render_title(item.label, heading.group('heading').strip(), palette.accent)}"
        f"{''.join(fragments)}"
        "</div>"
    )


def render_generic_item(item: ListItem, palette: Palette) -> str:
    """Render a non-product list item."""
    category = _render_category_item(item, palette)
    if category is not None:
        return category

    title, body = extract_bold_title(item.raw_content)
    if not title:
        if "\n" not in item.raw_content.strip():
            return f'<div class="list-item mb-2"><p>{item.label}. {inline_bold(item.raw_content.strip())}</p></div>'
        title, body = _split_first_line(item.raw_content)

    fragments = []
    for block in group_body_lines(body.split("\n")):
        if block.kind == "bullets":
            fragments.append(_render_list(inline_bold(line) for line in block.lines))
        else:
            fragments.append(_render_paragraph([inline_bold(block.lines[0])]))

    body_html = f'<div class="pl-4 mt-1">{"".join(fragments)}</div>' if fragments else ""
    return (
        '<div class="list-item mb-4">'
        f"{_render_title(item.label, title, palette.accent)}"
        f"{body_html}"
        "</div>"
    )


def render_bullet_blocks(blocks: Sequence[Block]) -> str:
    """Render bullet-list segmentation: lists as <ul>, other lines untouched in <p>."""
    fragments = []
    for block in blocks:
        if block.kind == "list":
            fragments.append('<ul class="list-disc pl-5 my-3">' + "".join(f"<li>{line}</li>" for line in block.lines) + "</ul>")
        else:
            fragments.append(_render_paragraph(block.lines))
    return "".join(fragments)


__all__ = [
    "Feature",
    "FeaturePattern",
    "FEATURE_PATTERNS",
    "BodyBlock",
    "ScanState",
    "extract_feature",
    "extract_availability",
    "extract_bold_title",
    "group_body_lines",
    "is_product_code",
    "render_product_item",
    "render_generic_item",
    "render_bullet_blocks",
]

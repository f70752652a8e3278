"""Decide which structural shape a cleaned response has.

Shapes are checked in priority order and the first match wins:
numbered list, bullet list, markdown headings, then plain text.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Tuple

from .config import PRODUCT_KEYWORDS

logger = logging.getLogger(__name__)


class ContentShape(str, Enum):
    NUMBERED_LIST = "numbered_list"
    BULLET_LIST = "bullet_list"
    HEADING = "heading"
    PLAIN_TEXT = "plain_text"


# "N." plus whitespace, allowing a closing bold marker in between ("**1.**" then a newline)
NUMBERED_MARKER = re.compile(r"\d+\.(?:\*\*)?\s")
# "•" anywhere, or "*"/"-" plus whitespace at the start of a line
BULLET_MARKER = re.compile(r"•|^[ \t]*[*-][ \t]", re.MULTILINE)
HEADING_MARKER = re.compile(r"^#+[ \t]", re.MULTILINE)
PRODUCT_KEYWORD = re.compile("|".join(PRODUCT_KEYWORDS), re.IGNORECASE)


def has_numbered_list(text: str) -> bool:
    return NUMBERED_MARKER.search(text) is not None


def has_bullet_points(text: str) -> bool:
    return BULLET_MARKER.search(text) is not None


def has_headings(text: str) -> bool:
    return HEADING_MARKER.search(text) is not None


def looks_like_product_listing(text: str) -> bool:
    """True when the text mentions product attributes (sizes, colors, materials...)."""
    return PRODUCT_KEYWORD.search(text) is not None


# Order encodes precedence
SHAPE_PREDICATES: Tuple[Tuple[ContentShape, Callable[[str], bool]], ...] = (
    (ContentShape.NUMBERED_LIST, has_numbered_list),
    (ContentShape.BULLET_LIST, has_bullet_points),
    (ContentShape.HEADING, has_headings),
)


def classify_content(text: str) -> ContentShape:
    for shape, predicate in SHAPE_PREDICATES:
        if predicate(text):
            return shape
    return ContentShape.PLAIN_TEXT


@dataclass(frozen=True)
class ContentProfile:
    shape: ContentShape
    product_like: bool


def detect_content(text: str) -> ContentProfile:
    profile = ContentProfile(
        shape=classify_content(text),
        product_like=looks_like_product_listing(text),
    )
    logger.debug("[detect] shape=%s product_like=%s", profile.shape.value, profile.product_like)
    return profile


__all__ = [
    "ContentShape",
    "ContentProfile",
    "classify_content",
    "detect_content",
    "looks_like_product_listing",
]

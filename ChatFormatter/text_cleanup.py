"""Utilities for cleaning and validating raw chat API responses."""
from __future__ import annotations

import re
from typing import List


# Escape sequences that arrive as literal two-character text in JSON-ish payloads.
_ESCAPED_SEQUENCES = (
    ("\\r\\n", "\n"),
    ("\\n", "\n"),
)

# Control characters except \t (0x09) and \n (0x0A)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B-\x1F\x7F]")

_MARKUP_TAG = re.compile(r"</?[a-zA-Z][a-zA-Z0-9]*(?:\s[^<>]*)?>")


def clean_response_text(text: str) -> str:
    """Normalize a raw response before classification.

    Converts escaped newlines into real ones, unifies line endings and strips
    control characters. Runs once per formatting call.
    """
    for escaped, replacement in _ESCAPED_SEQUENCES:
        text = text.replace(escaped, replacement)

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _CONTROL_CHARS.sub("", text)


def validate_response_text(text: str) -> List[str]:
    """Return a list of warnings describing potential formatting issues."""
    warnings: List[str] = []

    if not text.strip():
        warnings.append("empty")
        return warnings

    if text.count("**") % 2:
        warnings.append("unbalanced bold markers")

    if _MARKUP_TAG.search(text):
        warnings.append("contains markup")

    return warnings


__all__ = ["clean_response_text", "validate_response_text"]

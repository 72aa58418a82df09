"""Sanitization of user-supplied text.

User content is stored as plain text: markup is stripped rather than
escaped so that it renders the same in every client.
"""

from __future__ import annotations

import html
import re

from talent_connect.core.errors import ValidationError

_SCRIPT_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def strip_tags(text: str | None) -> str:
    """Remove HTML tags (and script/style bodies) from ``text``."""
    if not text:
        return ""
    text = _SCRIPT_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    return _CONTROL_RE.sub("", text)


def clean_text(
    text: str | None,
    *,
    field: str = "Text",
    max_length: int | None = None,
    required: bool = True,
) -> str:
    """Sanitize and validate a free-text field.

    Args:
        text: Raw user input
        field: Field name used in error messages
        max_length: Maximum allowed length after cleaning (None for no limit)
        required: Reject empty values when True

    Returns:
        The cleaned, trimmed text

    Raises:
        ValidationError: If the value is empty (when required) or too long
    """
    cleaned = strip_tags(text).strip()
    if required and not cleaned:
        raise ValidationError(f"{field} cannot be empty")
    if max_length is not None and len(cleaned) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return cleaned


def preview(text: str, length: int = 80) -> str:
    """Return a single-line preview of ``text`` for notifications."""
    single_line = " ".join(text.split())
    if len(single_line) <= length:
        return single_line
    return single_line[: length - 1].rstrip() + "…"

"""Field-value sanitization for URL pre-fill.

Pipeline, in order:

1. List and mapping values bypass the string pipeline (``PassthroughArray``).
2. Any other non-string value is ``Rejected(NOT_SCALAR)``.
3. NUL bytes are removed and the text is normalized to Unicode NFC.
4. Markup tags (``<...>``) are stripped; entities are left undecoded.
5. Leading/trailing whitespace is trimmed.
6. Text longer than *max_length* is truncated (not rejected).
7. The truncated text is scanned case-insensitively for blocked patterns.

The pattern scan is a narrow heuristic that catches what survives
stripping (attribute-style handlers, unterminated ``<script`` fragments).
It is not an HTML sanitizer: escape with ``escape_for_html`` at render time.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Mapping
from typing import Any

from formprefill.core.errors import ReasonCode
from formprefill.models.outcome import Accepted, PassthroughArray, Rejected, ValidationOutcome

MAX_VALUE_LENGTH: int = 10_000

_TAG_PATTERN = re.compile(r"<[^>]*>")

# Ordered so the reported detail names the most specific match.
_BLOCKED_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("script_open", re.compile(r"<script", re.IGNORECASE)),
    ("script_close", re.compile(r"</script", re.IGNORECASE)),
    ("javascript_url", re.compile(r"javascript:", re.IGNORECASE)),
    ("event_handler", re.compile(r"on\w+\s*=", re.IGNORECASE)),
)


def normalize_text(value: str) -> str:
    """Strip null bytes and normalize to Unicode NFC."""
    value = value.replace("\x00", "")
    return unicodedata.normalize("NFC", value)


def strip_tags(value: str) -> str:
    """Remove every ``<...>`` tag from *value*.

    An unterminated ``<`` is kept so the pattern scan can see it.
    """
    return _TAG_PATTERN.sub("", value)


def find_malicious_pattern(value: str) -> str | None:
    """Return the name of the first blocked pattern found in *value*, or ``None``."""
    for name, pattern in _BLOCKED_PATTERNS:
        if pattern.search(value):
            return name
    return None


def sanitize_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> ValidationOutcome:
    """Sanitize one raw field value and decide whether to accept it.

    Never raises for any *value* or *max_length*; the limit is clamped to
    ``0..MAX_VALUE_LENGTH``.  Returns ``Accepted`` with the sanitized text,
    ``Rejected`` with a reason code, or ``PassthroughArray`` for list and
    mapping values.
    """
    if isinstance(value, Mapping):
        return PassthroughArray(items=dict(value))

    if isinstance(value, (list, tuple)):
        return PassthroughArray(items=tuple(value))

    if not isinstance(value, str):
        return Rejected(reason=ReasonCode.NOT_SCALAR, detail=type(value).__name__)

    max_length = min(max(max_length, 0), MAX_VALUE_LENGTH)
    text = strip_tags(normalize_text(value)).strip()

    if len(text) > max_length:
        text = text[:max_length]

    matched = find_malicious_pattern(text)
    if matched is not None:
        return Rejected(reason=ReasonCode.MALICIOUS_PATTERN, detail=matched)

    return Accepted(value=text)

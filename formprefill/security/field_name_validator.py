"""Field-name validation for ``field_``-prefixed query parameters.

A field name is 1-255 characters drawn from ASCII letters, digits,
underscore, hyphen and whitespace, matched against the whole string.
"""

from __future__ import annotations

import re

FIELD_PREFIX: str = "field_"

MAX_FIELD_NAME_LENGTH: int = 255

# ASCII-only \w and \s; fullmatch so "$" never accepts a trailing newline.
_FIELD_NAME_PATTERN = re.compile(
    rf"[A-Za-z0-9_\- \t\n\r\f\v]{{1,{MAX_FIELD_NAME_LENGTH}}}"
)


def extract_field_name(key: str, prefix: str = FIELD_PREFIX) -> str | None:
    """Return the candidate field name after *prefix*, or ``None``.

    ``None`` means the key is not a field parameter at all.  An empty
    string is returned for a bare prefix so the name check can reject it.
    """
    if not isinstance(key, str) or not key.startswith(prefix):
        return None
    return key[len(prefix):]


def validate_field_name(name: str) -> bool:
    """Return ``True`` iff *name* is an acceptable field identifier.

    Total: any non-string, empty string or over-long name yields ``False``.
    """
    if not isinstance(name, str):
        return False
    return _FIELD_NAME_PATTERN.fullmatch(name) is not None

"""Type-specific checks applied to values that already passed sanitization.

Dates follow one locale-independent strategy, tried in order:

1. ISO 8601 via ``datetime.fromisoformat`` (``2023-01-15``,
   ``2023-01-15T10:30:00``, trailing ``Z`` allowed).
2. Year-first slash form ``YYYY/MM/DD`` with optional ``HH:MM[:SS]``.
3. English month names: ``15 January 2023``, ``January 15, 2023``
   (three-letter abbreviations accepted, case-insensitive).

Day- or month-first numeric dates such as ``01/02/2023`` are ambiguous and
rejected.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from datetime import datetime

from formprefill.models.outcome import FieldType

_MAX_EMAIL_LENGTH: int = 254
_MAX_LOCAL_PART_LENGTH: int = 64

_EMAIL_PATTERN = re.compile(
    r"(?P<local>[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*)"
    r"@"
    r"(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+"
    r"[A-Za-z]{2,63}"
)

_DIGITS_PATTERN = re.compile(r"[0-9]+")

_FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_SLASH_DATE_PATTERN = re.compile(
    r"(?P<year>[0-9]{4})/(?P<month>[0-9]{1,2})/(?P<day>[0-9]{1,2})"
    r"(?:[ T](?P<hour>[0-9]{1,2}):(?P<minute>[0-9]{2})(?::(?P<second>[0-9]{2}))?)?"
)

_DAY_MONTH_YEAR_PATTERN = re.compile(
    r"(?P<day>[0-9]{1,2})\s+(?P<month>[A-Za-z]+)\.?,?\s+(?P<year>[0-9]{4})"
)

_MONTH_DAY_YEAR_PATTERN = re.compile(
    r"(?P<month>[A-Za-z]+)\.?\s+(?P<day>[0-9]{1,2}),?\s+(?P<year>[0-9]{4})"
)

_MONTHS: dict[str, int] = {
    name: number
    for number, full in enumerate(
        (
            "january", "february", "march", "april", "may", "june",
            "july", "august", "september", "october", "november", "december",
        ),
        start=1,
    )
    for name in (full, full[:3])
}
_MONTHS["sept"] = 9


def is_valid_email(value: str) -> bool:
    """Return ``True`` for a ``local-part@domain.tld`` mailbox address."""
    if len(value) > _MAX_EMAIL_LENGTH:
        return False
    match = _EMAIL_PATTERN.fullmatch(value)
    if match is None:
        return False
    return len(match.group("local")) <= _MAX_LOCAL_PART_LENGTH


def is_valid_integer(value: str) -> bool:
    """Return ``True`` for an optionally signed run of ASCII digits."""
    if value[:1] in ("+", "-"):
        value = value[1:]
    return _DIGITS_PATTERN.fullmatch(value) is not None


def is_valid_float(value: str) -> bool:
    """Return ``True`` for a finite decimal number with optional exponent."""
    if _FLOAT_PATTERN.fullmatch(value) is None:
        return False
    return math.isfinite(float(value))


def parse_date(value: str) -> datetime | None:
    """Parse *value* with the module's date strategy; ``None`` if it fails."""
    candidate = value.strip()
    if not candidate:
        return None

    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        pass

    match = _SLASH_DATE_PATTERN.fullmatch(candidate)
    if match is not None:
        return _build_datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour") or 0),
            int(match.group("minute") or 0),
            int(match.group("second") or 0),
        )

    for pattern in (_DAY_MONTH_YEAR_PATTERN, _MONTH_DAY_YEAR_PATTERN):
        match = pattern.fullmatch(candidate)
        if match is None:
            continue
        month = _MONTHS.get(match.group("month").lower())
        if month is None:
            return None
        return _build_datetime(int(match.group("year")), month, int(match.group("day")))

    return None


def _build_datetime(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
) -> datetime | None:
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def is_valid_date(value: str) -> bool:
    return parse_date(value) is not None


def _always_valid(value: str) -> bool:
    return True


_VALIDATORS: dict[FieldType, Callable[[str], bool]] = {
    FieldType.TEXT: _always_valid,
    FieldType.EMAIL: is_valid_email,
    FieldType.INTEGER: is_valid_integer,
    FieldType.FLOAT: is_valid_float,
    FieldType.DATE: is_valid_date,
    FieldType.DATETIME: is_valid_date,
}


def validate_type(value: str, field_type: FieldType | str = FieldType.TEXT) -> bool:
    """Return ``True`` if *value* satisfies *field_type*.

    Unknown type names are treated as ``text``.  Never raises.
    """
    if not isinstance(value, str):
        return False
    return _VALIDATORS[FieldType.coerce(field_type)](value)

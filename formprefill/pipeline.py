"""URL pre-fill pipeline.

Runs each ``field_``-prefixed query parameter through field-name
validation and value sanitization, and optionally through the
type-specific gate.  Rejections are reported as outcomes and logged as
SECURITY events; nothing here raises for untrusted input.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from typing import Any

from formprefill.core.config import Settings, get_settings
from formprefill.core.errors import InvalidParametersError, ReasonCode
from formprefill.models.outcome import Accepted, FieldType, Rejected, ValidationOutcome
from formprefill.security.field_name_validator import extract_field_name, validate_field_name
from formprefill.security.type_validators import validate_type
from formprefill.security.value_sanitizer import normalize_text, sanitize_value, strip_tags

logger = logging.getLogger(__name__)
_security_logger = logging.getLogger("form_prefill.security")

_EVENTS: dict[ReasonCode, str] = {
    ReasonCode.INVALID_FIELD_NAME: "invalid_field_name",
    ReasonCode.MALICIOUS_PATTERN: "malicious_pattern",
    ReasonCode.INVALID_TYPE: "invalid_type",
    ReasonCode.NOT_SCALAR: "not_scalar",
}


def value_digest(value: Any) -> str:
    """Short SHA-256 digest of *value* so logs never carry raw input."""
    return hashlib.sha256(repr(value).encode("utf-8", "backslashreplace")).hexdigest()[:16]


def _log_rejection(field: str, outcome: Rejected, value: Any, settings: Settings) -> None:
    shown = repr(value) if settings.LOG_REJECTED_VALUES else f"sha256:{value_digest(value)}"
    _security_logger.warning(
        "SECURITY event=%s field=%r detail=%r value=%s",
        _EVENTS[outcome.reason],
        field,
        outcome.detail,
        shown,
    )


def process_parameter(
    key: str, value: Any, settings: Settings | None = None
) -> tuple[str, ValidationOutcome] | None:
    """Validate a single query parameter.

    Returns ``None`` for keys without the field prefix, otherwise the
    derived field name and its outcome.  An invalid field name stops
    processing before the value is looked at.
    """
    settings = settings or get_settings()

    field = extract_field_name(key, settings.FIELD_PREFIX)
    if field is None:
        return None

    if not validate_field_name(field):
        outcome = Rejected(reason=ReasonCode.INVALID_FIELD_NAME)
        _log_rejection(field[:64], outcome, value, settings)
        return field, outcome

    outcome = sanitize_value(value, max_length=settings.MAX_VALUE_LENGTH)
    if isinstance(outcome, Rejected):
        _log_rejection(field, outcome, value, settings)
    elif isinstance(outcome, Accepted) and len(outcome.value) == settings.MAX_VALUE_LENGTH:
        stripped_length = len(strip_tags(normalize_text(value)).strip())
        if stripped_length > settings.MAX_VALUE_LENGTH:
            logger.info(
                "Truncated field=%r from %d to %d characters",
                field,
                stripped_length,
                settings.MAX_VALUE_LENGTH,
            )
    return field, outcome


def process_parameters(
    params: Mapping[str, Any], settings: Settings | None = None
) -> dict[str, ValidationOutcome]:
    """Validate every field parameter in *params*.

    Returns outcomes keyed by derived field name, in input order.
    Non-field keys are skipped.  Raises ``InvalidParametersError`` only
    when *params* is not a mapping.
    """
    if not isinstance(params, Mapping):
        raise InvalidParametersError(params)

    settings = settings or get_settings()
    outcomes: dict[str, ValidationOutcome] = {}
    for key, value in params.items():
        result = process_parameter(key, value, settings)
        if result is None:
            continue
        field, outcome = result
        outcomes[field] = outcome

    logger.debug(
        "Processed %d field parameters, %d accepted",
        len(outcomes),
        sum(1 for outcome in outcomes.values() if outcome.is_accepted),
    )
    return outcomes


def apply_field_types(
    outcomes: Mapping[str, ValidationOutcome],
    field_types: Mapping[str, FieldType | str],
    settings: Settings | None = None,
) -> dict[str, ValidationOutcome]:
    """Run the type gate over accepted text values.

    Fields missing from *field_types* are treated as ``text``.  A failing
    value becomes ``Rejected(INVALID_TYPE)``; it is not re-sanitized.
    """
    settings = settings or get_settings()
    checked: dict[str, ValidationOutcome] = {}
    for field, outcome in outcomes.items():
        if isinstance(outcome, Accepted):
            field_type = FieldType.coerce(field_types.get(field, FieldType.TEXT))
            if not validate_type(outcome.value, field_type):
                rejected = Rejected(reason=ReasonCode.INVALID_TYPE, detail=field_type.value)
                _log_rejection(field, rejected, outcome.value, settings)
                checked[field] = rejected
                continue
        checked[field] = outcome
    return checked

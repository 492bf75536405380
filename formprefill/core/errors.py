"""Rejection reason codes and structured rejection output.

Validation never raises: every rejected field is reported as a
``Rejected`` outcome carrying a ``ReasonCode``.  ``FormPrefillError`` is
reserved for caller programming errors.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from formprefill.models.outcome import ValidationOutcome


class ReasonCode(str, enum.Enum):
    """Machine-readable reasons a field value was not accepted."""

    INVALID_FIELD_NAME = "INVALID_FIELD_NAME"
    MALICIOUS_PATTERN = "MALICIOUS_PATTERN"
    INVALID_TYPE = "INVALID_TYPE"
    NOT_SCALAR = "NOT_SCALAR"


_MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.INVALID_FIELD_NAME: "Field name is not allowed",
    ReasonCode.MALICIOUS_PATTERN: "Value contains a blocked pattern",
    ReasonCode.INVALID_TYPE: "Value does not match the field type",
    ReasonCode.NOT_SCALAR: "Value is not text",
}


class FormPrefillError(Exception):
    """Base exception for all form-prefill errors."""


class InvalidParametersError(FormPrefillError):
    """Raised when the parameter collection handed to the pipeline is not a mapping."""

    def __init__(self, received: object) -> None:
        self.received_type = type(received).__name__
        super().__init__(f"Expected a mapping of parameters, got {self.received_type}")


class RejectionDetail(BaseModel):
    """Structured rejection entry.

    Returns ``{"field": str, "code": str, "message": str}`` and never the
    rejected value itself.
    """

    field: str
    code: str
    message: str

    @classmethod
    def from_outcome(cls, field: str, outcome: "ValidationOutcome") -> "RejectionDetail | None":
        """Build a detail for a ``Rejected`` outcome, ``None`` for anything else."""
        reason = getattr(outcome, "reason", None)
        if reason is None:
            return None
        return cls(field=field, code=reason.value, message=_MESSAGES[reason])


def format_rejections(outcomes: Mapping[str, "ValidationOutcome"]) -> list[dict[str, str]]:
    """Convert the rejected entries of *outcomes* into a structured list.

    Accepted and passthrough entries are skipped.  Order follows *outcomes*.
    """
    errors: list[dict[str, str]] = []
    for field, outcome in outcomes.items():
        detail = RejectionDetail.from_outcome(field, outcome)
        if detail is not None:
            errors.append(detail.model_dump())
    return errors

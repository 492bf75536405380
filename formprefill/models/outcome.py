"""Field types and validation outcome models.

``ValidationOutcome`` is a tagged union discriminated on ``kind``:
``Accepted`` carries the sanitized text, ``Rejected`` carries a
``ReasonCode``, and ``PassthroughArray`` carries list or mapping values that
bypass the string pipeline.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from formprefill.core.errors import ReasonCode


class FieldType(str, enum.Enum):
    """Question type metadata supplied by the form definition."""

    TEXT = "text"
    EMAIL = "email"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"
    DATETIME = "datetime"

    @classmethod
    def coerce(cls, raw: Any) -> "FieldType":
        """Map *raw* metadata to a ``FieldType``, defaulting to ``TEXT``."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.TEXT


class Accepted(BaseModel):
    """Value passed sanitization; ``value`` is safe to store, not to render."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["accepted"] = "accepted"
    value: str = Field(..., max_length=10_000)

    @property
    def is_accepted(self) -> bool:
        return True


class Rejected(BaseModel):
    """Value (or its field name) was refused; treat as "no value supplied"."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["rejected"] = "rejected"
    reason: ReasonCode
    detail: str = ""

    @property
    def is_accepted(self) -> bool:
        return False


class PassthroughArray(BaseModel):
    """Structured (list or mapping) value left to the caller's own validation layer."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["passthrough_array"] = "passthrough_array"
    items: dict[Any, Any] | tuple[Any, ...] = ()

    @property
    def is_accepted(self) -> bool:
        return True


ValidationOutcome = Annotated[
    Union[Accepted, Rejected, PassthroughArray],
    Field(discriminator="kind"),
]

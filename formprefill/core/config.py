"""Settings for the URL pre-fill pipeline.

Centralized configuration for field-parameter validation.
All settings are loaded from environment variables with the FORM_PREFILL_ prefix.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Form pre-fill configuration.

    All fields can be overridden by environment variables prefixed with
    ``FORM_PREFILL_``.  For example, ``FORM_PREFILL_MAX_VALUE_LENGTH=500``
    lowers the truncation limit.
    """

    # ── Parameter recognition ───────────────────────────────────────
    FIELD_PREFIX: str = "field_"  # Query keys without it are ignored

    # ── Value sanitization ──────────────────────────────────────────
    MAX_VALUE_LENGTH: int = Field(default=10_000, ge=1, le=10_000)  # Longer values are truncated

    # ── Storage ─────────────────────────────────────────────────────
    ANSWER_KEY_TEMPLATE: str = "formcreator_field_{question_id}"

    # ── Logging ─────────────────────────────────────────────────────
    LOG_REJECTED_VALUES: bool = False  # Only a digest is logged when False

    model_config = {
        "env_prefix": "FORM_PREFILL_",
    }


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()

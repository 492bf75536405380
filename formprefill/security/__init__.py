"""Field-name validation, value sanitization, type checks and output escaping."""

from formprefill.security.field_name_validator import extract_field_name, validate_field_name
from formprefill.security.output_escaper import escape_for_html
from formprefill.security.type_validators import validate_type
from formprefill.security.value_sanitizer import sanitize_value

__all__ = [
    "escape_for_html",
    "extract_field_name",
    "sanitize_value",
    "validate_field_name",
    "validate_type",
]

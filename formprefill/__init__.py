"""URL pre-fill validation for form answers.

Validates ``field_``-prefixed query parameters, sanitizes their values,
and escapes them for rendering.
"""

from formprefill.pipeline import apply_field_types, process_parameter, process_parameters
from formprefill.security.output_escaper import escape_for_html

__all__ = [
    "apply_field_types",
    "escape_for_html",
    "process_parameter",
    "process_parameters",
]

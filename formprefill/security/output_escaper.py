"""Render-time HTML escaping for pre-filled values.

``escape_for_html`` returns a ``markupsafe.Markup`` so that already-escaped
text is marked by its type: templates and further ``escape`` calls treat a
``Markup`` as safe and do not encode it again.  Plain ``str`` input is
always escaped, including text that merely looks escaped (``&lt;`` becomes
``&amp;lt;``), so each plain value must be escaped exactly once per render.
"""

from __future__ import annotations

from markupsafe import Markup, escape


def escape_for_html(value: str) -> Markup:
    """Escape ``& < > " '`` for element content and quoted attribute values."""
    return escape(value)


def is_escaped(value: object) -> bool:
    """Return ``True`` if *value* is already marked safe for HTML output."""
    return isinstance(value, Markup)

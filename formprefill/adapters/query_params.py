"""Starlette query-string adapter.

Turns a multi-valued query string into the plain mapping the pipeline
expects: single keys map to a string, repeated keys (or PHP-style
``key[]``) map to a list of strings.
"""

from __future__ import annotations

from typing import Any

from starlette.datastructures import QueryParams

_ARRAY_SUFFIX = "[]"


def collect_parameters(query_params: QueryParams | Any) -> dict[str, Any]:
    """Fold *query_params* into ``{key: str | list[str]}``.

    Accepts a ``QueryParams`` or any object with ``multi_items()``.
    """
    grouped: dict[str, list[str]] = {}
    forced_list: set[str] = set()
    for raw_key, value in query_params.multi_items():
        key = raw_key
        if key.endswith(_ARRAY_SUFFIX):
            key = key[: -len(_ARRAY_SUFFIX)]
            forced_list.add(key)
        grouped.setdefault(key, []).append(value)

    return {
        key: values if key in forced_list or len(values) > 1 else values[0]
        for key, values in grouped.items()
    }


def parse_query_string(query_string: str) -> dict[str, Any]:
    """Convenience wrapper for a raw ``a=1&b=2`` query string."""
    return collect_parameters(QueryParams(query_string))

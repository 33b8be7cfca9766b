"""Translation of request query strings into bounded launch queries."""

from launchvault.query.fields import (
    FILTER_FIELDS,
    INTERNAL_FIELDS,
    RESERVED_KEYS,
    SORT_FIELDS,
)
from launchvault.query.translator import (
    LaunchQuery,
    build_filter,
    build_limit,
    build_offset,
    build_projection,
    build_sort,
    coerce_value,
    translate,
)

__all__ = [
    "FILTER_FIELDS",
    "INTERNAL_FIELDS",
    "RESERVED_KEYS",
    "SORT_FIELDS",
    "LaunchQuery",
    "build_filter",
    "build_limit",
    "build_offset",
    "build_projection",
    "build_sort",
    "coerce_value",
    "translate",
]

"""
Query-string translation for launch reads.

Turns untrusted request parameters into the pieces of a bounded MongoDB read:

- build_filter(params): equality/range predicate over FILTER_FIELDS
- build_projection(params): inclusion or exclusion projection
- build_sort(params): [(path, direction)] from SORT_FIELDS
- build_limit(params): int in [1, max_limit]
- build_offset(params): int >= 0

None of these raise. A value that cannot be coerced is logged at DEBUG and
either replaced by a default or dropped.
"""

import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from launchvault.config import QueryConfig
from launchvault.exceptions import QueryParameterError
from launchvault.query.fields import (
    FILTER_FIELDS,
    INTERNAL_FIELDS,
    RANGE_FIELDS,
    RESERVED_KEYS,
    SORT_FIELDS,
    FieldKind,
)
from launchvault.utils.time_utils import to_iso_utc

logger = logging.getLogger(__name__)

QueryParams = Mapping[str, Any]

_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1
_TRUE_VALUES = frozenset({"true", "1", "yes"})
_FALSE_VALUES = frozenset({"false", "0", "no"})
_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_DEFAULT_CONFIG = QueryConfig()


class LaunchQuery(BaseModel):
    """Validated read parameters, ready to hand to a Motor cursor."""

    filter: dict[str, Any] = Field(default_factory=dict)
    projection: dict[str, int] = Field(default_factory=dict)
    sort: list[tuple[str, int]] = Field(default_factory=list)
    limit: int
    offset: int = 0


# ============================================================================
# Coercion
# ============================================================================


def _text(key: str, raw: Any) -> str:
    if not isinstance(raw, str):
        raise QueryParameterError(key, repr(raw), "expected a string")
    value = raw.strip()
    if not value:
        raise QueryParameterError(key, raw, "empty value")
    return value


def _to_int(key: str, raw: Any) -> int:
    value = _text(key, raw)
    try:
        number = int(value)
    except ValueError:
        try:
            as_float = float(value)
        except ValueError:
            raise QueryParameterError(key, value, "not a number") from None
        if not math.isfinite(as_float) or not as_float.is_integer():
            raise QueryParameterError(key, value, "not an integer") from None
        number = int(as_float)
    # BSON stores at most a signed 64-bit integer
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise QueryParameterError(key, value, "out of range")
    return number


def _to_float(key: str, raw: Any) -> float:
    value = _text(key, raw)
    try:
        number = float(value)
    except ValueError:
        raise QueryParameterError(key, value, "not a number") from None
    if not math.isfinite(number):
        raise QueryParameterError(key, value, "not a finite number")
    return number


def _to_bool(key: str, raw: Any) -> bool:
    value = _text(key, raw).lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise QueryParameterError(key, value, "not a boolean")


def _to_date(key: str, raw: Any) -> str:
    value = _text(key, raw)
    try:
        return to_iso_utc(value)
    except ValueError:
        raise QueryParameterError(key, value, "not an ISO-8601 date") from None


def coerce_value(key: str, raw: Any, kind: FieldKind) -> Any:
    """
    Convert one raw query-string value to the type its field stores.

    Raises:
        QueryParameterError: if the value cannot be converted.
    """
    if kind == "int":
        return _to_int(key, raw)
    if kind == "float":
        return _to_float(key, raw)
    if kind == "bool":
        return _to_bool(key, raw)
    if kind == "date":
        return _to_date(key, raw)
    return _text(key, raw)


# ============================================================================
# Builders
# ============================================================================


def build_filter(params: QueryParams) -> dict[str, Any]:
    """Equality and date-range conditions for every recognised key."""
    predicate: dict[str, Any] = {}

    for key, raw in params.items():
        if key in RESERVED_KEYS:
            continue

        if key in RANGE_FIELDS:
            path, operator = RANGE_FIELDS[key]
            try:
                bound = coerce_value(key, raw, "date")
            except QueryParameterError as e:
                logger.debug(f"Dropping filter: {e}")
                continue
            condition = predicate.setdefault(path, {})
            if isinstance(condition, dict):
                condition[operator] = bound
            continue

        spec = FILTER_FIELDS.get(key)
        if spec is None:
            continue

        try:
            value = coerce_value(key, raw, spec.kind)
        except QueryParameterError as e:
            logger.debug(f"Dropping filter: {e}")
            continue

        # An exact launch_date_utc beats a start/end range on the same path
        predicate[spec.path] = value

    return predicate


def _drop_nested(fields: list[str]) -> list[str]:
    # MongoDB rejects projecting both "a" and "a.b"
    kept: list[str] = []
    for name in sorted(set(fields), key=len):
        if not any(name.startswith(f"{parent}.") for parent in kept):
            kept.append(name)
    return kept


def build_projection(params: QueryParams) -> dict[str, int]:
    """
    Projection for the `fields` and `id` parameters.

    `fields=a,b.c` includes only those paths; without it everything is
    returned. Internal fields are excluded in both cases, and `_id` unless
    `id=true`.
    """
    include_id = False
    if "id" in params:
        try:
            include_id = _to_bool("id", params["id"])
        except QueryParameterError as e:
            logger.debug(f"Ignoring id flag: {e}")

    requested: list[str] = []
    raw_fields = params.get("fields")
    if isinstance(raw_fields, str):
        for name in raw_fields.split(","):
            name = name.strip()
            if not name:
                continue
            if not _FIELD_NAME.match(name):
                logger.debug(f"Dropping projection field {name!r}")
                continue
            if name.split(".", 1)[0] in (*INTERNAL_FIELDS, "_id"):
                continue
            requested.append(name)

    if requested:
        projection = {name: 1 for name in _drop_nested(requested)}
    else:
        projection = {name: 0 for name in INTERNAL_FIELDS}

    if not include_id:
        projection["_id"] = 0
    return projection


def build_sort(
    params: QueryParams, config: QueryConfig = _DEFAULT_CONFIG
) -> list[tuple[str, int]]:
    """Sort spec from `sort` and `order`, with flight_number as tie-breaker."""
    default_path = SORT_FIELDS.get(config.default_sort, "flight_number")

    path = default_path
    raw_sort = params.get("sort")
    if isinstance(raw_sort, str) and raw_sort.strip() in SORT_FIELDS:
        path = SORT_FIELDS[raw_sort.strip()]
    elif raw_sort is not None:
        logger.debug(f"Unknown sort field {raw_sort!r}, using {default_path}")

    direction = 1
    raw_order = params.get("order")
    if isinstance(raw_order, str) and raw_order.strip().lower() == "desc":
        direction = -1

    sort = [(path, direction)]
    if path != "flight_number":
        sort.append(("flight_number", direction))
    return sort


def build_limit(params: QueryParams, config: QueryConfig = _DEFAULT_CONFIG) -> int:
    if "limit" not in params:
        return config.default_limit
    try:
        value = _to_int("limit", params["limit"])
    except QueryParameterError as e:
        logger.debug(f"Using default limit: {e}")
        return config.default_limit
    return max(1, min(value, config.max_limit))


def build_offset(params: QueryParams) -> int:
    if "offset" not in params:
        return 0
    try:
        value = _to_int("offset", params["offset"])
    except QueryParameterError as e:
        logger.debug(f"Using offset 0: {e}")
        return 0
    return max(0, value)


def translate(
    params: QueryParams | None, config: QueryConfig | None = None
) -> LaunchQuery:
    """Run every builder over one request's parameters."""
    params = params or {}
    config = config or _DEFAULT_CONFIG
    return LaunchQuery(
        filter=build_filter(params),
        projection=build_projection(params),
        sort=build_sort(params, config),
        limit=build_limit(params, config),
        offset=build_offset(params),
    )

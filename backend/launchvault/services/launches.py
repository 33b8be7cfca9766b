"""
Launch Query Service

Read operations over the launch collection. Every call makes one Motor
round-trip with a filter, projection, sort and limit that came out of
launchvault.query, so nothing unbounded or unsanitised reaches MongoDB.

Operations:
- latest(params): newest past launch
- next(params): earliest upcoming launch
- all(params): every launch matching the query string
- past(params) / upcoming(params): all() pinned to upcoming=false/true
- one(flight_number, params): single launch or LaunchNotFoundError
"""

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection

from launchvault.config import QueryConfig
from launchvault.exceptions import LaunchNotFoundError, QueryParameterError
from launchvault.query import INTERNAL_FIELDS, LaunchQuery, coerce_value, translate
from launchvault.query.translator import QueryParams, build_projection

logger = logging.getLogger(__name__)

Launch = dict[str, Any]


def strip_internal(launch: Launch) -> Launch:
    """Remove fields that must never leave the service."""
    for field in INTERNAL_FIELDS:
        launch.pop(field, None)
    return launch


class LaunchQueryService:
    """Read-only access to launch documents."""

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        config: QueryConfig | None = None,
    ):
        self.collection = collection
        self.config = config or QueryConfig()

    async def _find_many(
        self, base: dict[str, Any], params: QueryParams | None
    ) -> list[Launch]:
        query: LaunchQuery = translate(params, self.config)
        # Base predicate is applied last so the client cannot override it
        predicate = {**query.filter, **base}

        cursor = (
            self.collection.find(predicate, query.projection)
            .sort(query.sort)
            .skip(query.offset)
            .limit(query.limit)
        )
        launches = await cursor.to_list(length=query.limit)
        logger.debug(f"find {predicate} -> {len(launches)} launch(es)")
        return [strip_internal(launch) for launch in launches]

    async def _find_first(
        self,
        predicate: dict[str, Any],
        params: QueryParams | None,
        sort: list[tuple[str, int]] | None = None,
    ) -> Launch:
        cursor = self.collection.find(predicate, build_projection(params or {}))
        if sort:
            cursor = cursor.sort(sort)
        launches = await cursor.limit(1).to_list(length=1)
        if not launches:
            raise LaunchNotFoundError(f"No launch matches {predicate}")
        return strip_internal(launches[0])

    async def latest(self, params: QueryParams | None = None) -> Launch:
        return await self._find_first(
            {"upcoming": False}, params, sort=[("flight_number", -1)]
        )

    async def next(self, params: QueryParams | None = None) -> Launch:
        return await self._find_first(
            {"upcoming": True}, params, sort=[("flight_number", 1)]
        )

    async def all(self, params: QueryParams | None = None) -> list[Launch]:
        return await self._find_many({}, params)

    async def past(self, params: QueryParams | None = None) -> list[Launch]:
        return await self._find_many({"upcoming": False}, params)

    async def upcoming(self, params: QueryParams | None = None) -> list[Launch]:
        return await self._find_many({"upcoming": True}, params)

    async def one(
        self, flight_number: int | str, params: QueryParams | None = None
    ) -> Launch:
        """
        Launch with exactly this flight number.

        Raises:
            LaunchNotFoundError: if no launch has it, or it is not an integer.
        """
        try:
            number = coerce_value("flight_number", str(flight_number), "int")
        except QueryParameterError as e:
            raise LaunchNotFoundError(f"No launch with flight number {flight_number!r}") from e

        return await self._find_first({"flight_number": number}, params)

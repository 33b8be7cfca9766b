"""Orbit sync: copy the latest Space-Track elements onto launch payloads."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection

from launchvault.config import Settings, get_settings
from launchvault.services.spacetrack import (
    OrbitalElementSnapshot,
    SpaceTrackAPIError,
    SpaceTrackClient,
    create_spacetrack_client,
)
from launchvault.storage import MongoStore

from .models import OrbitSyncResult

logger = logging.getLogger(__name__)

NORAD_ID_PATH = "rocket.second_stage.payloads.norad_id"
# "$" resolves to the payload element matched by the NORAD_ID_PATH filter
ORBIT_PARAMS_PATH = "rocket.second_stage.payloads.$.orbit_params"

_DONE = None


async def collect_norad_ids(collection: AsyncIOMotorCollection) -> list[int]:
    """First NORAD id of every payload on past launches, by flight number.

    Duplicates are kept: two launches can carry the same object.
    """
    norad_ids: list[int] = []
    cursor = collection.find(
        {"upcoming": False}, {NORAD_ID_PATH: 1, "flight_number": 1, "_id": 0}
    ).sort([("flight_number", 1)])

    async for launch in cursor:
        payloads = (
            launch.get("rocket", {}).get("second_stage", {}).get("payloads") or []
        )
        for payload in payloads:
            ids = payload.get("norad_id") or []
            if not ids:
                continue
            first = ids[0]
            # Imported data can hold ids as integral doubles
            if isinstance(first, float) and first.is_integer():
                first = int(first)
            if isinstance(first, bool) or not isinstance(first, int):
                logger.warning(
                    f"Flight {launch.get('flight_number')}: "
                    f"ignoring non-integer norad_id {first!r}"
                )
                continue
            norad_ids.append(first)

    return norad_ids


def index_snapshots(
    snapshots: Iterable[OrbitalElementSnapshot],
) -> dict[int, OrbitalElementSnapshot]:
    """Map NORAD id to element set; the first one seen for an id wins."""
    index: dict[int, OrbitalElementSnapshot] = {}
    for snapshot in snapshots:
        index.setdefault(snapshot.norad_cat_id, snapshot)
    return index


class OrbitSyncJob:
    """One reconciliation pass between payload NORAD ids and Space-Track.

    Updates run through a queue drained by a single worker, so they happen
    one at a time and in flight-number order.
    """

    update_workers = 1

    def __init__(self, collection: AsyncIOMotorCollection, client: SpaceTrackClient):
        self.collection = collection
        self.client = client

    async def _login(self) -> None:
        # A failed login is not fatal here; the fetch that follows decides
        try:
            await self.client.login()
        except SpaceTrackAPIError as e:
            logger.warning(f"Space-Track login failed: {e}")

    async def apply(
        self,
        norad_id: int,
        index: dict[int, OrbitalElementSnapshot],
        result: OrbitSyncResult,
    ) -> None:
        snapshot = index.get(norad_id)
        if snapshot is None:
            logger.debug(f"No element set for NORAD {norad_id}, leaving orbit as is")
            result.skipped += 1
            return

        orbit = snapshot.to_orbit_params()
        logger.info(f"Updating...{snapshot.object_name} (NORAD {norad_id})")
        logger.debug(f"{orbit.model_dump()}")

        update: Any = await self.collection.update_one(
            {NORAD_ID_PATH: norad_id},
            {"$set": orbit.to_set_document(ORBIT_PARAMS_PATH)},
        )
        result.matched += 1
        result.modified += update.modified_count

    async def _update_worker(
        self,
        queue: asyncio.Queue[int | None],
        index: dict[int, OrbitalElementSnapshot],
        result: OrbitSyncResult,
    ) -> None:
        while True:
            norad_id = await queue.get()
            try:
                if norad_id is _DONE:
                    return
                await self.apply(norad_id, index, result)
            finally:
                queue.task_done()

    async def run(self) -> OrbitSyncResult:
        """
        Run the whole pass.

        Raises:
            SpaceTrackAPIError: if the element sets cannot be fetched.
        """
        norad_ids = await collect_norad_ids(self.collection)
        logger.info(f"Collected {len(norad_ids)} payload NORAD ids from past launches")

        await self._login()
        snapshots = await self.client.fetch_latest_elements()
        index = index_snapshots(snapshots)

        result = OrbitSyncResult(
            identifiers=len(norad_ids), element_sets=len(snapshots)
        )

        queue: asyncio.Queue[int | None] = asyncio.Queue()
        for norad_id in norad_ids:
            queue.put_nowait(norad_id)
        for _ in range(self.update_workers):
            queue.put_nowait(_DONE)

        workers = [
            asyncio.create_task(self._update_worker(queue, index, result))
            for _ in range(self.update_workers)
        ]
        await asyncio.gather(*workers)

        logger.info(
            f"{result.identifiers} launch orbits processed "
            f"({result.matched} updated, {result.skipped} without element set)"
        )
        return result


async def run_orbit_sync(settings: Settings | None = None) -> OrbitSyncResult:
    """
    Connect, sync, disconnect.

    Raises:
        StoreConnectionError: if MongoDB is unreachable.
        SpaceTrackAPIError: if Space-Track cannot be queried.
    """
    settings = settings or get_settings()

    store = MongoStore(
        settings.mongo_url,
        settings.mongo_database,
        settings.mongo_collection,
        timeout_ms=settings.mongo_timeout_ms,
    )
    await store.connect()

    try:
        async with create_spacetrack_client(
            settings.spacetrack_identity,
            settings.spacetrack_password,
            settings.spacetrack,
        ) as client:
            job = OrbitSyncJob(store.launches, client)
            return await job.run()
    finally:
        store.close()


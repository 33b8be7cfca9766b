from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .config import SpaceTrackConfig
from .exceptions import SpaceTrackAPIError, SpaceTrackAuthError
from .models import OrbitalElementSnapshot

logger = logging.getLogger(__name__)


class SpaceTrackClient:
    """Session-cookie client for Space-Track.org.

    Usage:
        async with create_spacetrack_client(identity, password) as client:
            await client.login()
            snapshots = await client.fetch_latest_elements()

    Requests are never retried; callers decide what a failure means.
    """

    def __init__(
        self,
        config: SpaceTrackConfig | None = None,
        identity: str | None = None,
        password: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or SpaceTrackConfig()
        self.identity = identity or ""
        self.password = password or ""
        self.authenticated = False
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.info(
            f"Initialized SpaceTrackClient "
            f"(credentials={'set' if self.identity and self.password else 'missing'})"
        )

    async def __aenter__(self) -> SpaceTrackClient:
        limits = httpx.Limits(max_connections=self.config.max_connections)
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            limits=limits,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            self.authenticated = False
            logger.info("Closed SpaceTrackClient")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "SpaceTrackClient must be used as async context manager"
            )
        return self._client

    async def login(self) -> None:
        """Open a session. The cookie jar on the httpx client carries it."""
        if not self.identity or not self.password:
            raise SpaceTrackAuthError("Space-Track identity and password are required")

        try:
            response = await self.client.post(
                self.config.login_path,
                data={"identity": self.identity, "password": self.password},
            )
        except httpx.RequestError as e:
            raise SpaceTrackAPIError(f"Login request failed: {e}") from e

        if response.status_code in (401, 403):
            raise SpaceTrackAuthError(
                "Space-Track rejected credentials", status_code=response.status_code
            )
        if response.is_error:
            raise SpaceTrackAPIError(
                f"Login failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        # A bad password still answers 200 with {"Login": "Failed"}
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("Login") == "Failed":
            raise SpaceTrackAuthError("Space-Track rejected credentials", status_code=200)

        self.authenticated = True
        logger.info("Space-Track authentication successful")

    async def _get_json(self, path: str) -> Any:
        try:
            response = await self.client.get(path)
        except httpx.RequestError as e:
            raise SpaceTrackAPIError(f"Request to {path} failed: {e}") from e

        if response.status_code == 401:
            raise SpaceTrackAuthError("Space-Track session missing", status_code=401)
        if response.is_error:
            raise SpaceTrackAPIError(
                f"Space-Track returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise SpaceTrackAPIError(f"Invalid JSON from Space-Track: {e}") from e

    async def fetch_latest_raw(self) -> list[dict[str, Any]]:
        data = await self._get_json(self.config.latest_elements_path)
        if isinstance(data, dict) and "error" in data:
            raise SpaceTrackAuthError(f"Space-Track query refused: {data['error']}")
        if not isinstance(data, list):
            raise SpaceTrackAPIError(
                f"Expected a list of element sets, got {type(data).__name__}"
            )
        return data

    async def fetch_latest_elements(self) -> list[OrbitalElementSnapshot]:
        """Most recent element set for every object with an epoch in the window."""
        raw = await self.fetch_latest_raw()

        snapshots: list[OrbitalElementSnapshot] = []
        for entry in raw:
            try:
                snapshots.append(OrbitalElementSnapshot.from_api(entry))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed element set "
                    f"{entry.get('NORAD_CAT_ID') if isinstance(entry, dict) else entry!r}: "
                    f"{e.error_count()} error(s)"
                )

        logger.info(f"Fetched {len(snapshots)} element sets from Space-Track")
        return snapshots


def create_spacetrack_client(
    identity: str | None = None,
    password: str | None = None,
    config: SpaceTrackConfig | None = None,
) -> SpaceTrackClient:
    return SpaceTrackClient(config, identity, password)

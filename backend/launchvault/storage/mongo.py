"""
MongoDB connection via Motor.

This module provides:
- MongoStore: an explicitly passed connection handle (no module globals)
- Health check utilities
- Credential-safe URL rendering for logs
"""

import logging
from typing import Any

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import PyMongoError

from launchvault.exceptions import StoreConnectionError

logger = logging.getLogger(__name__)


class MongoStore:
    """Owns one Motor client for the lifetime of a process."""

    def __init__(
        self,
        url: str,
        database: str,
        collection: str = "launch",
        timeout_ms: int = 5000,
    ):
        self.url = url
        self.database_name = database
        self.collection_name = collection
        self.timeout_ms = timeout_ms
        self._client: AsyncIOMotorClient | None = None

    async def connect(self) -> None:
        """
        Open the client and verify the server answers a ping.

        Raises:
            StoreConnectionError: if the server cannot be reached.
        """
        try:
            self._client = AsyncIOMotorClient(
                self.url, serverSelectionTimeoutMS=self.timeout_ms
            )
            await self._client.admin.command("ping")
        except PyMongoError as e:
            self.close()
            raise StoreConnectionError(
                f"Cannot reach MongoDB at {sanitize_mongo_url(self.url)}: {e}"
            ) from e

        logger.info(
            f"Connected to MongoDB {sanitize_mongo_url(self.url)} "
            f"(database={self.database_name})"
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Closed MongoDB connection")

    @property
    def client(self) -> AsyncIOMotorClient:
        if self._client is None:
            raise RuntimeError("MongoStore not connected. Call connect() first.")
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self.client[self.database_name]

    @property
    def launches(self) -> AsyncIOMotorCollection:
        return self.database[self.collection_name]

    async def ping(self) -> bool:
        """Check if MongoDB connection is healthy."""
        if self._client is None:
            return False

        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError:
            return False

    def info(self) -> dict[str, Any]:
        """Connection information that is safe to log or return."""
        return {
            "status": "connected" if self._client is not None else "disconnected",
            "url": sanitize_mongo_url(self.url),
            "database": self.database_name,
            "collection": self.collection_name,
        }


def sanitize_mongo_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url

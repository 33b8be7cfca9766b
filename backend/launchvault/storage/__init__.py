"""MongoDB storage layer."""

from launchvault.storage.mongo import MongoStore, sanitize_mongo_url

__all__ = ["MongoStore", "sanitize_mongo_url"]

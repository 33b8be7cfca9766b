"""Data models for the orbit sync job."""

from pydantic import BaseModel


class OrbitSyncResult(BaseModel):
    """Result of an orbit sync run."""

    identifiers: int = 0
    matched: int = 0
    skipped: int = 0
    modified: int = 0
    element_sets: int = 0

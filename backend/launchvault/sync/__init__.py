"""Batch jobs that write into the launch collection."""

from .models import OrbitSyncResult
from .orbits import OrbitSyncJob, collect_norad_ids, index_snapshots, run_orbit_sync

__all__ = [
    "OrbitSyncJob",
    "OrbitSyncResult",
    "collect_norad_ids",
    "index_snapshots",
    "run_orbit_sync",
]

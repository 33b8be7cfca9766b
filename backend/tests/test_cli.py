"""Tests for sync-orbits failure handling and exit codes."""

import argparse
import asyncio
import logging

import pytest

import launchvault.__main__ as cli
from launchvault.config import Settings
from launchvault.exceptions import StoreConnectionError
from launchvault.services.spacetrack import SpaceTrackAPIError
from launchvault.sync import OrbitSyncResult, orbits

from conftest import FakeLaunchCollection, make_launch


@pytest.fixture
def quiet_cli(monkeypatch):
    monkeypatch.setattr(cli, "_init_logfire", lambda: None)
    monkeypatch.setattr(cli, "get_settings", lambda: Settings(logfire_token=""))


def _failing_sync(error: Exception):
    async def run_orbit_sync(settings):
        raise error

    return run_orbit_sync


@pytest.mark.parametrize(
    "error,message",
    [
        (StoreConnectionError("Cannot reach MongoDB"), "Failed to connect to MongoDB"),
        (SpaceTrackAPIError("Service unavailable", status_code=503), "Space-Track login broken"),
    ],
)
def test_sync_orbits_failure_exits_with_one(
    monkeypatch, caplog, quiet_cli, error, message
) -> None:
    monkeypatch.setattr(cli, "run_orbit_sync", _failing_sync(error))

    with caplog.at_level(logging.ERROR, logger="launchvault"):
        exit_code = cli.cmd_sync_orbits(argparse.Namespace())

    assert exit_code == 1
    assert message in caplog.text


def test_sync_orbits_success_prints_count(monkeypatch, capsys, quiet_cli) -> None:
    async def run_orbit_sync(settings):
        return OrbitSyncResult(identifiers=2, matched=1, skipped=1)

    monkeypatch.setattr(cli, "run_orbit_sync", run_orbit_sync)

    assert cli.cmd_sync_orbits(argparse.Namespace()) == 0
    assert "2 launch orbits updated!" in capsys.readouterr().out


# ============================================================================
# Store lifetime in run_orbit_sync
# ============================================================================


class RecordingStore:
    instances: list["RecordingStore"] = []

    def __init__(self, *args, **kwargs):
        self.launches = FakeLaunchCollection([make_launch(1, norad_ids=[[100]])])
        self.closed = False
        RecordingStore.instances.append(self)

    async def connect(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


class BrokenSpaceTrackClient:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return None

    async def login(self) -> None:
        pass

    async def fetch_latest_elements(self):
        raise SpaceTrackAPIError("Service unavailable", status_code=503)


def test_run_orbit_sync_closes_store_when_job_fails(monkeypatch) -> None:
    monkeypatch.setattr(orbits, "MongoStore", RecordingStore)
    monkeypatch.setattr(
        orbits, "create_spacetrack_client", lambda *args, **kwargs: BrokenSpaceTrackClient()
    )

    with pytest.raises(SpaceTrackAPIError):
        asyncio.run(orbits.run_orbit_sync(Settings(logfire_token="")))

    store = RecordingStore.instances[-1]
    assert store.closed
    assert store.launches.update_calls == []

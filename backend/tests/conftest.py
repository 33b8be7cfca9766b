"""Shared fixtures: an in-memory stand-in for a Motor launch collection."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

import pytest
from bson import ObjectId


def _values_at(node: Any, parts: list[str]):
    """Every value reachable at a dotted path, descending through arrays."""
    if isinstance(node, list):
        for element in node:
            yield from _values_at(element, parts)
        return
    if not parts:
        yield node
        return
    if isinstance(node, dict) and parts[0] in node:
        child = node[parts[0]]
        if len(parts) == 1 and isinstance(child, list):
            yield child
        yield from _values_at(child, parts[1:])


def _satisfies(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        try:
            for op, bound in condition.items():
                if op == "$gte" and not value >= bound:
                    return False
                if op == "$lte" and not value <= bound:
                    return False
        except TypeError:
            return False
        return True
    return type(value) is type(condition) and value == condition


def matches(doc: dict[str, Any], predicate: dict[str, Any]) -> bool:
    for path, condition in predicate.items():
        if not any(_satisfies(v, condition) for v in _values_at(doc, path.split("."))):
            return False
    return True


def _project(doc: dict[str, Any], projection: dict[str, int] | None) -> dict[str, Any]:
    if not projection:
        return doc
    included = {k.split(".", 1)[0] for k, v in projection.items() if v and k != "_id"}
    if included:
        out = {k: v for k, v in doc.items() if k in included}
        if projection.get("_id", 1) and "_id" in doc:
            out["_id"] = doc["_id"]
        return out
    return {k: v for k, v in doc.items() if projection.get(k, 1)}


def _set_path(node: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    for part in parts[:-1]:
        node = node.setdefault(part, {})
    node[parts[-1]] = value


def _get_path(node: Any, path: str) -> Any:
    for part in path.split("."):
        node = node[part]
    return node


@dataclass
class FakeUpdateResult:
    matched_count: int
    modified_count: int


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]):
        self._docs = docs
        self.sort_spec: list[tuple[str, int]] = []
        self.skip_count = 0
        self.limit_count = 0

    def sort(self, spec):
        self.sort_spec = list(spec)
        for path, direction in reversed(self.sort_spec):
            self._docs.sort(
                key=lambda d: next(_values_at(d, path.split(".")), None),
                reverse=direction == -1,
            )
        return self

    def skip(self, count: int):
        self.skip_count = count
        return self

    def limit(self, count: int):
        self.limit_count = count
        return self

    def _window(self) -> list[dict[str, Any]]:
        docs = self._docs[self.skip_count:]
        if self.limit_count:
            docs = docs[: self.limit_count]
        return docs

    async def to_list(self, length: int | None = None):
        docs = self._window()
        return docs if length is None else docs[:length]

    def __aiter__(self):
        async def gen():
            for doc in self._window():
                yield doc

        return gen()


class FakeLaunchCollection:
    """Enough of AsyncIOMotorCollection for find/sort/skip/limit and update_one."""

    def __init__(self, docs: list[dict[str, Any]] | None = None):
        self.docs = [copy.deepcopy(d) for d in docs or []]
        for doc in self.docs:
            doc.setdefault("_id", ObjectId())
        self.find_calls: list[tuple[dict[str, Any], dict[str, int] | None]] = []
        self.cursors: list[FakeCursor] = []
        self.update_calls: list[tuple[dict[str, Any], dict[str, Any]]] = []

    def find(self, predicate=None, projection=None):
        predicate = predicate or {}
        self.find_calls.append((predicate, projection))
        docs = [
            _project(copy.deepcopy(doc), projection)
            for doc in self.docs
            if matches(doc, predicate)
        ]
        cursor = FakeCursor(docs)
        self.cursors.append(cursor)
        return cursor

    async def update_one(self, predicate, update):
        self.update_calls.append((predicate, update))
        (filter_path, filter_value), = predicate.items()

        for doc in self.docs:
            if not matches(doc, predicate):
                continue
            for key, value in update["$set"].items():
                if ".$." not in key:
                    _set_path(doc, key, value)
                    continue
                array_path, rest = key.split(".$.", 1)
                suffix = filter_path[len(array_path) + 1:]
                elements = _get_path(doc, array_path)
                position = next(
                    i
                    for i, element in enumerate(elements)
                    if matches(element, {suffix: filter_value})
                )
                _set_path(elements[position], rest, value)
            return FakeUpdateResult(matched_count=1, modified_count=1)

        return FakeUpdateResult(matched_count=0, modified_count=0)


def make_launch(
    flight_number: int,
    upcoming: bool = False,
    norad_ids: list[list[int]] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    payloads = [
        {"payload_id": f"P{flight_number}-{i}", "norad_id": ids, "orbit_params": {"regime": "low-earth"}}
        for i, ids in enumerate(norad_ids if norad_ids is not None else [[]])
    ]
    launch = {
        "flight_number": flight_number,
        "mission_name": f"Mission {flight_number}",
        "launch_year": str(2005 + flight_number),
        "launch_date_utc": f"{2005 + flight_number}-03-24T22:30:00.000Z",
        "upcoming": upcoming,
        "launch_success": None if upcoming else True,
        "rocket": {
            "rocket_id": "falcon9",
            "rocket_name": "Falcon 9",
            "second_stage": {"payloads": payloads},
        },
        "reuse": {"core": False, "side_core1": False, "fairings": False},
    }
    launch.update(extra)
    return launch


@pytest.fixture
def launches() -> list[dict[str, Any]]:
    return [
        make_launch(1, norad_ids=[[100]]),
        make_launch(2, norad_ids=[[200]]),
        make_launch(3, upcoming=True),
        make_launch(4, upcoming=True),
    ]


@pytest.fixture
def collection(launches) -> FakeLaunchCollection:
    return FakeLaunchCollection(launches)

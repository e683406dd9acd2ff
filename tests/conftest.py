# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Iterable, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

os.environ.setdefault("IDFORGE_DATACENTER_ID", "2")
os.environ.setdefault("IDFORGE_WORKER_ID", "3")

from idforge.core.layout import IdentifierLayout
from idforge.main import app as fastapi_app
from idforge.services.registry import reset_id_generator

REFERENCE_EPOCH = 1480166465631


class ScriptedClock:
    """Clock returning scripted readings, repeating the last one once exhausted."""

    def __init__(self, readings: Iterable[int]) -> None:
        self._readings = list(readings)
        if not self._readings:
            raise ValueError("at least one reading is required")
        self._index = 0
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        value = self._readings[min(self._index, len(self._readings) - 1)]
        self._index += 1
        return value


class ManualClock:
    """Clock whose reading only changes when a test moves it."""

    def __init__(self, now: int) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture()
def layout() -> IdentifierLayout:
    return IdentifierLayout(epoch=REFERENCE_EPOCH)


@pytest.fixture(autouse=True)
def fresh_generator() -> Iterator[None]:
    reset_id_generator()
    try:
        yield
    finally:
        reset_id_generator()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


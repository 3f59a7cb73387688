# tests/conftest.py
from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from neochat_relay.api.dependencies import get_store
from neochat_relay.main import app as fastapi_app
from neochat_relay.storage import InMemoryKeyValueStore

START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced clock in seconds, shaped like ``time.time``."""

    def __init__(self, start: float = START_TIME) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMillisClock:
    """Millisecond clock for service-level timestamp assertions."""

    def __init__(self, start: int = int(START_TIME * 1000)) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def millis_clock() -> FakeMillisClock:
    return FakeMillisClock()


@pytest.fixture()
def store(clock: FakeClock) -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_store_dependency(app: FastAPI, store: InMemoryKeyValueStore) -> Iterator[None]:
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_store, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client

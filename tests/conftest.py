"""Root conftest: storage and URL strategy fixtures shared by all tests."""

from __future__ import annotations

import pytest

from docdrop.storage.base import StorageBackend
from docdrop.storage.local import LocalStorage
from docdrop.urls import RequestContext, StaticUrlStrategy


class FixedClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


class FailingStorage(StorageBackend):
    name = "failing"

    def __init__(self, error: Exception) -> None:
        self.error = error

    async def put(self, key, data, content_type="application/octet-stream"):
        raise self.error

    async def resolve(self, key):
        raise self.error


@pytest.fixture()
def local_storage(tmp_path) -> LocalStorage:
    return LocalStorage(str(tmp_path / "uploads"))


@pytest.fixture()
def static_strategy() -> StaticUrlStrategy:
    return StaticUrlStrategy("https://files.example.com/")


@pytest.fixture()
def request_context() -> RequestContext:
    return RequestContext(scheme="http", host="10.0.0.5:5000")


def read_stream(location) -> bytes:
    with location.source as source:
        return source.read()

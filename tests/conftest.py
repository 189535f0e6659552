import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Set
import pytest
from bookbridge.main import create_app
from bookbridge.storage.collection import ConcurrencyPolicy, Storage
from bookbridge.user.dependencies import StaticIdentity


class InMemoryStore:
    """Dict-backed store; every call yields to the loop first so read-modify-write cycles can interleave."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.fail_on_get: Set[str] = set()
        self.fail_on_set: Set[str] = set()
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        await asyncio.sleep(0)
        if key in self.fail_on_get:
            raise ConnectionError(f"get {key} refused")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        if key in self.fail_on_set:
            raise ConnectionError(f"set {key} refused")
        self.data[key] = value

    async def remove(self, key: str) -> None:
        await asyncio.sleep(0)
        self.data.pop(key, None)

    async def close(self) -> None:
        self.closed = True


class FakeClock:

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def store():
    return InMemoryStore()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def identity():
    return StaticIdentity("user123")

@pytest.fixture
def storage(store):
    return Storage(store, policy=ConcurrencyPolicy.LOCK)

@pytest.fixture
def app(store, identity, clock):
    return create_app(store=store, identity=identity, policy=ConcurrencyPolicy.LOCK, clock=clock)

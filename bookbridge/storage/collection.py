import asyncio
from contextlib import nullcontext
from enum import Enum
from typing import Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel
from bookbridge.config.settings import config_settings
from bookbridge.storage._store import KeyValueStore
from bookbridge.storage.codec import load_collection, save_collection
from bookbridge.storage.constants import logger

T = TypeVar("T", bound=BaseModel)
R = TypeVar("R")


class ConcurrencyPolicy(str, Enum):
    # read-modify-write cycles may interleave; the last full snapshot written wins
    NONE = "none"
    # one asyncio.Lock per collection name serializes read-modify-write cycles
    LOCK = "lock"


class Storage:
    """Hands out Collection objects over one store and owns their write locks."""

    def __init__(self, store: KeyValueStore, policy: Optional[ConcurrencyPolicy] = None):
        self.store = store
        self.policy = ConcurrencyPolicy(policy or config_settings.COLLECTION_WRITE_POLICY)
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock_for(self, name: str) -> asyncio.Lock:
        lock = self._locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[name] = lock
        return lock

    def collection(self, name: str, model: Type[T]) -> "Collection[T]":
        return Collection(self, name, model)


class Collection(Generic[T]):
    """The full ordered list of one record type, stored under a single key.

    Every mutation reads the whole list, changes it in memory and writes the
    whole list back.
    """

    def __init__(self, storage: Storage, name: str, model: Type[T]):
        self._storage = storage
        self.name = name
        self.model = model

    def _guard(self):
        if self._storage.policy is ConcurrencyPolicy.LOCK:
            return self._storage.lock_for(self.name)
        return nullcontext()

    async def load(self) -> List[T]:
        return await load_collection(self._storage.store, self.name, self.model)

    async def save(self, items: List[T]) -> None:
        await save_collection(self._storage.store, self.name, items)

    async def mutate(self, fn: Callable[[List[T]], Tuple[List[T], R]]) -> R:
        """Run fn over the current list and persist the list it returns.

        fn returns (new_items, result); result is handed back to the caller.
        """
        async with self._guard():
            items = await self.load()
            new_items, result = fn(items)
            await self.save(new_items)
            logger.debug("collection.mutated", extra={"collection": self.name, "count": len(new_items)})
            return result

    async def clear(self) -> None:
        async with self._guard():
            await self.save([])

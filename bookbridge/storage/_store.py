from typing import Optional, Protocol
import redis.asyncio as redis
from redis.exceptions import RedisError
from bookbridge.config.settings import config_settings

# errors a key-value backend may raise when it rejects a read or write
STORE_EXCEPTIONS = (RedisError, ConnectionError, TimeoutError, OSError)


class KeyValueStore(Protocol):
    """Asynchronous string-keyed, string-valued persistent store."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class RedisStore:
    """KeyValueStore over redis.asyncio; one redis key per collection."""

    def __init__(self, client: Optional[redis.Redis] = None):
        if client is None:
            client = redis.Redis(
                host=config_settings.REDIS_HOST, port=config_settings.REDIS_PORT, db=config_settings.REDIS_DB,
                decode_responses=True)
        self._client = client

    async def get(self, key: str) -> Optional[str]:
        raw = await self._client.get(key)
        if isinstance(raw, bytes):
            return raw.decode()
        return raw

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def remove(self, key: str) -> None:
        await self._client.delete(key)

    async def close(self) -> None:
        await self._client.aclose()

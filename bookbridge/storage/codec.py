from typing import Any, List, Sequence, Type, TypeVar
import orjson
from pydantic import BaseModel, ValidationError
from bookbridge.common.custom_exceptions import StorageFailure
from bookbridge.storage._store import STORE_EXCEPTIONS, KeyValueStore
from bookbridge.storage.constants import logger

T = TypeVar("T", bound=BaseModel)


def serialize(items: Sequence[BaseModel]) -> str:
    return orjson.dumps([it.model_dump(mode="json", by_alias=True, exclude_none=True) for it in items]).decode()


def deserialize(raw: str, model: Type[T], name: str = "") -> List[T]:
    """Parse a stored collection; unparseable values read as empty, bad rows are skipped."""
    try:
        data: Any = orjson.loads(raw)
    except orjson.JSONDecodeError:
        logger.warning("collection.decode_failed", extra={"collection": name})
        return []

    if not isinstance(data, list):
        logger.warning("collection.not_a_list", extra={"collection": name})
        return []

    items: List[T] = []
    for idx, row in enumerate(data):
        try:
            items.append(model.model_validate(row))
        except ValidationError:
            logger.warning("collection.record_skipped", extra={"collection": name, "index": idx})
    return items


async def load_collection(store: KeyValueStore, name: str, model: Type[T]) -> List[T]:
    try:
        raw = await store.get(name)
    except STORE_EXCEPTIONS as exc:
        logger.error("collection.read_failed", extra={"collection": name}, exc_info=exc)
        raise StorageFailure(name, "read") from exc

    if raw is None:
        return []
    return deserialize(raw, model, name)


async def save_collection(store: KeyValueStore, name: str, items: Sequence[BaseModel]) -> None:
    payload = serialize(items)
    try:
        await store.set(name, payload)
    except STORE_EXCEPTIONS as exc:
        logger.error("collection.write_failed", extra={"collection": name, "count": len(items)}, exc_info=exc)
        raise StorageFailure(name, "write") from exc

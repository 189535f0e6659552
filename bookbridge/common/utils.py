from contextlib import contextmanager
from datetime import datetime,timezone
from typing import Any, Dict, Iterator, Optional, Union
import uuid

from bookbridge.common.constants import correlation_id_ctx

def now() -> datetime:
    return datetime.now(timezone.utc)


def build_success(data: Any,
                  correlation_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "status": "ok",
        "data": data,
        "error": None,
        "correlation_id": correlation_id,
    }

def build_error(code: Union[str, int] = "UNKNOWN_ERROR",
                details: Optional[Any] = None,
                correlation_id: Optional[str] = None) -> Dict[str, Any]:
   
    return {
        "status": "error",
        "data": None,
        "error": {"code": code, "details": details},
        "correlation_id": correlation_id,
    }


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for the duration of one UI action."""
    cid = correlation_id or uuid.uuid4().hex
    reset_token = correlation_id_ctx.set(cid)
    try:
        yield cid
    finally:
        correlation_id_ctx.reset(reset_token)

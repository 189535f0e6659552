import contextvars
from typing import Optional

# Correlation id for one logical UI action (e.g. "place order"), attached to every log line
correlation_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)

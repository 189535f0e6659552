from typing import Any, Dict, Optional
from bookbridge.common.constants import correlation_id_ctx
from bookbridge.common.logging_setup import get_logger
from bookbridge.common.utils import build_error

logger = get_logger("bookbridge.common")


class AppError(Exception):
    """Base for every error the persistence/identity layer hands back to the UI."""

    code = "APP_ERROR"
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def details(self) -> Dict[str, Any]:
        return {"message": self.message}


class NotFound(AppError):
    code = "NOT_FOUND"
    default_message = "Resource not found"


class DuplicateIdentity(AppError):
    code = "DUPLICATE_IDENTITY"

    def __init__(self, field: str, message: Optional[str] = None):
        # "email" or "username", so the UI can say which one is taken
        self.field = field
        if message is None:
            message = "Email already registered" if field == "email" else "Username already taken"
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        return {"message": self.message, "field": self.field}


class InvalidCredentials(AppError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class InvalidOrExpiredToken(AppError):
    code = "INVALID_OR_EXPIRED_TOKEN"
    default_message = "Invalid or expired token"


class Unauthenticated(AppError):
    code = "UNAUTHENTICATED"
    default_message = "No user is logged in"


class StorageFailure(AppError):
    code = "STORAGE_FAILURE"
    default_message = "Local storage is unavailable"

    def __init__(self, collection: str, operation: str, message: Optional[str] = None):
        self.collection = collection
        self.operation = operation
        super().__init__(message or f"Storage {operation} failed for {collection}")

    def details(self) -> Dict[str, Any]:
        return {"message": self.message, "collection": self.collection, "operation": self.operation}


class CartNotCleared(AppError):
    """The order was saved but the cart clear that follows it failed."""

    code = "CART_NOT_CLEARED"
    default_message = "Order placed but the cart could not be cleared"

    def __init__(self, order, message: Optional[str] = None):
        self.order = order
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        return {"message": self.message, "order_id": self.order.id}


def error_payload(exc: BaseException) -> Dict[str, Any]:
    """Error envelope for the UI layer; anything unknown becomes SERVER_ERROR."""
    cid = correlation_id_ctx.get(None)

    if isinstance(exc, AppError):
        return build_error(code=exc.code, details=exc.details(), correlation_id=cid)

    logger.error(
        "unexpected.exception",
        extra={"correlation_id": cid},
        exc_info=exc,
    )
    return build_error(code="SERVER_ERROR", details={"message": "Something went wrong"}, correlation_id=cid)

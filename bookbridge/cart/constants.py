from bookbridge.common.logging_setup import get_logger

logger = get_logger("bookbridge.cart")

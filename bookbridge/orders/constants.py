from bookbridge.common.logging_setup import get_logger

logger = get_logger("bookbridge.orders")

# flat delivery charge added to every order, in rupees
DELIVERY_FEE = 40

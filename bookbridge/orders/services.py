from datetime import datetime
from typing import Callable, List
from uuid6 import uuid7
from bookbridge.cart.repository import CartRepository
from bookbridge.catalog.utils import Price
from bookbridge.common.custom_exceptions import CartNotCleared, StorageFailure
from bookbridge.common.utils import now
from bookbridge.orders.constants import logger
from bookbridge.orders.models import OrderIn
from bookbridge.orders.repository import OrderRepository
from bookbridge.orders.utils import compute_order_summary
from bookbridge.schema.order import Order, OrderStatus, PaymentMethod
from bookbridge.user.dependencies import IdentityContext, require_user_id


class OrderService:

    def __init__(self, orders: OrderRepository, cart: CartRepository, identity: IdentityContext,
                 clock: Callable[[], datetime] = now):
        self._orders = orders
        self._cart = cart
        self._identity = identity
        self._clock = clock

    async def create_order(self, data: OrderIn) -> Order:
        """Persist the order, then empty the cart.

        The two writes are not rolled back together. If the order is saved but
        the cart clear fails, CartNotCleared carries the saved order so the
        caller can retry the clear instead of placing the order again.
        """
        user_id = require_user_id(self._identity)
        ts = self._clock()
        order = Order(
            id=str(uuid7()),
            book_id=data.book_id,
            user_id=user_id,
            payment_method=data.payment_method,
            address=data.address,
            status=OrderStatus.PENDING,
            upi_id=data.upi_id if data.payment_method == PaymentMethod.UPI else None,
            created_at=ts,
            updated_at=ts,
        )

        await self._orders.append(order)
        logger.info("order.created", extra={"order_id": order.id, "user_id": user_id,
                                            "payment_method": order.payment_method.value})

        try:
            await self._cart.clear()
        except StorageFailure as exc:
            logger.error("order.cart_clear_failed", extra={"order_id": order.id, "user_id": user_id})
            raise CartNotCleared(order) from exc

        return order

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        user_id = require_user_id(self._identity)
        order = await self._orders.update_status(order_id, user_id, status, self._clock())
        logger.info("order.status_updated", extra={"order_id": order_id, "status": order.status.value})
        return order

    async def get_order(self, order_id: str) -> Order:
        return await self._orders.get(order_id, require_user_id(self._identity))

    async def list_orders(self) -> List[Order]:
        return await self._orders.list_for_user(require_user_id(self._identity))

    def order_summary(self, price: Price, payment_method: PaymentMethod):
        return compute_order_summary(price, payment_method)

from datetime import datetime
from typing import List
from bookbridge.common.custom_exceptions import NotFound
from bookbridge.orders.constants import logger
from bookbridge.schema.order import Order, OrderStatus
from bookbridge.storage.collection import Storage
from bookbridge.storage.constants import ORDERS_KEY


class OrderRepository:

    def __init__(self, storage: Storage):
        self._orders = storage.collection(ORDERS_KEY, Order)

    async def append(self, order: Order) -> Order:
        await self._orders.mutate(lambda items: (items + [order], None))
        return order

    async def update_status(self, order_id: str, user_id: str, status: OrderStatus, at: datetime) -> Order:
        """Replace status/updated_at of an order owned by user_id.

        A foreign order is reported exactly like a missing one.
        """

        def apply(items: List[Order]):
            out = []
            updated = None
            for it in items:
                if it.id == order_id and it.user_id == user_id:
                    updated = it.model_copy(update={"status": OrderStatus(status), "updated_at": at})
                    out.append(updated)
                else:
                    out.append(it)
            if updated is None:
                # raising here aborts the write
                logger.warning("order.update.not_found_or_unauthorized", extra={"order_id": order_id, "user_id": user_id})
                raise NotFound(f"Order {order_id} not found")
            return out, updated

        return await self._orders.mutate(apply)

    async def get(self, order_id: str, user_id: str) -> Order:
        for order in await self._orders.load():
            if order.id == order_id and order.user_id == user_id:
                return order
        logger.warning("order.not_found", extra={"order_id": order_id, "user_id": user_id})
        raise NotFound(f"Order {order_id} not found")

    async def list_for_user(self, user_id: str) -> List[Order]:
        """Newest first."""
        owned = [o for o in await self._orders.load() if o.user_id == user_id]
        return owned[::-1]

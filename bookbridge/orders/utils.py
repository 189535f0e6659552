from bookbridge.catalog.utils import Price, normalize_price, price_value
from bookbridge.orders.constants import DELIVERY_FEE
from bookbridge.schema.order import PaymentMethod


def compute_order_summary(price: Price, payment_method: PaymentMethod):
    subtotal = price_value(price)
    delivery = DELIVERY_FEE
    total = subtotal + delivery

    return {
        "payment_method": PaymentMethod(payment_method).value,
        "summary": {
            "subtotal": normalize_price(subtotal),
            "delivery": normalize_price(delivery),
            "total": normalize_price(total),
        },
    }

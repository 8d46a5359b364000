import logging
from dataclasses import dataclass
from functools import lru_cache
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from app.adapters.mock_payment import MockCheckoutAdapter
from app.adapters.payment_errors import PaymentSessionFailed
from app.config import settings

log = logging.getLogger(__name__)


class EmptyCheckout(ValueError):
    pass


@dataclass
class CheckoutLineItem:
    product_name: str
    unit_price: Decimal
    quantity: int


def to_minor_units(amount: Decimal) -> int:
    """19.99 -> 1999; half a cent rounds away from zero."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_line_items(items: Iterable[CheckoutLineItem], currency: str) -> List[Dict]:
    return [
        {
            "price_data": {
                "currency": currency,
                "product_data": {"name": it.product_name},
                "unit_amount": to_minor_units(it.unit_price),
            },
            "quantity": it.quantity,
        }
        for it in items
    ]


@lru_cache
def get_checkout_adapter():
    """FastAPI dependency: one processor adapter per process, chosen by PAYMENT_BACKEND."""
    if settings.PAYMENT_BACKEND == "mock":
        return MockCheckoutAdapter()
    # stripe is only imported when it is the configured processor
    from app.adapters.stripe_checkout import StripeCheckoutAdapter

    return StripeCheckoutAdapter(settings.STRIPE_SECRET_KEY, timeout_seconds=settings.PAYMENT_TIMEOUT_SECONDS)


class CheckoutService:
    """
    Turns cart items into a hosted checkout session.

    Stored cart lines are never read or modified here; clearing the cart
    after payment is the caller's job.
    """

    def __init__(self, adapter):
        self.adapter = adapter

    def create_checkout_session(self, items: List[CheckoutLineItem]) -> Dict:
        if not items:
            raise EmptyCheckout("cartItems must not be empty")
        line_items = build_line_items(items, settings.CHECKOUT_CURRENCY)
        try:
            url = self.adapter.create_session(
                line_items,
                success_url=settings.CHECKOUT_SUCCESS_URL,
                cancel_url=settings.CHECKOUT_CANCEL_URL,
            )
        except PaymentSessionFailed:
            raise
        except Exception as e:
            # anything else from the transport is still a failed session
            log.exception("checkout session creation failed")
            raise PaymentSessionFailed(str(e)) from e
        return {"url": url}

import logging
from typing import Dict, List, Optional

import stripe

from app.adapters.payment_errors import PaymentSessionFailed

log = logging.getLogger(__name__)


class StripeCheckoutAdapter:
    """
    Creates hosted Stripe Checkout sessions.

    The client never retries: a failed call is reported straight back to the
    caller. Requests are bounded by `timeout_seconds`; a timeout surfaces as
    PaymentSessionFailed like any other processor error.
    """

    def __init__(self, secret_key: Optional[str], timeout_seconds: int = 15):
        self.secret_key = secret_key
        self.timeout_seconds = timeout_seconds
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout_seconds)
        stripe.max_network_retries = 0

    def create_session(self, line_items: List[Dict], success_url: str, cancel_url: str) -> str:
        """
        Request a single-use session in "payment" mode and return its redirect URL.

        Args:
            line_items: processor line items (price_data/quantity dicts).
            success_url / cancel_url: where the hosted page sends the customer.
        """
        if not self.secret_key:
            raise PaymentSessionFailed("Payment processor is not configured")
        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                payment_method_types=["card"],
                line_items=line_items,
                mode="payment",
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as e:
            log.exception("Stripe error")
            raise PaymentSessionFailed(str(e)) from e
        if not getattr(session, "url", None):
            raise PaymentSessionFailed("Processor returned a session without a URL")
        log.info("created checkout session %s", session.id)
        return session.url

    def health_check(self) -> bool:
        return bool(self.secret_key)

import time
from uuid import uuid4
from typing import Dict, List

from app.adapters.payment_errors import PaymentSessionFailed


class MockCheckoutAdapter:
    """
    Stand-in for the Stripe adapter in local development (PAYMENT_BACKEND=mock) and tests.

    Every request is kept in `sessions` so callers can inspect exactly what
    would have been sent to the processor.
    """

    def __init__(self, delay_ms: int = 0, fail: bool = False):
        self.delay_seconds = delay_ms / 1000.0
        self.fail = fail
        self.sessions: List[Dict] = []

    def create_session(self, line_items: List[Dict], success_url: str, cancel_url: str) -> str:
        # Simulate network latency / processor work
        if self.delay_seconds:
            time.sleep(self.delay_seconds)

        if self.fail:
            raise PaymentSessionFailed("Simulated processor rejection")

        session_id = f"cs_mock_{uuid4().hex}"
        self.sessions.append(
            {
                "id": session_id,
                "mode": "payment",
                "line_items": line_items,
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )
        return f"https://checkout.mock.local/pay/{session_id}"

    def health_check(self) -> bool:
        return True

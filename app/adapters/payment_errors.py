class PaymentSessionFailed(Exception):
    """The processor did not issue a checkout session (network error, rejection, bad line items)."""
    pass

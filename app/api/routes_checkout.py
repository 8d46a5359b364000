from fastapi import APIRouter, Depends, HTTPException

from app.adapters.payment_errors import PaymentSessionFailed
from app.schemas.cart_schema import CheckoutIn, CheckoutOut
from app.services.checkout_service import (
    CheckoutLineItem,
    CheckoutService,
    EmptyCheckout,
    get_checkout_adapter,
)

router = APIRouter(tags=["checkout"])


@router.post("/create-checkout-session", response_model=CheckoutOut, summary="Create hosted checkout session")
def create_checkout_session(payload: CheckoutIn, adapter=Depends(get_checkout_adapter)):
    svc = CheckoutService(adapter)
    items = [
        CheckoutLineItem(product_name=it.product_name, unit_price=it.price, quantity=it.quantity)
        for it in payload.cart_items
    ]
    try:
        return svc.create_checkout_session(items)
    except EmptyCheckout as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PaymentSessionFailed:
        raise HTTPException(status_code=500, detail="Failed to create checkout session")

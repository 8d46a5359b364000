from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.cart_schema import (
    AddToCartIn,
    CartLineOut,
    DeletedLineOut,
    MessageOut,
    UpdateQuantityIn,
)
from app.services.cart_service import (
    CartLineNotFound,
    CartService,
    InvalidQuantity,
    StoreUnavailable,
)

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("", response_model=CartLineOut, summary="Add item to cart (merges quantity)")
def add_to_cart(payload: AddToCartIn, db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.add_or_merge_line(
            payload.user_email,
            payload.product_id,
            payload.product_name,
            payload.price,
            payload.quantity,
            payload.image_url,
        )
    except InvalidQuantity as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailable:
        raise HTTPException(status_code=500, detail="Failed to add item to cart")


# registered before /{line_id} routes; "clear" is never a line id
@router.delete("/clear/{user_email}", response_model=MessageOut, summary="Remove every line for a customer")
def clear_cart(user_email: str, db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        svc.clear_cart(user_email)
    except StoreUnavailable:
        raise HTTPException(status_code=500, detail="Failed to clear cart")
    return {"message": "Cart cleared successfully"}


@router.get("/{user_email}", response_model=List[CartLineOut], summary="List a customer's cart")
def get_cart(user_email: str, db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.list_lines(user_email)
    except StoreUnavailable:
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{line_id}", response_model=CartLineOut, summary="Set a line's quantity")
def update_quantity(line_id: int, payload: UpdateQuantityIn, db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.set_quantity(line_id, payload.quantity)
    except CartLineNotFound:
        raise HTTPException(status_code=404, detail="Cart item not found")
    except InvalidQuantity as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailable:
        raise HTTPException(status_code=500, detail="Failed to update item quantity")


@router.delete("/{line_id}", response_model=DeletedLineOut, summary="Remove one line")
def delete_line(line_id: int, db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        line = svc.delete_line(line_id)
    except CartLineNotFound:
        raise HTTPException(status_code=404, detail="Cart item not found")
    except StoreUnavailable:
        raise HTTPException(status_code=500, detail="Failed to delete item")
    return {"message": "Item deleted", "item": CartLineOut.model_validate(line)}

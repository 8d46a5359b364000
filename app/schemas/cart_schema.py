# app/schemas/cart_schema.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# cart.quantity is a 32-bit INTEGER column
MAX_QUANTITY = 2_147_483_647


class AddToCartIn(BaseModel):
    user_email: str = Field(..., min_length=1, max_length=320)
    product_id: str = Field(..., min_length=1, max_length=128)
    product_name: str = Field(..., min_length=1, max_length=256)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(..., gt=0, le=MAX_QUANTITY)
    image_url: Optional[str] = Field(None, max_length=1024)

    @field_validator("product_id", mode="before")
    @classmethod
    def _product_id_as_str(cls, v):
        # storefronts send numeric ids as JSON numbers
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class UpdateQuantityIn(BaseModel):
    quantity: int = Field(..., gt=0, le=MAX_QUANTITY)


class CartLineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_email: str
    product_id: str
    product_name: str
    price: Decimal
    quantity: int
    image_url: Optional[str] = None
    created_at: datetime


class DeletedLineOut(BaseModel):
    message: str
    item: CartLineOut


class MessageOut(BaseModel):
    message: str


class CheckoutItemIn(BaseModel):
    product_name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., gt=0, le=MAX_QUANTITY)


class CheckoutIn(BaseModel):
    cart_items: List[CheckoutItemIn] = Field(..., alias="cartItems")


class CheckoutOut(BaseModel):
    url: str

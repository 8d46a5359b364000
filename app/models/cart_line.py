from app.db import Base
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)


class CartLine(Base):
    """
    One customer's chosen quantity of one product.

    At most one row exists per (user_email, product_id); adds merge into it.
    Name, price and image are copied in on first add and never refreshed.
    """

    __tablename__ = "cart"
    __table_args__ = (
        UniqueConstraint("user_email", "product_id", name="uq_cart_user_product"),
        CheckConstraint("quantity > 0", name="ck_cart_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_email = Column(String(320), nullable=False, index=True)
    product_id = Column(String(128), nullable=False)
    product_name = Column(String(256), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    image_url = Column(String(1024), nullable=True)
    # set by the service on insert only; merges leave it untouched
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<CartLine id={self.id} user={self.user_email} product={self.product_id} qty={self.quantity}>"

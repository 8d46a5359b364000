import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.cart_line import CartLine
from app.repositories.cart_repo import CartRepository, UnsupportedStore
from app.utils.transactions import smart_transaction

log = logging.getLogger(__name__)


class CartLineNotFound(Exception):
    pass


class StoreUnavailable(Exception):
    """The store could not be reached, timed out, or rejected the statement."""
    pass


class InvalidQuantity(ValueError):
    pass


def _require_positive(quantity: int):
    # bool is an int subclass; True is not a quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity("Quantity must be a positive integer")


class CartService:
    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    @contextmanager
    def _store(self, operation: str):
        """Run one store round trip in a transaction, mapping driver errors to StoreUnavailable."""
        try:
            with smart_transaction(self.db, operation):
                yield
        except (SQLAlchemyError, UnsupportedStore) as e:
            log.exception("%s failed", operation)
            self.db.rollback()
            raise StoreUnavailable(f"{operation} failed") from e

    def add_or_merge_line(
        self,
        user_email: str,
        product_id: str,
        product_name: str,
        price: Decimal,
        quantity: int,
        image_url: Optional[str] = None,
    ) -> CartLine:
        """
        Add a product to the customer's cart.

        The first add creates the line; later adds for the same product
        increase its quantity and keep the name, price, image and
        created_at from the first add.
        """
        _require_positive(quantity)
        with self._store("add to cart"):
            line = self.cart_repo.upsert_line(
                user_email,
                product_id,
                product_name,
                price,
                quantity,
                image_url,
                created_at=self._now(),
            )
        log.debug("merged cart line id=%s user=%s product=%s qty=%s", line.id, user_email, product_id, line.quantity)
        return line

    def list_lines(self, user_email: str) -> List[CartLine]:
        """Most recently added first."""
        with self._store("list cart"):
            return self.cart_repo.list_for_customer(user_email)

    def set_quantity(self, line_id: int, quantity: int) -> CartLine:
        # Overwrites, unlike add_or_merge_line. Zero is not accepted; remove the line instead.
        _require_positive(quantity)
        with self._store("update cart item"):
            line = self.cart_repo.set_quantity(line_id, quantity)
        if line is None:
            raise CartLineNotFound("Cart item not found")
        return line

    def delete_line(self, line_id: int) -> CartLine:
        with self._store("delete cart item"):
            line = self.cart_repo.delete(line_id)
        if line is None:
            raise CartLineNotFound("Cart item not found")
        return line

    def clear_cart(self, user_email: str) -> int:
        with self._store("clear cart"):
            removed = self.cart_repo.clear_customer(user_email)
        log.info("cleared %d cart line(s) for %s", removed, user_email)
        return removed

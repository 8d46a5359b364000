from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.models.cart_line import CartLine

# dialects with INSERT ... ON CONFLICT DO UPDATE; merge-add is refused elsewhere
UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class UnsupportedStore(RuntimeError):
    pass


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, line_id: int, for_update: bool = False) -> Optional[CartLine]:
        return self.db.get(
            CartLine,
            line_id,
            populate_existing=True,
            with_for_update=True if for_update else None,
        )

    def get_for_customer(self, user_email: str, product_id: str) -> Optional[CartLine]:
        return (
            self.db.query(CartLine)
            .filter(CartLine.user_email == user_email, CartLine.product_id == product_id)
            .populate_existing()
            .first()
        )

    def list_for_customer(self, user_email: str) -> List[CartLine]:
        return (
            self.db.query(CartLine)
            .filter(CartLine.user_email == user_email)
            .order_by(CartLine.created_at.desc(), CartLine.id.desc())
            .populate_existing()
            .all()
        )

    def upsert_line(
        self,
        user_email: str,
        product_id: str,
        product_name: str,
        price: Decimal,
        quantity: int,
        image_url: Optional[str],
        created_at: datetime,
    ) -> CartLine:
        """
        Insert the line, or add `quantity` to the existing one for the same
        (user_email, product_id). Name, price, image and created_at of an
        existing line are left as they are.

        On PostgreSQL and sqlite this is one INSERT ... ON CONFLICT DO UPDATE
        statement, so concurrent adds for the same pair can never produce two
        rows. Any other store raises UnsupportedStore before touching the table.
        """
        values = {
            "user_email": user_email,
            "product_id": product_id,
            "product_name": product_name,
            "price": price,
            "quantity": quantity,
            "image_url": image_url,
            "created_at": created_at,
        }
        dialect = self.db.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise UnsupportedStore(f"merge-add needs INSERT ... ON CONFLICT; unsupported database: {dialect}")

        table = CartLine.__table__
        stmt = insert(table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.user_email, table.c.product_id],
            set_={"quantity": table.c.quantity + stmt.excluded.quantity},
        )
        self.db.execute(stmt)
        return self.get_for_customer(user_email, product_id)

    def set_quantity(self, line_id: int, quantity: int) -> Optional[CartLine]:
        line = self.get_by_id(line_id, for_update=True)
        if line is None:
            return None
        line.quantity = quantity
        self.db.flush()
        return line

    def delete(self, line_id: int) -> Optional[CartLine]:
        line = self.get_by_id(line_id, for_update=True)
        if line is None:
            return None
        self.db.delete(line)
        self.db.flush()
        return line

    def clear_customer(self, user_email: str) -> int:
        return (
            self.db.query(CartLine)
            .filter(CartLine.user_email == user_email)
            .delete(synchronize_session="fetch")
        )

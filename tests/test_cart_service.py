from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from uuid import uuid4

import pytest

from app.db import SessionLocal
from app.models.cart_line import CartLine
from app.repositories import cart_repo
from app.services.cart_service import (
    CartLineNotFound,
    CartService,
    InvalidQuantity,
    StoreUnavailable,
)


def _email():
    return f"svc-{uuid4().hex[:8]}@example.com"


def _add_in_own_session(email, product_id, qty):
    db = SessionLocal()
    try:
        svc = CartService(db)
        return svc.add_or_merge_line(email, product_id, "Creatine 500g", Decimal("49.90"), qty)
    finally:
        db.close()


def _rows(email, product_id):
    db = SessionLocal()
    try:
        return (
            db.query(CartLine)
            .filter(CartLine.user_email == email, CartLine.product_id == product_id)
            .all()
        )
    finally:
        db.close()


def test_merge_keeps_single_line_and_sums_quantities():
    email = _email()
    db = SessionLocal()
    try:
        svc = CartService(db)
        first = svc.add_or_merge_line(email, "P1", "Creatine 500g", Decimal("49.90"), 1, "img.png")
        created_at = first.created_at
        for qty in (2, 3, 4):
            line = svc.add_or_merge_line(email, "P1", "Other name", Decimal("1.00"), qty, "other.png")
        assert line.id == first.id
        assert line.quantity == 10
        assert line.created_at == created_at
        assert line.product_name == "Creatine 500g"
        assert line.price == Decimal("49.90")
        assert line.image_url == "img.png"
    finally:
        db.close()
    assert len(_rows(email, "P1")) == 1


def test_concurrent_adds_never_duplicate():
    email = _email()
    with ThreadPoolExecutor(max_workers=2) as ex:
        list(ex.map(lambda q: _add_in_own_session(email, "P2", q), [2, 3]))

    rows = _rows(email, "P2")
    assert len(rows) == 1
    assert rows[0].quantity == 5


def test_many_concurrent_adds_sum_up():
    email = _email()
    workers = 8
    with ThreadPoolExecutor(max_workers=workers) as ex:
        list(ex.map(lambda q: _add_in_own_session(email, "P3", q), [1] * workers))

    rows = _rows(email, "P3")
    assert len(rows) == 1
    assert rows[0].quantity == workers


def test_lines_are_per_product_and_customer():
    email = _email()
    _add_in_own_session(email, "A", 1)
    _add_in_own_session(email, "B", 1)
    _add_in_own_session(_email(), "A", 1)

    db = SessionLocal()
    try:
        lines = CartService(db).list_lines(email)
        assert [l.product_id for l in lines] == ["B", "A"]
    finally:
        db.close()


def test_non_positive_quantities_rejected():
    email = _email()
    db = SessionLocal()
    try:
        svc = CartService(db)
        with pytest.raises(InvalidQuantity):
            svc.add_or_merge_line(email, "P4", "Bar", Decimal("2.50"), 0)
        line = svc.add_or_merge_line(email, "P4", "Bar", Decimal("2.50"), 1)
        with pytest.raises(InvalidQuantity):
            svc.set_quantity(line.id, 0)
        with pytest.raises(InvalidQuantity):
            svc.set_quantity(line.id, -1)
        assert svc.set_quantity(line.id, 6).quantity == 6
    finally:
        db.close()


def test_missing_line_raises_not_found():
    db = SessionLocal()
    try:
        svc = CartService(db)
        with pytest.raises(CartLineNotFound):
            svc.set_quantity(123456789, 1)
        with pytest.raises(CartLineNotFound):
            svc.delete_line(123456789)
    finally:
        db.close()


def test_clear_reports_removed_count():
    email = _email()
    _add_in_own_session(email, "A", 1)
    _add_in_own_session(email, "B", 2)
    db = SessionLocal()
    try:
        svc = CartService(db)
        assert svc.clear_cart(email) == 2
        assert svc.clear_cart(email) == 0
        assert svc.list_lines(email) == []
    finally:
        db.close()


def test_merge_add_refused_without_on_conflict_support(monkeypatch):
    # a store whose dialect has no INSERT ... ON CONFLICT
    monkeypatch.setattr(cart_repo, "UPSERT_INSERTS", {})
    email = _email()
    db = SessionLocal()
    try:
        with pytest.raises(StoreUnavailable):
            CartService(db).add_or_merge_line(email, "P5", "Bar", Decimal("2.50"), 1)
    finally:
        db.close()
    assert _rows(email, "P5") == []

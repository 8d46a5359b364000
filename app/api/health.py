import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.db import engine
from app.services.checkout_service import get_checkout_adapter

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=PlainTextResponse, tags=["health"])
def root():
    return "Welcome to the IronFuel API!"


@router.get("/health", tags=["health"])
def health(adapter=Depends(get_checkout_adapter)):
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_ok = True
    except SQLAlchemyError:
        log.warning("health: store unreachable", exc_info=True)
    payment_ok = adapter.health_check()

    return {
        "status": "ok" if db_ok and payment_ok else "degraded",
        "db": db_ok,
        "payment_adapter": payment_ok,
    }

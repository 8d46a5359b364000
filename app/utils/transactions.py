import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.orm import Session, SessionTransaction

log = logging.getLogger(__name__)


@contextmanager
def smart_transaction(session: Session, label: Optional[str] = None) -> Iterator[SessionTransaction]:
    """
    Unit of work around one cart operation.

    A session with no open transaction gets its own top-level transaction,
    committed when the block exits. Inside a caller's transaction the block
    runs in a SAVEPOINT instead, and only the SAVEPOINT is released; the
    caller still owns the final commit. Either way an exception undoes the
    block's work and propagates unchanged.

    Usage:
        with smart_transaction(db, "add to cart"):
            ... DB work ...
    """
    label = label or "transaction"
    nested = session.in_transaction()
    tx = session.begin_nested() if nested else session.begin()
    try:
        with tx:
            yield tx
    except Exception as e:
        log.debug("%s rolled back%s: %r", label, " to savepoint" if nested else "", e)
        raise

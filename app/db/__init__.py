import importlib
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings

log = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    """
    Build create_engine() arguments for the configured store.

    - sqlite (dev/tests): allow use across threads, busy timeout as the
      statement timeout, default pool.
    - anything else (PostgreSQL in production): bounded pool with a checkout
      timeout, TLS required unless disabled, per-statement timeout.
    """
    backend = make_url(url).get_backend_name()
    timeout_ms = settings.DB_STATEMENT_TIMEOUT_MS
    if backend == "sqlite":
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": timeout_ms / 1000.0,
            },
        }

    connect_args = {}
    if backend == "postgresql":
        connect_args["options"] = f"-c statement_timeout={timeout_ms}"
        if settings.DB_SSL_REQUIRE and "sslmode=" not in url:
            connect_args["sslmode"] = "require"
    return {
        "connect_args": connect_args,
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT_SECONDS,
    }


engine = create_engine(DATABASE_URL, future=True, echo=False, **_engine_kwargs(DATABASE_URL))
# rows returned to callers stay readable after the transaction commits
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
Base = declarative_base()

# model modules that must be imported before create_all() sees their tables
MODEL_MODULES = [
    "app.models.cart_line",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    With reset=True (RESET_DB=1 in tests/CI) every table is dropped and
    recreated; otherwise existing tables are left in place.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset:
        log.info("Resetting database (RESET_DB set)...")
        Base.metadata.drop_all(bind=engine)

    log.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    log.info("Database initialized.")


def database_version() -> str:
    if engine.dialect.name == "sqlite":
        query = "SELECT sqlite_version()"
    else:
        query = "SELECT version()"
    with engine.connect() as conn:
        return conn.execute(text(query)).scalar_one()


def dispose_engine():
    engine.dispose()
    log.info("Database connection pool drained.")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

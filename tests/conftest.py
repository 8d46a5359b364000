import os
import tempfile

# Point the app at a throwaway sqlite file and the mock processor before app.config is imported.
TEST_DB = os.path.join(tempfile.gettempdir(), f"cart_tests_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB}"
os.environ["PAYMENT_BACKEND"] = "mock"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest

from app.db import dispose_engine, init_db


@pytest.fixture(autouse=True, scope="session")
def setup_db():
    init_db(reset=True)
    yield
    dispose_engine()
    if os.path.exists(TEST_DB):
        os.remove(TEST_DB)

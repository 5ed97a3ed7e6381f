import matplotlib

matplotlib.use("Agg")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

import storage


@pytest.fixture
def db():
    """Fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    storage.set_engine(engine)
    storage.init_db()
    yield engine
    storage.set_engine(None)
    engine.dispose()

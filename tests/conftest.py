# tests/conftest.py
import os

# must be set before caseguard.core.config is imported
os.environ.setdefault("DB_URL", "sqlite+pysqlite://")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker as _sessionmaker
from sqlalchemy.pool import StaticPool

from caseguard.core.db import get_db
from caseguard.models.base import Base

# register every ORM table in metadata before create_all
import caseguard.models.case  # noqa: F401
import caseguard.models.customer  # noqa: F401


@pytest.fixture()
def engine():
    """
    Fresh in-memory SQLite per test.

    StaticPool keeps one connection so the schema survives across sessions and
    the TestClient's worker thread sees the same database.
    """
    eng = create_engine(
        "sqlite+pysqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return _sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    from caseguard.main import app

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()

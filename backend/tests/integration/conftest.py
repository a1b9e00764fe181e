"""
Integration test fixtures and configuration.

Provides an in-memory SQLite database for the document store. StaticPool
keeps one shared connection so every session sees the same database, also
from worker threads.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from database.document_store import DocumentStore
from database.repositories.wait_time_repository import WaitTimeRepository
from models import Base


@pytest.fixture
def engine():
    """Fresh in-memory database with the documents table."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def document_store(engine):
    return DocumentStore(engine)


@pytest.fixture
def wait_time_repo(document_store):
    return WaitTimeRepository(document_store)

"""
SQLAlchemy ORM Base Configuration
Provides declarative base and session factory creation for ORM models.

The engine is supplied by the caller (database.connection in production,
an in-memory SQLite engine in tests) so importing models never opens a
connection.
"""

from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    pass


def create_session_factory(engine: Engine) -> sessionmaker:
    """
    Build a session factory bound to the given engine.

    Usage:
        SessionLocal = create_session_factory(engine)
        with SessionLocal() as session, session.begin():
            session.add(obj)

    Returns:
        sessionmaker producing SQLAlchemy Session instances
    """
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,  # Allow access to objects after commit
        autoflush=True,
    )

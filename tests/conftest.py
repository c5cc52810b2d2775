"""
Soft Delete Test Configuration

Provides pytest fixtures for in-memory SQLite database and session management.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from models import Base


@pytest.fixture(scope="session")
def db_engine():
    """Create an in-memory SQLite database for testing"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """
    Create a new database session for each test function.
    Rolls back all changes after the test completes.
    """
    connection = db_engine.connect()
    transaction = connection.begin()

    SessionLocal = sessionmaker(bind=connection)
    session = SessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def standalone_session():
    """
    Session on its own engine that really commits, for tests that need
    commit failures and rollbacks to behave as in production.
    """
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = Session(engine)

    yield session

    session.close()
    engine.dispose()

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from database import Base, get_db, register_sqlite_functions
from main import app
from redis_client import get_search_cache

# Create engine globally for the test session
TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
register_sqlite_functions(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def committing_session():
    # Real commits and rollbacks, for tests that hit constraint violations
    isolated_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_sqlite_functions(isolated_engine)
    Base.metadata.create_all(bind=isolated_engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=isolated_engine)()

    yield session

    session.close()
    isolated_engine.dispose()

@pytest.fixture(scope="function")
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_cache] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

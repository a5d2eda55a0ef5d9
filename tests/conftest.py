import os

# Keep the module-level engine off the working directory
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "database"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_db, get_memory_store
from app.core.config import Settings
from app.core.database import build_engine, create_database_tables
from app.main import create_app
from app.services.student.memory import InMemoryStudentStore


@pytest.fixture
def sample_student():
    return {"name": "Ali Khan", "age": 20, "email": "ali@example.com"}


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "students.db"


@pytest.fixture
def make_session_factory(db_path):
    """Build a session factory on the test database file. Each call is a fresh engine."""
    engines = []

    def _make():
        engine = build_engine(f"sqlite:///{db_path}")
        create_database_tables(engine)
        engines.append(engine)
        return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

    yield _make
    for engine in engines:
        engine.dispose()


@pytest.fixture
def session_factory(make_session_factory):
    return make_session_factory()


def build_db_client(session_factory) -> TestClient:
    app = create_app(Settings(STORAGE_BACKEND="database", AUTO_CREATE_TABLES=False))

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def build_memory_client(store: InMemoryStudentStore) -> TestClient:
    app = create_app(Settings(STORAGE_BACKEND="memory"))
    app.dependency_overrides[get_memory_store] = lambda: store
    return TestClient(app)


@pytest.fixture
def db_client_factory():
    return build_db_client


@pytest.fixture
def memory_client_factory():
    return build_memory_client


@pytest.fixture
def client(session_factory):
    return build_db_client(session_factory)


@pytest.fixture
def memory_store():
    return InMemoryStudentStore()


@pytest.fixture
def memory_client(memory_store):
    return build_memory_client(memory_store)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from resume_builder.database import get_db, init_db
from resume_builder.main import app
from resume_builder.services.auth_service import auth_service
from resume_builder.services.kv_store import InMemoryKeyValueStore


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def test_db(tmp_path):
    db_path = tmp_path / "db.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def fresh_auth_service():
    """Drop any sessions left over from other tests."""
    original = auth_service.__dict__.copy()
    auth_service._sessions = {}
    yield auth_service
    auth_service.__dict__.update(original)


@pytest.fixture
def client(test_db, fresh_auth_service):
    return TestClient(app)


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()



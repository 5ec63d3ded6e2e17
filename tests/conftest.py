import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from portfolio.db.base import Base
from portfolio.db.session import build_engine, get_db
from portfolio.main import app
from portfolio.services.notifications import get_notification_dispatcher
from portfolio.services.storage import LocalBlobStore, get_blob_store

engine = build_engine("sqlite://")
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="session", autouse=True)
def create_test_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    """
    Uses:
      - one outer transaction per test
      - a SAVEPOINT for every session-level transaction inside it

    Helpers and application code can call session.commit() and
    begin_nested() freely; the outer transaction is rolled back after every test.
    """
    connection = engine.connect()
    outer_tx = connection.begin()

    session = TestingSessionLocal(bind=connection, join_transaction_mode="create_savepoint")

    try:
        yield session
    finally:
        session.close()
        outer_tx.rollback()
        connection.close()


class RecordingDispatcher:
    def __init__(self):
        self.sent = []

    def dispatch(self, notification):
        self.sent.append(notification)


@pytest.fixture()
def notifications():
    return RecordingDispatcher()


@pytest.fixture()
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "uploads", "http://testserver")


@pytest.fixture(autouse=True)
def override_dependencies(db_session, notifications, blob_store):
    def _get_db_override():
        # same unit of work as get_db
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _get_db_override
    app.dependency_overrides[get_notification_dispatcher] = lambda: notifications
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c

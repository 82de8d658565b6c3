import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from passlib.handlers.bcrypt import bcrypt
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from minicloud.database import Base, get_db
from minicloud.dependencies import get_blob_store, get_token_service
from minicloud.main import app
from minicloud.models.user_model import User
from minicloud.services.token_service import TokenService
from minicloud.storage.blob_store import LocalBlobStore

DATABASE_URL = "sqlite:///:memory:"
TEST_SECRET = "test-secret-key"
USER_EMAIL = "user@example.com"
USER_PASSWORD = "Password1"
DISABLED_EMAIL = "disabled@example.com"

engine = create_engine(DATABASE_URL,
                       connect_args={
                           "check_same_thread": False,
                       },
                       poolclass=StaticPool)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


class FakeClock:
    def __init__(self, now=None):
        self.now = now or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def override_get_db():
    database = TestingSessionLocal()
    try:
        yield database
    finally:
        database.close()

app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_token_service] = lambda: TokenService(TEST_SECRET)


@pytest.fixture(autouse=True)
def setup_and_teardown():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    session.add(User(email=USER_EMAIL, password_hash=bcrypt.hash(USER_PASSWORD)))
    session.add(User(email=DISABLED_EMAIL, password_hash=bcrypt.hash(USER_PASSWORD), is_active=False))
    session.commit()
    session.close()

    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def blob_store(tmp_path):
    store = LocalBlobStore(tmp_path / "blobs")
    app.dependency_overrides[get_blob_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_blob_store, None)


@pytest.fixture
def client(blob_store):
    return TestClient(app)


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_service(clock):
    return TokenService(TEST_SECRET, clock=clock)


@pytest.fixture
def auth_headers(client):
    response = client.post("/auth/login", json={"email": USER_EMAIL, "password": USER_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def other_auth_headers(client):
    response = client.post("/auth/register", json={"email": "other@example.com", "password": "Other1234"})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from todoserver.database import get_db
from todoserver.main import create_app
from todoserver.models import Base


@pytest.fixture()
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(db_session_factory):
    session = db_session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session_factory):
    app = create_app()

    def override_get_db():
        session = db_session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # Not used as a context manager so the lifespan never touches the real database
    return TestClient(app)


def register(client, username="alice", password="pw1", recovery="r1"):
    return client.post(
        "/api/auth/register",
        json={"username": username, "password": password, "recoveryPhrase": recovery},
    )


def login(client, username="alice", password="pw1"):
    return client.post("/api/auth/login", json={"username": username, "password": password})


@pytest.fixture()
def auth_headers(client):
    def _auth_headers(username="alice", password="pw1", recovery="r1"):
        register(client, username, password, recovery)
        token = login(client, username, password).json()["token"]
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers

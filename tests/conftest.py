import os

# Settings are read once, at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("INTEGRITY_CHECK_INTERVAL_SECONDS", "0")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from main import app
from core.db import build_engine, get_session
from auth.security import get_password_hash
from models import Post, User

PASSWORD = "Secret1!"


@pytest.fixture
def test_db_engine():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_db_engine):
    with Session(test_db_engine) as session:
        yield session


@pytest.fixture
def client(test_db_engine):
    def get_test_session():
        with Session(test_db_engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_test_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, username, password=PASSWORD):
    response = client.post("/api/auth/register", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_user(client):
    return register(client, "alice")


@pytest.fixture
def auth_header(auth_user):
    return {"Authorization": f"Bearer {auth_user['token']}"}


@pytest.fixture
def other_user(client):
    return register(client, "bob")


@pytest.fixture
def other_auth_header(other_user):
    return {"Authorization": f"Bearer {other_user['token']}"}


@pytest.fixture
def make_user(db_session):
    def _make_user(username):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=get_password_hash(PASSWORD),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_post(db_session):
    def _make_post(author_id=None, title="Hello World", content="Some content here", category_id=None):
        post = Post(title=title, content=content, author_id=author_id, category_id=category_id)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post
    return _make_post

import asyncio
from types import SimpleNamespace

import pytest
from fastapi import FastAPI, HTTPException, status
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlmodel import select

from dependencies import RateLimiter, setup_error_handlers
from main import app
from models import Category, Post, User
from seed_data import create_test_data


class FakeRedis:
    def __init__(self, fail=False):
        self.counts = {}
        self.fail = fail

    async def incr(self, key):
        if self.fail:
            raise RedisConnectionError("redis is down")
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key, seconds):
        return True

    async def ping(self):
        if self.fail:
            raise RedisConnectionError("redis is down")
        return True

    async def aclose(self):
        pass


def fake_request(redis):
    return SimpleNamespace(
        app=SimpleNamespace(state=SimpleNamespace(redis=redis)),
        client=SimpleNamespace(host="10.0.0.1"),
    )


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
    assert response.json()["redis"] == "disabled"


@pytest.mark.parametrize("fail, redis_status", [(False, "ok"), (True, "unavailable")])
def test_health_check_reports_redis(client, monkeypatch, fail, redis_status):
    monkeypatch.setattr(app.state, "redis", FakeRedis(fail=fail))

    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["redis"] == redis_status


def test_metrics_endpoint(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == status.HTTP_200_OK
    assert "http_requests_total" in response.text


def test_rate_limiter_blocks_after_limit():
    limiter = RateLimiter("test", limit=2)
    request = fake_request(FakeRedis())

    asyncio.run(limiter(request))
    asyncio.run(limiter(request))
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(limiter(request))
    assert exc_info.value.status_code == 429


def test_rate_limiter_lets_requests_through_when_redis_fails():
    limiter = RateLimiter("test", limit=1)
    request = fake_request(FakeRedis(fail=True))

    for _ in range(3):
        asyncio.run(limiter(request))


def test_rate_limiter_disabled_without_redis():
    asyncio.run(RateLimiter("test", limit=0)(fake_request(None)))


def test_unhandled_errors_are_opaque():
    broken_app = FastAPI()
    setup_error_handlers(broken_app)

    @broken_app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    client = TestClient(broken_app, raise_server_exceptions=False)
    response = client.get("/boom")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["detail"] == "An unexpected error occurred"
    assert body["error_id"]
    assert "hunter2" not in response.text


def test_malformed_body_is_bad_request(client, auth_header):
    response = client.post(
        "/api/posts",
        headers={**auth_header, "Content-Type": "application/json"},
        content="{not json",
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid request"


def test_seed_data_fills_empty_database(test_db_engine, db_session):
    assert create_test_data(test_db_engine, post_count=10) is True
    assert create_test_data(test_db_engine) is False

    assert len(db_session.exec(select(User)).all()) == 10
    assert len(db_session.exec(select(Category)).all()) == 4
    posts = db_session.exec(select(Post)).all()
    assert len(posts) == 10
    for post in posts:
        assert all(like.user_id != post.author_id for like in post.likes)

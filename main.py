from contextlib import asynccontextmanager
import asyncio
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from prometheus_fastapi_instrumentator import Instrumentator, metrics
from sqlalchemy import text
from sqlmodel import Session
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from core.config import get_settings
from core.db import create_db_and_tables, engine
from core.logging_config import setup_logging
from core.tasks import periodic_integrity_check, reconcile_integrity
from dependencies import log_requests, setup_error_handlers
from routers import (
    auth_router,
    posts_router,
    categories_router,
    likes_router,
)

# Initialize settings and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute):
    return f"{route.tags[0] if route.tags else ''}-{route.name}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Setup and cleanup tasks for the application lifecycle"""
    create_db_and_tables()

    app.state.redis = None
    if settings.RATE_LIMIT_ENABLED:
        # The client connects lazily, an unreachable Redis only disables rate limiting
        app.state.redis = aioredis.from_url(
            settings.REDIS_URL, encoding="utf8", decode_responses=True
        )

    integrity_task = None
    if settings.INTEGRITY_CHECK_INTERVAL_SECONDS > 0:
        integrity_task = asyncio.create_task(
            periodic_integrity_check(interval=settings.INTEGRITY_CHECK_INTERVAL_SECONDS)
        )
    try:
        yield
    finally:
        if integrity_task:
            integrity_task.cancel()
            try:
                await integrity_task
            except asyncio.CancelledError:
                pass
        if app.state.redis:
            await app.state.redis.aclose()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=settings.REDOC_URL,
        openapi_url=settings.OPENAPI_URL,
        openapi_tags=settings.OPENAPI_TAGS,
        lifespan=lifespan,
        generate_unique_id_function=custom_generate_unique_id,
    )

    # Add middleware
    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add error handlers
    setup_error_handlers(app)

    Instrumentator().instrument(app)\
        .add(metrics.request_size())\
        .add(metrics.response_size())\
        .add(metrics.latency(buckets=[0.1, 0.5, 1.0, 2.0, 3.0, 4.0, 5.0]))\
        .add(metrics.requests(should_include_handler=True))\
        .expose(app, include_in_schema=True, should_gzip=True)

    # Include routers
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(posts_router, prefix="/api/posts", tags=["posts"])
    app.include_router(categories_router, prefix="/api/categories", tags=["categories"])
    app.include_router(likes_router, prefix="/api/likes", tags=["likes"])

    app.add_api_route("/health", health_check, methods=["GET"], tags=["health"])

    return app


async def health_check(request: Request):
    """Health check endpoint for monitoring"""
    try:
        # Check database connection
        with Session(engine) as session:
            session.execute(text("SELECT 1"))

        redis_status = "disabled"
        redis = getattr(request.app.state, "redis", None)
        if redis is not None:
            # Degraded, not down: the rate limiter fails open
            try:
                await redis.ping()
                redis_status = "ok"
            except RedisError as e:
                logger.warning(f"Redis ping failed: {str(e)}")
                redis_status = "unavailable"

        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc),
            "version": settings.APP_VERSION,
            "redis": redis_status,
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(
            status_code=503,
            detail="Service unavailable"
        )


# Create the FastAPI application
app = create_application()


def main():
    """Create the tables, optionally seed demo data and run one integrity pass"""
    create_db_and_tables()
    if settings.SEED_DEMO_DATA:
        from seed_data import create_test_data
        create_test_data(engine)
    report = reconcile_integrity()
    logger.info(
        f"Integrity check removed {report.posts_removed} posts and {report.likes_removed} likes"
    )


if __name__ == "__main__":
    main()

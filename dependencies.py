from typing import Annotated
from uuid import uuid4
import logging
from time import time

from fastapi import Depends, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.security import OAuth2PasswordBearer
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlmodel import Session

from auth.security import Identity, authenticate
from core.config import get_settings
from core.db import get_session
from core.exceptions import AuthError, BlogError

settings = get_settings()
logger = logging.getLogger(__name__)

SessionDep = Annotated[Session, Depends(get_session)]

# Authentication dependencies
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)

ACCESS_TOKEN_COOKIE = "access_token"


def _request_token(request: Request, bearer: str | None) -> str | None:
    """Bearer header first, then the cookie set at login"""
    if bearer:
        return bearer
    cookie = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if cookie:
        return cookie.replace("Bearer ", "")
    return None


async def get_identity(
    request: Request,
    bearer: Annotated[str | None, Depends(oauth2_scheme)],
) -> Identity:
    return authenticate(_request_token(request, bearer))


async def get_optional_identity(
    request: Request,
    bearer: Annotated[str | None, Depends(oauth2_scheme)],
) -> Identity | None:
    token = _request_token(request, bearer)
    if not token:
        return None
    try:
        return authenticate(token)
    except AuthError:
        return None


IdentityDep = Annotated[Identity, Depends(get_identity)]
OptionalIdentityDep = Annotated[Identity | None, Depends(get_optional_identity)]


# Rate limiting dependency
class RateLimiter:
    """Fixed-window request counter per client, kept in Redis"""

    def __init__(self, key_prefix: str, limit: int, window: int = 60):
        self.key_prefix = key_prefix
        self.limit = limit
        self.window = window

    async def __call__(self, request: Request):
        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return

        client = request.client.host if request.client else "unknown"
        key = f"rate_limit:{self.key_prefix}:{client}:{int(time() // self.window)}"
        try:
            requests = await redis.incr(key)
            if requests == 1:
                await redis.expire(key, self.window)
        except RedisError as e:
            logger.error(f"Rate limit error: {str(e)}")
            return

        if requests > self.limit:
            raise HTTPException(status_code=429, detail="Too many requests")


# Middleware
async def log_requests(request: Request, call_next):
    start_time = time()
    response = await call_next(request)
    process_time = time() - start_time

    logger.info(
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Status: {response.status_code} | "
        f"Process Time: {process_time:.2f}s"
    )
    return response


# Error handlers
def setup_error_handlers(app):
    @app.exception_handler(BlogError)
    async def blog_error_handler(request: Request, exc: BlogError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder({"detail": "Invalid request", "errors": errors}),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        error_id = str(uuid4())
        logger.error(
            f"Unhandled error {error_id}: {str(exc)}",
            exc_info=exc,
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_id": error_id,
            },
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred", "error_id": error_id},
        )

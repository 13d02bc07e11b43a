from typing import Annotated
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from fastapi.responses import JSONResponse
import logging

from models import AuthResponse, BasicResponse, LoginRequest, RegisterRequest, Token, User, UserPublic
from dependencies import ACCESS_TOKEN_COOKIE, IdentityDep, RateLimiter, SessionDep
from services import accounts
from core.config import get_settings

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)

login_rate_limit = RateLimiter("login", settings.LOGIN_ATTEMPTS_PER_MINUTE)


def _auth_response(user: User, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Build the token + profile body and set the session cookie"""
    token = accounts.issue_token(user)
    body = AuthResponse(token=token, user=UserPublic.model_validate(user))
    response = JSONResponse(body.model_dump(mode="json"), status_code=status_code)
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=f"Bearer {token}",
        httponly=True,
        secure=True,
        samesite="Lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return response


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, session: SessionDep):
    """Create an account and sign it in"""
    user = accounts.register(session, data.username, data.password, data.email)
    return _auth_response(user, status_code=status.HTTP_201_CREATED)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(login_rate_limit)])
async def login(data: LoginRequest, session: SessionDep):
    """Exchange username and password for a bearer token"""
    user = accounts.authenticate_user(session, data.username, data.password)
    logger.info(f"User {user.username} logged in")
    return _auth_response(user)


@router.post("/token", response_model=Token, dependencies=[Depends(login_rate_limit)])
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: SessionDep,
) -> Token:
    """OAuth2 password flow, used by the interactive docs"""
    user = accounts.authenticate_user(session, form_data.username, form_data.password)
    return Token(access_token=accounts.issue_token(user))


@router.post("/logout", response_model=BasicResponse)
async def logout(identity: IdentityDep):
    """Clear the authentication cookie; bearer tokens stay valid until they expire"""
    response = JSONResponse({"message": "Logged out successfully"})
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return response


@router.get("/me", response_model=UserPublic)
async def get_users_me(identity: IdentityDep, session: SessionDep) -> User:
    """Get the current user's profile"""
    return accounts.get_current_user(session, identity)

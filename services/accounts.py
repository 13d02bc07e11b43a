import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from auth.security import Identity, create_access_token, get_password_hash, verify_password
from core.config import get_settings
from core.exceptions import AuthError, ConflictError, NotFoundError
from core.metrics import users_registered_total
from models import User
from services.validation import validate_registration

settings = get_settings()
logger = logging.getLogger(__name__)


def get_user(username: str, session: Session) -> User | None:
    """Look a user up by username, ignoring case"""
    statement = select(User).where(func.lower(User.username) == username.lower())
    return session.exec(statement).first()


def issue_token(user: User) -> str:
    return create_access_token(user_id=user.id, username=user.username, email=user.email)


def register(session: Session, username: str, password: str, email: str | None = None) -> User:
    """Create an account after validating the credentials"""
    validate_registration(username, password, email)

    if get_user(username, session):
        raise ConflictError("Username is already taken")

    user = User(
        username=username,
        email=email or f"{username}@{settings.PLACEHOLDER_EMAIL_DOMAIN}",
        password_hash=get_password_hash(password),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # A concurrent registration took the name first
        session.rollback()
        raise ConflictError("Username is already taken")
    session.refresh(user)

    users_registered_total.inc()
    logger.info(f"Registered user {user.username} ({user.id})")
    return user


def authenticate_user(session: Session, username: str, password: str) -> User:
    user = get_user(username, session) if username else None
    if not user or not verify_password(password, user.password_hash):
        raise AuthError("Invalid username or password")
    return user


def get_current_user(session: Session, identity: Identity) -> User:
    """Load the account behind an identity; it may have been removed since the token was issued"""
    user = session.get(User, identity.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user

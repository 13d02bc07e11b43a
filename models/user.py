from sqlalchemy import Index, func
from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from .post import Post
    from .like import Like


class UserBase(SQLModel):
    username: str = Field(index=True, max_length=50)
    email: str = Field(index=True, max_length=256)


class User(UserBase, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, max_length=36)
    password_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    posts: List["Post"] = Relationship(back_populates="author")
    likes: List["Like"] = Relationship(back_populates="user")


# "Bob" and "bob" are the same account
Index("uq_users_username_lower", func.lower(User.__table__.c.username), unique=True)


class UserPublic(UserBase):
    id: str


class RegisterRequest(SQLModel):
    # Empty defaults let the validators report missing fields themselves
    username: str = ""
    password: str = ""
    email: Optional[str] = None


class LoginRequest(SQLModel):
    username: str = ""
    password: str = ""

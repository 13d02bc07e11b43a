from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING
from .user import UserPublic

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class Like(SQLModel, table=True):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),
    )

    id: int | None = Field(default=None, primary_key=True)
    post_id: int = Field(foreign_key="posts.id", index=True, ondelete="CASCADE")
    user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    post: Optional["Post"] = Relationship(back_populates="likes")
    user: Optional["User"] = Relationship(back_populates="likes")


class LikePublic(SQLModel):
    id: int
    post_id: int
    user_id: str
    created_at: datetime
    user: Optional[UserPublic] = None


class LikeStatus(SQLModel):
    has_liked: bool

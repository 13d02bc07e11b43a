from sqlalchemy import Column, Integer
from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime, timezone
from typing import Optional, List, TYPE_CHECKING
from .user import UserPublic
from .category import CategoryPublic

if TYPE_CHECKING:
    from .user import User
    from .category import Category
    from .like import Like

post_version = Column("version", Integer, nullable=False)


class PostBase(SQLModel):
    title: str = Field(max_length=100)
    content: str = Field(max_length=5000)


class Post(PostBase, table=True):
    __tablename__ = "posts"
    __mapper_args__ = {"version_id_col": post_version}

    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    updated_at: datetime | None = Field(default=None)
    author_id: str | None = Field(default=None, foreign_key="users.id", index=True, ondelete="CASCADE")
    category_id: int | None = Field(default=None, foreign_key="categories.id", index=True, ondelete="SET NULL")
    version: int = Field(default=1, sa_column=post_version)

    # Relationships
    author: Optional["User"] = Relationship(back_populates="posts")
    category: Optional["Category"] = Relationship(back_populates="posts")
    likes: List["Like"] = Relationship(
        back_populates="post",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )

    @property
    def likes_count(self) -> int:
        return len(self.likes)


class PostPublic(PostBase):
    id: int
    created_at: datetime
    updated_at: Optional[datetime]
    author_id: Optional[str]
    category_id: Optional[int]
    version: int
    author: Optional[UserPublic] = None
    category: Optional[CategoryPublic] = None
    likes_count: int = 0
    is_liked_by_user: Optional[bool] = None  # None for anonymous callers


class PostCreate(SQLModel):
    title: str = ""
    content: str = ""
    category_id: Optional[int] = None


class PostUpdate(PostCreate):
    id: Optional[int] = None
    version: Optional[int] = None

from sqlalchemy import Column, Index, Integer, func
from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .post import Post

category_version = Column("version", Integer, nullable=False)


class CategoryBase(SQLModel):
    name: str = Field(index=True, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)


class Category(CategoryBase, table=True):
    __tablename__ = "categories"
    # UPDATE ... WHERE version = ? detects concurrent writers
    __mapper_args__ = {"version_id_col": category_version}

    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = Field(default=1, sa_column=category_version)

    posts: List["Post"] = Relationship(back_populates="category")


Index("uq_categories_name_lower", func.lower(Category.__table__.c.name), unique=True)


class CategoryPublic(CategoryBase):
    id: int
    created_at: datetime
    version: int


class CategoryCreate(SQLModel):
    name: str = ""
    description: Optional[str] = None


class CategoryUpdate(CategoryCreate):
    id: Optional[int] = None
    version: Optional[int] = None

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import Session, col, or_, select

from auth.security import Identity
from core.exceptions import AuthError, BadRequestError, ConflictError, NotFoundError, ValidationError
from core.metrics import posts_created_total
from models import Category, Post, PostCreate, PostUpdate, User
from services.validation import validate_post

logger = logging.getLogger(__name__)


def _with_relations(statement):
    return statement.options(
        selectinload(Post.author),
        selectinload(Post.category),
        selectinload(Post.likes),
    )


def _ensure_category(session: Session, category_id: int | None) -> None:
    if category_id is not None and session.get(Category, category_id) is None:
        raise ValidationError(f"Category {category_id} does not exist")


def list_posts(
    session: Session,
    search: str | None = None,
    category_id: int | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Post]:
    """Newest posts first, optionally filtered by text and category"""
    statement = _with_relations(select(Post))

    if search and search.strip():
        # autoescape keeps % and _ literal
        statement = statement.where(
            or_(
                col(Post.title).icontains(search, autoescape=True),
                col(Post.content).icontains(search, autoescape=True),
            )
        )
    if category_id is not None:
        statement = statement.where(Post.category_id == category_id)

    statement = statement.order_by(col(Post.created_at).desc(), col(Post.id).desc()).offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return session.exec(statement).all()


def get_post(session: Session, post_id: int) -> Post:
    post = session.exec(_with_relations(select(Post).where(Post.id == post_id))).first()
    if post is None:
        raise NotFoundError("Post not found")
    return post


def create_post(session: Session, identity: Identity, data: PostCreate) -> Post:
    validate_post(data.title, data.content)
    _ensure_category(session, data.category_id)

    if session.get(User, identity.user_id) is None:
        raise AuthError("User no longer exists")

    post = Post(
        title=data.title,
        content=data.content,
        category_id=data.category_id,
        author_id=identity.user_id,
        created_at=datetime.now(timezone.utc),
        updated_at=None,
    )
    session.add(post)
    session.commit()
    session.refresh(post)

    posts_created_total.inc()
    logger.info(f"User {identity.username} created post {post.id}")
    return post


def update_post(session: Session, post_id: int, data: PostUpdate) -> Post:
    if data.id != post_id:
        raise BadRequestError("Route id does not match body id")

    validate_post(data.title, data.content)

    post = session.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if data.version is not None and data.version != post.version:
        raise ConflictError("Post was modified by another request, reload and retry")

    category_changed = "category_id" in data.model_fields_set
    if category_changed:
        _ensure_category(session, data.category_id)

    post.title = data.title
    post.content = data.content
    if category_changed:
        post.category_id = data.category_id
    post.updated_at = datetime.now(timezone.utc)
    session.add(post)

    try:
        session.commit()
    except StaleDataError:
        session.rollback()
        if session.get(Post, post_id) is None:
            raise NotFoundError("Post not found")
        raise ConflictError("Post was modified by another request, reload and retry")

    session.refresh(post)
    return post


def delete_post(session: Session, post_id: int) -> None:
    """Delete a post together with its likes"""
    post = session.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    session.delete(post)
    try:
        session.commit()
    except StaleDataError:
        session.rollback()
        raise NotFoundError("Post not found")
    logger.info(f"Deleted post {post_id}")

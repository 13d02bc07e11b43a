import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from auth.security import Identity
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.metrics import likes_total
from models import Like, Post

logger = logging.getLogger(__name__)


def _find_like(session: Session, post_id: int, user_id: str) -> Like | None:
    statement = select(Like).where(Like.post_id == post_id, Like.user_id == user_id)
    return session.exec(statement).first()


def list_likes_for_post(session: Session, post_id: int) -> list[Like]:
    statement = (
        select(Like)
        .where(Like.post_id == post_id)
        .options(selectinload(Like.user))
        .order_by(Like.created_at)
    )
    return session.exec(statement).all()


def like_post(session: Session, identity: Identity, post_id: int) -> Like:
    if post_id <= 0:
        raise ValidationError("Invalid post ID")

    post = session.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    if post.author_id == identity.user_id:
        raise ValidationError("You cannot like your own post")

    if _find_like(session, post_id, identity.user_id):
        raise ConflictError("You have already liked this post")

    like = Like(post_id=post_id, user_id=identity.user_id)
    session.add(like)
    try:
        session.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first
        session.rollback()
        raise ConflictError("You have already liked this post")
    session.refresh(like)

    likes_total.labels(action="like").inc()
    logger.info(f"User {identity.username} liked post {post_id}")
    return like


def unlike_post(session: Session, identity: Identity, post_id: int) -> None:
    like = _find_like(session, post_id, identity.user_id)
    if like is None:
        raise NotFoundError("Like not found")

    session.delete(like)
    session.commit()

    likes_total.labels(action="unlike").inc()
    logger.info(f"User {identity.username} unliked post {post_id}")


def has_liked(session: Session, identity: Identity, post_id: int) -> bool:
    return _find_like(session, post_id, identity.user_id) is not None

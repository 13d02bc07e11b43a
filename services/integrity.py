"""
Reconciliation of rows whose referenced entity no longer exists.

Accounts can be removed outside this application, which leaves posts
without an author and likes pointing at missing users or posts. This
module removes them; it is run by the scheduled job in ``core.tasks``
and never as part of serving a request.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import exists
from sqlmodel import Session, col, or_, select

from core.metrics import orphans_removed_total
from models import Like, Post, User

logger = structlog.get_logger(__name__)


@dataclass
class IntegrityReport:
    posts_removed: int = 0
    likes_removed: int = 0

    @property
    def total(self) -> int:
        return self.posts_removed + self.likes_removed


def find_orphan_posts(session: Session) -> list[Post]:
    author_exists = exists().where(User.id == Post.author_id)
    statement = select(Post).where(col(Post.author_id).is_not(None), ~author_exists)
    return session.exec(statement).all()


def find_orphan_likes(session: Session) -> list[Like]:
    post_exists = exists().where(Post.id == Like.post_id)
    user_exists = exists().where(User.id == Like.user_id)
    statement = select(Like).where(or_(~post_exists, ~user_exists))
    return session.exec(statement).all()


def remove_orphans(session: Session) -> IntegrityReport:
    report = IntegrityReport()

    # Posts first: their likes go with them through the cascade
    for post in find_orphan_posts(session):
        report.likes_removed += len(post.likes)
        session.delete(post)
        report.posts_removed += 1
    session.commit()

    for like in find_orphan_likes(session):
        session.delete(like)
        report.likes_removed += 1
    session.commit()

    if report.total:
        orphans_removed_total.labels(kind="post").inc(report.posts_removed)
        orphans_removed_total.labels(kind="like").inc(report.likes_removed)
        logger.warning(
            "orphans_removed",
            posts=report.posts_removed,
            likes=report.likes_removed,
        )
    else:
        logger.debug("no_orphans_found")
    return report

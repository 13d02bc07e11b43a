from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
import logging

from models import Post, PostCreate, PostPublic, PostUpdate, UserPublic, CategoryPublic
from dependencies import IdentityDep, OptionalIdentityDep, RateLimiter, SessionDep
from auth.security import Identity
from services import posts as post_service
from core.config import get_settings

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)

post_rate_limit = RateLimiter("posts", settings.POSTS_PER_MINUTE)


def add_liked_status(post: Post, identity: Identity | None) -> PostPublic:
    """Convert a Post to PostPublic with relations expanded and the caller's liked status"""
    post_dict = post.model_dump()
    post_dict["author"] = UserPublic.model_validate(post.author) if post.author else None
    post_dict["category"] = CategoryPublic.model_validate(post.category) if post.category else None
    post_dict["likes_count"] = post.likes_count
    post_dict["is_liked_by_user"] = (
        any(like.user_id == identity.user_id for like in post.likes)
        if identity else None
    )
    return PostPublic(**post_dict)


@router.get("", response_model=List[PostPublic])
async def list_posts(
    session: SessionDep,
    identity: OptionalIdentityDep,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    """List posts, newest first, optionally filtered by text or category"""
    posts = post_service.list_posts(
        session, search=search, category_id=category_id, limit=limit, offset=offset
    )
    return [add_liked_status(post, identity) for post in posts]


@router.get("/{post_id}", response_model=PostPublic)
async def get_post(post_id: int, session: SessionDep, identity: OptionalIdentityDep) -> PostPublic:
    """Get a specific post by ID"""
    post = post_service.get_post(session, post_id)
    return add_liked_status(post, identity)


@router.post(
    "",
    response_model=PostPublic,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(post_rate_limit)],
)
async def create_post(
    data: PostCreate,
    response: Response,
    session: SessionDep,
    identity: IdentityDep,
) -> PostPublic:
    """Create a new post authored by the caller"""
    post = post_service.create_post(session, identity, data)
    response.headers["Location"] = f"/api/posts/{post.id}"
    return add_liked_status(post, identity)


@router.put("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_post(post_id: int, data: PostUpdate, session: SessionDep, identity: IdentityDep):
    """Replace the title, content and optionally the category of a post"""
    post_service.update_post(session, post_id, data)
    logger.info(f"User {identity.username} updated post {post_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int, session: SessionDep, identity: IdentityDep):
    """Delete a specific post and its likes"""
    post_service.delete_post(session, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from typing import List
from fastapi import APIRouter, Depends
import logging

from models import BasicResponse, Like, LikePublic, LikeStatus, UserPublic
from dependencies import IdentityDep, RateLimiter, SessionDep
from services import likes as like_service
from core.config import get_settings

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)

like_rate_limit = RateLimiter("likes", settings.LIKES_PER_MINUTE)


def to_like_public(like: Like) -> LikePublic:
    like_dict = like.model_dump()
    like_dict["user"] = UserPublic.model_validate(like.user) if like.user else None
    return LikePublic(**like_dict)


@router.get("/post/{post_id}", response_model=List[LikePublic])
async def list_likes_for_post(post_id: int, session: SessionDep):
    """Get the likes of a post together with who left them"""
    likes = like_service.list_likes_for_post(session, post_id)
    return [to_like_public(like) for like in likes]


@router.post("/post/{post_id}", response_model=BasicResponse, dependencies=[Depends(like_rate_limit)])
async def like_post(post_id: int, session: SessionDep, identity: IdentityDep):
    """Like a post"""
    like_service.like_post(session, identity, post_id)
    return BasicResponse(message="Post liked successfully")


@router.delete("/post/{post_id}", response_model=BasicResponse, dependencies=[Depends(like_rate_limit)])
async def unlike_post(post_id: int, session: SessionDep, identity: IdentityDep):
    """Unlike a post"""
    like_service.unlike_post(session, identity, post_id)
    return BasicResponse(message="Post unliked successfully")


@router.get("/post/{post_id}/status", response_model=LikeStatus)
async def get_like_status(post_id: int, session: SessionDep, identity: IdentityDep):
    """Check whether the caller has liked a post"""
    return LikeStatus(has_liked=like_service.has_liked(session, identity, post_id))

from typing import List
from fastapi import APIRouter, Response, status
import logging

from models import Category, CategoryCreate, CategoryPublic, CategoryUpdate
from dependencies import IdentityDep, SessionDep
from services import categories as category_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[CategoryPublic])
async def list_categories(session: SessionDep):
    """List all categories ordered by name"""
    return category_service.list_categories(session)


@router.get("/{category_id}", response_model=CategoryPublic)
async def get_category(category_id: int, session: SessionDep) -> Category:
    return category_service.get_category(session, category_id)


@router.post("", response_model=CategoryPublic, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    response: Response,
    session: SessionDep,
    identity: IdentityDep,
) -> Category:
    """Create a category; names are unique regardless of case"""
    category = category_service.create_category(session, data)
    response.headers["Location"] = f"/api/categories/{category.id}"
    return category


@router.put("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    session: SessionDep,
    identity: IdentityDep,
):
    category_service.update_category(session, category_id, data)
    logger.info(f"User {identity.username} updated category {category_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, session: SessionDep, identity: IdentityDep):
    """Delete a category, its posts become uncategorized"""
    category_service.delete_category(session, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import Session, select

from core.exceptions import BadRequestError, ConflictError, NotFoundError
from models import Category, CategoryCreate, CategoryUpdate
from services.validation import validate_category

logger = logging.getLogger(__name__)

NAME_TAKEN = "Category with this name already exists"


def _find_by_name(session: Session, name: str) -> Category | None:
    statement = select(Category).where(func.lower(Category.name) == name.lower())
    return session.exec(statement).first()


def list_categories(session: Session) -> list[Category]:
    return session.exec(select(Category).order_by(Category.name)).all()


def get_category(session: Session, category_id: int) -> Category:
    category = session.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def create_category(session: Session, data: CategoryCreate) -> Category:
    validate_category(data.name, data.description)

    if _find_by_name(session, data.name):
        raise ConflictError(NAME_TAKEN)

    category = Category(name=data.name, description=data.description)
    session.add(category)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(NAME_TAKEN)
    session.refresh(category)
    logger.info(f"Created category {category.id} '{category.name}'")
    return category


def update_category(session: Session, category_id: int, data: CategoryUpdate) -> Category:
    if data.id != category_id:
        raise BadRequestError("Route id does not match body id")

    validate_category(data.name, data.description)

    category = get_category(session, category_id)
    if data.version is not None and data.version != category.version:
        raise ConflictError("Category was modified by another request, reload and retry")

    existing = _find_by_name(session, data.name)
    if existing and existing.id != category.id:
        raise ConflictError(NAME_TAKEN)

    category.name = data.name
    category.description = data.description
    session.add(category)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(NAME_TAKEN)
    except StaleDataError:
        session.rollback()
        if session.get(Category, category_id) is None:
            raise NotFoundError("Category not found")
        raise ConflictError("Category was modified by another request, reload and retry")

    session.refresh(category)
    return category


def delete_category(session: Session, category_id: int) -> None:
    """Delete a category; its posts stay and lose their category"""
    category = get_category(session, category_id)
    # Without a delete cascade the ORM nulls posts.category_id on flush
    session.delete(category)
    try:
        session.commit()
    except StaleDataError:
        session.rollback()
        raise NotFoundError("Category not found")
    logger.info(f"Deleted category {category_id}")

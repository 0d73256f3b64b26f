"""Category service"""

import logging
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from tasker.core.context import CallContext
from tasker.core.errors import NotFoundError
from tasker.models.todo import Todo, TodoCategory, utcnow
from tasker.schemas.category import CategoryCreate, CategoryResponse
from tasker.services.todo_service import unit_of_work

logger = logging.getLogger(__name__)


def category_not_found() -> NotFoundError:
    return NotFoundError("category not found", code="CATEGORY_NOT_FOUND")


def create_category(db: Session, user_id: str, payload: CategoryCreate, ctx: Optional[CallContext] = None) -> CategoryResponse:
    with unit_of_work(db, ctx, "create category", user_id):
        category = TodoCategory(
            user_id=user_id,
            name=payload.name,
            color=payload.color,
            description=payload.description
        )
        db.add(category)
        db.flush()
        db.refresh(category)
        result = CategoryResponse.model_validate(category)

    logger.info(f"category created id={result.id} user_id={user_id}")
    return result


def get_categories(db: Session, user_id: str, ctx: Optional[CallContext] = None) -> List[CategoryResponse]:
    with unit_of_work(db, ctx, "get categories", user_id):
        categories = db.query(TodoCategory).filter(
            TodoCategory.user_id == user_id
        ).order_by(TodoCategory.name.asc()).all()
        result = [CategoryResponse.model_validate(c) for c in categories]
    return result


def get_category_by_id(db: Session, user_id: str, category_id: UUID, ctx: Optional[CallContext] = None) -> CategoryResponse:
    with unit_of_work(db, ctx, "get category by id", user_id, category_id):
        category = db.query(TodoCategory).filter(
            TodoCategory.id == category_id,
            TodoCategory.user_id == user_id
        ).first()

        if category is None:
            raise category_not_found()

        result = CategoryResponse.model_validate(category)
    return result


def delete_category(db: Session, user_id: str, category_id: UUID, ctx: Optional[CallContext] = None) -> None:
    """Delete a category; todos pointing at it lose their category."""
    with unit_of_work(db, ctx, "delete category", user_id, category_id):
        db.query(Todo).filter(
            Todo.category_id == category_id,
            Todo.user_id == user_id
        ).update({Todo.category_id: None, Todo.updated_at: utcnow()}, synchronize_session=False)

        deleted = db.query(TodoCategory).filter(
            TodoCategory.id == category_id,
            TodoCategory.user_id == user_id
        ).delete(synchronize_session=False)

        if deleted == 0:
            raise category_not_found()

    logger.info(f"category deleted id={category_id} user_id={user_id}")

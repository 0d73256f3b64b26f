"""Comment service"""

import logging
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from tasker.core.context import CallContext
from tasker.models.todo import Todo, TodoComment
from tasker.schemas.comment import CommentCreate, CommentResponse
from tasker.services.todo_service import todo_not_found, unit_of_work

logger = logging.getLogger(__name__)


def _owned_todo(db: Session, user_id: str, todo_id: UUID, lock: bool = False) -> Todo:
    query = db.query(Todo).filter(
        Todo.id == todo_id,
        Todo.user_id == user_id
    )
    if lock:
        query = query.with_for_update()

    todo = query.first()
    if todo is None:
        raise todo_not_found()
    return todo


def add_comment(db: Session, user_id: str, todo_id: UUID, payload: CommentCreate, ctx: Optional[CallContext] = None) -> CommentResponse:
    with unit_of_work(db, ctx, "add comment", user_id, todo_id):
        # verrou sur le todo: un delete concurrent attend la fin de l'insert
        _owned_todo(db, user_id, todo_id, lock=True)

        comment = TodoComment(
            todo_id=todo_id,
            user_id=user_id,
            content=payload.content
        )
        db.add(comment)
        db.flush()
        db.refresh(comment)
        result = CommentResponse.model_validate(comment)

    logger.info(f"comment added id={result.id} todo_id={todo_id} user_id={user_id}")
    return result


def get_comments_by_todo_id(db: Session, user_id: str, todo_id: UUID, ctx: Optional[CallContext] = None) -> List[CommentResponse]:
    with unit_of_work(db, ctx, "get comments", user_id, todo_id):
        _owned_todo(db, user_id, todo_id)

        comments = db.query(TodoComment).filter(
            TodoComment.todo_id == todo_id,
            TodoComment.user_id == user_id
        ).order_by(TodoComment.created_at.asc(), TodoComment.id.asc()).all()
        result = [CommentResponse.model_validate(c) for c in comments]
    return result

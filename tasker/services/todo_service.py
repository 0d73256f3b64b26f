"""Todo service: populated reads, listings, stats and mutations.

Every public function runs as one unit of work on the given session. Reads of
a page cost three statements whatever the page size: roots joined with their
category, then children and comments for all roots of the page.
"""

import logging
from collections import defaultdict
from contextlib import contextmanager
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, case, func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tasker.core.context import CallContext, check
from tasker.core.errors import NotFoundError, OperationCancelledError, StoreError, TaskerError, ValidationError
from tasker.models.todo import (
    Todo,
    TodoCategory,
    TodoComment,
    utcnow,
    PRIORITY_MEDIUM,
    STATUS_ACTIVE,
    STATUS_ARCHIVED,
    STATUS_COMPLETED,
    STATUS_DRAFT,
)
from tasker.schemas.category import CategoryResponse
from tasker.schemas.comment import CommentResponse
from tasker.schemas.common import PaginatedResponse
from tasker.schemas.todo import (
    GetTodosQuery,
    PopulatedTodo,
    TodoBulkUpdate,
    TodoCreate,
    TodoResponse,
    TodoStats,
    TodoUpdate,
)
from tasker.services.todo_filters import (
    build_conditions,
    build_order_by,
    overdue_clause,
    page_offset,
    total_pages,
    validate_pagination,
)

logger = logging.getLogger(__name__)

# colonnes qui ne peuvent pas être remises à NULL par un update
NON_NULLABLE_FIELDS = ("title", "status", "priority")


def todo_not_found() -> NotFoundError:
    return NotFoundError("todo not found", code="TODO_NOT_FOUND")


def apply_statement_timeout(db: Session, ctx: Optional[CallContext]) -> None:
    """Bound every statement of the transaction by what is left of the deadline (Postgres only)."""
    if ctx is None or ctx.deadline is None:
        return
    if db.get_bind().dialect.name != "postgresql":
        return

    timeout_ms = max(int(ctx.remaining() * 1000), 1)
    # is_local=true: limité à la transaction en cours
    db.execute(
        text("SELECT set_config('statement_timeout', :timeout, true)"),
        {"timeout": str(timeout_ms)}
    )


@contextmanager
def unit_of_work(db: Session, ctx: Optional[CallContext], operation: str, user_id: str, entity_id=None):
    """Commit on success, roll back on any error.

    The context is checked before the first statement and again right before
    commit, so a cancelled call never leaves a partial write behind. A
    deadline also becomes the statement timeout, so a running query stops.
    """
    try:
        check(ctx)
        apply_statement_timeout(db, ctx)
        yield
        check(ctx)
        db.commit()
    except TaskerError:
        db.rollback()
        raise
    except (SQLAlchemyError, OperationCancelledError) as e:
        db.rollback()
        logger.error(f"Error: {operation} user_id={user_id} id={entity_id}: {e}")
        raise StoreError(operation, user_id, entity_id, cause=e) from e


def _category_join():
    return and_(TodoCategory.id == Todo.category_id, TodoCategory.user_id == Todo.user_id)


def _populate(db: Session, user_id: str, rows) -> List[PopulatedTodo]:
    ids = [todo.id for todo, _ in rows]
    children = defaultdict(list)
    comments = defaultdict(list)

    if ids:
        child_rows = db.query(Todo).filter(
            Todo.parent_todo_id.in_(ids),
            Todo.user_id == user_id
        ).order_by(Todo.sort_order.asc(), Todo.created_at.asc(), Todo.id.asc()).all()
        for child in child_rows:
            children[child.parent_todo_id].append(TodoResponse.model_validate(child))

        comment_rows = db.query(TodoComment).filter(
            TodoComment.todo_id.in_(ids),
            TodoComment.user_id == user_id
        ).order_by(TodoComment.created_at.asc(), TodoComment.id.asc()).all()
        for comment in comment_rows:
            comments[comment.todo_id].append(CommentResponse.model_validate(comment))

    populated = []
    for todo, category in rows:
        populated.append(PopulatedTodo.model_validate(todo).model_copy(update={
            "category": CategoryResponse.model_validate(category) if category is not None else None,
            "children": children[todo.id],
            "comments": comments[todo.id],
        }))
    return populated


def _apply_changes(todo: Todo, changes: dict) -> None:
    for field, value in changes.items():
        if field == "metadata":
            todo.todo_metadata = value
        else:
            setattr(todo, field, value)

    # completed_at suit le statut
    if "status" in changes:
        todo.completed_at = utcnow() if changes["status"] == STATUS_COMPLETED else None

    todo.updated_at = utcnow()


def _sparse_changes(payload, exclude: set) -> dict:
    changes = payload.model_dump(exclude_unset=True, exclude=exclude)
    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]
    return changes


# ============ READS ============

def get_todo_by_id(db: Session, user_id: str, todo_id: UUID, ctx: Optional[CallContext] = None) -> PopulatedTodo:
    with unit_of_work(db, ctx, "get todo by id", user_id, todo_id):
        row = db.query(Todo, TodoCategory).outerjoin(
            TodoCategory, _category_join()
        ).filter(
            Todo.id == todo_id,
            Todo.user_id == user_id
        ).first()

        if row is None:
            raise todo_not_found()

        result = _populate(db, user_id, [row])[0]
    return result


def check_todo_exists(db: Session, user_id: str, todo_id: UUID, ctx: Optional[CallContext] = None) -> TodoResponse:
    """Ownership check without the joins of get_todo_by_id."""
    with unit_of_work(db, ctx, "check todo exists", user_id, todo_id):
        todo = db.query(Todo).filter(
            Todo.id == todo_id,
            Todo.user_id == user_id
        ).first()

        if todo is None:
            raise todo_not_found()

        result = TodoResponse.model_validate(todo)
    return result


def get_todos(db: Session, user_id: str, query: GetTodosQuery, ctx: Optional[CallContext] = None) -> PaginatedResponse[PopulatedTodo]:
    validate_pagination(query)
    conditions = build_conditions(user_id, query)
    order_by = build_order_by(query)

    with unit_of_work(db, ctx, "get todos", user_id):
        total = db.query(func.count(Todo.id)).filter(*conditions).scalar() or 0

        rows = db.query(Todo, TodoCategory).outerjoin(
            TodoCategory, _category_join()
        ).filter(
            *conditions
        ).order_by(*order_by).limit(query.limit).offset(page_offset(query)).all()

        data = _populate(db, user_id, rows)

    return PaginatedResponse[PopulatedTodo](
        data=data,
        page=query.page,
        limit=query.limit,
        total=total,
        total_pages=total_pages(total, query.limit),
    )


def get_todo_stats(db: Session, user_id: str, ctx: Optional[CallContext] = None) -> TodoStats:
    def count_status(status: str):
        return func.count(case((Todo.status == status, 1)))

    with unit_of_work(db, ctx, "get todo stats", user_id):
        row = db.query(
            func.count(Todo.id).label("total"),
            count_status(STATUS_DRAFT).label("draft"),
            count_status(STATUS_ACTIVE).label("active"),
            count_status(STATUS_COMPLETED).label("completed"),
            count_status(STATUS_ARCHIVED).label("archived"),
            func.count(case((overdue_clause(), 1))).label("overdue"),
        ).filter(Todo.user_id == user_id).one()

    return TodoStats(
        total=row.total or 0,
        draft=row.draft or 0,
        active=row.active or 0,
        completed=row.completed or 0,
        archived=row.archived or 0,
        overdue=row.overdue or 0,
    )


# ============ MUTATIONS ============

def create_todo(db: Session, user_id: str, payload: TodoCreate, ctx: Optional[CallContext] = None) -> TodoResponse:
    with unit_of_work(db, ctx, "create todo", user_id):
        todo = Todo(
            user_id=user_id,
            title=payload.title,
            description=payload.description,
            status=STATUS_DRAFT,
            priority=payload.priority or PRIORITY_MEDIUM,
            due_date=payload.due_date,
            completed_at=None,
            parent_todo_id=payload.parent_todo_id,
            category_id=payload.category_id,
            todo_metadata=payload.metadata.model_dump() if payload.metadata is not None else None,
        )
        db.add(todo)
        db.flush()
        db.refresh(todo)
        result = TodoResponse.model_validate(todo)

    logger.info(f"todo created id={result.id} user_id={user_id}")
    return result


def update_todo(db: Session, user_id: str, payload: TodoUpdate, ctx: Optional[CallContext] = None) -> TodoResponse:
    changes = _sparse_changes(payload, exclude={"id"})
    if not changes:
        raise ValidationError("no fields to update", code="NO_FIELDS_TO_UPDATE")

    if changes.get("parent_todo_id") == payload.id:
        raise ValidationError("a todo cannot be its own parent", code="INVALID_PARENT")

    with unit_of_work(db, ctx, "update todo", user_id, payload.id):
        todo = db.query(Todo).filter(
            Todo.id == payload.id,
            Todo.user_id == user_id
        ).with_for_update().first()

        if todo is None:
            raise todo_not_found()

        _apply_changes(todo, changes)
        db.flush()
        db.refresh(todo)
        result = TodoResponse.model_validate(todo)

    logger.info(f"todo updated id={payload.id} user_id={user_id} fields={sorted(changes)}")
    return result


def bulk_update_todos(db: Session, user_id: str, payload: TodoBulkUpdate, ctx: Optional[CallContext] = None) -> List[TodoResponse]:
    """Apply the same change to several todos; ids not owned by the caller are skipped."""
    changes = _sparse_changes(payload, exclude={"todo_ids"})
    if not changes:
        raise ValidationError("no fields to update", code="NO_FIELDS_TO_UPDATE")

    with unit_of_work(db, ctx, "bulk update todos", user_id):
        todos = db.query(Todo).filter(
            Todo.id.in_(payload.todo_ids),
            Todo.user_id == user_id
        ).with_for_update().all()

        for todo in todos:
            _apply_changes(todo, changes)
        db.flush()

        by_id = {}
        for todo in todos:
            db.refresh(todo)
            by_id[todo.id] = TodoResponse.model_validate(todo)
        results = [by_id[todo_id] for todo_id in dict.fromkeys(payload.todo_ids) if todo_id in by_id]

    logger.info(f"todos bulk updated count={len(results)} user_id={user_id} fields={sorted(changes)}")
    return results


def delete_todo(db: Session, user_id: str, todo_id: UUID, ctx: Optional[CallContext] = None) -> None:
    """Hard delete. Children become root todos, comments are removed."""
    with unit_of_work(db, ctx, "delete todo", user_id, todo_id):
        db.query(Todo).filter(
            Todo.parent_todo_id == todo_id,
            Todo.user_id == user_id
        ).update({Todo.parent_todo_id: None, Todo.updated_at: utcnow()}, synchronize_session=False)

        db.query(TodoComment).filter(
            TodoComment.todo_id == todo_id
        ).delete(synchronize_session=False)

        deleted = db.query(Todo).filter(
            Todo.id == todo_id,
            Todo.user_id == user_id
        ).delete(synchronize_session=False)

        if deleted == 0:
            raise todo_not_found()

    logger.info(f"todo deleted id={todo_id} user_id={user_id}")

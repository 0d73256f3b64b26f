"""Predicate builder for todo listings.

Turns a GetTodosQuery into SQLAlchemy clauses. Caller values are always bound
parameters; the sort field goes through SORT_COLUMNS so an arbitrary column
name never reaches the statement.
"""

import math
from typing import List
from sqlalchemy import case, or_
from sqlalchemy.sql.elements import ColumnElement

from tasker.core.errors import ValidationError
from tasker.models.todo import Todo, STATUS_COMPLETED, store_now
from tasker.schemas.todo import GetTodosQuery


PRIORITY_RANK = case({"low": 1, "medium": 2, "high": 3}, value=Todo.priority, else_=0)

SORT_COLUMNS = {
    "created_at": Todo.created_at,
    "updated_at": Todo.updated_at,
    "title": Todo.title,
    "priority": PRIORITY_RANK,
    "due_date": Todo.due_date,
    "status": Todo.status,
}


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_pattern(term: str) -> str:
    return f"%{escape_like(term)}%"


def overdue_clause() -> ColumnElement:
    # horloge du store, pas celle de l'appelant
    return (Todo.due_date < store_now()) & (Todo.status != STATUS_COMPLETED)


def build_conditions(user_id: str, query: GetTodosQuery) -> List[ColumnElement]:
    conditions = [Todo.user_id == user_id]

    if query.status is not None:
        conditions.append(Todo.status == query.status)

    if query.priority is not None:
        conditions.append(Todo.priority == query.priority)

    if query.category_id is not None:
        conditions.append(Todo.category_id == query.category_id)

    if query.parent_todo_id is not None:
        conditions.append(Todo.parent_todo_id == query.parent_todo_id)
    else:
        # par défaut, seulement les todos racines
        conditions.append(Todo.parent_todo_id.is_(None))

    if query.due_from is not None:
        conditions.append(Todo.due_date >= query.due_from)

    if query.due_to is not None:
        conditions.append(Todo.due_date <= query.due_to)

    if query.overdue:
        conditions.append(overdue_clause())

    if query.completed is not None:
        if query.completed:
            conditions.append(Todo.status == STATUS_COMPLETED)
        else:
            conditions.append(Todo.status != STATUS_COMPLETED)

    if query.search is not None:
        pattern = search_pattern(query.search)
        conditions.append(or_(
            Todo.title.ilike(pattern, escape="\\"),
            Todo.description.ilike(pattern, escape="\\"),
        ))

    return conditions


def build_order_by(query: GetTodosQuery) -> List[ColumnElement]:
    if query.sort is None:
        return [Todo.created_at.desc(), Todo.id.desc()]

    column = SORT_COLUMNS.get(query.sort)
    if column is None:
        raise ValidationError(f"invalid sort field: {query.sort}", code="INVALID_SORT_FIELD")

    if query.order == "desc":
        return [column.desc(), Todo.id.desc()]
    return [column.asc(), Todo.id.asc()]


def page_offset(query: GetTodosQuery) -> int:
    return (query.page - 1) * query.limit


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        raise ValidationError("limit must be greater than zero", code="INVALID_LIMIT")
    return math.ceil(total / limit)


def validate_pagination(query: GetTodosQuery) -> None:
    if query.page < 1:
        raise ValidationError("page must be at least 1", code="INVALID_PAGE")
    if query.limit <= 0:
        raise ValidationError("limit must be greater than zero", code="INVALID_LIMIT")

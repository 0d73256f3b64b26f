from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Annotated, List, Optional
from uuid import UUID

from tasker.core.database import get_db
from tasker.routers.deps import get_current_user_id
from tasker.schemas.comment import CommentCreate, CommentResponse
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
from tasker.services import comment_service, todo_service

router = APIRouter(prefix="/v1/todos", tags=["todos"])


# payload PATCH: l'id vient du path
class TodoPatch(TodoUpdate):
    id: Optional[UUID] = None


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
def create_todo(
    payload: TodoCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return todo_service.create_todo(db, user_id, payload)


@router.get("", response_model=PaginatedResponse[PopulatedTodo])
def get_todos(
    query: Annotated[GetTodosQuery, Query()],
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return todo_service.get_todos(db, user_id, query)


@router.get("/stats", response_model=TodoStats)
def get_todo_stats(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return todo_service.get_todo_stats(db, user_id)


@router.patch("/bulk", response_model=List[TodoResponse])
def bulk_update_todos(
    payload: TodoBulkUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return todo_service.bulk_update_todos(db, user_id, payload)


@router.get("/{todo_id}", response_model=PopulatedTodo)
def get_todo(
    todo_id: UUID,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return todo_service.get_todo_by_id(db, user_id, todo_id)


@router.patch("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: UUID,
    payload: TodoPatch,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    fields = payload.model_dump(exclude_unset=True, exclude={"id"})
    update = TodoUpdate.model_validate({**fields, "id": todo_id})
    return todo_service.update_todo(db, user_id, update)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    todo_id: UUID,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    todo_service.delete_todo(db, user_id, todo_id)


@router.post("/{todo_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    todo_id: UUID,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return comment_service.add_comment(db, user_id, todo_id, payload)


@router.get("/{todo_id}/comments", response_model=List[CommentResponse])
def get_comments(
    todo_id: UUID,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return comment_service.get_comments_by_todo_id(db, user_id, todo_id)

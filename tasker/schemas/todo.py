"""Pydantic schemas for todo request/response validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, timezone
from typing import Optional, List, Literal
from uuid import UUID

from tasker.core.config import settings
from tasker.schemas.category import CategoryResponse
from tasker.schemas.common import as_utc
from tasker.schemas.comment import CommentResponse


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # les colonnes DateTime stockent de l'UTC naïf
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


Status = Literal["draft", "active", "completed", "archived"]
Priority = Literal["low", "medium", "high"]


class TodoMetadata(BaseModel):
    tags: List[str] = []
    color: Optional[str] = None
    reminder: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, tags: List[str]) -> List[str]:
        # les tags forment un ensemble, on garde l'ordre d'insertion
        return list(dict.fromkeys(tags))


class TodoCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    parent_todo_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    metadata: Optional[TodoMetadata] = None

    normalize_due_date = field_validator("due_date")(to_naive_utc)


class TodoUpdate(BaseModel):
    """Sparse update: only fields explicitly set are applied."""

    id: UUID
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[Status] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    parent_todo_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    metadata: Optional[TodoMetadata] = None

    normalize_due_date = field_validator("due_date")(to_naive_utc)


class TodoBulkUpdate(BaseModel):
    todo_ids: List[UUID] = Field(min_length=1, max_length=100)
    status: Optional[Status] = None
    priority: Optional[Priority] = None
    category_id: Optional[UUID] = None


class GetTodosQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT)
    sort: Optional[str] = None
    order: Optional[Literal["asc", "desc"]] = None
    search: Optional[str] = Field(default=None, min_length=1)
    status: Optional[Status] = None
    priority: Optional[Priority] = None
    category_id: Optional[UUID] = None
    parent_todo_id: Optional[UUID] = None
    due_from: Optional[datetime] = None
    due_to: Optional[datetime] = None
    overdue: Optional[bool] = None
    completed: Optional[bool] = None

    normalize_due_range = field_validator("due_from", "due_to")(to_naive_utc)


class TodoResponse(BaseModel):
    id: UUID
    user_id: str
    title: str
    description: Optional[str] = None
    status: Status
    priority: Priority
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    parent_todo_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    metadata: Optional[TodoMetadata] = Field(default=None, validation_alias="todo_metadata")
    sort_order: int = 0
    created_at: datetime
    updated_at: datetime

    timestamps_utc = field_validator("due_date", "completed_at", "created_at", "updated_at")(as_utc)

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PopulatedTodo(TodoResponse):
    category: Optional[CategoryResponse] = None
    children: List[TodoResponse] = []
    comments: List[CommentResponse] = []


class TodoStats(BaseModel):
    total: int = 0
    draft: int = 0
    active: int = 0
    completed: int = 0
    archived: int = 0
    overdue: int = 0

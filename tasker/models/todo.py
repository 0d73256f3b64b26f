"""Todo, category and comment models"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement
from tasker.core.database import Base


STATUS_DRAFT = "draft"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUS_ARCHIVED = "archived"
STATUSES = [STATUS_DRAFT, STATUS_ACTIVE, STATUS_COMPLETED, STATUS_ARCHIVED]

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITIES = [PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH]


def utcnow() -> datetime:
    # UTC naïf, comme les colonnes DateTime
    return datetime.now(timezone.utc).replace(tzinfo=None)


class store_now(FunctionElement):
    """Horloge du store, en UTC naïf comme les colonnes DateTime."""
    type = DateTime()
    inherit_cache = True


@compiles(store_now)
def _store_now_default(element, compiler, **kw):
    # CURRENT_TIMESTAMP est déjà en UTC sur sqlite
    return "CURRENT_TIMESTAMP"


@compiles(store_now, "postgresql")
def _store_now_postgresql(element, compiler, **kw):
    # colonnes sans zone: comparer en UTC, pas dans le TimeZone de la session
    return "TIMEZONE('utc', CURRENT_TIMESTAMP)"


class TodoCategory(Base):
    __tablename__ = "todo_categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)

    name = Column(String, nullable=False)
    color = Column(String, nullable=False, default="#6b7280")
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class Todo(Base):
    __tablename__ = "todos"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=STATUS_DRAFT, index=True)
    priority = Column(String, nullable=False, default=PRIORITY_MEDIUM)
    due_date = Column(DateTime, nullable=True, index=True)
    completed_at = Column(DateTime, nullable=True)

    parent_todo_id = Column(Uuid, ForeignKey("todos.id", ondelete="SET NULL"), nullable=True, index=True)
    category_id = Column(Uuid, ForeignKey("todo_categories.id", ondelete="SET NULL"), nullable=True, index=True)

    # "metadata" est réservé par declarative_base
    todo_metadata = Column("metadata", JSON, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class TodoComment(Base):
    __tablename__ = "todo_comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    todo_id = Column(Uuid, ForeignKey("todos.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    content = Column(Text, nullable=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

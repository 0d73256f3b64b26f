from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from uuid import UUID

from tasker.schemas.common import as_utc

# Schemas commentaires

class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=1000)

class CommentResponse(BaseModel):
    id: UUID
    todo_id: UUID
    user_id: str
    content: str
    created_at: datetime
    updated_at: datetime

    timestamps_utc = field_validator("created_at", "updated_at")(as_utc)

    model_config = ConfigDict(from_attributes=True)

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional
from uuid import UUID

from tasker.schemas.common import as_utc

# Schemas catégories

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = "#6b7280"
    description: Optional[str] = None

class CategoryResponse(BaseModel):
    id: UUID
    user_id: str
    name: str
    color: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    timestamps_utc = field_validator("created_at", "updated_at")(as_utc)

    model_config = ConfigDict(from_attributes=True)

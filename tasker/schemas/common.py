from pydantic import BaseModel
from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # la DB rend de l'UTC naïf, on l'expose avec sa zone
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T] = []
    page: int
    limit: int
    total: int
    total_pages: int

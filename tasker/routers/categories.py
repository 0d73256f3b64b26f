from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from tasker.core.database import get_db
from tasker.routers.deps import get_current_user_id
from tasker.schemas.category import CategoryCreate, CategoryResponse
from tasker.services import category_service

router = APIRouter(prefix="/v1/categories", tags=["categories"])


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return category_service.create_category(db, user_id, payload)


@router.get("", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return category_service.get_categories(db, user_id)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: UUID, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return category_service.get_category_by_id(db, user_id, category_id)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: UUID, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    category_service.delete_category(db, user_id, category_id)

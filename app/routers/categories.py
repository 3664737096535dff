from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.category import Category
from app.routers.deps import get_current_identity
from app.schemas.common import MessageResponse
from app.schemas.catalog import CategoryCreate, CategoryRead
from app.services import categories as category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_identity)],
)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)) -> Category:
    return category_service.create_category(db, payload)


@router.get("", response_model=list[CategoryRead])
def list_categories(db: Session = Depends(get_db)) -> list[Category]:
    return category_service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: str, db: Session = Depends(get_db)) -> Category:
    return category_service.get_category(db, category_id)


@router.delete("/{category_id}", response_model=MessageResponse, dependencies=[Depends(get_current_identity)])
def delete_category(category_id: str, db: Session = Depends(get_db)) -> MessageResponse:
    category_service.delete_category(db, category_id)
    return MessageResponse(message="Category deleted successfully")

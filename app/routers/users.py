from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.security import PasswordHasher
from app.db.session import get_db
from app.models.user import User
from app.routers.deps import get_current_identity, get_password_hasher
from app.schemas.auth import UserRead, UserUpdate
from app.schemas.common import MessageResponse
from app.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(get_current_identity)])


@router.get("", response_model=list[UserRead])
def get_all_users(db: Session = Depends(get_db)) -> list[User]:
    return user_service.list_users(db)


@router.get("/{user_id}", response_model=UserRead)
def get_user_by_id(user_id: str, db: Session = Depends(get_db)) -> User:
    return user_service.get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> User:
    return user_service.update_user(db, user_id, payload, hasher)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: str, db: Session = Depends(get_db)) -> MessageResponse:
    user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")

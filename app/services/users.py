import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import INVALID_CREDENTIALS_MESSAGE, NotFoundError, ValidationFailure
from app.core.security import PasswordHasher
from app.models.user import User
from app.schemas.auth import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def _commit_unique_email(db: Session) -> None:
    # The unique index on users.email is the only duplicate check.
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationFailure("Email already exists", code="email_exists") from exc


def register_user(db: Session, payload: UserCreate, hasher: PasswordHasher) -> User:
    user = User(
        username=payload.username,
        email=payload.email,
        phone=payload.phone,
        password_hash=hasher.hash(payload.password),
    )
    db.add(user)
    _commit_unique_email(db)
    db.refresh(user)
    logger.info("user_registered", extra={"user_id": user.id})
    return user


def authenticate_user(db: Session, email: str, password: str, hasher: PasswordHasher) -> User:
    user = db.scalar(select(User).where(User.email == email))
    if user is None:
        hasher.dummy_verify()
        logger.info("login_failed", extra={"reason": "unknown_email"})
        raise ValidationFailure(INVALID_CREDENTIALS_MESSAGE, code="invalid_credentials")
    if not hasher.verify(password, user.password_hash):
        logger.info("login_failed", extra={"reason": "password_mismatch", "user_id": user.id})
        raise ValidationFailure(INVALID_CREDENTIALS_MESSAGE, code="invalid_credentials")
    return user


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.created_at)).all())


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_user(db: Session, user_id: str, payload: UserUpdate, hasher: PasswordHasher) -> User:
    user = get_user(db, user_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    password = changes.pop("password", None)
    if password is not None:
        user.password_hash = hasher.hash(password)
    for field, value in changes.items():
        setattr(user, field, value)
    _commit_unique_email(db)
    db.refresh(user)
    logger.info("user_updated", extra={"user_id": user.id, "password_changed": password is not None})
    return user


def delete_user(db: Session, user_id: str) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("user_deleted", extra={"user_id": user_id})

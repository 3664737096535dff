from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationFailure
from app.models.category import Category
from app.schemas.catalog import CategoryCreate


def create_category(db: Session, payload: CategoryCreate) -> Category:
    category = Category(name=payload.name, description=payload.description)
    db.add(category)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationFailure("Category already exists", code="category_exists") from exc
    db.refresh(category)
    return category


def list_categories(db: Session) -> list[Category]:
    return list(db.scalars(select(Category).order_by(Category.name)).all())


def get_category(db: Session, category_id: str) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def delete_category(db: Session, category_id: str) -> None:
    db.delete(get_category(db, category_id))
    db.commit()

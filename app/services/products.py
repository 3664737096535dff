"""Product catalog persistence and search."""
import logging
from datetime import datetime, timezone

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFoundError, ValidationFailure
from app.models.category import Category
from app.models.comment import Comment
from app.models.common import is_valid_reference
from app.models.product import Product
from app.schemas.catalog import CommentCreate, ProductCreate, ProductSearch, ProductUpdate

logger = logging.getLogger(__name__)

TEXT_CRITERIA = ("title", "content", "size", "engine")
EXACT_CRITERIA = ("discount_price", "load_capacity")


def _with_relations(stmt: Select) -> Select:
    return stmt.options(selectinload(Product.categories), selectinload(Product.comments))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _resolve_categories(db: Session, category_ids: list[str]) -> list[Category]:
    valid_ids = list(dict.fromkeys(item for item in category_ids if is_valid_reference(item)))
    if not valid_ids:
        return []
    return list(db.scalars(select(Category).where(Category.id.in_(valid_ids))).all())


def list_products(db: Session) -> list[Product]:
    return list(db.scalars(_with_relations(select(Product).order_by(Product.created_at))).all())


def get_product(db: Session, product_id: str) -> Product:
    product = db.scalar(_with_relations(select(Product).where(Product.id == product_id)))
    if product is None:
        raise NotFoundError("Product not found")
    return product


def create_product(db: Session, payload: ProductCreate) -> Product:
    data = payload.model_dump(exclude={"category"})
    data["image_urls"] = data["image_urls"] or []

    categories: list[Category] = []
    if payload.category:
        categories = _resolve_categories(db, payload.category)
        if len(categories) != len(set(payload.category)):
            raise ValidationFailure("Invalid category reference", code="invalid_reference")

    product = Product(**data, categories=categories)
    db.add(product)
    db.commit()
    logger.info("product_created", extra={"product_id": product.id})
    return get_product(db, product.id)


def search_products(db: Session, criteria: ProductSearch) -> list[Product]:
    conditions = []
    for field in TEXT_CRITERIA:
        value = getattr(criteria, field)
        if value:
            conditions.append(getattr(Product, field).icontains(value, autoescape=True))
    if criteria.created_at is not None:
        conditions.append(Product.created_at >= _as_utc(criteria.created_at))
    for field in EXACT_CRITERIA:
        value = getattr(criteria, field)
        if value is not None:
            conditions.append(getattr(Product, field) == value)

    stmt = _with_relations(select(Product).where(*conditions).order_by(Product.created_at))
    return list(db.scalars(stmt).all())


def update_product(db: Session, product_id: str, payload: ProductUpdate) -> Product:
    product = get_product(db, product_id)

    changes = payload.model_dump(exclude_unset=True, exclude={"category", "image_urls", "video_url"})
    for field, value in changes.items():
        if value is not None:
            setattr(product, field, value)

    # An empty or fully invalid category list leaves the current categories alone.
    if payload.category:
        categories = _resolve_categories(db, payload.category)
        if categories:
            product.categories = categories
    if payload.image_urls:
        product.image_urls = payload.image_urls
    if payload.video_url:
        product.video_url = payload.video_url

    db.commit()
    logger.info("product_updated", extra={"product_id": product_id})
    return get_product(db, product_id)


def delete_product(db: Session, product_id: str) -> None:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    db.delete(product)
    db.commit()
    logger.info("product_deleted", extra={"product_id": product_id})


def list_comments(db: Session, product_id: str) -> list[Comment]:
    return get_product(db, product_id).comments


def add_comment(db: Session, product_id: str, author_id: str | None, payload: CommentCreate) -> Comment:
    product = get_product(db, product_id)
    comment = Comment(product_id=product.id, author_id=author_id, content=payload.content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment

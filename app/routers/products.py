from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.security import TokenIdentity
from app.db.session import get_db
from app.models.comment import Comment
from app.models.product import Product
from app.routers.deps import get_current_identity
from app.schemas.common import MessageResponse
from app.schemas.catalog import CommentCreate, CommentRead, ProductCreate, ProductRead, ProductSearch, ProductUpdate
from app.services import products as product_service

router = APIRouter(prefix="/products", tags=["products"])


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_identity)],
)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)) -> Product:
    return product_service.create_product(db, payload)


@router.get("", response_model=list[ProductRead])
def get_products(db: Session = Depends(get_db)) -> list[Product]:
    return product_service.list_products(db)


@router.post("/search", response_model=list[ProductRead])
def search_products(criteria: ProductSearch | None = None, db: Session = Depends(get_db)) -> list[Product]:
    return product_service.search_products(db, criteria or ProductSearch())


@router.get("/{product_id}", response_model=ProductRead)
def get_product_by_id(product_id: str, db: Session = Depends(get_db)) -> Product:
    return product_service.get_product(db, product_id)


@router.patch("/{product_id}", response_model=ProductRead, dependencies=[Depends(get_current_identity)])
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)) -> Product:
    return product_service.update_product(db, product_id, payload)


@router.delete("/{product_id}", response_model=MessageResponse, dependencies=[Depends(get_current_identity)])
def delete_product(product_id: str, db: Session = Depends(get_db)) -> MessageResponse:
    product_service.delete_product(db, product_id)
    return MessageResponse(message="Product deleted successfully")


@router.get("/{product_id}/comments", response_model=list[CommentRead])
def get_comments(product_id: str, db: Session = Depends(get_db)) -> list[Comment]:
    return product_service.list_comments(db, product_id)


@router.post("/{product_id}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
def add_comment(
    product_id: str,
    payload: CommentCreate,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> Comment:
    return product_service.add_comment(db, product_id, identity.user_id, payload)

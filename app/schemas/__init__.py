from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterResponse,
    TokenResponse,
    UserCreate,
    UserRead,
    UserSummary,
    UserUpdate,
)
from app.schemas.catalog import (
    CategoryCreate,
    CategoryRead,
    CommentCreate,
    CommentRead,
    ProductCreate,
    ProductRead,
    ProductSearch,
    ProductUpdate,
)
from app.schemas.common import MessageResponse

__all__ = [
    "UserCreate",
    "UserRead",
    "UserSummary",
    "UserUpdate",
    "LoginRequest",
    "RefreshRequest",
    "TokenResponse",
    "AuthResponse",
    "RegisterResponse",
    "MessageResponse",
    "CategoryCreate",
    "CategoryRead",
    "CommentCreate",
    "CommentRead",
    "ProductCreate",
    "ProductUpdate",
    "ProductSearch",
    "ProductRead",
]

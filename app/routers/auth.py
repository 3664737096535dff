from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError, NotFoundError
from app.core.security import PasswordHasher, TokenError, TokenIdentity, TokenService
from app.db.session import get_db
from app.models.user import User
from app.routers.deps import get_current_identity, get_password_hasher, get_token_service
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterResponse,
    TokenResponse,
    UserCreate,
    UserRead,
    UserSummary,
)
from app.services.users import authenticate_user, get_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(tokens: TokenService, user: User) -> dict:
    return {
        "access_token": tokens.issue_access_token(user.id, user.email),
        "refresh_token": tokens.issue_refresh_token(user.id, user.email),
        "user": UserSummary.model_validate(user),
    }


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> RegisterResponse:
    user = register_user(db, payload, hasher)
    return RegisterResponse(client_id=user.id, **_issue_tokens(tokens, user))


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthResponse:
    user = authenticate_user(db, payload.email, payload.password, hasher)
    return AuthResponse(**_issue_tokens(tokens, user))


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    payload: RefreshRequest,
    response: Response,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> TokenResponse:
    try:
        identity = tokens.verify(payload.refresh_token, expected_type="refresh")
        user = get_user(db, identity.user_id)
    except (TokenError, NotFoundError) as exc:
        raise AuthenticationError("Invalid or expired refresh token") from exc
    access_token = tokens.issue_access_token(user.id, user.email)
    response.headers["Authorization"] = f"Bearer {access_token}"
    return TokenResponse(access_token=access_token)


@router.get("/me", response_model=UserRead)
def me(identity: TokenIdentity = Depends(get_current_identity), db: Session = Depends(get_db)) -> User:
    return get_user(db, identity.user_id)

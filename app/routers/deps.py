from functools import lru_cache

from fastapi import Depends, Header, Request

from app.core.config import get_settings
from app.core.errors import AuthenticationError
from app.core.security import PasswordHasher, TokenError, TokenIdentity, TokenService


@lru_cache(maxsize=4)
def _hasher_for(rounds: int) -> PasswordHasher:
    return PasswordHasher(rounds=rounds)


def get_password_hasher() -> PasswordHasher:
    return _hasher_for(get_settings().bcrypt_rounds)


def get_token_service() -> TokenService:
    return TokenService(get_settings())


def get_current_identity(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> TokenIdentity:
    """Verify the bearer access token and attach its identity to the request.

    Verification failures are always rejected; a new token is only ever
    issued by ``POST /auth/refresh``.
    """
    if not authorization:
        raise AuthenticationError("Authorization header missing")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Invalid authorization header")
    try:
        identity = tokens.verify(token.strip(), expected_type="access")
    except TokenError as exc:
        raise AuthenticationError("Invalid or expired token") from exc
    request.state.identity = identity
    return identity

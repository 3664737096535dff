from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings

TokenType = Literal["access", "refresh"]


class PasswordHasher:
    """bcrypt hashing with an explicit cost factor."""

    def __init__(self, rounds: int = 12) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: str) -> bool:
        return self._context.verify(password, hashed_password)

    def dummy_verify(self) -> None:
        # Equalizes timing for unknown accounts.
        self._context.dummy_verify()


class TokenError(ValueError):
    pass


@dataclass(slots=True, frozen=True)
class TokenIdentity:
    user_id: str
    email: str


class TokenService:
    def __init__(self, settings: Settings) -> None:
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._lifetimes: dict[str, timedelta] = {
            "access": timedelta(minutes=settings.access_token_expire_minutes),
            "refresh": timedelta(minutes=settings.refresh_token_expire_minutes),
        }

    def issue(self, user_id: str, email: str, token_type: TokenType = "access", expires_delta: timedelta | None = None) -> str:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": user_id,
            "email": email,
            "type": token_type,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self._lifetimes[token_type]),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def issue_access_token(self, user_id: str, email: str, expires_delta: timedelta | None = None) -> str:
        return self.issue(user_id, email, "access", expires_delta)

    def issue_refresh_token(self, user_id: str, email: str, expires_delta: timedelta | None = None) -> str:
        return self.issue(user_id, email, "refresh", expires_delta)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise TokenError("Invalid token") from exc

    def verify(self, token: str, expected_type: TokenType = "access") -> TokenIdentity:
        payload = self.decode(token)
        if payload.get("type") != expected_type:
            raise TokenError(f"Expected {expected_type} token")
        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            raise TokenError("Token is missing identity claims")
        return TokenIdentity(user_id=user_id, email=email)

"""FastAPI auth dependencies.

These are used as Depends() in route handlers. get_current_user is the
gate for every protected route: it turns an Authorization header into a
CurrentIdentity or rejects the request with 401. It only reads; it never
changes anything in the store.

Every rejection carries the same shape, and a forged token and an expired
one get the same message, so a caller can't tell which check failed.
"""

import uuid
from datetime import datetime
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from todoserver.auth.jwt import TokenInvalid, TokenService
from todoserver.auth.password import PasswordHasher
from todoserver.config import settings
from todoserver.db.engine import get_db
from todoserver.services.user_service import UserService

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class CurrentIdentity:
    """The authenticated user making the request.

    All downstream code uses user_id as the owner scope for task queries.
    """

    def __init__(
        self,
        user_id: uuid.UUID,
        email: str,
        name: str,
        created_at: Optional[datetime] = None,
    ):
        self.user_id = user_id
        self.email = email
        self.name = name
        self.created_at = created_at

    def __repr__(self) -> str:
        return f"CurrentIdentity(user_id={self.user_id!s}, email={self.email!r})"


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_days=settings.token_expire_days,
    )


def unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={"code": "UNAUTHORIZED", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer_token(authorization: Optional[str]) -> str:
    parts = (authorization or "").strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return ""
    return parts[1].strip()


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> CurrentIdentity:
    """Resolve the bearer token to a live user (401 otherwise)."""
    token = _extract_bearer_token(authorization)
    if not token:
        raise unauthorized("Authentication required")

    try:
        subject = tokens.verify(token)
        user_id = uuid.UUID(subject)
    except (TokenInvalid, ValueError):
        raise unauthorized(INVALID_TOKEN_MESSAGE)

    user = await UserService(db).get_by_id(user_id)
    if not user:
        # Token outlived its account
        raise unauthorized(INVALID_TOKEN_MESSAGE)

    identity = CurrentIdentity(
        user_id=user.id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
    )
    request.state.identity = identity
    return identity

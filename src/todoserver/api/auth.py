"""Auth API — registration, login, current user, logout.

- POST /auth/register → create an account, returns a token (201)
- POST /auth/login → email/password → token
- GET /auth/me → current user info (bearer token)
- POST /auth/logout → acknowledge; the client discards its token

Tokens are not revoked server-side, so logout changes nothing here.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from todoserver.api.errors import api_error, validation_error
from todoserver.auth.dependencies import (
    CurrentIdentity,
    get_current_user,
    get_password_hasher,
    get_token_service,
)
from todoserver.auth.jwt import TokenService
from todoserver.auth.password import PasswordHasher
from todoserver.db.engine import get_db
from todoserver.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    MessageResponse,
    RegisterRequest,
    UserProfile,
    UserPublic,
)
from todoserver.services.auth_service import (
    AuthService,
    InvalidCredentials,
    UserExists,
    UserNotFound,
)
from todoserver.services.validation import ValidationError

router = APIRouter(prefix="/auth")


def _auth_svc(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, hasher, tokens)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_auth_svc)):
    """Create a new user account and log it in."""
    try:
        result = await svc.register(body.name, body.email, body.password)
    except ValidationError as e:
        raise validation_error(e)
    except UserExists:
        raise api_error(
            409,
            "USER_EXISTS",
            "An account with this email already exists. Please login instead.",
        )

    return AuthResponse(
        message="Registration successful!",
        token=result.token,
        user=UserPublic.model_validate(result.user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_auth_svc)):
    """Login with email and password → bearer token."""
    try:
        result = await svc.login(body.email, body.password)
    except ValidationError as e:
        raise validation_error(e)
    except UserNotFound:
        raise api_error(
            404, "USER_NOT_FOUND", "User does not exist. Please register first."
        )
    except InvalidCredentials:
        raise api_error(
            401, "INVALID_CREDENTIALS", "Invalid email or password. Please try again."
        )

    return AuthResponse(
        message="Login successful!",
        token=result.token,
        user=UserPublic.model_validate(result.user),
    )


@router.get("/me", response_model=MeResponse)
async def get_me(identity: CurrentIdentity = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return MeResponse(
        user=UserProfile(
            id=identity.user_id,
            name=identity.name,
            email=identity.email,
            created_at=identity.created_at,
        )
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(identity: CurrentIdentity = Depends(get_current_user)):
    """Logout is client-side: the token stays valid until it expires."""
    return MessageResponse(message="Logout successful")

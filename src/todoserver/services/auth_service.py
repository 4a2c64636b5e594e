"""Auth service — registration and login.

Each call is one unit of work against the credential store:

  register: validate → normalize email → reject existing → hash → insert
            → issue token → commit
  login:    validate → normalize email → look up → verify hash → issue token

The token is issued before the commit in register, so a signing failure
rolls back the insert rather than leaving a user the client never got a
token for. Hashing runs on a worker thread; bcrypt is deliberately slow.

UserNotFound and InvalidCredentials are kept distinct so the client can
tell "register first" from "wrong password".
"""

import asyncio
from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from todoserver.auth.jwt import TokenService
from todoserver.auth.password import PasswordHasher
from todoserver.db.models import User
from todoserver.services.user_service import EmailTaken, UserService, normalize_email
from todoserver.services.validation import (
    check_email,
    check_name,
    check_password,
    raise_for,
)

logger = structlog.get_logger()


class UserExists(Exception):
    """An account with this email is already registered."""


class UserNotFound(Exception):
    """No account is registered under this email."""


class InvalidCredentials(Exception):
    """The password does not match the account."""


@dataclass
class AuthResult:
    token: str
    user: User


class AuthService:
    """Registration and login on top of the credential store."""

    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.db = db
        self.users = UserService(db)
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and return a token for it.

        Raises:
            ValidationError: name/email/password break a field rule
            UserExists: the normalized email is already registered
        """
        raise_for(
            name=check_name(name),
            email=check_email(email),
            password=check_password(password),
        )
        email = normalize_email(email)

        if await self.users.get_by_email(email):
            raise UserExists(email)

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        try:
            user = await self.users.create(name, email, password_hash)
        except EmailTaken:
            # Lost the race to a concurrent registration of the same email
            raise UserExists(email)

        try:
            token = self.tokens.issue(str(user.id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("auth.registered", user_id=str(user.id))
        return AuthResult(token=token, user=user)

    async def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and return a fresh token.

        Raises:
            ValidationError: email or password missing
            UserNotFound: no account for this email
            InvalidCredentials: wrong password
        """
        raise_for(
            email=None if (email or "").strip() else "Email is required",
            password=None if password else "Password is required",
        )
        email = normalize_email(email)

        user = await self.users.get_by_email(email)
        if not user:
            logger.info("auth.login_failed", reason="user_not_found")
            raise UserNotFound(email)

        matches = await asyncio.to_thread(
            self.hasher.verify, password, user.password_hash
        )
        if not matches:
            logger.info("auth.login_failed", reason="invalid_password", user_id=str(user.id))
            raise InvalidCredentials(email)

        token = self.tokens.issue(str(user.id))
        logger.info("auth.login", user_id=str(user.id))
        return AuthResult(token=token, user=user)

"""JWT token creation and verification.

Tokens are stateless: the server keeps no record of what it has issued,
so a token stays valid until its exp claim passes. Logout is the client
discarding the token.

Claims: sub (user id as a string), iat, exp.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt


class TokenInvalid(Exception):
    """Raised when a token fails verification for any reason."""


class TokenExpired(TokenInvalid):
    """Raised when a well-signed token is past its exp claim."""


class TokenService:
    """Issue and verify signed bearer tokens with a server-held secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_days: int = 7):
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(days=expire_days)

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        """Create a token for user_id expiring after the configured lifetime."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Verify a token and return the user id it was issued for.

        Raises TokenExpired when now >= exp, TokenInvalid otherwise.
        The signature is checked before exp, so expired and forged
        tokens go through the same HMAC work.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalid(f"Invalid token: {e}")
        return payload["sub"]

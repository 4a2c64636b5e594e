"""Password hashing utilities.

bcrypt embeds a random salt in every hash (output starts with "$2b$"),
so two hashes of the same password never match byte-for-byte. The cost
factor is the dominant latency in register/login: 8 rounds is roughly
25ms, 10 rounds roughly 100ms, 12 rounds is already too slow for an
interactive login.
"""

import bcrypt

# bcrypt silently ignores input past 72 bytes; reject it instead.
MAX_PASSWORD_BYTES = 72


class InvalidInput(ValueError):
    """Raised when a plaintext cannot be hashed."""


class PasswordHasher:
    """bcrypt hash/verify with an injected cost factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh salt.

        Raises InvalidInput for empty or over-long input before doing
        any hashing work.
        """
        if not plaintext:
            raise InvalidInput("Password must not be empty")
        pw_bytes = plaintext.encode("utf-8")
        if len(pw_bytes) > MAX_PASSWORD_BYTES:
            raise InvalidInput(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")

    def verify(self, plaintext: str, hash_value: str) -> bool:
        """Check a password against a stored hash. Never raises."""
        if not plaintext or not hash_value:
            return False
        try:
            return bcrypt.checkpw(
                plaintext.encode("utf-8"), hash_value.encode("utf-8")
            )
        except (ValueError, TypeError):
            return False

"""Password hashing with bcrypt."""

import logging

import bcrypt

from app.config import Settings, get_settings
from app.exceptions import InvalidInput

logger = logging.getLogger("userhub")

# bcrypt ignores (newer releases reject) anything past 72 bytes
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Salted one-way hashing with a fixed bcrypt work factor."""

    def __init__(self, settings: Settings) -> None:
        self.rounds = settings.BCRYPT_ROUNDS

    def _encode(self, secret: str) -> bytes:
        if not isinstance(secret, str) or not secret:
            raise InvalidInput("Password must be a non-empty string")
        encoded = secret.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise InvalidInput(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        return encoded

    def hash(self, secret: str) -> str:
        """Hash a password. Each call uses a fresh salt."""
        return bcrypt.hashpw(self._encode(secret), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, secret: str, hashed: str) -> bool:
        """Check a password against a stored hash."""
        try:
            return bcrypt.checkpw(self._encode(secret), hashed.encode("utf-8"))
        except InvalidInput:
            return False
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False


_password_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get singleton password hasher instance."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher(get_settings())
    return _password_hasher

"""JWT Token Service."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import Settings, get_settings
from app.exceptions import TokenExpired, TokenSignatureInvalid
from app.models.user import User
from app.schemas.auth import TokenPair

ACCESS = "access"
REFRESH = "refresh"


def user_claims(user: User) -> dict[str, Any]:
    """Identity claims for a user, without the password hash or refresh token."""
    return {
        "sub": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value if hasattr(user.role, "value") else user.role,
        "active": user.active,
        "imageUrl": user.image_url,
    }


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(self, settings: Settings) -> None:
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.access_expires = timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES)
        self.refresh_expires = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)

    def create_token(self, claims: dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
        """Sign a token of the given type carrying ``claims``."""
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "type": token_type,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def issue(self, user: User) -> TokenPair:
        """Mint an access/refresh pair for the given user."""
        access_token = self.create_token(user_claims(user), ACCESS, self.access_expires)
        refresh_token = self.create_token({"sub": user.id}, REFRESH, self.refresh_expires)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def verify(self, token: str, token_type: str = ACCESS) -> dict[str, Any]:
        """Decode and validate a token of the expected type.

        Raises TokenExpired when the signature is good but ``exp`` has passed, and
        TokenSignatureInvalid for anything else that fails to verify.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpired("Token has expired") from None
        except JWTError:
            raise TokenSignatureInvalid("Invalid token") from None

        if payload.get("type") != token_type or not payload.get("sub"):
            raise TokenSignatureInvalid("Invalid token")
        return payload


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService(get_settings())
    return _jwt_service

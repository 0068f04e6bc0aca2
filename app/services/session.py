"""Session service: login, refresh-token rotation and logout."""

import logging

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.exceptions import InvalidCredentials, InvalidToken, NotFound
from app.schemas.auth import TokenPair
from app.services.jwt import REFRESH, JWTService, get_jwt_service
from app.services.user_store import UserStore, get_user_store

logger = logging.getLogger("userhub")


class SessionService:
    """Single active session per user, tracked by the stored refresh token.

    Every successful login or refresh overwrites ``User.refresh_token``, so any
    previously issued refresh token stops working. Concurrent logins race on
    that write and the last one wins.
    """

    def __init__(self, settings: Settings, tokens: JWTService, users: UserStore) -> None:
        self.settings = settings
        self.tokens = tokens
        self.users = users

    def login(self, db: Session, email: str, password: str) -> TokenPair:
        """Verify credentials and start a new session."""
        user = self.users.find_by_email(db, email)
        if not user:
            raise NotFound("User not found")

        if not self.users.hasher.verify(password, user.password_hash):
            raise InvalidCredentials("Invalid email or password")

        if not user.active:
            raise InvalidCredentials("Account is deactivated")

        pair = self.tokens.issue(user)
        self.users.set_refresh_token(db, user.id, pair.refresh_token)
        logger.info("Login user=%s", user.id)
        return pair

    def refresh(self, db: Session, refresh_token: str) -> TokenPair:
        """Exchange the current refresh token for a new pair, rotating it."""
        claims = self.tokens.verify(refresh_token, REFRESH)

        user = self.users.find_by_id(db, claims["sub"])
        if not user:
            raise NotFound("User not found")

        if user.refresh_token is None or user.refresh_token != refresh_token:
            logger.warning("Rejected stale refresh token for user=%s", user.id)
            raise InvalidToken("Invalid refresh token")

        if not user.active:
            raise InvalidCredentials("Account is deactivated")

        pair = self.tokens.issue(user)
        self.users.set_refresh_token(db, user.id, pair.refresh_token)
        return pair

    def logout(self, db: Session, user_id: str) -> None:
        """End the user's session. Safe to call repeatedly."""
        self.users.set_refresh_token(db, user_id, None)
        logger.info("Logout user=%s", user_id)


_session_service: SessionService | None = None


def get_session_service() -> SessionService:
    """Get singleton session service instance."""
    global _session_service
    if _session_service is None:
        _session_service = SessionService(get_settings(), get_jwt_service(), get_user_store())
    return _session_service

"""Authentication dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request

from app.exceptions import InvalidToken
from app.models.user import UserRole
from app.services.jwt import ACCESS, get_jwt_service


@dataclass
class CurrentUser:
    """Authenticated user context, resolved from the access token alone."""

    user_id: str
    name: str
    email: str
    role: UserRole
    active: bool
    image_url: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_current_user(request: Request) -> CurrentUser:
    """Extract and validate the user from the Bearer token. Raises 401 if invalid."""
    token = _bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})

    jwt_service = get_jwt_service()
    try:
        payload = jwt_service.verify(token, ACCESS)
    except InvalidToken:
        raise HTTPException(
            status_code=401, detail="Invalid or expired token", headers={"WWW-Authenticate": "Bearer"}
        ) from None

    return CurrentUser(
        user_id=payload["sub"],
        name=payload.get("name", ""),
        email=payload.get("email", ""),
        role=UserRole(payload.get("role", UserRole.USER.value)),
        active=bool(payload.get("active", True)),
        image_url=payload.get("imageUrl"),
    )


def get_optional_user(request: Request) -> CurrentUser | None:
    """Like get_current_user, but anonymous requests resolve to None."""
    if _bearer_token(request) is None:
        return None
    return get_current_user(request)


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Require an ADMIN access token."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return user


def require_self_or_admin(user_id: str, user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Allow access to a user resource by its owner or an admin."""
    if user.user_id != user_id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Not allowed to access this user")
    return user

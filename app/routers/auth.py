"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.exceptions import InvalidCredentials, InvalidToken, NotFound
from app.rate_limit import limiter
from app.schemas.auth import LoginRequest, RefreshRequest, TokenPair
from app.services.session import get_session_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenPair)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> TokenPair:
    """Authenticate and receive an access/refresh token pair."""
    session_service = get_session_service()
    try:
        return session_service.login(db, body.email, body.password)
    except NotFound:
        raise HTTPException(status_code=401, detail="Invalid email or password") from None
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=e.message) from None


@router.post("/refresh", response_model=TokenPair)
@limiter.limit("20/minute")
def refresh(request: Request, body: RefreshRequest, db: Session = Depends(get_db)) -> TokenPair:
    """Exchange a refresh token for a new pair. The submitted token is revoked."""
    session_service = get_session_service()
    try:
        return session_service.refresh(db, body.refresh_token)
    except (NotFound, InvalidToken):
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token") from None


@router.post("/logout", status_code=204)
def logout(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)) -> Response:
    """Clear the stored refresh token for the current user."""
    get_session_service().logout(db, user.user_id)
    return Response(status_code=204)

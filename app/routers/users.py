"""User management API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, UploadFile
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user, get_optional_user, require_admin, require_self_or_admin
from app.models.user import UserRole
from app.rate_limit import limiter
from app.schemas.user import UserCreate, UserEdit, UserPublic, UserUpdate
from app.services.media import get_media_service
from app.services.user_store import get_user_store

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.post("/", response_model=UserPublic, status_code=201)
@limiter.limit("5/minute")
def create_user(
    request: Request,
    body: UserCreate,
    user: CurrentUser | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> UserPublic:
    """Register a new user. Only admins may choose the role or create inactive accounts."""
    is_admin = bool(user and user.is_admin)
    if body.role is not None and body.role != UserRole.USER and not is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required to assign roles")
    if not body.active and not is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required to change status")

    store = get_user_store()
    return store.create(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role or UserRole.USER,
        active=body.active,
    )


@router.get("/me", response_model=UserPublic)
def get_me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)) -> UserPublic:
    """Get the current user's profile."""
    return get_user_store().get_by_id(db, user.user_id)


@router.put("/me/image", response_model=UserPublic)
@limiter.limit("10/minute")
async def upload_image(
    request: Request,
    file: UploadFile | None = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserPublic:
    """Upload a profile image for the current user."""
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    media = get_media_service()
    error = media.validate_image_metadata(file.filename or "", file.content_type)
    if error:
        raise HTTPException(status_code=400, detail=error)

    store = get_user_store()
    # the token may outlive the account; nothing is written to disk for a missing user
    store.get_by_id(db, user.user_id)

    image_url = await media.store_image(user.user_id, file)
    return store.set_image_url(db, user.user_id, image_url)


@router.get("/", response_model=list[UserPublic])
def list_users(admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)) -> list[UserPublic]:
    """List all users."""
    return get_user_store().list_all(db)


@router.get("/{user_id}", response_model=UserPublic)
def get_user(
    user_id: str,
    user: CurrentUser = Depends(require_self_or_admin),
    db: Session = Depends(get_db),
) -> UserPublic:
    """Get a single user by ID."""
    return get_user_store().get_by_id(db, user_id)


@router.put("/{user_id}", response_model=UserPublic)
def update_user(
    user_id: str,
    body: UserUpdate,
    user: CurrentUser = Depends(require_self_or_admin),
    db: Session = Depends(get_db),
) -> UserPublic:
    """Replace a user's details, including the password."""
    if (body.role is not None or body.active is not None) and not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required to change role or status")

    return get_user_store().update_by_id(
        db,
        user_id,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
        active=body.active,
    )


@router.patch("/{user_id}", response_model=UserPublic)
def edit_user(
    user_id: str,
    body: UserEdit,
    user: CurrentUser = Depends(require_self_or_admin),
    db: Session = Depends(get_db),
) -> UserPublic:
    """Edit some of a user's details. The password is left untouched."""
    changes = body.model_dump(exclude_unset=True)
    if ("role" in changes or "active" in changes) and not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required to change role or status")

    return get_user_store().edit_by_id(db, user_id, changes)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Response:
    """Delete a user."""
    if not get_user_store().delete_by_id(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return Response(status_code=204)

"""Credential store: persistence of user records.

Public accessors return ``UserPublic`` via ``public_view``. The record accessors
(``find_by_email``, ``find_by_id``, ``set_refresh_token``) hand out the ORM row
including secrets and are reserved for the session service and admin tooling.
"""

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.exceptions import Conflict, NotFound
from app.models.user import User, UserRole
from app.schemas.user import UserPublic
from app.services.password import PasswordHasher, get_password_hasher


def normalize_email(email: str) -> str:
    return email.strip().lower()


def public_view(user: User) -> UserPublic:
    """Project a user record onto its client-safe fields."""
    return UserPublic.model_validate(user)


class UserStore:
    """CRUD over the ``user`` table."""

    def __init__(self, hasher: PasswordHasher) -> None:
        self.hasher = hasher

    # --- record accessors (secrets included) ---

    def find_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == normalize_email(email)).first()

    def find_by_id(self, db: Session, user_id: str) -> User | None:
        return db.get(User, user_id)

    def set_refresh_token(self, db: Session, user_id: str, refresh_token: str | None) -> bool:
        """Overwrite the stored refresh token. Returns False if the user does not exist."""
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update({User.refresh_token: refresh_token, User.updated_at: datetime.utcnow()}, synchronize_session="fetch")
        )
        db.commit()
        return updated > 0

    # --- public accessors ---

    def get_by_id(self, db: Session, user_id: str) -> UserPublic:
        user = self.find_by_id(db, user_id)
        if not user:
            raise NotFound("User not found")
        return public_view(user)

    def list_all(self, db: Session) -> list[UserPublic]:
        users = db.query(User).order_by(User.created_at.asc()).all()
        return [public_view(u) for u in users]

    def create(
        self,
        db: Session,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.USER,
        active: bool = True,
    ) -> UserPublic:
        """Register a new user with a hashed password."""
        email = normalize_email(email)
        if self.find_by_email(db, email):
            raise Conflict("Email already registered")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=self.hasher.hash(password),
            role=role,
            active=active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return public_view(user)

    def update_by_id(
        self,
        db: Session,
        user_id: str,
        name: str,
        email: str,
        password: str,
        role: UserRole | None = None,
        active: bool | None = None,
    ) -> UserPublic:
        """Replace a user's editable fields, re-hashing the password."""
        changes: dict[str, Any] = {
            "name": name.strip(),
            "email": email,
            "password_hash": self.hasher.hash(password),
        }
        if role is not None:
            changes["role"] = role
        if active is not None:
            changes["active"] = active
        return self._apply(db, user_id, changes)

    def edit_by_id(self, db: Session, user_id: str, changes: dict[str, Any]) -> UserPublic:
        """Apply a partial edit. Password and session fields are not editable here."""
        allowed = {"name", "email", "role", "active", "image_url"}
        # only image_url may be cleared with an explicit null
        edits = {k: v for k, v in changes.items() if k in allowed and (v is not None or k == "image_url")}
        return self._apply(db, user_id, edits)

    def set_image_url(self, db: Session, user_id: str, image_url: str) -> UserPublic:
        return self._apply(db, user_id, {"image_url": image_url})

    def delete_by_id(self, db: Session, user_id: str) -> bool:
        """Delete a user. Returns False if there was nothing to delete."""
        user = self.find_by_id(db, user_id)
        if not user:
            return False
        db.delete(user)
        db.commit()
        return True

    def _apply(self, db: Session, user_id: str, changes: dict[str, Any]) -> UserPublic:
        user = self.find_by_id(db, user_id)
        if not user:
            raise NotFound("User not found")

        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            existing = self.find_by_email(db, changes["email"])
            if existing and existing.id != user.id:
                raise Conflict("Email already registered")
        if "name" in changes and changes["name"] is not None:
            changes["name"] = changes["name"].strip()

        for field, value in changes.items():
            setattr(user, field, value)
        db.commit()
        db.refresh(user)
        return public_view(user)


_user_store: UserStore | None = None


def get_user_store() -> UserStore:
    """Get singleton user store instance."""
    global _user_store
    if _user_store is None:
        _user_store = UserStore(get_password_hasher())
    return _user_store

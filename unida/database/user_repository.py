from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from unida.exceptions import NotFound, ValidationError
from unida.model.user import User
from unida.database.db.session import SessionLocal
from unida.database.db.models import UserRow


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        institution=row.institution,
        avatar=row.avatar,
        avatar_handle=row.avatar_handle,
        is_admin=bool(row.is_admin),
        created_at=row.created_at,
    )


class UserRepository:
    """
    Credential store. Email uniqueness is enforced by the database.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def create(self, user: User) -> User:
        with self.session_factory() as db:
            row = UserRow(
                id=user.id,
                email=user.email.lower(),
                name=user.name,
                password_hash=user.password_hash,
                institution=user.institution,
                avatar=user.avatar,
                avatar_handle=user.avatar_handle,
                is_admin=user.is_admin,
                created_at=user.created_at,
            )
            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise ValidationError(
                    "Email already registered",
                    errors={"email": "already registered"},
                ) from e
            return _to_user(row)

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self.session_factory() as db:
            row = db.get(UserRow, user_id)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self.session_factory() as db:
            row = (
                db.query(UserRow)
                .filter(UserRow.email == email.strip().lower())
                .one_or_none()
            )
            return _to_user(row) if row else None

    def update_avatar(self, user_id: str, avatar: str, avatar_handle: Optional[str]) -> User:
        with self.session_factory() as db:
            row = db.get(UserRow, user_id)
            if not row:
                raise NotFound("User not found")
            row.avatar = avatar
            row.avatar_handle = avatar_handle
            db.commit()
            return _to_user(row)

    def set_admin(self, email: str, is_admin: bool = True) -> User:
        with self.session_factory() as db:
            row = (
                db.query(UserRow)
                .filter(UserRow.email == email.strip().lower())
                .one_or_none()
            )
            if not row:
                raise NotFound("User not found")
            row.is_admin = is_admin
            db.commit()
            return _to_user(row)

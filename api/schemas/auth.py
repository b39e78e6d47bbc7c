from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator
from typing_extensions import Annotated

from unida.model.user import User
from unida.service.auth_service import BCRYPT_MAX_BYTES

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

Stripped = Annotated[str, StringConstraints(strip_whitespace=True)]


class RegisterRequest(BaseModel):
    # password is kept verbatim, login compares it unstripped
    name: Stripped = Field(min_length=1, max_length=120)
    email: Stripped = Field(pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(min_length=6)
    institution: Optional[Stripped] = Field(default=None, max_length=200)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    institution: Optional[str] = None
    avatar: Optional[str] = None
    is_admin: bool = False
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(**user.model_dump(exclude={"password_hash", "avatar_handle"}))


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


class AvatarResponse(BaseModel):
    ok: bool = True
    avatar: str

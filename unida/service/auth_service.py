from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Tuple

import bcrypt
import jwt

from unida.config import Config
from unida.database.user_repository import UserRepository
from unida.exceptions import Unauthorized, ValidationError
from unida.model.user import Identity, User

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes; bcrypt>=5 refuses longer input
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash, or an over-long password
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Compared against on unknown emails so login timing does not leak them."""
    return hash_password("unida-no-such-user")


class AuthService:
    """
    Registration, login and bearer token handling.

    Tokens are HS256 JWTs carrying the user's id, name, email and admin
    flag. Whether an identity may touch a given record is decided by the
    caller.
    """

    def __init__(
        self,
        users: Optional[UserRepository] = None,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        ttl_days: Optional[int] = None,
    ):
        self.users = users or UserRepository()
        self.secret = secret or Config.jwt_secret
        self.algorithm = algorithm or Config.jwt_algorithm
        self.ttl = timedelta(days=ttl_days or Config.token_ttl_days)

    # =====================================================
    # Tokens
    # =====================================================

    def issue_token(self, user: User, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = {
            "sub": user.id,
            "name": user.name,
            "email": user.email,
            "is_admin": user.is_admin,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: Optional[str]) -> Identity:
        if not token:
            raise Unauthorized("Missing token")

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise Unauthorized("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise Unauthorized("Invalid token") from e

        return Identity(
            id=claims["sub"],
            name=claims.get("name", ""),
            email=claims.get("email", ""),
            is_admin=bool(claims.get("is_admin", False)),
        )

    # =====================================================
    # Use cases
    # =====================================================

    def register(
        self,
        name: str,
        email: str,
        password: str,
        institution: Optional[str] = None,
    ) -> Tuple[User, str]:
        email = email.strip().lower()
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValidationError(
                "Password too long",
                errors={"password": f"must be at most {BCRYPT_MAX_BYTES} bytes"},
            )
        if self.users.get_by_email(email):
            raise ValidationError(
                "Email already registered",
                errors={"email": "already registered"},
            )

        user = self.users.create(
            User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                institution=institution,
            )
        )
        logger.info(f"👤 Registered user {user.id} <{user.email}>")
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        user = self.users.get_by_email(email)
        if not user:
            check_password(password, _dummy_hash())
        if not user or not check_password(password, user.password_hash):
            logger.info(f"🚫 Failed login for <{email}>")
            raise ValidationError("Invalid credentials")
        return user, self.issue_token(user)

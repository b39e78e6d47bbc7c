from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from unida.database.announcement_repository import (
    AnnouncementRepository,
    event_repository,
    news_repository,
)
from unida.database.paper_repository import PaperRepository
from unida.database.user_repository import UserRepository
from unida.exceptions import Forbidden, Unauthorized
from unida.model.user import Identity
from unida.service.auth_service import AuthService
from unida.service.media_gateway import CloudinaryGateway, MediaGateway
from unida.service.submission_service import SubmissionService


def get_paper_repo() -> PaperRepository:
    """Return a PaperRepository instance (stateless, safe to create per-request)."""
    return PaperRepository()


def get_user_repo() -> UserRepository:
    return UserRepository()


def get_news_repo() -> AnnouncementRepository:
    return news_repository()


def get_event_repo() -> AnnouncementRepository:
    return event_repository()


@lru_cache
def get_media_gateway() -> MediaGateway:
    """One Cloudinary client per process."""
    return CloudinaryGateway()


def get_auth_service(users: UserRepository = Depends(get_user_repo)) -> AuthService:
    return AuthService(users=users)


def get_submission_service(
    papers: PaperRepository = Depends(get_paper_repo),
    users: UserRepository = Depends(get_user_repo),
    gateway: MediaGateway = Depends(get_media_gateway),
) -> SubmissionService:
    return SubmissionService(papers=papers, users=users, gateway=gateway)


def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    auth: AuthService = Depends(get_auth_service),
) -> Identity:
    """Resolve ``Authorization: Bearer <token>`` to an Identity."""
    if not authorization:
        raise Unauthorized("Missing token")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Invalid authorization header")

    return auth.verify_token(token.strip())


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_admin:
        raise Forbidden("Admin only")
    return identity

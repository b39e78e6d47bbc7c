from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from api.deps import get_current_identity, get_submission_service
from api.schemas.auth import AvatarResponse
from unida.model.user import Identity
from unida.service.submission_service import SubmissionService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/avatar", response_model=AvatarResponse)
async def upload_avatar(
    avatar: Optional[UploadFile] = File(default=None),
    identity: Identity = Depends(get_current_identity),
    service: SubmissionService = Depends(get_submission_service),
):
    """Replace the caller's avatar image."""
    data = await avatar.read(service.max_bytes + 1) if avatar else None
    user = await service.update_avatar(
        identity,
        data=data,
        filename=avatar.filename if avatar else None,
        content_type=avatar.content_type if avatar else None,
    )
    return AvatarResponse(avatar=user.avatar)

"""
Paper submission pipeline.

Upload path:   Received -> Validated -> Uploading -> Persisted
Delete path:   authorize -> remove from media host -> remove record

The media host and the database are not updated atomically. A crash (or
a failed database write) after a successful upload leaves an orphaned
object; nothing reconciles those. Both are logged with the handle so
they can be cleaned up by hand.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from unida.config import Config
from unida.database.paper_repository import PaperRepository
from unida.database.user_repository import UserRepository
from unida.exceptions import Forbidden, NotFound, UploadError, ValidationError
from unida.model.paper import Comment, Paper
from unida.model.user import Identity, User
from unida.service.media_gateway import MEDIA_KINDS, MediaGateway

logger = logging.getLogger(__name__)


class SubmissionService:
    def __init__(
        self,
        papers: PaperRepository,
        users: UserRepository,
        gateway: MediaGateway,
        max_bytes: Optional[int] = None,
    ):
        self.papers = papers
        self.users = users
        self.gateway = gateway
        self.max_bytes = max_bytes or Config.max_upload_bytes

    # =====================================================
    # Validation
    # =====================================================

    def validate_attachment(
        self,
        data: Optional[bytes],
        content_type: Optional[str],
        kind: str,
        field: str = "file",
    ) -> None:
        """
        Reject before any side effect: missing file, wrong declared type,
        or too large.
        """
        if not data:
            raise ValidationError("File is required", errors={field: "required"})

        allowed = MEDIA_KINDS[kind].content_types
        declared = (content_type or "").split(";")[0].strip().lower()
        if declared not in allowed:
            raise ValidationError(
                "Unsupported file type",
                errors={field: f"expected one of: {', '.join(sorted(allowed))}"},
            )

        if len(data) > self.max_bytes:
            raise ValidationError(
                "File too large",
                errors={field: f"max {self.max_bytes // (1024 * 1024)} MB"},
            )

    # =====================================================
    # Papers
    # =====================================================

    async def submit_paper(
        self,
        identity: Identity,
        title: Optional[str],
        data: Optional[bytes],
        filename: Optional[str],
        content_type: Optional[str],
        desc: str = "",
        category: str = "",
        is_collab: bool = False,
    ) -> Paper:
        # ---- Received -> Validated ----
        errors: Dict[str, str] = {}
        if not title or not title.strip():
            errors["title"] = "required"
        if not data:
            errors["file"] = "required"
        if errors:
            raise ValidationError("Missing required fields", errors=errors)

        self.validate_attachment(data, content_type, "pdf")

        author: Optional[User] = await run_in_threadpool(self.users.get_by_id, identity.id)

        # ---- Validated -> Uploading ----
        stored = await self.gateway.store(data, filename or "paper.pdf", "pdf")

        # ---- Uploading -> Persisted ----
        paper = Paper(
            title=title,
            desc=desc or "",
            category=category or "",
            author=author.name if author else identity.name,
            author_id=identity.id,
            author_avatar=author.avatar if author else None,
            pdf_url=stored.url,
            storage_handle=stored.handle,
            is_collab=is_collab,
        )
        try:
            created = await run_in_threadpool(self.papers.create, paper)
        except Exception:
            logger.error(f"❌ Paper record not saved, orphaned media: {stored.handle}")
            raise

        logger.info(f"✅ Paper published: {created.title} ({created.id})")
        return created

    async def delete_paper(self, identity: Identity, paper_id: str) -> None:
        paper = await run_in_threadpool(self.papers.get, paper_id)

        if not identity.can_manage(paper.author_id):
            raise Forbidden("Only the author or an admin can delete this paper")

        if paper.storage_handle:
            await self._remove_quietly(paper.storage_handle)

        await run_in_threadpool(self.papers.delete, paper_id)
        logger.info(f"🗑 Paper deleted: {paper_id} by {identity.id}")

    def add_comment(self, identity: Identity, paper_id: str, text: str) -> List[Comment]:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Comment text is required", errors={"text": "required"})

        user = self.users.get_by_id(identity.id)
        comment = Comment(
            author=user.name if user else identity.name,
            author_id=identity.id,
            author_avatar=user.avatar if user else None,
            text=text,
        )
        return self.papers.append_comment(paper_id, comment)

    # =====================================================
    # Avatars
    # =====================================================

    async def update_avatar(
        self,
        identity: Identity,
        data: Optional[bytes],
        filename: Optional[str],
        content_type: Optional[str],
    ) -> User:
        self.validate_attachment(data, content_type, "image", field="avatar")

        user = await run_in_threadpool(self.users.get_by_id, identity.id)
        if not user:
            raise NotFound("User not found")

        stored = await self.gateway.store(data, filename or "avatar.png", "image")
        try:
            updated = await run_in_threadpool(
                self.users.update_avatar, user.id, stored.url, stored.handle
            )
        except Exception:
            logger.error(f"❌ Avatar not saved, orphaned media: {stored.handle}")
            raise

        if user.avatar_handle:
            await self._remove_quietly(user.avatar_handle)

        return updated

    # =====================================================
    # Helpers
    # =====================================================

    async def _remove_quietly(self, handle: str) -> None:
        """Media removal never blocks the database side of a delete."""
        try:
            await self.gateway.remove(handle)
        except UploadError as e:
            logger.warning(f"⚠ Could not remove media {handle}: {e}")

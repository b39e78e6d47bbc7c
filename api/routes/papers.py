from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.deps import get_current_identity, get_paper_repo, get_submission_service
from api.schemas.paper import (
    CommentRequest,
    CommentResponse,
    LikeResponse,
    OkResponse,
    PaperResponse,
)
from unida.database.paper_repository import PaperRepository
from unida.model.user import Identity
from unida.service.submission_service import SubmissionService

router = APIRouter(prefix="/api/papers", tags=["papers"])


@router.get("", response_model=List[PaperResponse])
def list_papers(
    repo: PaperRepository = Depends(get_paper_repo),
):
    """List all papers, newest first."""
    return [PaperResponse.from_paper(p) for p in repo.list()]


@router.get("/{paper_id}", response_model=PaperResponse)
def get_paper(
    paper_id: str,
    repo: PaperRepository = Depends(get_paper_repo),
):
    """Get a single paper by ID."""
    return PaperResponse.from_paper(repo.get(paper_id))


@router.post("", response_model=PaperResponse, status_code=201)
async def submit_paper(
    title: Optional[str] = Form(default=None),
    desc: str = Form(default=""),
    category: str = Form(default=""),
    is_collab: bool = Form(default=False),
    file: Optional[UploadFile] = File(default=None),
    identity: Identity = Depends(get_current_identity),
    service: SubmissionService = Depends(get_submission_service),
):
    """Upload a PDF and publish it as a paper."""
    # one byte past the ceiling is enough to reject an oversized file
    data = await file.read(service.max_bytes + 1) if file else None
    paper = await service.submit_paper(
        identity,
        title=title,
        data=data,
        filename=file.filename if file else None,
        content_type=file.content_type if file else None,
        desc=desc,
        category=category,
        is_collab=is_collab,
    )
    return PaperResponse.from_paper(paper)


@router.delete("/{paper_id}", response_model=OkResponse)
async def delete_paper(
    paper_id: str,
    identity: Identity = Depends(get_current_identity),
    service: SubmissionService = Depends(get_submission_service),
):
    """Delete a paper (author or admin) together with its stored file."""
    await service.delete_paper(identity, paper_id)
    return OkResponse()


# --- Comments ---

@router.post("/{paper_id}/comments", response_model=List[CommentResponse])
def add_comment(
    paper_id: str,
    body: CommentRequest,
    identity: Identity = Depends(get_current_identity),
    service: SubmissionService = Depends(get_submission_service),
):
    """Append a comment; returns the paper's full comment list."""
    comments = service.add_comment(identity, paper_id, body.text)
    return [CommentResponse.from_comment(c) for c in comments]


# --- Likes ---

@router.post("/{paper_id}/like", response_model=LikeResponse)
def like_paper(
    paper_id: str,
    repo: PaperRepository = Depends(get_paper_repo),
):
    """Increment the like counter."""
    return LikeResponse(likes=repo.like(paper_id))

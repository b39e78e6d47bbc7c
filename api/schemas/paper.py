from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from unida.model.paper import Comment, Paper


# --- Comments ---

class CommentRequest(BaseModel):
    text: str = Field(min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    id: str
    author: str
    author_id: Optional[str] = None
    author_avatar: Optional[str] = None
    text: str
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> CommentResponse:
        return cls(**comment.model_dump())


# --- Paper ---

class PaperResponse(BaseModel):
    id: str
    title: str
    desc: str
    category: str
    author: str
    author_id: Optional[str] = None
    author_avatar: Optional[str] = None
    pdf_url: Optional[str] = None
    is_collab: bool = False
    likes: int = 0
    comments: List[CommentResponse]
    created_at: datetime

    @classmethod
    def from_paper(cls, paper: Paper) -> PaperResponse:
        # storage_handle stays server-side
        return cls(
            **paper.model_dump(exclude={"storage_handle", "comments"}),
            comments=[CommentResponse.from_comment(c) for c in paper.comments],
        )


class LikeResponse(BaseModel):
    likes: int


class OkResponse(BaseModel):
    ok: bool = True

from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime
import uuid


class Comment(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    author: str
    author_id: Optional[str] = None
    author_avatar: Optional[str] = None
    text: str

    created_at: datetime = Field(default_factory=datetime.utcnow)


class Paper(BaseModel):
    """
    A submitted paper.

    ``pdf_url`` points at the stored document on the media host and
    ``storage_handle`` is the opaque id needed to delete it again.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    title: str
    desc: str = ""
    category: str = ""

    author: str
    author_id: Optional[str] = None
    author_avatar: Optional[str] = None

    pdf_url: Optional[str] = None
    storage_handle: Optional[str] = None

    is_collab: bool = False
    likes: int = 0
    comments: List[Comment] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
        "extra": "ignore",
    }

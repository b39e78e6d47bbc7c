from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
import uuid


class User(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    name: str
    email: str
    password_hash: str
    institution: Optional[str] = None

    avatar: Optional[str] = None
    avatar_handle: Optional[str] = None
    is_admin: bool = False

    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class Identity(BaseModel):
    """Who a verified bearer token says the caller is."""

    id: str
    name: str
    email: str
    is_admin: bool = False

    def can_manage(self, owner_id: Optional[str]) -> bool:
        return self.is_admin or (owner_id is not None and owner_id == self.id)

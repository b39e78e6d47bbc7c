from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime
import uuid


class News(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    title: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    media_url: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class Event(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    title: str
    description: str = ""
    type: str = "event"
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    media_url: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

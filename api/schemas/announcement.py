from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class NewsRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    media_url: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


class EventRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    type: str = "event"
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    media_url: Optional[str] = None

    model_config = {"str_strip_whitespace": True}

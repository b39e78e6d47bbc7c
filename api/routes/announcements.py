from typing import List

from fastapi import APIRouter, Depends

from api.deps import get_event_repo, get_news_repo, require_admin
from api.schemas.announcement import EventRequest, NewsRequest
from api.schemas.paper import OkResponse
from unida.database.announcement_repository import AnnouncementRepository
from unida.model.announcement import Event, News
from unida.model.user import Identity

news_router = APIRouter(prefix="/api/news", tags=["news"])
events_router = APIRouter(prefix="/api/events", tags=["events"])


# --- News ---

@news_router.get("", response_model=List[News])
def list_news(
    repo: AnnouncementRepository = Depends(get_news_repo),
):
    """List news, newest first."""
    return repo.list()


@news_router.post("", response_model=News, status_code=201)
def create_news(
    body: NewsRequest,
    _: Identity = Depends(require_admin),
    repo: AnnouncementRepository = Depends(get_news_repo),
):
    return repo.create(News(**body.model_dump()))


@news_router.delete("/{item_id}", response_model=OkResponse)
def delete_news(
    item_id: str,
    _: Identity = Depends(require_admin),
    repo: AnnouncementRepository = Depends(get_news_repo),
):
    repo.delete(item_id)
    return OkResponse()


# --- Events ---

@events_router.get("", response_model=List[Event])
def list_events(
    repo: AnnouncementRepository = Depends(get_event_repo),
):
    """List events, newest first."""
    return repo.list()


@events_router.post("", response_model=Event, status_code=201)
def create_event(
    body: EventRequest,
    _: Identity = Depends(require_admin),
    repo: AnnouncementRepository = Depends(get_event_repo),
):
    return repo.create(Event(**body.model_dump()))


@events_router.delete("/{item_id}", response_model=OkResponse)
def delete_event(
    item_id: str,
    _: Identity = Depends(require_admin),
    repo: AnnouncementRepository = Depends(get_event_repo),
):
    repo.delete(item_id)
    return OkResponse()

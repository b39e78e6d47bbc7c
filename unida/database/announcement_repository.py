from __future__ import annotations

from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import sessionmaker

from unida.exceptions import NotFound
from unida.model.announcement import Event, News
from unida.database.db.session import SessionLocal
from unida.database.db.models import AnnouncementRow

T = TypeVar("T", bound=BaseModel)


class AnnouncementRepository(Generic[T]):
    """
    Durable store for one announcement collection (news or events).
    """

    def __init__(
        self,
        kind: str,
        model: Type[T],
        session_factory: Optional[sessionmaker] = None,
    ):
        self.kind = kind
        self.model = model
        self.session_factory = session_factory or SessionLocal

    def create(self, item: T) -> T:
        with self.session_factory() as db:
            row = AnnouncementRow(
                id=item.id,
                kind=self.kind,
                item=item.model_dump(mode="json"),
                created_at=item.created_at,
            )
            db.add(row)
            db.commit()
            return self.model.model_validate(row.item)

    def list(self) -> List[T]:
        with self.session_factory() as db:
            rows = (
                db.query(AnnouncementRow)
                .filter(AnnouncementRow.kind == self.kind)
                .order_by(AnnouncementRow.created_at.desc(), AnnouncementRow.seq.desc())
                .all()
            )
            return [self.model.model_validate(r.item) for r in rows]

    def delete(self, item_id: str) -> None:
        with self.session_factory() as db:
            row = (
                db.query(AnnouncementRow)
                .filter(AnnouncementRow.kind == self.kind, AnnouncementRow.id == item_id)
                .one_or_none()
            )
            if not row:
                raise NotFound(f"{self.kind.capitalize()} not found")
            db.delete(row)
            db.commit()


def news_repository(session_factory: Optional[sessionmaker] = None) -> AnnouncementRepository[News]:
    return AnnouncementRepository("news", News, session_factory)


def event_repository(session_factory: Optional[sessionmaker] = None) -> AnnouncementRepository[Event]:
    return AnnouncementRepository("event", Event, session_factory)

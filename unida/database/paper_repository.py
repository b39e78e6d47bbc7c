from __future__ import annotations

from typing import List, Optional
from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker

from unida.exceptions import NotFound
from unida.model.paper import Comment, Paper
from unida.database.db.session import SessionLocal
from unida.database.db.models import PaperRow


class PaperRepository:
    """
    Postgres/SQLite repository for Paper.

    Each paper is stored as a JSON document plus a few indexed columns.
    There is no transaction spanning the media host: callers upload first
    and persist second, and delete remotely first and locally second.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    @staticmethod
    def _row(db: Session, paper_id: str) -> Optional[PaperRow]:
        return db.query(PaperRow).filter(PaperRow.id == paper_id).one_or_none()

    # =====================================================
    # Basic CRUD
    # =====================================================

    def create(self, paper: Paper) -> Paper:
        """
        Insert a new Paper and return its stored form.
        """
        with self.session_factory() as db:
            row = PaperRow(
                id=paper.id,
                paper=paper.model_dump(mode="json"),
                title=paper.title,
                author_id=paper.author_id,
                created_at=paper.created_at,
                updated_at=datetime.utcnow(),
            )
            db.add(row)
            db.commit()
            return Paper.model_validate(row.paper)

    def list(self) -> List[Paper]:
        """
        All papers, newest first.
        """
        with self.session_factory() as db:
            rows = (
                db.query(PaperRow)
                .order_by(PaperRow.created_at.desc(), PaperRow.seq.desc())
                .all()
            )
            return [Paper.model_validate(r.paper) for r in rows]

    def get(self, paper_id: str) -> Paper:
        with self.session_factory() as db:
            row = self._row(db, paper_id)
            if not row:
                raise NotFound("Paper not found")
            return Paper.model_validate(row.paper)

    def delete(self, paper_id: str) -> None:
        with self.session_factory() as db:
            row = self._row(db, paper_id)
            if not row:
                raise NotFound("Paper not found")
            db.delete(row)
            db.commit()

    def count(self) -> int:
        with self.session_factory() as db:
            return db.query(PaperRow).count()

    # =====================================================
    # Partial update (comments / likes)
    #
    # Read-modify-write on the document; concurrent writers to the same
    # paper can lose updates.
    # =====================================================

    def append_comment(self, paper_id: str, comment: Comment) -> List[Comment]:
        """
        Append a comment and return the paper's full comment list.
        """
        with self.session_factory() as db:
            row = self._row(db, paper_id)
            if not row:
                raise NotFound("Paper not found")

            paper = dict(row.paper)  # copy, then reassign so the change is tracked
            comments = list(paper.get("comments") or [])
            comments.append(comment.model_dump(mode="json"))
            paper["comments"] = comments

            row.paper = paper
            row.updated_at = datetime.utcnow()

            db.commit()
            return [Comment.model_validate(c) for c in comments]

    def like(self, paper_id: str) -> int:
        """
        Increment the like counter, returning the new value.
        """
        with self.session_factory() as db:
            row = self._row(db, paper_id)
            if not row:
                raise NotFound("Paper not found")

            paper = dict(row.paper)
            paper["likes"] = int(paper.get("likes") or 0) + 1

            row.paper = paper
            row.updated_at = datetime.utcnow()

            db.commit()
            return paper["likes"]

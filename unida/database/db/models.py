from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base
from datetime import datetime


Base = declarative_base()

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
Document = JSON().with_variant(JSONB(), "postgresql")


class PaperRow(Base):
    __tablename__ = "papers"

    # insertion sequence, tie-breaker for equal created_at
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Text, unique=True, nullable=False, index=True)
    paper = Column(Document, nullable=False)

    title = Column(Text)
    author_id = Column(Text, index=True)
    created_at = Column(DateTime, index=True)
    updated_at = Column(DateTime)


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, unique=True, nullable=False, index=True)
    name = Column(Text, nullable=False)
    password_hash = Column(Text, nullable=False)
    institution = Column(Text)

    avatar = Column(Text)
    avatar_handle = Column(Text)
    is_admin = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)


class AnnouncementRow(Base):
    """News items and events share one table, split by ``kind``."""
    __tablename__ = "announcements"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Text, unique=True, nullable=False, index=True)
    kind = Column(Text, nullable=False, index=True)  # news | event
    item = Column(Document, nullable=False)

    created_at = Column(DateTime, index=True)

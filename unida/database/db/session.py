from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from unida.config import Config


def build_engine(database_url: str, **kwargs):
    if database_url.startswith("sqlite"):
        # FastAPI serves sync handlers from a threadpool
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(database_url, **kwargs)


engine = build_engine(Config.database_url)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)

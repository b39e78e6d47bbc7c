"""Helpers for tests: in-memory database, fake media host, test client."""

from typing import Dict, List, Optional

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api import deps
from unida.database.announcement_repository import event_repository, news_repository
from unida.database.db.models import Base
from unida.database.paper_repository import PaperRepository
from unida.database.user_repository import UserRepository
from unida.exceptions import UploadError
from unida.model.user import User
from unida.service.auth_service import AuthService, hash_password
from unida.service.media_gateway import MediaGateway, StoredMedia

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
TEXT_BYTES = b"just some notes, definitely not a pdf\n"


def in_memory_session_factory() -> sessionmaker:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


class FakeGateway(MediaGateway):
    """Keeps "uploaded" objects in a dict, keyed by handle."""

    def __init__(self, max_bytes: int = 10 * 1024 * 1024):
        super().__init__(max_bytes=max_bytes)
        self.objects: Dict[str, bytes] = {}
        self.stored: List[str] = []
        self.removed: List[str] = []
        self.fail_store = False
        self.fail_remove = False

    async def store(self, data: bytes, filename: str, kind: str) -> StoredMedia:
        self.check(data, filename, kind)
        if self.fail_store:
            raise UploadError("File upload failed")
        handle = f"{kind}:unida_papers/{len(self.stored) + 1}-{filename}"
        self.objects[handle] = data
        self.stored.append(handle)
        return StoredMedia(url=f"https://media.example/{handle}", handle=handle)

    async def remove(self, handle: str) -> bool:
        if self.fail_remove:
            raise UploadError(f"Failed to remove {handle}")
        self.removed.append(handle)
        return self.objects.pop(handle, None) is not None


class AppFixture:
    """The FastAPI app wired to an in-memory database and a FakeGateway."""

    secret = "test-secret-0123456789-0123456789-abcdef"

    def __init__(self):
        from main import app

        self.app = app
        self.session_factory = in_memory_session_factory()
        self.gateway = FakeGateway()
        self.papers = PaperRepository(self.session_factory)
        self.users = UserRepository(self.session_factory)
        self.auth = AuthService(users=self.users, secret=self.secret)

        app.dependency_overrides[deps.get_paper_repo] = lambda: self.papers
        app.dependency_overrides[deps.get_user_repo] = lambda: self.users
        app.dependency_overrides[deps.get_news_repo] = lambda: news_repository(self.session_factory)
        app.dependency_overrides[deps.get_event_repo] = lambda: event_repository(self.session_factory)
        app.dependency_overrides[deps.get_media_gateway] = lambda: self.gateway
        app.dependency_overrides[deps.get_auth_service] = lambda: self.auth

        self.client = TestClient(app, raise_server_exceptions=False)

    def close(self):
        self.app.dependency_overrides.clear()

    def make_user(
        self,
        name: str = "Alice",
        email: str = "alice@example.com",
        password: str = "secret1",
        is_admin: bool = False,
    ) -> User:
        return self.users.create(
            User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                is_admin=is_admin,
            )
        )

    def headers_for(self, user: User) -> dict:
        return {"Authorization": f"Bearer {self.auth.issue_token(user)}"}

    def upload_paper(
        self,
        headers: dict,
        title: Optional[str] = "On Things",
        content: bytes = PDF_BYTES,
        filename: str = "paper.pdf",
        content_type: str = "application/pdf",
        **fields,
    ):
        data = dict(fields)
        if title is not None:
            data["title"] = title
        return self.client.post(
            "/api/papers",
            data=data,
            files={"file": (filename, content, content_type)},
            headers=headers,
        )

import os

# Settings are read at import time by the application modules
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import uuid  # noqa: E402
from datetime import datetime, timezone  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mp3_download_service.app.interfaces.download_repository import (  # noqa: E402
    IDownloadRepository,
)
from mp3_download_service.app.interfaces.user_service import IUserService  # noqa: E402
from mp3_download_service.domain.errors import PersistenceError  # noqa: E402
from mp3_download_service.domain.models.download import DownloadRecord  # noqa: E402
from mp3_download_service.domain.models.user import UserCreate, UserRead  # noqa: E402
from mp3_download_service.infrastructure.clients.conversion_client import (  # noqa: E402
    ConversionClient,
)
from mp3_download_service.infrastructure.database.models import Base  # noqa: E402

CONVERSION_URL = "https://converter.test/download-mp3"


class FakeDownloadRepository(IDownloadRepository):
    """In-memory download store. Set `fail` to make every call raise."""

    def __init__(self):
        self.records: list[DownloadRecord] = []
        self.fail = False

    async def create(self, db, *, source_url, title, owner_id):
        if self.fail:
            raise PersistenceError("Could not save the download to your history.")
        record = DownloadRecord(
            id=len(self.records) + 1,
            source_url=source_url,
            title=title,
            owner_id=owner_id,
            created_at=datetime.now(timezone.utc),
        )
        self.records.append(record)
        return record

    async def list_by_owner(self, db, owner_id):
        if self.fail:
            raise PersistenceError("Could not load your download history.")
        owned = [r for r in self.records if r.owner_id == owner_id]
        return sorted(owned, key=lambda r: (r.created_at, r.id), reverse=True)


class FakeUserService(IUserService):
    """In-memory user accounts keyed by email."""

    def __init__(self):
        self.users: dict[str, UserRead] = {}
        self.password_hashes: dict[str, str | None] = {}

    async def create(self, db, user_to_create: UserCreate) -> UserRead:
        now = datetime.now(timezone.utc)
        user = UserRead(
            id=uuid.uuid4(),
            email=user_to_create.email,
            first_name=user_to_create.first_name,
            last_name=user_to_create.last_name,
            created_at=now,
            updated_at=now,
        )
        self.users[user.email] = user
        self.password_hashes[user.email] = user_to_create.password_hash
        return user

    async def get_by_email(self, db, email):
        return self.users.get(email)

    async def get_password_hash(self, db, email):
        return self.password_hashes.get(email)


class RecordingHandler:
    """httpx.MockTransport handler answering with a fixed response."""

    def __init__(self, response: httpx.Response | Exception):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def download_repository():
    return FakeDownloadRepository()


@pytest.fixture
def user_service():
    return FakeUserService()


@pytest.fixture
def conversion_endpoint():
    """Build a (client, handler) pair answering every request with `response`."""

    def _build(response, **client_kwargs):
        handler = RecordingHandler(response)
        client = ConversionClient(
            CONVERSION_URL, transport=httpx.MockTransport(handler), **client_kwargs
        )
        return client, handler

    return _build


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    session_factory = async_sessionmaker(
        db_engine, expire_on_commit=False, class_=AsyncSession
    )
    async with session_factory() as session:
        yield session

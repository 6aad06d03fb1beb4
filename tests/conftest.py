import uuid
from typing import AsyncGenerator, Dict, Iterable, Optional
from uuid import UUID

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog.core.config import Settings
from catalog.core.db import Base, create_session_factory
from catalog.content.api.deps import (
    get_character_service,
    get_content_store,
    get_creator_service,
    get_genre_service,
    get_query_service,
)
from catalog.content.clients.identity import IdentityLookupError
from catalog.content.models import (
    Character,
    ContentPurchase,
    ContentRental,
    Creator,
    Genre,
)
from catalog.content.schemas.common import ActorContext
from catalog.content.schemas.detail import OwnerRef, OwnerSummary
from catalog.content.schemas.series import SeriesCreate
from catalog.content.schemas.volume import VolumeCreate
from catalog.content.schemas.chapter import ChapterCreate
from catalog.content.services.content_store import ContentHierarchyStore
from catalog.content.services.series_query_service import SeriesQueryService
from catalog.content.services.taxonomy_service import (
    CharacterService,
    CreatorService,
    GenreService,
)
from catalog.main import create_app

# In-memory SQLite cho test, dùng chung một connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeIdentityLookup:
    """Identity lookup giả: trả về các summary đã biết, ghi lại các lần gọi."""

    def __init__(self, known: Optional[Dict[UUID, OwnerSummary]] = None, fail=False):
        self.known = known or {}
        self.fail = fail
        self.calls = []

    async def lookup(self, refs: Iterable[OwnerRef]) -> Dict[UUID, OwnerSummary]:
        refs = set(refs)
        self.calls.append(refs)
        if self.fail:
            raise IdentityLookupError("identity service unavailable")
        return {ref.id: self.known[ref.id] for ref in refs if ref.id in self.known}


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        APP_ENV="testing",
        SERIALIZATION_RETRY_ATTEMPTS=2,
    )


@pytest.fixture
async def engine():
    """Database mới cho mỗi test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_sqlite_fks(dbapi_connection, connection_record):
        """Enable foreign key constraints in SQLite."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def store(session_factory, test_settings) -> ContentHierarchyStore:
    return ContentHierarchyStore(session_factory, settings=test_settings)


@pytest.fixture
def genre_service(session_factory) -> GenreService:
    return GenreService(session_factory)


@pytest.fixture
def creator_service(session_factory) -> CreatorService:
    return CreatorService(session_factory)


@pytest.fixture
def character_service(session_factory) -> CharacterService:
    return CharacterService(session_factory)


@pytest.fixture
def identity_lookup() -> FakeIdentityLookup:
    return FakeIdentityLookup()


@pytest.fixture
def query_service(session_factory, identity_lookup) -> SeriesQueryService:
    return SeriesQueryService(session_factory, identity_lookup)


@pytest.fixture
def actor() -> ActorContext:
    return ActorContext(user_id=uuid.uuid4())


@pytest.fixture
def tenant_actor() -> ActorContext:
    return ActorContext(user_id=uuid.uuid4(), tenant_id=uuid.uuid4())


async def add_rows(session_factory, *rows):
    """Chèn trực tiếp các dòng (taxonomy, sổ giao dịch) phục vụ test."""
    async with session_factory() as session:
        session.add_all(rows)
        await session.commit()
    return rows


async def fetch_all(session_factory, model):
    """Đọc mọi dòng của model, kể cả các dòng đã bị xóa mềm."""
    async with session_factory() as session:
        result = await session.execute(select(model))
        return list(result.scalars().all())


@pytest.fixture
async def genres(session_factory):
    return await add_rows(
        session_factory,
        Genre(id=uuid.uuid4(), name="Fantasy", slug="fantasy"),
        Genre(id=uuid.uuid4(), name="Adventure", slug="adventure"),
    )


@pytest.fixture
async def creators(session_factory):
    return await add_rows(
        session_factory,
        Creator(id=uuid.uuid4(), name="Akira"),
        Creator(id=uuid.uuid4(), name="Bao"),
    )


@pytest.fixture
async def characters(session_factory):
    return await add_rows(
        session_factory,
        Character(id=uuid.uuid4(), name="Hero"),
    )


class _DriverError(Exception):
    """Lỗi driver giả mang SQLSTATE như asyncpg."""

    def __init__(self, sqlstate: str):
        super().__init__(f"SQLSTATE {sqlstate}")
        self.sqlstate = sqlstate


def fail_commits(monkeypatch, times: int, sqlstate: str = "40001") -> Dict[str, int]:
    """
    Làm `times` lần commit đầu tiên thất bại với SQLSTATE cho trước
    (40001 serialization_failure, 40P01 deadlock_detected).
    """
    original_commit = AsyncSession.commit
    calls = {"count": 0}

    async def commit(self):
        calls["count"] += 1
        if calls["count"] <= times:
            raise OperationalError("COMMIT", {}, _DriverError(sqlstate))
        await original_commit(self)

    monkeypatch.setattr(AsyncSession, "commit", commit)
    return calls


async def add_purchase(session_factory, item_type: str, item_id: UUID):
    await add_rows(
        session_factory,
        ContentPurchase(user_id=uuid.uuid4(), item_type=item_type, item_id=item_id),
    )


async def add_rental(session_factory, item_type: str, item_id: UUID):
    await add_rows(
        session_factory,
        ContentRental(user_id=uuid.uuid4(), item_type=item_type, item_id=item_id),
    )


@pytest.fixture
async def series(store, actor):
    return await store.create_series(SeriesCreate(title="The Long Road"), actor)


@pytest.fixture
async def volume(store, series):
    return await store.create_volume(series.id, VolumeCreate(volume_number=1))


@pytest.fixture
async def chapters(store, volume):
    """Ba chương 1, 2, 3 trong volume."""
    return [
        await store.create_chapter(
            volume.id,
            ChapterCreate(
                chapter_number=n, title=f"Chapter {n}", content={"text": "a b"}
            ),
        )
        for n in (1, 2, 3)
    ]


@pytest.fixture
def app(
    store, query_service, genre_service, creator_service, character_service
) -> FastAPI:
    """Create app instance for testing."""
    app = create_app()
    app.dependency_overrides[get_content_store] = lambda: store
    app.dependency_overrides[get_query_service] = lambda: query_service
    app.dependency_overrides[get_genre_service] = lambda: genre_service
    app.dependency_overrides[get_creator_service] = lambda: creator_service
    app.dependency_overrides[get_character_service] = lambda: character_service
    return app


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Return an async client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

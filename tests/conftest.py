"""Shared test fixtures."""

from collections import Counter, defaultdict
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.lg_cache.application.runtime import CacheRuntime
from src.lg_cache.infrastructure.memory_store import InMemoryCacheStore
from src.lg_common.database import get_db_session
from src.lg_common.id_generator import generate_id
from src.lg_league.domain.models import DocumentQuery, StoredDocument
from src.main import app


def _contains(body: Any, match: Any) -> bool:
    """JSONB ``@>`` for the object/scalar subset the registry produces."""
    if isinstance(match, dict):
        return isinstance(body, dict) and all(
            k in body and _contains(body[k], v) for k, v in match.items()
        )
    return body == match


class FakeDocumentRepository:
    """In-memory DocumentRepositoryProtocol with call counting."""

    def __init__(self) -> None:
        self.docs: dict[str, dict[str, StoredDocument]] = defaultdict(dict)
        self.calls: Counter[str] = Counter()

    async def find(
        self, db: Any, collection: str, query: DocumentQuery
    ) -> list[StoredDocument]:
        self.calls["find"] += 1
        docs = [
            d for d in self.docs[collection].values()
            if _contains(d.body, query.match)
            and (not query.match_any or any(_contains(d.body, m) for m in query.match_any))
        ]
        for key in reversed(query.sort):
            docs.sort(key=lambda d: d.body.get(key.field, ""), reverse=key.descending)
        return docs[query.offset: query.offset + query.limit]

    async def find_by_id(self, db: Any, collection: str, doc_id: str) -> StoredDocument | None:
        self.calls["find_by_id"] += 1
        return self.docs[collection].get(doc_id)

    async def create(self, db: Any, collection: str, fields: dict[str, Any]) -> StoredDocument:
        self.calls["create"] += 1
        now = datetime.now(UTC)
        doc = StoredDocument(
            id=generate_id(), collection=collection, body=dict(fields),
            created_at=now, updated_at=now,
        )
        self.docs[collection][doc.id] = doc
        return doc

    async def update(
        self, db: Any, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> StoredDocument | None:
        self.calls["update"] += 1
        doc = self.docs[collection].get(doc_id)
        if doc is None:
            return None
        doc.body = {**doc.body, **fields}
        doc.updated_at = datetime.now(UTC)
        return doc

    async def delete(self, db: Any, collection: str, doc_id: str) -> bool:
        self.calls["delete"] += 1
        return self.docs[collection].pop(doc_id, None) is not None


def make_session() -> MagicMock:
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


class FakeSession:
    """Stands in for an AsyncSession opened from a session factory."""

    def __init__(self) -> None:
        self.closed = False

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.closed = True


class FakeSessionFactory:
    def __init__(self) -> None:
        self.opened: list[FakeSession] = []

    def __call__(self) -> FakeSession:
        session = FakeSession()
        self.opened.append(session)
        return session


@pytest.fixture
def db() -> MagicMock:
    return make_session()


@pytest.fixture
def memory_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def runtime(memory_store: InMemoryCacheStore) -> CacheRuntime:
    return CacheRuntime.from_store(memory_store, default_ttl_seconds=3600)


@pytest.fixture
def fake_repo() -> FakeDocumentRepository:
    return FakeDocumentRepository()


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
async def client(
    runtime: CacheRuntime,
    fake_repo: FakeDocumentRepository,
    session_factory: FakeSessionFactory,
) -> AsyncClient:
    """Async HTTP client over the app with in-memory cache and repository.

    ASGITransport does not run the lifespan, so app.state is filled here.
    """
    app.state.cache_runtime = runtime
    app.state.document_repository = fake_repo
    app.state.session_factory = session_factory

    async def _session():
        yield make_session()

    app.dependency_overrides[get_db_session] = _session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

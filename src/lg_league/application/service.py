"""LeagueService: cached reads and invalidating writes for one entity type.

Reads go through the read-through cache:
  list -> {namespace}:{canonical query shape}
  get  -> {prefix}:{id}
Writes commit first, then purge every key family the write can make stale,
then return. A failed purge never fails the write.

Writes run on the caller's (router's) db session. Reads open their own session
from the session factory: a cache load can outlive a cancelled request, and
the request-scoped session is closed when that request unwinds.
One service per entity type.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import Settings, settings
from src.lg_cache.application.runtime import CacheRuntime
from src.lg_cache.domain.fingerprint import entity_key, fingerprint
from src.lg_common.database import async_session_factory
from src.lg_common.errors import EntityNotFoundError
from src.lg_common.id_generator import normalize_id
from src.lg_league.application.schemas import EntityListResponse, ListQuery, check_fields
from src.lg_league.domain.registry import EntitySpec
from src.lg_league.domain.repository import DocumentRepositoryProtocol
from src.lg_league.infrastructure.persistence import DocumentRepository

logger = logging.getLogger(__name__)


class LeagueService:
    def __init__(
        self,
        spec: EntitySpec,
        runtime: CacheRuntime,
        repo: DocumentRepositoryProtocol | None = None,
        config: Settings = settings,
        sessions: async_sessionmaker[AsyncSession] = async_session_factory,
    ) -> None:
        self._spec = spec
        self._runtime = runtime
        self._repo: DocumentRepositoryProtocol = repo or DocumentRepository()
        self._sessions = sessions
        self._ttl = (
            config.CACHE_STANDINGS_TTL_SECONDS
            if spec.short_lived
            else config.CACHE_DEFAULT_TTL_SECONDS
        )

    @property
    def spec(self) -> EntitySpec:
        return self._spec

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_entities(self, query: ListQuery) -> dict[str, Any]:
        # Validate before keying so a bad query never reaches the store
        doc_query = query.to_document_query(self._spec)
        key = fingerprint(self._spec.keyspace.namespace, query.shape())

        async def load() -> dict[str, Any]:
            async with self._sessions() as db:
                docs = await self._repo.find(db, self._spec.collection, doc_query)
            items = [doc.to_payload() for doc in docs]
            return EntityListResponse(
                items=items, count=len(items), limit=query.limit, offset=query.offset
            ).model_dump()

        return await self._runtime.reads.fetch(key, load, self._ttl)

    async def get_entity(self, entity_id: str) -> dict[str, Any]:
        doc_id = self._require_id(entity_id)
        key = entity_key(self._spec.keyspace.prefix, doc_id)

        async def load() -> dict[str, Any]:
            async with self._sessions() as db:
                doc = await self._repo.find_by_id(db, self._spec.collection, doc_id)
            if doc is None:
                raise EntityNotFoundError(self._spec.label, doc_id)
            return doc.to_payload()

        return await self._runtime.reads.fetch(key, load, self._ttl)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_entity(self, db: AsyncSession, fields: dict[str, Any]) -> dict[str, Any]:
        body = check_fields(self._spec, fields, partial=False)
        try:
            doc = await self._repo.create(db, self._spec.collection, body)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._runtime.invalidations.invalidate(self._spec.entity_type, doc.id)
        logger.info("Created %s id=%s", self._spec.label, doc.id)
        return doc.to_payload()

    async def update_entity(
        self, db: AsyncSession, entity_id: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        doc_id = self._require_id(entity_id)
        body = check_fields(self._spec, fields, partial=True)
        try:
            doc = await self._repo.update(db, self._spec.collection, doc_id, body)
            if doc is None:
                raise EntityNotFoundError(self._spec.label, doc_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._runtime.invalidations.invalidate(self._spec.entity_type, doc_id)
        logger.info("Updated %s id=%s fields=%s", self._spec.label, doc_id, sorted(body))
        return doc.to_payload()

    async def delete_entity(self, db: AsyncSession, entity_id: str) -> None:
        doc_id = self._require_id(entity_id)
        try:
            deleted = await self._repo.delete(db, self._spec.collection, doc_id)
            if not deleted:
                raise EntityNotFoundError(self._spec.label, doc_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._runtime.invalidations.invalidate(self._spec.entity_type, doc_id)
        logger.info("Deleted %s id=%s", self._spec.label, doc_id)

    def _require_id(self, entity_id: str) -> str:
        doc_id = normalize_id(entity_id)
        if doc_id is None:
            raise EntityNotFoundError(self._spec.label, entity_id)
        return doc_id

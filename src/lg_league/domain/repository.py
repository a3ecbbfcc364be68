# src/lg_league/domain/repository.py
"""Repository Protocol: the league's document store.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lg_league.domain.models import DocumentQuery, StoredDocument


class DocumentRepositoryProtocol(Protocol):
    async def find(
        self, db: AsyncSession, collection: str, query: DocumentQuery
    ) -> list[StoredDocument]: ...

    async def find_by_id(
        self, db: AsyncSession, collection: str, doc_id: str
    ) -> StoredDocument | None: ...

    async def create(
        self, db: AsyncSession, collection: str, fields: dict[str, Any]
    ) -> StoredDocument: ...

    async def update(
        self, db: AsyncSession, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> StoredDocument | None: ...

    async def delete(
        self, db: AsyncSession, collection: str, doc_id: str
    ) -> bool: ...

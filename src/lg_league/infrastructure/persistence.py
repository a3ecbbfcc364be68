"""DocumentRepository: concrete implementation of DocumentRepositoryProtocol.

Every entity type lives in the single ``documents`` table, one JSONB body
per row, keyed by (collection, id). All queries use raw text() SQL (no ORM).

  equality filters   -> body @> CAST(:match AS JSONB)
  "any of" filters   -> (body @> :any_0 OR body @> :any_1 ...)
  sort on body field -> body -> CAST(:sort_n AS TEXT), jsonb ordering
                        (numbers compare numerically, strings lexically)

Sort field names are whitelisted by the entity registry and still bound as
parameters, never interpolated. SQLAlchemy failures surface as LoaderError.
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.lg_common.errors import DuplicateEntityError, LoaderError
from src.lg_common.id_generator import generate_id
from src.lg_league.domain.models import DocumentQuery, SortKey, StoredDocument

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = "id, collection, body, created_at, updated_at"

_GET_DOCUMENT_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM documents
    WHERE collection = :collection AND id = :doc_id
""")

_INSERT_DOCUMENT_SQL = text(f"""
    INSERT INTO documents (collection, id, body)
    VALUES (:collection, :doc_id, CAST(:body AS JSONB))
    RETURNING {_COLUMNS}
""")

_UPDATE_DOCUMENT_SQL = text(f"""
    UPDATE documents
    SET body = body || CAST(:fields AS JSONB)
    WHERE collection = :collection AND id = :doc_id
    RETURNING {_COLUMNS}
""")

_DELETE_DOCUMENT_SQL = text("""
    DELETE FROM documents
    WHERE collection = :collection AND id = :doc_id
    RETURNING id
""")

_TIMESTAMP_COLUMNS = {"createdAt": "created_at", "updatedAt": "updated_at"}

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _decode_body(value: Any) -> dict[str, Any]:
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return dict(value or {})


def _row_to_document(row: object) -> StoredDocument:
    return StoredDocument(
        id=row.id,  # type: ignore[attr-defined]
        collection=row.collection,  # type: ignore[attr-defined]
        body=_decode_body(row.body),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _build_find_sql(collection: str, query: DocumentQuery) -> tuple[Any, dict[str, Any]]:
    params: dict[str, Any] = {
        "collection": collection,
        "match": _dumps(query.match),
        "limit": query.limit,
        "offset": query.offset,
    }
    where = ["collection = :collection", "body @> CAST(:match AS JSONB)"]

    if query.match_any:
        alternatives = []
        for i, doc in enumerate(query.match_any):
            params[f"any_{i}"] = _dumps(doc)
            alternatives.append(f"body @> CAST(:any_{i} AS JSONB)")
        where.append("(" + " OR ".join(alternatives) + ")")

    order = [_order_term(i, key, params) for i, key in enumerate(query.sort)]
    order.append("id ASC")

    sql = (
        f"SELECT {_COLUMNS} FROM documents"
        f" WHERE {' AND '.join(where)}"
        f" ORDER BY {', '.join(order)}"
        " LIMIT :limit OFFSET :offset"
    )
    return text(sql), params


def _order_term(i: int, key: SortKey, params: dict[str, Any]) -> str:
    direction = "DESC NULLS LAST" if key.descending else "ASC NULLS LAST"
    column = _TIMESTAMP_COLUMNS.get(key.field)
    if column:
        return f"{column} {direction}"
    params[f"sort_{i}"] = key.field
    return f"body -> CAST(:sort_{i} AS TEXT) {direction}"


@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError as exc:
        raise DuplicateEntityError(collection) from exc
    except SQLAlchemyError as exc:
        raise LoaderError(f"{operation} {collection}: {exc.__class__.__name__}") from exc


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class DocumentRepository:
    """Concrete repository. Writes do not commit; the service owns the transaction."""

    async def find(
        self, db: AsyncSession, collection: str, query: DocumentQuery
    ) -> list[StoredDocument]:
        sql, params = _build_find_sql(collection, query)
        with _store_errors("find", collection):
            result = await db.execute(sql, params)
            rows = result.fetchall()
        return [_row_to_document(row) for row in rows]

    async def find_by_id(
        self, db: AsyncSession, collection: str, doc_id: str
    ) -> StoredDocument | None:
        with _store_errors("find_by_id", collection):
            result = await db.execute(
                _GET_DOCUMENT_SQL, {"collection": collection, "doc_id": doc_id}
            )
            row = result.fetchone()
        return _row_to_document(row) if row else None

    async def create(
        self, db: AsyncSession, collection: str, fields: dict[str, Any]
    ) -> StoredDocument:
        with _store_errors("create", collection):
            result = await db.execute(
                _INSERT_DOCUMENT_SQL,
                {"collection": collection, "doc_id": generate_id(), "body": _dumps(fields)},
            )
            row = result.fetchone()
        return _row_to_document(row)

    async def update(
        self, db: AsyncSession, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> StoredDocument | None:
        with _store_errors("update", collection):
            result = await db.execute(
                _UPDATE_DOCUMENT_SQL,
                {"collection": collection, "doc_id": doc_id, "fields": _dumps(fields)},
            )
            row = result.fetchone()
        return _row_to_document(row) if row else None

    async def delete(self, db: AsyncSession, collection: str, doc_id: str) -> bool:
        with _store_errors("delete", collection):
            result = await db.execute(
                _DELETE_DOCUMENT_SQL, {"collection": collection, "doc_id": doc_id}
            )
            row = result.fetchone()
        return row is not None

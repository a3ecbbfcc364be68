"""Pydantic schemas and field checks for lg_league.

Listing query shape (what gets fingerprinted):
  {<filter params>..., "sortBy", "sortOrder", "limit", "offset"}
Parameters left at their defaults are dropped, so "/teams" and
"/teams?limit=100&offset=0" share one cache entry.
"""

from typing import Any

from pydantic import BaseModel, Field

from src.lg_cache.domain.fingerprint import canonical_id_string
from src.lg_common.enums import SortOrder
from src.lg_common.errors import InvalidEntityFieldsError, InvalidQueryError
from src.lg_league.domain.models import DocumentQuery, SortKey
from src.lg_league.domain.registry import EntitySpec

DEFAULT_LIMIT = 100
MAX_LIMIT = 200


class ListQuery(BaseModel):
    filters: dict[str, str] = Field(default_factory=dict)
    sort_by: str | None = None
    sort_order: SortOrder | None = None
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    offset: int = Field(0, ge=0)

    def shape(self) -> dict[str, Any]:
        shape: dict[str, Any] = {k: canonical_id_string(v) for k, v in self.filters.items()}
        if self.sort_by is not None:
            shape["sortBy"] = self.sort_by
            shape["sortOrder"] = (self.sort_order or SortOrder.ASC).value
        if self.limit != DEFAULT_LIMIT:
            shape["limit"] = self.limit
        if self.offset:
            shape["offset"] = self.offset
        return shape

    def to_document_query(self, spec: EntitySpec) -> DocumentQuery:
        match: dict[str, Any] = {}
        match_any: list[dict[str, Any]] = []
        for param, raw in sorted(self.filters.items()):
            filter_spec = spec.filter(param)
            if filter_spec is None:
                raise InvalidQueryError(f"unknown filter {param!r}")
            try:
                docs = filter_spec.documents(raw)
            except ValueError as exc:
                raise InvalidQueryError(f"bad value for {param!r}") from exc
            if len(docs) == 1:
                _merge(match, docs[0])
            else:
                # only one "any of" filter per entity type exists today
                match_any = docs
        return DocumentQuery(
            match=match,
            match_any=match_any,
            sort=self._sort_keys(spec),
            limit=self.limit,
            offset=self.offset,
        )

    def _sort_keys(self, spec: EntitySpec) -> list[SortKey]:
        if self.sort_by is None:
            return [SortKey(f, order is SortOrder.DESC) for f, order in spec.default_sort]
        if self.sort_by not in spec.sortable:
            raise InvalidQueryError(f"cannot sort {spec.label} by {self.sort_by!r}")
        return [SortKey(self.sort_by, self.sort_order is SortOrder.DESC)]


class EntityListResponse(BaseModel):
    items: list[dict[str, Any]]
    count: int
    limit: int
    offset: int


def _merge(target: dict[str, Any], doc: dict[str, Any]) -> None:
    for key, value in doc.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = value


# ---------------------------------------------------------------------------
# Write payload checks
# ---------------------------------------------------------------------------


def check_fields(spec: EntitySpec, fields: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    """Reject unknown/missing/out-of-range fields; return the canonical payload."""
    unknown = sorted(set(fields) - spec.allowed)
    if unknown:
        raise InvalidEntityFieldsError(f"{spec.label} does not accept {', '.join(unknown)}")
    fields = {
        name: spec.normalizers[name](value) if name in spec.normalizers else value
        for name, value in fields.items()
    }
    if not partial:
        missing = [name for name in spec.required if fields.get(name) in (None, "")]
        if missing:
            raise InvalidEntityFieldsError(f"{spec.label} requires {', '.join(missing)}")
    elif not fields:
        raise InvalidEntityFieldsError("no fields to update")

    for name, enum_cls in spec.choices.items():
        if name in fields and fields[name] is not None:
            allowed = {member.value for member in enum_cls}
            if fields[name] not in allowed:
                raise InvalidEntityFieldsError(f"invalid {name} {fields[name]!r}")

    return canonical_document(fields)


def canonical_document(value: Any) -> Any:
    """Lowercase every document-id string so stored references match filters."""
    if isinstance(value, str):
        return canonical_id_string(value)
    if isinstance(value, dict):
        return {k: canonical_document(v) for k, v in value.items()}
    if isinstance(value, list):
        return [canonical_document(v) for v in value]
    return value

"""Domain models for lg_league: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.lg_common.datetime_utils import to_iso


@dataclass
class StoredDocument:
    id: str
    collection: str
    body: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    def to_payload(self) -> dict[str, Any]:
        """JSON-native entity representation, identical whether cached or loaded."""
        payload = {k: v for k, v in self.body.items() if k not in ("id", "createdAt", "updatedAt")}
        payload["id"] = self.id
        payload["createdAt"] = to_iso(self.created_at)
        payload["updatedAt"] = to_iso(self.updated_at)
        return payload


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False


@dataclass
class DocumentQuery:
    """What a listing asks the document store for."""

    match: dict[str, Any]
    match_any: list[dict[str, Any]]
    sort: list[SortKey]
    limit: int
    offset: int

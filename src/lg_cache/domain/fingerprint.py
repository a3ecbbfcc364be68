"""Deterministic cache keys for query shapes.

A query shape is a mapping of parameter name -> value (filters, sort,
pagination). The key is the namespace followed by the canonical JSON of
the shape:

    fingerprint("teams", {"limit": 10, "code": None}) == 'teams:{"limit":10}'

Canonical form:
  - mapping keys sorted, None values dropped at every level
  - 24-hex document ids and UUIDs lowercased, bytes as lowercase hex
  - datetime/date as ISO-8601, enums by value, pydantic models via model_dump
  - tuples as arrays, sets/frozensets as arrays sorted by canonical JSON
Anything else (callables, arbitrary objects, cycles, NaN) raises
InvalidShapeError.
"""

import json
import math
import re
import uuid
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

from src.lg_common.errors import InvalidShapeError
from src.lg_common.id_generator import DOCUMENT_ID_RE

_NAMESPACE_RE = re.compile(r"^[A-Za-z0-9_.\-]+$")


def fingerprint(namespace: str, shape: Mapping[str, Any]) -> str:
    """Build the cache key for ``shape`` under ``namespace``."""
    _check_namespace(namespace)
    if not isinstance(shape, Mapping):
        raise InvalidShapeError(f"shape must be a mapping, got {type(shape).__name__}")
    canonical = _canonical(shape, path="$", active=set())
    return f"{namespace}:{_dumps(canonical)}"


def entity_key(prefix: str, entity_id: str) -> str:
    """Individual-entity key, e.g. ``team:65f0c2...``."""
    _check_namespace(prefix)
    canonical_id = canonical_id_string(entity_id)
    if not canonical_id or ":" in canonical_id or "*" in canonical_id:
        raise InvalidShapeError(f"invalid entity id {entity_id!r}")
    return f"{prefix}:{canonical_id}"


def canonical_id_string(value: str) -> str:
    """Lowercase identifiers that look like document ids; leave other text alone."""
    if DOCUMENT_ID_RE.match(value):
        return value.lower()
    return value


def _check_namespace(namespace: str) -> None:
    if not isinstance(namespace, str) or not _NAMESPACE_RE.match(namespace):
        raise InvalidShapeError(f"invalid namespace {namespace!r}")


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _canonical(value: Any, path: str, active: set[int]) -> Any:
    # bool before int: bool is an int subclass
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, Enum):
        return _canonical(value.value, path, active)
    if isinstance(value, str):
        return canonical_id_string(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise InvalidShapeError(f"{path}: non-finite float")
        return value
    if isinstance(value, uuid.UUID):
        return value.hex
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return _canonical(value.model_dump(mode="json"), path, active)

    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        marker = id(value)
        if marker in active:
            raise InvalidShapeError(f"{path}: cyclic structure")
        active.add(marker)
        try:
            return _canonical_container(value, path, active)
        finally:
            active.discard(marker)

    raise InvalidShapeError(f"{path}: unserializable value of type {type(value).__name__}")


def _canonical_container(value: Any, path: str, active: set[int]) -> Any:
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for key in sorted(value, key=_key_sort):
            if not isinstance(key, str):
                raise InvalidShapeError(f"{path}: non-string key {key!r}")
            item = value[key]
            if item is None:
                continue
            out[key] = _canonical(item, f"{path}.{key}", active)
        return out
    if isinstance(value, (set, frozenset)):
        items = [_canonical(item, f"{path}[]", active) for item in value]
        return sorted(items, key=_dumps)
    return [_canonical(item, f"{path}[{i}]", active) for i, item in enumerate(value)]


def _key_sort(key: Any) -> str:
    return key if isinstance(key, str) else repr(key)

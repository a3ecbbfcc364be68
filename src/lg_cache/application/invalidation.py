"""InvalidationTracker: purge every key family a write can make stale.

Called by the write path after the repository commit and before the
response is built. Each rule is attempted independently; a failed pattern
is logged, recorded and counted, then the next rule runs. Nothing is
retried and the write is never rolled back: the stale entry is bounded by
its TTL.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field

from src.lg_cache.domain.fingerprint import canonical_id_string
from src.lg_cache.domain.keyspace import rules_for
from src.lg_cache.domain.store import CacheStoreProtocol
from src.lg_common.enums import EntityType
from src.lg_common.errors import CacheUnavailableError, InvalidationFailure

logger = logging.getLogger(__name__)


@dataclass
class InvalidationReport:
    entity_type: EntityType
    entity_id: str | None
    purged_patterns: list[str] = field(default_factory=list)
    deleted_keys: int = 0
    failures: list[InvalidationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class InvalidationTracker:
    def __init__(self, store: CacheStoreProtocol, *, enabled: bool = True) -> None:
        self._store = store
        self._enabled = enabled
        self._failures: Counter[str] = Counter()

    def failure_counts(self) -> dict[str, int]:
        return dict(self._failures)

    def patterns_for(self, entity_type: EntityType, entity_id: str | None) -> list[str]:
        canonical = canonical_id_string(entity_id) if entity_id is not None else None
        resolved = (rule.resolve(canonical) for rule in rules_for(entity_type))
        return [pattern for pattern in resolved if pattern is not None]

    async def invalidate(
        self, entity_type: EntityType, entity_id: str | None
    ) -> InvalidationReport:
        report = InvalidationReport(entity_type=entity_type, entity_id=entity_id)
        if not self._enabled:
            return report

        for pattern in self.patterns_for(entity_type, entity_id):
            try:
                report.deleted_keys += await self._store.delete_pattern(pattern)
                report.purged_patterns.append(pattern)
            except CacheUnavailableError as exc:
                failure = InvalidationFailure(entity_type.value, entity_id, pattern, exc.message)
                report.failures.append(failure)
                self._failures[entity_type.value] += 1
                logger.error(
                    "Cache invalidation failed type=%s id=%s pattern=%s: %s",
                    entity_type.value,
                    entity_id,
                    pattern,
                    exc.message,
                )

        logger.info(
            "Invalidated type=%s id=%s patterns=%d deleted=%d failures=%d",
            entity_type.value,
            entity_id,
            len(report.purged_patterns),
            report.deleted_keys,
            len(report.failures),
        )
        return report

"""Key layout and invalidation rules for every entity type.

Each entity type owns one individual key (``{prefix}:{id}``) and one
collection family (``{namespace}:*``). Rules are built once at import and
exposed read-only.
"""

from dataclasses import dataclass
from types import MappingProxyType

from src.lg_common.enums import EntityType

ID_PLACEHOLDER = "{id}"


@dataclass(frozen=True)
class EntityKeyspace:
    entity_type: EntityType
    prefix: str       # individual key prefix: team -> "team:{id}"
    namespace: str    # collection family: team -> "teams:*"

    @property
    def individual_template(self) -> str:
        return f"{self.prefix}:{ID_PLACEHOLDER}"

    @property
    def collection_pattern(self) -> str:
        return f"{self.namespace}:*"


@dataclass(frozen=True)
class InvalidationRule:
    entity_type: EntityType
    template: str

    @property
    def needs_id(self) -> bool:
        return ID_PLACEHOLDER in self.template

    def resolve(self, entity_id: str | None) -> str | None:
        """Concrete pattern, or None when the template needs an id we do not have."""
        if self.needs_id:
            if entity_id is None:
                return None
            return self.template.replace(ID_PLACEHOLDER, entity_id)
        return self.template


KEYSPACES: MappingProxyType[EntityType, EntityKeyspace] = MappingProxyType({
    EntityType.TEAM: EntityKeyspace(EntityType.TEAM, "team", "teams"),
    EntityType.PLAYER: EntityKeyspace(EntityType.PLAYER, "player", "players"),
    EntityType.FIXTURE: EntityKeyspace(EntityType.FIXTURE, "fixture", "fixtures"),
    EntityType.STANDING: EntityKeyspace(EntityType.STANDING, "standing", "standings"),
    # "news" is both singular and plural; the feed gets its own family
    EntityType.NEWS: EntityKeyspace(EntityType.NEWS, "news", "news_feed"),
    EntityType.TRANSFER: EntityKeyspace(EntityType.TRANSFER, "transfer", "transfers"),
    EntityType.AWARD: EntityKeyspace(EntityType.AWARD, "award", "awards"),
    EntityType.PLAYER_STAT: EntityKeyspace(EntityType.PLAYER_STAT, "player_stat", "player_stats"),
})

# Extra families purged by a write, beyond the type's own keys.
_DEPENDENT_FAMILIES: dict[EntityType, tuple[EntityType, ...]] = {
    # standings are recomputed from fixture results
    EntityType.FIXTURE: (EntityType.STANDING,),
}


def _build_rules() -> MappingProxyType[EntityType, tuple[InvalidationRule, ...]]:
    rules: dict[EntityType, tuple[InvalidationRule, ...]] = {}
    for entity_type, space in KEYSPACES.items():
        own = [
            InvalidationRule(entity_type, space.individual_template),
            InvalidationRule(entity_type, space.collection_pattern),
        ]
        for dependent in _DEPENDENT_FAMILIES.get(entity_type, ()):
            own.append(InvalidationRule(entity_type, KEYSPACES[dependent].collection_pattern))
        rules[entity_type] = tuple(own)
    return MappingProxyType(rules)


INVALIDATION_RULES = _build_rules()


def keyspace_for(entity_type: EntityType) -> EntityKeyspace:
    return KEYSPACES[entity_type]


def rules_for(entity_type: EntityType) -> tuple[InvalidationRule, ...]:
    return INVALIDATION_RULES[entity_type]

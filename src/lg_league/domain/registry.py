"""Static description of every league entity type.

One EntitySpec per type drives the generic repository, service and router:
which fields a document may carry, which query parameters filter a
listing, what the listing is sorted by when the caller does not say, and
the cache TTL.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from src.lg_cache.domain.fingerprint import canonical_id_string
from src.lg_cache.domain.keyspace import EntityKeyspace, keyspace_for
from src.lg_common.enums import (
    EntityType,
    FixtureStatus,
    NewsType,
    PlayerPosition,
    SortOrder,
    TransferType,
)


@dataclass(frozen=True)
class FilterSpec:
    """Query parameter -> JSONB containment document(s).

    ``paths`` with one entry is an equality filter; several entries mean
    "matches any of these paths" (fixture teamId is either side).
    """

    param: str
    paths: tuple[str, ...]
    cast: Callable[[str], Any] = canonical_id_string

    def documents(self, raw: str) -> list[dict[str, Any]]:
        value = self.cast(raw)
        return [_nest(path, value) for path in self.paths]


@dataclass(frozen=True)
class EntitySpec:
    entity_type: EntityType
    label: str
    route: str
    required: tuple[str, ...]
    optional: tuple[str, ...] = ()
    choices: dict[str, type[Enum]] = field(default_factory=dict)
    filters: tuple[FilterSpec, ...] = ()
    default_sort: tuple[tuple[str, SortOrder], ...] = ()
    # field -> canonical form applied on write (and by the matching filter)
    normalizers: dict[str, Callable[[Any], Any]] = field(default_factory=dict)
    short_lived: bool = False  # uses CACHE_STANDINGS_TTL_SECONDS

    @property
    def collection(self) -> str:
        return self.entity_type.value

    @property
    def keyspace(self) -> EntityKeyspace:
        return keyspace_for(self.entity_type)

    @property
    def allowed(self) -> frozenset[str]:
        return frozenset(self.required) | frozenset(self.optional)

    @property
    def sortable(self) -> frozenset[str]:
        return self.allowed | {"createdAt", "updatedAt"}

    def filter(self, param: str) -> FilterSpec | None:
        for spec in self.filters:
            if spec.param == param:
                return spec
        return None


def _trimmed(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _team_code(value: Any) -> Any:
    return value.strip().upper() if isinstance(value, str) else value


def _nest(path: str, value: Any) -> dict[str, Any]:
    doc: Any = value
    for part in reversed(path.split(".")):
        doc = {part: doc}
    return doc


_ASC = SortOrder.ASC
_DESC = SortOrder.DESC

ENTITY_SPECS: MappingProxyType[EntityType, EntitySpec] = MappingProxyType({
    EntityType.TEAM: EntitySpec(
        entity_type=EntityType.TEAM,
        label="Team",
        route="teams",
        required=("name", "code"),
        optional=("crestUrl", "jerseyUrl", "founded"),
        normalizers={"name": _trimmed, "code": _team_code},
        filters=(FilterSpec("code", ("code",), cast=_team_code),),
        default_sort=(("name", _ASC),),
    ),
    EntityType.PLAYER: EntitySpec(
        entity_type=EntityType.PLAYER,
        label="Player",
        route="players",
        required=("name", "team", "position"),
        optional=("playerNumber", "photoUrl"),
        choices={"position": PlayerPosition},
        filters=(FilterSpec("team", ("team",)), FilterSpec("position", ("position",))),
        default_sort=(("name", _ASC),),
    ),
    EntityType.FIXTURE: EntitySpec(
        entity_type=EntityType.FIXTURE,
        label="Fixture",
        route="fixtures",
        required=("matchweek", "date", "time", "venue", "teamA", "teamB"),
        optional=("status", "teamsheets"),
        choices={"status": FixtureStatus},
        filters=(
            FilterSpec("matchweek", ("matchweek",), cast=int),
            FilterSpec("status", ("status",)),
            FilterSpec("teamId", ("teamA.teamId", "teamB.teamId")),
        ),
        default_sort=(("date", _ASC), ("time", _ASC)),
    ),
    EntityType.STANDING: EntitySpec(
        entity_type=EntityType.STANDING,
        label="Standing",
        route="standings",
        required=(
            "team", "played", "wins", "draws", "losses",
            "goalsFor", "goalsAgainst", "goalDifference", "points",
        ),
        filters=(FilterSpec("team", ("team",)),),
        default_sort=(("points", _DESC), ("goalDifference", _DESC), ("goalsFor", _DESC)),
        short_lived=True,
    ),
    EntityType.NEWS: EntitySpec(
        entity_type=EntityType.NEWS,
        label="News",
        route="news",
        required=("title", "content", "author", "date", "type"),
        optional=("player", "team", "imageUrl"),
        choices={"type": NewsType},
        filters=(
            FilterSpec("type", ("type",)),
            FilterSpec("player", ("player",)),
            FilterSpec("team", ("team",)),
        ),
        default_sort=(("date", _DESC),),
    ),
    EntityType.TRANSFER: EntitySpec(
        entity_type=EntityType.TRANSFER,
        label="Transfer",
        route="transfers",
        required=("player", "fromTeam", "toTeam", "transferDate", "transferType", "season"),
        optional=("fee",),
        choices={"transferType": TransferType},
        filters=(FilterSpec("season", ("season",)), FilterSpec("transferType", ("transferType",))),
        default_sort=(("transferDate", _DESC),),
    ),
    EntityType.AWARD: EntitySpec(
        entity_type=EntityType.AWARD,
        label="Award",
        route="awards",
        required=("title", "season"),
        optional=("description", "recipient", "matchweek", "dateAwarded", "imageUrl"),
        filters=(FilterSpec("season", ("season",)), FilterSpec("recipient", ("recipient",))),
        default_sort=(("dateAwarded", _DESC),),
    ),
    EntityType.PLAYER_STAT: EntitySpec(
        entity_type=EntityType.PLAYER_STAT,
        label="PlayerStat",
        route="player-stats",
        required=("player",),
        optional=(
            "goals", "assists", "appearances", "minutesPlayed",
            "cleanSheets", "yellowCards", "redCards",
        ),
        filters=(FilterSpec("player", ("player",)),),
        default_sort=(("goals", _DESC), ("assists", _DESC), ("appearances", _DESC)),
    ),
})


def spec_for(entity_type: EntityType) -> EntitySpec:
    return ENTITY_SPECS[entity_type]

"""Tests for lg_league.domain.registry."""

import pytest

from src.lg_cache.domain.keyspace import KEYSPACES
from src.lg_common.enums import EntityType
from src.lg_league.domain.registry import ENTITY_SPECS, FilterSpec, spec_for


class TestEntitySpecs:
    def test_every_entity_type_registered(self) -> None:
        assert set(ENTITY_SPECS) == set(EntityType)

    def test_routes_are_unique(self) -> None:
        routes = [s.route for s in ENTITY_SPECS.values()]
        assert len(routes) == len(set(routes))

    @pytest.mark.parametrize("entity_type", list(EntityType))
    def test_keyspace_matches_cache_layout(self, entity_type: EntityType) -> None:
        assert spec_for(entity_type).keyspace is KEYSPACES[entity_type]

    @pytest.mark.parametrize("entity_type", list(EntityType))
    def test_default_sort_fields_are_sortable(self, entity_type: EntityType) -> None:
        spec = spec_for(entity_type)
        for field, _ in spec.default_sort:
            assert field in spec.sortable

    def test_only_standings_are_short_lived(self) -> None:
        assert [s.entity_type for s in ENTITY_SPECS.values() if s.short_lived] == [EntityType.STANDING]

    def test_team_fields(self) -> None:
        spec = spec_for(EntityType.TEAM)
        assert spec.required == ("name", "code")
        assert "crestUrl" in spec.allowed
        assert spec.collection == "team"

    def test_team_normalizers(self) -> None:
        spec = spec_for(EntityType.TEAM)
        assert spec.normalizers["code"](" dra ") == "DRA"
        assert spec.normalizers["name"](" Dragons ") == "Dragons"
        assert spec.filter("code").documents("dra") == [{"code": "DRA"}]

    def test_unknown_filter(self) -> None:
        assert spec_for(EntityType.TEAM).filter("nope") is None


class TestFilterSpec:
    def test_equality_filter(self) -> None:
        f = FilterSpec("team", ("team",))
        assert f.documents("65F0C2AB12CD34EF56789012") == [{"team": "65f0c2ab12cd34ef56789012"}]

    def test_nested_any_of(self) -> None:
        f = spec_for(EntityType.FIXTURE).filter("teamId")
        assert f.documents("abc") == [{"teamA": {"teamId": "abc"}}, {"teamB": {"teamId": "abc"}}]

    def test_cast(self) -> None:
        f = spec_for(EntityType.FIXTURE).filter("matchweek")
        assert f.documents("3") == [{"matchweek": 3}]
        with pytest.raises(ValueError):
            f.documents("three")

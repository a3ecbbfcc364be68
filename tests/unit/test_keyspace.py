"""Tests for lg_cache.domain.keyspace."""

import pytest

from src.lg_cache.domain.keyspace import (
    INVALIDATION_RULES,
    KEYSPACES,
    InvalidationRule,
    keyspace_for,
    rules_for,
)
from src.lg_cache.domain.patterns import parse_pattern
from src.lg_common.enums import EntityType


class TestKeyspaces:
    def test_every_entity_type_has_a_keyspace(self) -> None:
        assert set(KEYSPACES) == set(EntityType)

    def test_prefixes_and_namespaces_are_unique(self) -> None:
        names = [s.prefix for s in KEYSPACES.values()] + [s.namespace for s in KEYSPACES.values()]
        assert len(names) == len(set(names))

    def test_team_layout(self) -> None:
        space = keyspace_for(EntityType.TEAM)
        assert space.individual_template == "team:{id}"
        assert space.collection_pattern == "teams:*"

    def test_news_feed_does_not_collide_with_news_items(self) -> None:
        space = keyspace_for(EntityType.NEWS)
        family = parse_pattern(space.collection_pattern)
        assert not family.matches("news:65f0c2ab12cd34ef56789012")

    def test_tables_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            KEYSPACES[EntityType.TEAM] = None  # type: ignore[index]
        with pytest.raises(TypeError):
            INVALIDATION_RULES[EntityType.TEAM] = ()  # type: ignore[index]


class TestInvalidationRules:
    @pytest.mark.parametrize("entity_type", list(EntityType))
    def test_individual_and_collection_always_covered(self, entity_type: EntityType) -> None:
        space = keyspace_for(entity_type)
        templates = {rule.template for rule in rules_for(entity_type)}
        assert space.individual_template in templates
        assert space.collection_pattern in templates

    def test_fixture_writes_purge_standings(self) -> None:
        templates = {rule.template for rule in rules_for(EntityType.FIXTURE)}
        assert "standings:*" in templates

    @pytest.mark.parametrize("entity_type", list(EntityType))
    def test_all_templates_parse(self, entity_type: EntityType) -> None:
        for rule in rules_for(entity_type):
            parse_pattern(rule.resolve("65f0c2ab12cd34ef56789012"))


class TestInvalidationRule:
    def test_resolve_with_id(self) -> None:
        rule = InvalidationRule(EntityType.TEAM, "team:{id}")
        assert rule.needs_id
        assert rule.resolve("abc") == "team:abc"

    def test_resolve_without_id(self) -> None:
        assert InvalidationRule(EntityType.TEAM, "team:{id}").resolve(None) is None
        assert InvalidationRule(EntityType.TEAM, "teams:*").resolve(None) == "teams:*"

"""Tests for lg_cache.domain.patterns."""

import pytest

from src.lg_cache.domain.patterns import escape_glob, parse_pattern
from src.lg_common.errors import InvalidPatternError


class TestParsePattern:
    def test_exact_pattern(self) -> None:
        p = parse_pattern("team:65f0c2ab12cd34ef56789012")
        assert p.is_exact
        assert p.segments == ("team", "65f0c2ab12cd34ef56789012")

    def test_wildcard_pattern(self) -> None:
        p = parse_pattern("teams:*")
        assert not p.is_exact

    @pytest.mark.parametrize("bad", ["", "*", "*:teams", "team*", "teams:*x", "teams::x", "teams:"])
    def test_rejects_malformed(self, bad: str) -> None:
        with pytest.raises(InvalidPatternError):
            parse_pattern(bad)


class TestMatches:
    def test_family_matches_its_keys(self) -> None:
        p = parse_pattern("teams:*")
        assert p.matches("teams:{}")
        assert p.matches('teams:{"code":"DRA","limit":10}')

    def test_family_does_not_cross_into_neighbours(self) -> None:
        p = parse_pattern("teams:*")
        assert not p.matches("team:65f0c2ab12cd34ef56789012")
        assert not p.matches("teamsheets:{}")
        assert not p.matches("teams")

    def test_wildcard_matches_empty_tail_like_redis(self) -> None:
        assert parse_pattern("teams:*").matches("teams:")

    def test_player_does_not_match_player_stats(self) -> None:
        p = parse_pattern("players:*")
        assert not p.matches("player_stats:{}")

    def test_exact_matches_only_itself(self) -> None:
        p = parse_pattern("team:abc")
        assert p.matches("team:abc")
        assert not p.matches("team:abcd")

    def test_wildcard_spans_colons(self) -> None:
        p = parse_pattern("league:*:standings")
        assert p.matches("league:a:b:standings")
        assert not p.matches("league:standings")


class TestRedisMatch:
    def test_escape_glob(self) -> None:
        assert escape_glob("league[v2]") == r"league\[v2\]"
        assert escape_glob("plain") == "plain"

    def test_wildcard_kept(self) -> None:
        assert parse_pattern("teams:*").to_redis_match() == "teams:*"

    def test_glob_specials_escaped_in_literals(self) -> None:
        assert parse_pattern("news_feed:[x]?").to_redis_match() == r"news_feed:\[x\]\?"

"""Cache key pattern grammar.

A pattern is a ``:``-separated list of segments. A segment is either a
literal or a lone ``*``, which matches any run of characters (``:``
included, as Redis SCAN MATCH does):

    teams:*            -> every key starting with "teams:"
    team:65f0...       -> exactly that key
    league:*:standings -> anything in between, then ":standings"

``*`` inside a literal segment (``team*``) is rejected so a wildcard can
never cross into a neighbouring key family (``teams:*`` must not match
``teamsheets:...``).
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from src.lg_common.errors import InvalidPatternError

WILDCARD = "*"
SEPARATOR = ":"
_REDIS_GLOB_SPECIALS = re.compile(r"([*?\[\]\\])")


def escape_glob(text: str) -> str:
    """Escape Redis glob metacharacters so ``text`` matches only itself."""
    return _REDIS_GLOB_SPECIALS.sub(r"\\\1", text)


@dataclass(frozen=True)
class KeyPattern:
    raw: str
    segments: tuple[str, ...]

    @property
    def is_exact(self) -> bool:
        return WILDCARD not in self.segments

    def to_redis_match(self) -> str:
        """Redis SCAN MATCH glob with literal segments escaped."""
        return SEPARATOR.join(
            WILDCARD if seg == WILDCARD else escape_glob(seg)
            for seg in self.segments
        )

    def matches(self, key: str) -> bool:
        return _compile(self).fullmatch(key) is not None


def parse_pattern(pattern: str) -> KeyPattern:
    if not pattern:
        raise InvalidPatternError(pattern)
    segments = tuple(pattern.split(SEPARATOR))
    for seg in segments:
        if not seg:
            raise InvalidPatternError(pattern)
        if WILDCARD in seg and seg != WILDCARD:
            raise InvalidPatternError(pattern)
    if segments[0] == WILDCARD:
        # a leading wildcard would purge every key family at once
        raise InvalidPatternError(pattern)
    return KeyPattern(raw=pattern, segments=segments)


@lru_cache(maxsize=256)
def _compile(pattern: KeyPattern) -> re.Pattern[str]:
    parts = [".*" if seg == WILDCARD else re.escape(seg) for seg in pattern.segments]
    return re.compile(re.escape(SEPARATOR).join(parts), re.DOTALL)

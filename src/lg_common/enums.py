"""Global enums: values are the wire names used in cache keys and the
documents.collection column.
"""

from enum import Enum


class EntityType(str, Enum):
    TEAM = "team"
    PLAYER = "player"
    FIXTURE = "fixture"
    STANDING = "standing"
    NEWS = "news"
    TRANSFER = "transfer"
    AWARD = "award"
    PLAYER_STAT = "player_stat"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PlayerPosition(str, Enum):
    GOALKEEPER = "Goalkeeper"
    DEFENDER = "Defender"
    MIDFIELDER = "Midfielder"
    FORWARD = "Forward"


class FixtureStatus(str, Enum):
    UPCOMING = "Upcoming"
    LIVE = "Live"
    COMPLETED = "Completed"
    POSTPONED = "Postponed"
    CANCELLED = "Cancelled"


class NewsType(str, Enum):
    TRANSFER = "transfer"
    MILESTONE = "milestone"
    HIGHLIGHT = "highlight"
    GENERAL = "general"
    INJURY = "injury"
    MATCH_REPORT = "match_report"


class TransferType(str, Enum):
    PERMANENT = "Permanent"
    LOAN = "Loan"
    FREE_TRANSFER = "Free Transfer"
    END_OF_LOAN = "End of Loan"

"""
Value records for scraped footywire rows and canonical matches.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from .config import FIXTURE_FIELDS, RESULT_COLUMNS, REGULAR_ROUND_TYPE
from .exceptions import MalformedRowError


class _Unscored:
    """Marker for a score that does not exist yet because the match is unplayed."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSCORED"

    def __reduce__(self):
        return (_Unscored, ())


UNSCORED = _Unscored()

ScoreValue = Union[int, _Unscored]


class MatchStatus(str, Enum):
    """Lifecycle of a match as reported by the source."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    FINAL = "final"

    @property
    def rank(self) -> int:
        """Completeness of a record in this status; higher is more complete."""
        return _STATUS_RANKS[self]


_STATUS_RANKS = {
    MatchStatus.SCHEDULED: 0,
    MatchStatus.IN_PROGRESS: 1,
    MatchStatus.FINAL: 2,
}


@dataclass(frozen=True)
class Score:
    """Goals, behinds and total points for one team."""
    goals: ScoreValue = UNSCORED
    behinds: ScoreValue = UNSCORED
    points: ScoreValue = UNSCORED

    @property
    def is_scored(self) -> bool:
        return self.points is not UNSCORED


@dataclass(frozen=True)
class FixtureRow:
    """Raw fixture listing row: date text, both team names and the venue."""
    date: str
    teams: str
    venue: str

    @classmethod
    def from_fields(cls, fields) -> "FixtureRow":
        if isinstance(fields, str):
            raise MalformedRowError(f"Expected a sequence of fields, got text {fields!r}")
        if hasattr(fields, "as_tuple"):
            fields = fields.as_tuple()
        fields = tuple(fields)
        if len(fields) != len(FIXTURE_FIELDS):
            raise MalformedRowError(
                f"Fixture row needs {len(FIXTURE_FIELDS)} fields, got {len(fields)}: {fields!r}"
            )
        return cls(*(str(f) for f in fields))

    def as_tuple(self) -> Tuple[str, str, str]:
        return (self.date, self.teams, self.venue)


@dataclass(frozen=True)
class ResultRow:
    """Raw result listing row, one text field per canonical result column."""
    fields: Tuple[str, ...]

    @classmethod
    def from_fields(cls, fields) -> "ResultRow":
        if isinstance(fields, str):
            raise MalformedRowError(f"Expected a sequence of fields, got text {fields!r}")
        if hasattr(fields, "as_tuple"):
            fields = fields.as_tuple()
        fields = tuple("" if f is None else str(f) for f in fields)
        if len(fields) != len(RESULT_COLUMNS):
            raise MalformedRowError(
                f"Result row needs {len(RESULT_COLUMNS)} fields, got {len(fields)}"
            )
        return cls(fields)

    def get(self, column: str) -> str:
        return self.fields[RESULT_COLUMNS.index(column)]

    def as_tuple(self) -> Tuple[str, ...]:
        return self.fields


@dataclass(frozen=True)
class MatchRecord:
    """
    One canonical match.

    `round` is None only for fixture records that have not been through
    round inference yet.
    """
    game: Optional[int]
    date: datetime
    round: Optional[int]
    home_team: str
    away_team: str
    venue: str
    status: MatchStatus = MatchStatus.SCHEDULED
    home_score: Score = field(default_factory=Score)
    away_score: Score = field(default_factory=Score)
    season: Optional[int] = None
    round_type: str = REGULAR_ROUND_TYPE
    round_label: Optional[str] = None

    @property
    def margin(self) -> ScoreValue:
        if not (self.home_score.is_scored and self.away_score.is_scored):
            return UNSCORED
        return self.home_score.points - self.away_score.points

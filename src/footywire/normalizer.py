"""
Row normalization for scraped footywire rows.

Turns raw fixture rows (date, teams, venue) and raw result rows (the 16
canonical result columns) into MatchRecord values, and converts between
records and data frames.
"""

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd

from .config import (
    FINALS_ROUND_TYPE,
    FINALS_WEEKS,
    MATCH_COLUMNS,
    REGULAR_ROUND_TYPE,
    SCORE_COLUMNS,
)
from .exceptions import MalformedRowError
from .models import (
    UNSCORED,
    FixtureRow,
    MatchRecord,
    MatchStatus,
    ResultRow,
    Score,
    ScoreValue,
)
from .teams import canonicalize
from .utils import clean_text, get_season_from_date, safe_int

logger = logging.getLogger(__name__)

FIXTURE_KIND = "fixture"
RESULT_KIND = "result"

# Footywire renders the teams cell as "Home\nv \nAway"
_TEAMS_SEPARATOR = re.compile(r'\r?\n\s*v\s*\r?\n')
_TEAMS_INLINE_SEPARATOR = re.compile(r'\s+v\s+')
_ROUND_LABEL_RE = re.compile(r'^R(?:ound)?\s*(\d+)$', re.IGNORECASE)

_ISO_DATE_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
)
# Footywire match list dates omit the year, e.g. "Thu 22 Mar 7:25pm"
_FOOTYWIRE_DATE_FORMATS = (
    "%Y %a %d %b %I:%M%p",
    "%Y %a %d %b %H:%M",
    "%Y %a %d %b",
)

RawRow = Union[FixtureRow, ResultRow, Sequence[str]]


def split_teams(teams: str) -> tuple:
    """Split footywire's combined teams cell into (home, away)."""
    parts = _TEAMS_SEPARATOR.split(teams)
    if len(parts) != 2:
        parts = _TEAMS_INLINE_SEPARATOR.split(clean_text(teams))
    if len(parts) != 2:
        raise MalformedRowError(f"Cannot split teams from {teams!r}")

    home, away = (re.sub(r'[\r\n]', '', p).strip() for p in parts)
    if not home or not away:
        raise MalformedRowError(f"Missing team name in {teams!r}")
    return home, away


def parse_fixture_date(text: str, season: Optional[int] = None) -> datetime:
    """
    Parse a match date.

    Accepts ISO style dates ("2018-03-22 19:25") or footywire's match list
    format ("Thu 22 Mar 7:25pm"), which needs the season for its year.
    """
    if isinstance(text, datetime):
        return text
    text = clean_text(text)
    if not text:
        raise MalformedRowError("Missing match date")

    for fmt in _ISO_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    if season is not None:
        for fmt in _FOOTYWIRE_DATE_FORMATS:
            try:
                return datetime.strptime(f"{season} {text}", fmt)
            except ValueError:
                continue

    raise MalformedRowError(f"Unrecognised match date {text!r}")


def parse_score_field(text) -> ScoreValue:
    """Parse a goals/behinds/points cell; placeholders become UNSCORED, never 0."""
    value = safe_int(text)
    return UNSCORED if value is None else value


def _build_score(goals, behinds, points) -> Score:
    goals = parse_score_field(goals)
    behinds = parse_score_field(behinds)
    points = parse_score_field(points)
    if points is UNSCORED and goals is not UNSCORED and behinds is not UNSCORED:
        points = goals * 6 + behinds
    return Score(goals=goals, behinds=behinds, points=points)


def normalize_fixture_row(row: RawRow, season: Optional[int] = None,
                          game: Optional[int] = None) -> MatchRecord:
    """
    Normalize a 3-field fixture row.

    The returned record has no round yet; rounds are assigned across a whole
    season by `footywire.rounds.infer_rounds`.
    """
    if not isinstance(row, FixtureRow):
        row = FixtureRow.from_fields(row)

    date = parse_fixture_date(row.date, season)
    home, away = split_teams(row.teams)

    return MatchRecord(
        game=game,
        date=date,
        round=None,
        home_team=canonicalize(home),
        away_team=canonicalize(away),
        venue=clean_text(row.venue),
        status=MatchStatus.SCHEDULED,
        season=season if season is not None else date.year,
    )


def normalize_result_row(row: RawRow) -> MatchRecord:
    """Normalize a 16-field result row."""
    if not isinstance(row, ResultRow):
        row = ResultRow.from_fields(row)

    game = safe_int(row.get("Game"))
    if game is None:
        raise MalformedRowError(f"Result row has no game id: {row.get('Game')!r}")

    date = parse_fixture_date(row.get("Date"))

    home = clean_text(row.get("Home.Team"))
    away = clean_text(row.get("Away.Team"))
    if not home or not away:
        raise MalformedRowError(f"Result row {game} is missing a team name")

    home_score = _build_score(row.get("Home.Goals"), row.get("Home.Behinds"), row.get("Home.Points"))
    away_score = _build_score(row.get("Away.Goals"), row.get("Away.Behinds"), row.get("Away.Points"))
    status = (MatchStatus.FINAL if home_score.is_scored and away_score.is_scored
              else MatchStatus.SCHEDULED)

    round_label = clean_text(row.get("Round")) or None
    round_type = clean_text(row.get("Round.Type"))
    if not round_type:
        round_type = (FINALS_ROUND_TYPE if round_label in FINALS_WEEKS
                      else REGULAR_ROUND_TYPE)

    round_number = safe_int(row.get("Round.Number"))
    if round_number is None and round_label:
        label_match = _ROUND_LABEL_RE.match(round_label)
        if label_match:
            round_number = int(label_match.group(1))
    if round_label is None and round_number is not None:
        round_label = f"R{round_number}"

    season = safe_int(row.get("Season"))
    if season is None:
        season = get_season_from_date(date)

    return MatchRecord(
        game=game,
        date=date,
        round=round_number,
        home_team=canonicalize(home),
        away_team=canonicalize(away),
        venue=clean_text(row.get("Venue")),
        status=status,
        home_score=home_score,
        away_score=away_score,
        season=season,
        round_type=round_type,
        round_label=round_label,
    )


def normalize(raw_row: RawRow, kind: Optional[str] = None,
              season: Optional[int] = None, game: Optional[int] = None) -> MatchRecord:
    """
    Normalize one raw scraped row into a MatchRecord.

    Args:
        raw_row: FixtureRow, ResultRow, or a plain sequence of text fields
        kind: "fixture" (3 fields) or "result" (16 fields); required for
            plain sequences, inferred for FixtureRow/ResultRow
        season: Season of a fixture row (supplies the year for footywire dates)
        game: Season game number assigned to a fixture row

    Raises:
        MalformedRowError: the row does not match the schema of its kind
    """
    if kind is None:
        if isinstance(raw_row, FixtureRow):
            kind = FIXTURE_KIND
        elif isinstance(raw_row, ResultRow):
            kind = RESULT_KIND
        else:
            raise MalformedRowError("Row kind must be declared for plain field sequences")

    if kind == FIXTURE_KIND:
        return normalize_fixture_row(raw_row, season=season, game=game)
    if kind == RESULT_KIND:
        return normalize_result_row(raw_row)
    raise MalformedRowError(f"Unknown row kind {kind!r}")


def _score_cell(value: ScoreValue):
    return None if value is UNSCORED else value


def records_to_frame(records: Iterable[MatchRecord]) -> pd.DataFrame:
    """Build a match table (MATCH_COLUMNS) from records."""
    rows = []
    for rec in records:
        round_label = rec.round_label
        if round_label is None and rec.round is not None:
            round_label = f"R{rec.round}"
        rows.append({
            "Game": rec.game,
            "Date": rec.date,
            "Round": round_label,
            "Home.Team": rec.home_team,
            "Home.Goals": _score_cell(rec.home_score.goals),
            "Home.Behinds": _score_cell(rec.home_score.behinds),
            "Home.Points": _score_cell(rec.home_score.points),
            "Away.Team": rec.away_team,
            "Away.Goals": _score_cell(rec.away_score.goals),
            "Away.Behinds": _score_cell(rec.away_score.behinds),
            "Away.Points": _score_cell(rec.away_score.points),
            "Venue": rec.venue,
            "Margin": _score_cell(rec.margin),
            "Season": rec.season,
            "Round.Type": rec.round_type,
            "Round.Number": rec.round,
            "Status": MatchStatus(rec.status).value,
        })

    df = pd.DataFrame(rows, columns=MATCH_COLUMNS)
    return coerce_match_frame(df)


def coerce_match_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Give a match table its canonical column order and dtypes."""
    df = df.copy()
    missing = [c for c in MATCH_COLUMNS if c not in df.columns]
    if missing == ["Status"]:
        df["Status"] = derive_status(df)
    elif missing:
        raise MalformedRowError(f"Match table is missing columns: {missing}")
    else:
        df["Status"] = df["Status"].where(df["Status"].notna(), derive_status(df))

    df = df[MATCH_COLUMNS].copy()
    try:
        df["Date"] = pd.to_datetime(df["Date"])
    except (ValueError, TypeError) as e:
        raise MalformedRowError(f"Match table has unparseable dates: {e}") from e
    for col in ["Game", "Season", "Round.Number"] + SCORE_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors='coerce').astype("Int64")
    df["Status"] = df["Status"].astype(str)
    return df.reset_index(drop=True)


def derive_status(df: pd.DataFrame) -> pd.Series:
    """Status for tables that predate the Status column: scored matches are final."""
    home = pd.to_numeric(df["Home.Points"], errors='coerce')
    away = pd.to_numeric(df["Away.Points"], errors='coerce')
    scored = home.notna() & away.notna()
    return scored.map({True: MatchStatus.FINAL.value, False: MatchStatus.SCHEDULED.value})


def _record_value(value):
    if value is None or pd.isna(value):
        return UNSCORED
    return int(value)


def _optional_int(value) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def frame_to_records(df: pd.DataFrame) -> List[MatchRecord]:
    """Convert a match table back into MatchRecord values."""
    df = coerce_match_frame(df)
    records = []
    for row in df.itertuples(index=False, name=None):
        row = dict(zip(MATCH_COLUMNS, row))
        records.append(MatchRecord(
            game=int(row["Game"]),
            date=pd.Timestamp(row["Date"]).to_pydatetime(),
            round=_optional_int(row["Round.Number"]),
            home_team=row["Home.Team"],
            away_team=row["Away.Team"],
            venue=row["Venue"],
            status=MatchStatus(row["Status"]),
            home_score=Score(_record_value(row["Home.Goals"]),
                             _record_value(row["Home.Behinds"]),
                             _record_value(row["Home.Points"])),
            away_score=Score(_record_value(row["Away.Goals"]),
                             _record_value(row["Away.Behinds"]),
                             _record_value(row["Away.Points"])),
            season=_optional_int(row["Season"]),
            round_type=row["Round.Type"],
            round_label=None if pd.isna(row["Round"]) else row["Round"],
        ))
    return records

"""
Season fixture from footywire.com.
"""

import dataclasses
import logging
import numbers
from typing import Iterable, List, Optional

import pandas as pd

from .config import BYE_VENUE, FIXTURE_COLUMNS
from .fetcher import FootywireFetcher
from .models import FixtureRow, MatchRecord
from .normalizer import FIXTURE_KIND, normalize
from .rounds import infer_rounds
from .utils import clean_text

logger = logging.getLogger(__name__)


def validate_season(season) -> int:
    """Seasons are 4-digit years."""
    if isinstance(season, bool) or not isinstance(season, numbers.Integral):
        raise ValueError(f"'season' must be in 4-digit year format. 'season' is currently {season!r}")
    if len(str(season)) != 4:
        raise ValueError(
            f"'season' must be in 4-digit year format (e.g. 2018). 'season' is currently {season}"
        )
    return int(season)


def _is_bye(row) -> bool:
    if isinstance(row, FixtureRow):
        venue = row.venue
    elif len(row) == 3:
        venue = row[2]
    else:
        return False
    return clean_text(venue).upper() == BYE_VENUE


def fixture_records(raw_rows: Iterable, season: int) -> List[MatchRecord]:
    """
    Normalize a season's raw fixture rows into records with rounds.

    BYE rows are dropped; the remaining games are numbered 1..n in listing
    order and rounds are inferred from their dates.
    """
    rows = [r for r in raw_rows if not _is_bye(r)]
    records = [
        normalize(row, kind=FIXTURE_KIND, season=season, game=game)
        for game, row in enumerate(rows, start=1)
    ]
    if not records:
        return []

    rounds = infer_rounds([rec.date for rec in records])
    return [dataclasses.replace(rec, round=rnd) for rec, rnd in zip(records, rounds)]


def fixture_to_frame(records: Iterable[MatchRecord]) -> pd.DataFrame:
    """Fixture table (FIXTURE_COLUMNS) from fixture records."""
    df = pd.DataFrame(
        [
            {
                "Date": rec.date,
                "Season": rec.season,
                "Season.Game": rec.game,
                "Round": rec.round,
                "Home.Team": rec.home_team,
                "Away.Team": rec.away_team,
                "Venue": rec.venue,
            }
            for rec in records
        ],
        columns=FIXTURE_COLUMNS,
    )
    df["Date"] = pd.to_datetime(df["Date"])
    for col in ["Season", "Season.Game", "Round"]:
        df[col] = df[col].astype("Int64")
    return df


def build_fixture(raw_rows: Iterable, season: int) -> pd.DataFrame:
    """Fixture table for a season from raw (date, teams, venue) rows."""
    season = validate_season(season)
    return fixture_to_frame(fixture_records(raw_rows, season))


def get_fixture(season: int, fetcher: Optional[FootywireFetcher] = None) -> pd.DataFrame:
    """
    Get a season's fixture from footywire.com.

    Returns a data frame with the date, round, teams and venue of each game.
    """
    season = validate_season(season)
    own_fetcher = fetcher is None
    fetcher = fetcher or FootywireFetcher()
    try:
        raw_rows = fetcher.fetch_fixture_rows(season)
    finally:
        if own_fetcher:
            fetcher.close()

    df = build_fixture(raw_rows, season)
    logger.info(f"Built {season} fixture: {len(df)} games over {df['Round'].max() if not df.empty else 0} rounds")
    return df

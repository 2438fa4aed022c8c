"""
Round inference for fixture data.

Footywire's match list does not label rounds, so they are worked out from
match dates. AFL rounds start on Thursday or Friday and can spill into the
following Monday to Wednesday, which is why the weekday of each match
decides which week's round it belongs to.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Union

import numpy as np
import pandas as pd

from .config import FINALS_ROUND_TYPE, FINALS_WEEKS
from .exceptions import InsufficientDataError, MalformedRowError

logger = logging.getLogger(__name__)

# Weeks run Sunday to Saturday, counted from a fixed Sunday so that season
# boundaries never wrap the week number.
_WEEK_EPOCH = pd.Timestamp("1899-12-31")

# pandas dayofweek: Monday=0 ... Sunday=6
_CARRY_BACK_DAYS = [6, 0, 1, 2]  # Sunday to Wednesday

DateLike = Union[date, datetime, str, pd.Timestamp]


def _row_date(row) -> DateLike:
    if isinstance(row, tuple):
        return row[0]
    return row


def infer_rounds(rows: Iterable) -> List[int]:
    """
    Assign a round number to each match date.

    Args:
        rows: Dates in fixture order, or (date, raw_round_unit) tuples

    Returns:
        One round number per row; the earliest round is 1 and numbers are
        contiguous

    Raises:
        InsufficientDataError: no rows were supplied
    """
    rows = list(rows)
    if len(rows) < 1:
        raise InsufficientDataError("At least one dated row is needed to infer rounds")

    dates = pd.to_datetime(pd.Series([_row_date(r) for r in rows]), errors='coerce')
    if dates.isna().any():
        bad = [rows[i] for i in np.flatnonzero(dates.isna().to_numpy())]
        raise MalformedRowError(f"Cannot infer rounds from undated rows: {bad[:3]!r}")
    if dates.dt.tz is not None:
        dates = dates.dt.tz_localize(None)

    week = (dates.dt.normalize() - _WEEK_EPOCH).dt.days // 7
    carry_back = dates.dt.dayofweek.isin(_CARRY_BACK_DAYS)
    week = pd.Series(np.where(carry_back, week - 1, week))

    rounds = week.rank(method="dense").astype(int)
    return rounds.tolist()


def assign_finals_rounds(df: pd.DataFrame) -> pd.DataFrame:
    """
    Number finals rounds that arrived without a Round.Number.

    Each finals week follows the last regular round of its season, so a
    qualifying final after a 23 round season is round 24 and the grand
    final is round 27.
    """
    df = df.copy()
    if df.empty or "Round.Type" not in df.columns:
        return df

    finals = df["Round.Type"] == FINALS_ROUND_TYPE
    missing = finals & df["Round.Number"].isna()
    if not missing.any():
        return df

    last_regular = df.loc[~finals].groupby("Season")["Round.Number"].max()
    weeks = df.loc[missing, "Round"].map(FINALS_WEEKS)
    base = df.loc[missing, "Season"].map(last_regular)
    numbers = pd.to_numeric(base, errors='coerce') + pd.to_numeric(weeks, errors='coerce')

    unresolved = int(numbers.isna().sum())
    if unresolved:
        logger.debug(f"Could not number {unresolved} finals rows without regular rounds")

    df["Round.Number"] = pd.to_numeric(df["Round.Number"], errors='coerce').astype("Float64")
    df.loc[missing, "Round.Number"] = numbers
    df["Round.Number"] = df["Round.Number"].astype("Int64")
    return df

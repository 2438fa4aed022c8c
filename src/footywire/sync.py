"""
Reconciliation of a local match table against the source and a remote archive.

`plan_fetch` decides which match ids still have to be downloaded and
`merge` combines match tables without duplicating matches.
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Optional, Set

import pandas as pd

from .config import MATCH_COLUMNS
from .models import MatchStatus
from .normalizer import coerce_match_frame

logger = logging.getLogger(__name__)

_STATUS_RANK_COLUMN = "_status_rank"


def plan_fetch(source_ids: AbstractSet[int],
               local_ids: AbstractSet[int],
               archive_ids: AbstractSet[int] = frozenset(),
               trust_archive: bool = True) -> Set[int]:
    """
    Work out which match ids have to be fetched from the source.

    Args:
        source_ids: Ids available at the source
        local_ids: Ids already held locally
        archive_ids: Ids held by the remote archive
        trust_archive: Treat the archive as authoritative for the ids it
            holds, so they are not fetched again

    Returns:
        source_ids - local_ids, without archive ids when the archive is trusted
    """
    missing = set(source_ids) - set(local_ids)
    if trust_archive:
        missing -= set(archive_ids)
    return missing


@dataclass(frozen=True)
class ArchiveState:
    """Match ids known locally, to the remote archive, and at the source."""
    local_ids: frozenset = frozenset()
    archive_ids: frozenset = frozenset()
    source_ids: frozenset = frozenset()

    @classmethod
    def from_ids(cls, local_ids: Iterable[int] = (), archive_ids: Iterable[int] = (),
                 source_ids: Iterable[int] = ()) -> "ArchiveState":
        return cls(frozenset(local_ids), frozenset(archive_ids), frozenset(source_ids))

    @property
    def missing_locally(self) -> Set[int]:
        return set(self.source_ids - self.local_ids)

    def plan(self, trust_archive: bool = True) -> Set[int]:
        return plan_fetch(self.source_ids, self.local_ids, self.archive_ids, trust_archive)


def match_ids(df: Optional[pd.DataFrame]) -> Set[int]:
    """Set of match ids held by a match table."""
    if df is None or df.empty or "Game" not in df.columns:
        return set()
    return {int(g) for g in df["Game"].dropna()}


def _status_rank(status) -> int:
    try:
        return MatchStatus(status).rank
    except ValueError:
        return -1


def sort_matches(df: pd.DataFrame) -> pd.DataFrame:
    """Order a match table by date, then game id, then most complete status first."""
    df = df.copy()
    df[_STATUS_RANK_COLUMN] = df["Status"].map(_status_rank)
    df = df.sort_values(
        ["Date", "Game", _STATUS_RANK_COLUMN],
        ascending=[True, True, False],
        kind="mergesort",
    )
    return df.drop(columns=_STATUS_RANK_COLUMN).reset_index(drop=True)


def merge(existing: Optional[pd.DataFrame], new: Optional[pd.DataFrame]) -> pd.DataFrame:
    """
    Merge two match tables.

    Each game appears once in the result. When both tables hold a game, the
    row with the most complete status wins; on a tie the row from `existing`
    is kept. The result is ordered by date, game id and status (final first).
    """
    frames = [coerce_match_frame(df) for df in (existing, new)
              if df is not None and not df.empty]
    if not frames:
        return coerce_match_frame(pd.DataFrame(columns=MATCH_COLUMNS))

    combined = pd.concat(frames, ignore_index=True)
    combined[_STATUS_RANK_COLUMN] = combined["Status"].map(_status_rank)

    # Pick one row per game before ordering by date, so a rescheduled game
    # keeps its most complete row rather than its earliest one.
    deduped = (
        combined
        .sort_values(["Game", _STATUS_RANK_COLUMN], ascending=[True, False], kind="mergesort")
        .drop_duplicates(subset="Game", keep="first")
        .drop(columns=_STATUS_RANK_COLUMN)
    )

    dropped = len(combined) - len(deduped)
    if dropped:
        logger.debug(f"Dropped {dropped} duplicate match rows while merging")

    return sort_matches(deduped)

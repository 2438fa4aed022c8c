"""
Match results from footywire.com and incremental updates of a results table.
"""

import logging
import numbers
from typing import Iterable, List, Optional, Set

import pandas as pd

from .archive import RemoteArchive
from .config import MATCH_COLUMNS
from .exceptions import FetchError, MalformedRowError
from .fetcher import FootywireFetcher
from .fixtures import validate_season
from .models import MatchRecord
from .normalizer import RESULT_KIND, coerce_match_frame, normalize, records_to_frame
from .rounds import assign_finals_rounds
from .sync import ArchiveState, match_ids, merge, plan_fetch

logger = logging.getLogger(__name__)

ON_ERROR_CHOICES = ("raise", "skip")


def _check_on_error(on_error: str) -> None:
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")


def fetch_records(ids: Iterable[int], fetcher: FootywireFetcher,
                  on_error: str = "raise") -> List[MatchRecord]:
    """
    Fetch and normalize matches one id at a time, in id order.

    With on_error="skip" a match that cannot be fetched or parsed is logged
    and left out; with "raise" the first failure aborts the whole batch.
    """
    _check_on_error(on_error)
    ids = sorted(ids)
    records = []
    for i, match_id in enumerate(ids, start=1):
        logger.info(f"Fetching match {match_id} ({i}/{len(ids)})")
        try:
            row = fetcher.fetch_match_row(match_id)
            records.append(normalize(row, kind=RESULT_KIND))
        except (FetchError, MalformedRowError) as e:
            if on_error == "raise":
                raise
            logger.warning(f"Skipping match {match_id}: {e}")
    return records


def _empty_matches() -> pd.DataFrame:
    return coerce_match_frame(pd.DataFrame(columns=MATCH_COLUMNS))


def get_match_results(ids: Iterable[int], fetcher: Optional[FootywireFetcher] = None,
                      on_error: str = "raise") -> pd.DataFrame:
    """
    Get match results for footywire match ids.

    Match ids are listed on footywire's season match list pages.

    Returns:
        Match table ordered by date, match id and status
    """
    ids = list(ids)
    if not ids:
        raise ValueError("Please provide at least one match id")
    if not all(isinstance(i, numbers.Integral) and not isinstance(i, bool) for i in ids):
        raise ValueError("Match ids must be integers")
    ids = [int(i) for i in ids]

    logger.info("Getting data from footywire.com")
    own_fetcher = fetcher is None
    fetcher = fetcher or FootywireFetcher()
    try:
        records = fetch_records(ids, fetcher, on_error=on_error)
    finally:
        if own_fetcher:
            fetcher.close()

    df = assign_finals_rounds(merge(records_to_frame(records), None))
    logger.info("Finished getting data")
    return df


def source_match_ids(fetcher: FootywireFetcher, seasons: Iterable[int]) -> Set[int]:
    """Every match id footywire lists for the given seasons."""
    ids = set()
    for season in seasons:
        ids.update(fetcher.fetch_match_ids(season))
    return ids


def update_match_results(local: Optional[pd.DataFrame],
                         seasons: Iterable[int],
                         fetcher: Optional[FootywireFetcher] = None,
                         archive: Optional[RemoteArchive] = None,
                         check_existing: bool = True,
                         trust_archive: bool = True,
                         on_error: str = "raise") -> pd.DataFrame:
    """
    Bring a local match table up to date with footywire.

    Only matches missing from the local table are downloaded. When an
    archive is given, matches it already holds are taken from it instead of
    being fetched again (unless `trust_archive` is False). An archive that
    cannot be reached is skipped and everything missing locally is fetched.

    Args:
        local: Existing match table, or None to start from nothing
        seasons: Seasons to check for new matches
        fetcher: Page fetcher; a default FootywireFetcher is used if None
        archive: Optional remote archive of previously scraped matches
        check_existing: If False, download every match of the seasons
        trust_archive: Skip fetching ids the archive already holds
        on_error: "raise" to abort on the first failed match, "skip" to keep
            whatever could be fetched

    Returns:
        Updated match table ordered by date, match id and status
    """
    _check_on_error(on_error)
    seasons = [validate_season(s) for s in seasons]
    if not seasons:
        raise ValueError("Please provide at least one season")

    local = _empty_matches() if local is None else coerce_match_frame(local)

    own_fetcher = fetcher is None
    fetcher = fetcher or FootywireFetcher()
    try:
        logger.info("Getting match ids...")
        source_ids = source_match_ids(fetcher, seasons)

        if not check_existing:
            logger.info("Downloading all data. Warning - this takes a long time")
            fetched = records_to_frame(fetch_records(source_ids, fetcher, on_error))
            return assign_finals_rounds(merge(fetched, None))

        local_ids = match_ids(local)
        if not plan_fetch(source_ids, local_ids, trust_archive=False):
            logger.info("Data is up to date. Returning original data")
            return local

        archive_df = _empty_matches()
        if archive is not None:
            try:
                archive_df = archive.load()
            except FetchError as e:
                logger.warning(f"Archive unavailable, fetching everything missing locally: {e}")

        state = ArchiveState.from_ids(local_ids, match_ids(archive_df), source_ids)
        plan = state.plan(trust_archive)
        logger.info(f"Downloading new data for {len(plan)} matches...")

        if not plan:
            logger.info("Finished getting data")
            return assign_finals_rounds(merge(local, archive_df))

        fetched = records_to_frame(fetch_records(plan, fetcher, on_error))
    finally:
        if own_fetcher:
            fetcher.close()

    if trust_archive:
        result = merge(merge(local, archive_df), fetched)
    else:
        # Freshly fetched rows take precedence over archived ones
        result = merge(merge(local, fetched), archive_df)

    logger.info("Finished getting data")
    return assign_finals_rounds(result)

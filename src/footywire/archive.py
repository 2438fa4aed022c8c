"""
Remote archive of previously scraped match results.

The archive is a CSV match table kept somewhere reachable (a local path or
a URL). Loading it always returns a validated table in the canonical
match schema.
"""

import io
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .config import MATCH_COLUMNS
from .exceptions import FetchError, MalformedRowError
from .fetcher import FootywireFetcher
from .normalizer import coerce_match_frame
from .sync import sort_matches
from .teams import canonicalize_columns

logger = logging.getLogger(__name__)


class RemoteArchive:
    """Loads a match table from a CSV archive."""

    def __init__(self, location: str, fetcher: Optional[FootywireFetcher] = None):
        self.location = str(location)
        self._fetcher = fetcher

    @property
    def is_remote(self) -> bool:
        return self.location.startswith(("http://", "https://"))

    def _read_text(self) -> str:
        if self.is_remote:
            if self._fetcher is None:
                self._fetcher = FootywireFetcher()
            return self._fetcher.fetch_page(self.location)

        path = Path(self.location)
        try:
            return path.read_text(encoding='utf-8')
        except OSError as e:
            raise FetchError(f"Cannot read archive {path}: {e}", url=self.location) from e

    def load(self) -> pd.DataFrame:
        """
        Load the archive as a match table.

        Raises:
            FetchError: the archive cannot be reached
            MalformedRowError: the archive is not a match table
        """
        logger.info(f"Loading archive from {self.location}")
        text = self._read_text()

        try:
            df = pd.read_csv(io.StringIO(text))
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise MalformedRowError(f"Archive {self.location} is not a CSV table: {e}") from e

        df = coerce_match_frame(df)
        df = canonicalize_columns(df)
        logger.info(f"Loaded {len(df)} archived matches")
        return sort_matches(df)[MATCH_COLUMNS]

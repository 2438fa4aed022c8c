"""
Footywire Scraper Package for AFL Data.

This package scrapes AFL fixtures and match results from footywire.com,
reshapes them into pandas data frames, and keeps a local results table up
to date against the site and a remote archive.
"""

from .config import (
    FIXTURE_COLUMNS,
    MATCH_COLUMNS,
    RESULT_COLUMNS,
    ScraperSettings,
)
from .exceptions import (
    FetchError,
    FootywireError,
    InsufficientDataError,
    MalformedRowError,
)
from .models import (
    UNSCORED,
    FixtureRow,
    MatchRecord,
    MatchStatus,
    ResultRow,
    Score,
)
from .normalizer import normalize, records_to_frame, frame_to_records
from .rounds import infer_rounds, assign_finals_rounds
from .teams import TEAM_ALIASES, canonicalize
from .sync import ArchiveState, plan_fetch, merge
from .fetcher import FootywireFetcher
from .archive import RemoteArchive
from .fixtures import build_fixture, get_fixture
from .results import get_match_results, update_match_results

__all__ = [
    # Pipelines
    'get_fixture',
    'build_fixture',
    'get_match_results',
    'update_match_results',
    # Core
    'normalize',
    'infer_rounds',
    'assign_finals_rounds',
    'canonicalize',
    'plan_fetch',
    'merge',
    'records_to_frame',
    'frame_to_records',
    # Collaborators
    'FootywireFetcher',
    'RemoteArchive',
    # Records
    'MatchRecord',
    'MatchStatus',
    'FixtureRow',
    'ResultRow',
    'Score',
    'UNSCORED',
    'ArchiveState',
    'TEAM_ALIASES',
    # Configuration
    'ScraperSettings',
    'RESULT_COLUMNS',
    'MATCH_COLUMNS',
    'FIXTURE_COLUMNS',
    # Errors
    'FootywireError',
    'MalformedRowError',
    'FetchError',
    'InsufficientDataError',
]

__version__ = "1.0.0"

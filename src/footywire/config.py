"""
Configuration settings for the footywire scraper.
Contains all constants, URLs, and column layouts for data collection.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

# Base URLs
FOOTYWIRE_BASE_URL = "https://www.footywire.com"
MATCH_LIST_URL_TEMPLATE = f"{FOOTYWIRE_BASE_URL}/afl/footy/ft_match_list?year={{season}}"
MATCH_STATS_URL_TEMPLATE = f"{FOOTYWIRE_BASE_URL}/afl/footy/ft_match_statistics?mid={{match_id}}"

# Advanced match statistics are only published from this season onwards
FIRST_STATS_SEASON = 2010

# Match list cell that links to the match statistics page
MATCH_LIST_LINK_SELECTOR = ".data:nth-child(5) a"

BYE_VENUE = "BYE"

# Canonical result table layout
RESULT_COLUMNS: List[str] = [
    "Game",
    "Date",
    "Round",
    "Home.Team",
    "Home.Goals",
    "Home.Behinds",
    "Home.Points",
    "Away.Team",
    "Away.Goals",
    "Away.Behinds",
    "Away.Points",
    "Venue",
    "Margin",
    "Season",
    "Round.Type",
    "Round.Number",
]

# Match tables carry the status after the canonical columns
MATCH_COLUMNS: List[str] = RESULT_COLUMNS + ["Status"]

FIXTURE_FIELDS: List[str] = ["Date", "Teams", "Venue"]

FIXTURE_COLUMNS: List[str] = [
    "Date",
    "Season",
    "Season.Game",
    "Round",
    "Home.Team",
    "Away.Team",
    "Venue",
]

SCORE_COLUMNS: List[str] = [
    "Home.Goals",
    "Home.Behinds",
    "Home.Points",
    "Away.Goals",
    "Away.Behinds",
    "Away.Points",
    "Margin",
]

REGULAR_ROUND_TYPE = "Regular"
FINALS_ROUND_TYPE = "Finals"

# Finals codes and the week of the finals series they are played in
FINALS_WEEKS: Dict[str, int] = {
    "EF": 1,
    "QF": 1,
    "SF": 2,
    "PF": 3,
    "GF": 4,
}

FINALS_NAMES: Dict[str, str] = {
    "Elimination Final": "EF",
    "Qualifying Final": "QF",
    "Semi Final": "SF",
    "Preliminary Final": "PF",
    "Grand Final": "GF",
}


@dataclass
class ScraperSettings:
    """Runtime settings for the scraper."""
    # Request delays (in seconds) - footywire is a small site, keep it polite
    min_delay: float = 1.0
    max_delay: float = 3.0
    request_timeout: int = 30

    # Retry settings
    max_retries: int = 3
    base_retry_delay: float = 2.0
    max_retry_delay: float = 60.0
    retry_jitter: float = 0.5

    # Remote archive of previously scraped results (CSV, path or URL)
    archive_url: Optional[str] = None
    # Skip ids the archive already holds instead of fetching them again
    trust_archive: bool = True

    # User agents rotation
    user_agents: List[str] = field(default_factory=lambda: [
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    ])

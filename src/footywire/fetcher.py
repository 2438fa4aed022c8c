"""
Page fetcher for footywire.com.

Fetches season match lists and match statistics pages over HTTP with
exponential backoff, and turns them into raw rows for the normalizer.
HTML parsing is kept to the few cells the package needs.
"""

import logging
import random
import re
import time
from datetime import datetime
from typing import List, Optional, Tuple

import cloudscraper
import requests
from bs4 import BeautifulSoup

from .config import (
    FINALS_NAMES,
    FINALS_ROUND_TYPE,
    FIXTURE_FIELDS,
    MATCH_LIST_LINK_SELECTOR,
    MATCH_LIST_URL_TEMPLATE,
    MATCH_STATS_URL_TEMPLATE,
    REGULAR_ROUND_TYPE,
    ScraperSettings,
)
from .exceptions import FetchError, MalformedRowError
from .models import FixtureRow, ResultRow
from .utils import clean_text, parse_score

logger = logging.getLogger(__name__)

_MATCH_ID_RE = re.compile(r'(\d+)')

_ROUND_HEADER_RE = re.compile(
    r'(Round\s+(\d+)|' + '|'.join(FINALS_NAMES) + r')\s*,\s*([^,\n]+)'
)
_MATCH_DATE_RE = re.compile(
    r'(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday),\s*'
    r'(\d{1,2})(?:st|nd|rd|th)?\s+([A-Za-z]+)\s+(\d{4})'
    r'(?:,\s*(\d{1,2}:\d{2})\s*([AP]M))?',
    re.IGNORECASE,
)
_SCORE_CELL_RE = re.compile(r'^\d+\.\d+(?:\.\d+)?(?:\s*\(\d+\))?$')

# Quarter-by-quarter score rows have a cell per quarter
_MIN_SCORE_CELLS = 4


class ExponentialBackoff:
    """Retry waits that double per attempt, capped and jittered."""

    def __init__(self, base_delay: float = 2.0, max_delay: float = 60.0,
                 max_retries: int = 3, jitter: float = 0.5):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.max_retries = max_retries
        self.jitter = jitter

    @classmethod
    def from_settings(cls, settings: ScraperSettings) -> "ExponentialBackoff":
        return cls(
            base_delay=settings.base_retry_delay,
            max_delay=settings.max_retry_delay,
            max_retries=settings.max_retries,
            jitter=settings.retry_jitter,
        )

    def get_delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (0-based)."""
        delay = min(self.base_delay * (2 ** attempt), self.max_delay)
        spread = delay * self.jitter
        # Waits never drop below half the base delay
        return max(self.base_delay / 2, delay + random.uniform(-spread, spread))

    def wait(self, attempt: int, url: str = "") -> None:
        delay = self.get_delay(attempt)
        logger.info(f"Retrying {url or 'request'} in {delay:.1f}s "
                    f"(attempt {attempt + 2} of {self.max_retries})")
        time.sleep(delay)


def parse_match_ids(html: str) -> List[int]:
    """Match ids linked from a season match list page, in page order."""
    soup = BeautifulSoup(html, 'lxml')
    ids = []
    for link in soup.select(MATCH_LIST_LINK_SELECTOR):
        match = _MATCH_ID_RE.search(link.get('href', ''))
        if match:
            match_id = int(match.group(1))
            if match_id not in ids:
                ids.append(match_id)
    return ids


def parse_fixture_rows(html: str) -> List[FixtureRow]:
    """
    Raw (date, teams, venue) rows from a season match list page.

    Cell text is kept as-is; the teams cell relies on its line breaks to
    separate home and away.
    """
    soup = BeautifulSoup(html, 'lxml')
    rows = []
    for tr in soup.find_all('tr'):
        cells = tr.find_all('td', class_='data', recursive=False)
        if not cells:
            continue
        if len(cells) < len(FIXTURE_FIELDS):
            logger.debug(f"Skipping match list row with {len(cells)} cells")
            continue
        date_text, teams_text, venue_text = (c.get_text() for c in cells[:len(FIXTURE_FIELDS)])
        rows.append(FixtureRow(clean_text(date_text), teams_text.strip(), clean_text(venue_text)))
    return rows


def _parse_match_date(text: str) -> Optional[datetime]:
    match = _MATCH_DATE_RE.search(text)
    if not match:
        return None
    day, month, year, clock, meridiem = match.groups()
    if clock:
        return datetime.strptime(f"{day} {month} {year} {clock}{meridiem.upper()}", "%d %B %Y %I:%M%p")
    return datetime.strptime(f"{day} {month} {year}", "%d %B %Y")


def _parse_round_header(text: str) -> Tuple[str, str, str, str]:
    """(round label, round type, round number, venue) from the match header."""
    match = _ROUND_HEADER_RE.search(text)
    if not match:
        raise MalformedRowError("Match page has no round/venue header")
    name, number, venue = match.groups()
    venue = clean_text(venue)
    if number:
        return f"R{number}", REGULAR_ROUND_TYPE, number, venue
    return FINALS_NAMES[clean_text(name)], FINALS_ROUND_TYPE, "", venue


def _parse_team_scores(soup: BeautifulSoup) -> List[Tuple[str, Tuple[int, int, int]]]:
    """(team, (goals, behinds, points)) for each team in the quarter scores table."""
    teams = []
    for tr in soup.find_all('tr'):
        cells = [clean_text(c.get_text()) for c in tr.find_all(['td', 'th'], recursive=False)]
        if len(cells) < _MIN_SCORE_CELLS + 1:
            continue
        name, scores = cells[0], cells[1:]
        if not name or not all(_SCORE_CELL_RE.match(s) for s in scores):
            continue
        if any(name == team for team, _ in teams):
            continue
        teams.append((name, parse_score(scores[-1])))
    return teams


def parse_match_page(html: str, match_id: int) -> ResultRow:
    """Build a raw result row from a match statistics page."""
    soup = BeautifulSoup(html, 'lxml')
    text = soup.get_text("\n")

    date = _parse_match_date(text)
    if date is None:
        raise MalformedRowError(f"Match {match_id} page has no match date")

    round_label, round_type, round_number, venue = _parse_round_header(text)

    teams = _parse_team_scores(soup)
    if len(teams) < 2:
        raise MalformedRowError(f"Match {match_id} page has no score table")
    (home, (hg, hb, hp)), (away, (ag, ab, ap)) = teams[:2]

    return ResultRow.from_fields([
        str(match_id),
        date.strftime("%Y-%m-%d %H:%M"),
        round_label,
        home, str(hg), str(hb), str(hp),
        away, str(ag), str(ab), str(ap),
        venue,
        str(hp - ap),
        str(date.year),
        round_type,
        round_number,
    ])


class FootywireFetcher:
    """
    HTTP fetcher for footywire pages using cloudscraper.

    Every request is paced with a random delay, and failed requests are
    retried with exponential backoff. A page that still cannot be fetched
    raises FetchError.
    """

    def __init__(self, settings: Optional[ScraperSettings] = None,
                 session: Optional[requests.Session] = None):
        self.settings = settings or ScraperSettings()
        self.backoff = ExponentialBackoff.from_settings(self.settings)
        self._owns_session = session is None
        self.session = session if session is not None else self._create_session()

    def _create_session(self) -> requests.Session:
        session = cloudscraper.create_scraper(
            browser={
                'browser': 'chrome',
                'platform': 'darwin',
                'desktop': True,
            },
        )
        session.headers.update({
            'User-Agent': self.settings.user_agents[0],
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-AU,en;q=0.5',
            'Connection': 'keep-alive',
        })
        return session

    def close(self) -> None:
        if self._owns_session and self.session is not None:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def fetch_page(self, url: str) -> str:
        """Fetch page text with pacing and exponential backoff."""
        last_error = None
        for attempt in range(self.backoff.max_retries):
            try:
                self.session.headers['User-Agent'] = random.choice(self.settings.user_agents)

                delay = random.uniform(self.settings.min_delay, self.settings.max_delay)
                time.sleep(delay)

                logger.debug(f"GET {url} (attempt {attempt + 1})")
                response = self.session.get(url, timeout=self.settings.request_timeout)

                if response.status_code == 200:
                    return response.text
                if response.status_code == 404:
                    raise FetchError(f"Page not found: {url}", url=url)

                last_error = f"HTTP {response.status_code}"
                if response.status_code == 429:
                    logger.warning("Rate limited (429)")
                elif response.status_code == 403:
                    logger.warning("Forbidden (403)")
                else:
                    logger.warning(f"HTTP {response.status_code} for {url}")

            except requests.RequestException as e:
                last_error = str(e)
                logger.warning(f"Error fetching {url}: {e}")

            if attempt < self.backoff.max_retries - 1:
                self.backoff.wait(attempt, url)

        logger.error(f"Max retries reached for URL: {url}")
        raise FetchError(f"Failed to fetch {url}: {last_error}", url=url)

    def fetch_match_ids(self, season: int) -> List[int]:
        """Ids of the matches with statistics pages in a season."""
        html = self.fetch_page(MATCH_LIST_URL_TEMPLATE.format(season=season))
        ids = parse_match_ids(html)
        logger.info(f"Found {len(ids)} match ids for {season}")
        return ids

    def fetch_fixture_rows(self, season: int) -> List[FixtureRow]:
        """Raw fixture rows for a season."""
        html = self.fetch_page(MATCH_LIST_URL_TEMPLATE.format(season=season))
        rows = parse_fixture_rows(html)
        logger.info(f"Scraped {len(rows)} fixture rows for {season}")
        return rows

    def fetch_match_row(self, match_id: int) -> ResultRow:
        """Raw result row for a single match."""
        html = self.fetch_page(MATCH_STATS_URL_TEMPLATE.format(match_id=match_id))
        return parse_match_page(html, match_id)

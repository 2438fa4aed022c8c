"""
Utility functions for the footywire scraper.
"""

import logging
import math
import re
from datetime import datetime
from typing import Any, Optional, Tuple, Union

import pandas as pd

logger = logging.getLogger(__name__)

_SCORE_RE = re.compile(r'(\d+)\.(\d+)(?:\.(\d+)|\s*\(\s*(\d+)\s*\))?')


def clean_text(text: Any) -> str:
    """Collapse whitespace (including line breaks) in scraped cell text."""
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    text = text.replace('\xa0', ' ')
    return re.sub(r'\s+', ' ', text).strip()


def parse_score(score_str: str) -> Tuple[Optional[int], Optional[int], Optional[int]]:
    """
    Parse an AFL score like '17.19.121' or '17.19 (121)' into
    (goals, behinds, points).

    Points are derived from goals and behinds when the string omits them.

    Returns:
        Tuple of (goals, behinds, points) or (None, None, None) if parsing fails
    """
    if score_str is None or (not isinstance(score_str, str) and pd.isna(score_str)):
        return (None, None, None)

    match = _SCORE_RE.search(str(score_str))
    if not match:
        return (None, None, None)

    goals = int(match.group(1))
    behinds = int(match.group(2))
    points = match.group(3) or match.group(4)
    points = int(points) if points is not None else goals * 6 + behinds
    return (goals, behinds, points)


def safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """
    Safely convert a scraped value to int, returning `default` on failure.

    Only whole numbers convert; infinities and fractional values such as
    "6.5" return `default` rather than being truncated.
    """
    if value is None:
        return default
    if not isinstance(value, str) and pd.isna(value):
        return default
    try:
        # Remove commas for numbers like "81,616"
        if isinstance(value, str):
            value = value.replace(',', '').strip()
        number = float(value)
    except (ValueError, TypeError, OverflowError):
        return default
    if not math.isfinite(number) or not number.is_integer():
        return default
    return int(number)


def get_season_from_date(date: Union[str, datetime]) -> Optional[int]:
    """
    Determine the AFL season from a match date.

    The home and away season and finals are played within one calendar
    year, so the season is the year of the match.
    """
    if isinstance(date, str):
        date = pd.to_datetime(date, errors='coerce')

    if date is None or pd.isna(date):
        return None

    return int(date.year)


def print_data_summary(df: pd.DataFrame, name: str = "DataFrame") -> None:
    """Print a summary of a match or fixture table."""
    print(f"\n{'=' * 50}")
    print(f"Summary: {name}")
    print(f"{'=' * 50}")
    print(f"Shape: {df.shape[0]} rows x {df.shape[1]} columns")
    if 'Season' in df.columns and not df.empty:
        print("\nRows per season:")
        print(df['Season'].value_counts().sort_index())
    if 'Status' in df.columns and not df.empty:
        print("\nRows per status:")
        print(df['Status'].value_counts())
    print(f"\nMissing values:")
    missing = df.isnull().sum()
    missing = missing[missing > 0].sort_values(ascending=False)
    if not missing.empty:
        print(missing.head(10))
    else:
        print("  No missing values!")
    print(f"{'=' * 50}\n")

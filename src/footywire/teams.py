"""
Team name canonicalization.

Footywire and older datasets use several spellings for the same club
(nicknames, sponsor-era names, pre-relocation names). Every table this
package produces uses the canonical names below.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

import pandas as pd

# Alternate spelling -> canonical name
TEAM_ALIASES: Mapping[str, str] = MappingProxyType({
    # North Melbourne
    "Kangaroos": "North Melbourne",
    "North Melbourne Kangaroos": "North Melbourne",
    "NM": "North Melbourne",

    # Western Bulldogs played as Footscray until 1996
    "Western Bulldogs": "Footscray",
    "Bulldogs": "Footscray",
    "WB": "Footscray",

    # Sydney relocated from South Melbourne in 1982
    "South Melbourne": "Sydney",
    "Sydney Swans": "Sydney",
    "Swans": "Sydney",

    "Brisbane": "Brisbane Lions",
    "Brisbane Bears": "Brisbane Lions",
    "Lions": "Brisbane Lions",

    "Greater Western Sydney": "GWS",
    "GWS Giants": "GWS",
    "Giants": "GWS",

    "Gold Coast Suns": "Gold Coast",
    "Suns": "Gold Coast",

    "Adelaide Crows": "Adelaide",
    "Crows": "Adelaide",

    "Geelong Cats": "Geelong",
    "Cats": "Geelong",

    "West Coast Eagles": "West Coast",
    "Eagles": "West Coast",

    "Port Adelaide Power": "Port Adelaide",
    "Power": "Port Adelaide",

    "Fremantle Dockers": "Fremantle",
    "Dockers": "Fremantle",

    "Hawthorn Hawks": "Hawthorn",
    "Hawks": "Hawthorn",

    "Richmond Tigers": "Richmond",
    "Tigers": "Richmond",

    "Carlton Blues": "Carlton",
    "Blues": "Carlton",

    "Collingwood Magpies": "Collingwood",
    "Magpies": "Collingwood",

    "Essendon Bombers": "Essendon",
    "Bombers": "Essendon",

    "Melbourne Demons": "Melbourne",
    "Demons": "Melbourne",

    "St Kilda Saints": "St Kilda",
    "Saints": "St Kilda",
})


def canonicalize(name: str) -> str:
    """
    Map an alternate team spelling to its canonical name.

    Unknown names are returned unchanged so new or renamed clubs flow
    through the pipeline instead of halting it.
    """
    if not isinstance(name, str):
        return name
    return TEAM_ALIASES.get(name.strip(), name)


def canonicalize_columns(df: pd.DataFrame,
                         columns: Iterable[str] = ("Home.Team", "Away.Team")) -> pd.DataFrame:
    """Return a copy of `df` with team name columns canonicalized."""
    df = df.copy()
    for col in columns:
        if col in df.columns:
            df[col] = df[col].map(canonicalize)
    return df

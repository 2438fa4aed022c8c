#!/usr/bin/env python3
"""
Footywire AFL Data Scraper - Main Entry Point

Scrapes AFL fixtures and match results from footywire.com and keeps a local
results table up to date.

Usage:
    python -m footywire.run_scraper --help
    python -m footywire.run_scraper fixture --season 2018
    python -m footywire.run_scraper results --ids 9514 9515
    python -m footywire.run_scraper update --data-file data/match_results.csv --season 2018
    python -m footywire.run_scraper validate --data-file data/match_results.csv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

# Configure logging - terminal only, no file logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def _settings_from_args(args):
    from . import ScraperSettings

    settings = ScraperSettings()
    if getattr(args, 'min_delay', None) is not None:
        settings.min_delay = args.min_delay
    if getattr(args, 'max_delay', None) is not None:
        settings.max_delay = args.max_delay
    if getattr(args, 'archive_url', None):
        settings.archive_url = args.archive_url
    if getattr(args, 'no_trust_archive', False):
        settings.trust_archive = False
    return settings


def _write_output(df: pd.DataFrame, output: Optional[str]) -> None:
    if not output:
        print(df.to_string(index=False))
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info(f"Saved {len(df)} rows to {path}")


def _seasons_from_args(args) -> List[int]:
    from .config import FIRST_STATS_SEASON

    if getattr(args, 'season', None):
        return [args.season]
    if getattr(args, 'seasons', None):
        return args.seasons
    if getattr(args, 'to_season', None):
        # Match statistics pages only exist from FIRST_STATS_SEASON
        from_season = getattr(args, 'from_season', None) or FIRST_STATS_SEASON
        return list(range(from_season, args.to_season + 1))
    raise ValueError("Specify --season, --seasons, or --to-season (with an optional --from-season)")


def fixture_command(args):
    """Scrape a season's fixture."""
    from . import FootywireFetcher, get_fixture

    with FootywireFetcher(_settings_from_args(args)) as fetcher:
        df = get_fixture(args.season, fetcher=fetcher)

    _write_output(df, args.output)
    return df


def results_command(args):
    """Scrape results for specific match ids."""
    from . import FootywireFetcher, get_match_results

    on_error = "skip" if args.skip_errors else "raise"
    with FootywireFetcher(_settings_from_args(args)) as fetcher:
        df = get_match_results(args.ids, fetcher=fetcher, on_error=on_error)

    _write_output(df, args.output)
    return df


def update_command(args):
    """
    Update a local results file with any matches it is missing.

    The file is created if it does not exist yet.
    """
    from . import FootywireFetcher, RemoteArchive, update_match_results

    seasons = _seasons_from_args(args)
    settings = _settings_from_args(args)
    data_file = Path(args.data_file)

    local = None
    if data_file.exists():
        local = pd.read_csv(data_file)
        logger.info(f"Loaded {len(local)} local matches from {data_file}")
    else:
        logger.info(f"No local data at {data_file}, starting from scratch")

    on_error = "skip" if args.skip_errors else "raise"
    with FootywireFetcher(settings) as fetcher:
        archive = None
        if settings.archive_url:
            archive = RemoteArchive(settings.archive_url, fetcher=fetcher)

        df = update_match_results(
            local,
            seasons,
            fetcher=fetcher,
            archive=archive,
            check_existing=not args.all,
            trust_archive=settings.trust_archive,
            on_error=on_error,
        )

    _write_output(df, str(data_file))
    return df


def validate_command(args):
    """Validate a results file for schema, duplicate matches and round order."""
    from .normalizer import coerce_match_frame
    from .config import REGULAR_ROUND_TYPE
    from .utils import print_data_summary

    data_file = Path(args.data_file)
    if not data_file.exists():
        logger.error(f"Data file not found: {data_file}")
        return [f"Missing data file: {data_file}"]

    issues = []
    df = coerce_match_frame(pd.read_csv(data_file))

    duplicated = df.loc[df['Game'].duplicated(), 'Game'].tolist()
    if duplicated:
        issues.append(f"Duplicate match ids: {duplicated[:10]}")

    regular = df[df['Round.Type'] == REGULAR_ROUND_TYPE].sort_values(['Season', 'Date'])
    for season, season_df in regular.groupby('Season'):
        rounds = season_df['Round.Number'].dropna()
        if not rounds.is_monotonic_increasing:
            issues.append(f"Rounds out of date order in {season}")

    if issues:
        logger.warning("Data validation issues found:")
        for issue in issues:
            logger.warning(f"  - {issue}")
    else:
        logger.info("All data validated successfully!")

    if args.summary:
        print_data_summary(df, name=str(data_file))

    return issues


def _add_delay_args(parser) -> None:
    parser.add_argument(
        '--min-delay',
        type=float,
        help='Minimum delay between requests (seconds)'
    )
    parser.add_argument(
        '--max-delay',
        type=float,
        help='Maximum delay between requests (seconds)'
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Footywire AFL Data Scraper',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fixture for a season
  python -m footywire.run_scraper fixture --season 2018 --output data/fixture_2018.csv

  # Results for specific footywire match ids
  python -m footywire.run_scraper results --ids 9514 9515

  # Bring a results file up to date for a range of seasons
  python -m footywire.run_scraper update --data-file data/match_results.csv --from-season 2010 --to-season 2018

  # Validate a results file
  python -m footywire.run_scraper validate --data-file data/match_results.csv
        """
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Fixture command
    fixture_parser = subparsers.add_parser('fixture', help='Scrape a season fixture')
    fixture_parser.add_argument(
        '--season',
        type=int,
        required=True,
        help='Season to scrape (e.g., 2018)'
    )
    fixture_parser.add_argument(
        '--output',
        help='CSV file to write (prints the table if omitted)'
    )
    _add_delay_args(fixture_parser)

    # Results command
    results_parser = subparsers.add_parser('results', help='Scrape results for match ids')
    results_parser.add_argument(
        '--ids',
        nargs='+',
        type=int,
        required=True,
        help='Footywire match ids'
    )
    results_parser.add_argument(
        '--skip-errors',
        action='store_true',
        help='Skip matches that cannot be fetched instead of aborting'
    )
    results_parser.add_argument(
        '--output',
        help='CSV file to write (prints the table if omitted)'
    )
    _add_delay_args(results_parser)

    # Update command
    update_parser = subparsers.add_parser('update', help='Update a local results file')
    update_parser.add_argument(
        '--data-file',
        required=True,
        help='Results CSV to update (created if missing)'
    )
    update_parser.add_argument(
        '--season',
        type=int,
        help='Single season to check (e.g., 2018)'
    )
    update_parser.add_argument(
        '--seasons',
        nargs='+',
        type=int,
        help='Multiple seasons to check'
    )
    update_parser.add_argument(
        '--from-season',
        type=int,
        help='First season of a range (default: 2010)'
    )
    update_parser.add_argument(
        '--to-season',
        type=int,
        help='Last season of a range'
    )
    update_parser.add_argument(
        '--archive-url',
        help='CSV archive of previously scraped results (path or URL)'
    )
    update_parser.add_argument(
        '--no-trust-archive',
        action='store_true',
        help='Fetch matches again even if the archive holds them'
    )
    update_parser.add_argument(
        '--all',
        action='store_true',
        help='Download every match instead of only missing ones (slow)'
    )
    update_parser.add_argument(
        '--skip-errors',
        action='store_true',
        help='Skip matches that cannot be fetched instead of aborting'
    )
    _add_delay_args(update_parser)

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Validate a results file')
    validate_parser.add_argument(
        '--data-file',
        required=True,
        help='Results CSV to validate'
    )
    validate_parser.add_argument(
        '--summary',
        action='store_true',
        help='Print a summary of the table'
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    from .exceptions import FootywireError

    commands = {
        'fixture': fixture_command,
        'results': results_command,
        'update': update_command,
        'validate': validate_command,
    }
    if args.command not in commands:
        parser.print_help()
        return 0

    try:
        outcome = commands[args.command](args)
    except (FootywireError, ValueError) as e:
        logger.error(str(e))
        return 1

    if args.command == 'validate' and outcome:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

"""Tests for match result fetching and incremental updates."""

import unittest

import numpy as np
import pandas as pd

from footywire.exceptions import FetchError, MalformedRowError
from footywire.results import get_match_results, update_match_results

from match_factories import (
    SEASON_2018,
    FakeArchive,
    FakeFetcher,
    matches_frame,
    result_fields,
)


def _fetcher(**kwargs):
    return FakeFetcher(season_ids={2018: [1, 2, 3]}, rows=SEASON_2018, **kwargs)


class TestGetMatchResults(unittest.TestCase):

    def test_fetches_each_id(self):
        fetcher = _fetcher()
        df = get_match_results([3, 1], fetcher=fetcher)
        self.assertEqual(fetcher.fetched, [1, 3])
        self.assertEqual(df["Game"].tolist(), [1, 3])
        self.assertEqual(df["Status"].tolist(), ["final", "final"])

    def test_failure_aborts_by_default(self):
        with self.assertRaises(FetchError):
            get_match_results([1, 2], fetcher=_fetcher(failing=[2]))

    def test_skip_keeps_partial_results(self):
        df = get_match_results([1, 2, 3], fetcher=_fetcher(failing=[2]), on_error="skip")
        self.assertEqual(df["Game"].tolist(), [1, 3])

    def test_malformed_row_skipped(self):
        rows = dict(SEASON_2018)
        rows[2] = result_fields(game=2, date="not a date")
        fetcher = FakeFetcher(rows=rows)
        with self.assertRaises(MalformedRowError):
            get_match_results([1, 2], fetcher=fetcher)
        df = get_match_results([1, 2], fetcher=FakeFetcher(rows=rows), on_error="skip")
        self.assertEqual(df["Game"].tolist(), [1])

    def test_requires_ids(self):
        with self.assertRaises(ValueError):
            get_match_results([], fetcher=_fetcher())
        with self.assertRaises(ValueError):
            get_match_results(["1"], fetcher=_fetcher())
        with self.assertRaises(ValueError):
            get_match_results([1.5], fetcher=_fetcher())

    def test_accepts_numpy_ids(self):
        fetcher = _fetcher()
        df = get_match_results(np.array([3, 1]), fetcher=fetcher)
        self.assertEqual(fetcher.fetched, [1, 3])
        self.assertEqual(df["Game"].tolist(), [1, 3])

    def test_accepts_game_column(self):
        fetcher = _fetcher()
        get_match_results(matches_frame(SEASON_2018.values())["Game"].astype("int64"), fetcher=fetcher)
        self.assertEqual(fetcher.fetched, [1, 2, 3])

    def test_invalid_error_policy(self):
        with self.assertRaises(ValueError):
            get_match_results([1], fetcher=_fetcher(), on_error="ignore")


class TestUpdateMatchResults(unittest.TestCase):

    def setUp(self):
        self.local = matches_frame([SEASON_2018[1]])
        self.archive_frame = matches_frame([SEASON_2018[2]])

    def test_up_to_date_short_circuits(self):
        local = matches_frame(SEASON_2018.values())
        fetcher = _fetcher()
        archive = FakeArchive(self.archive_frame)

        df = update_match_results(local, [2018], fetcher=fetcher, archive=archive)

        self.assertEqual(fetcher.fetched, [])
        self.assertEqual(archive.loads, 0)
        pd.testing.assert_frame_equal(df, local)

    def test_trusted_archive(self):
        fetcher = _fetcher()
        df = update_match_results(self.local, [2018], fetcher=fetcher,
                                  archive=FakeArchive(self.archive_frame), trust_archive=True)

        self.assertEqual(fetcher.fetched, [3])
        self.assertEqual(df["Game"].tolist(), [1, 2, 3])
        self.assertFalse(df["Game"].duplicated().any())

    def test_untrusted_archive(self):
        fetcher = _fetcher()
        df = update_match_results(self.local, [2018], fetcher=fetcher,
                                  archive=FakeArchive(self.archive_frame), trust_archive=False)

        self.assertEqual(fetcher.fetched, [2, 3])
        self.assertEqual(df["Game"].tolist(), [1, 2, 3])

    def test_untrusted_archive_rows_replaced_by_fetched(self):
        stale = matches_frame([result_fields(game=2, date="2018-03-23 19:50", venue="Etihad")])
        df = update_match_results(self.local, [2018], fetcher=_fetcher(),
                                  archive=FakeArchive(stale), trust_archive=False)
        self.assertEqual(df.loc[df["Game"] == 2, "Venue"].item(), "Docklands")

    def test_archive_covers_everything_missing(self):
        archive = FakeArchive(matches_frame([SEASON_2018[2], SEASON_2018[3]]))
        fetcher = _fetcher()
        df = update_match_results(self.local, [2018], fetcher=fetcher, archive=archive)

        self.assertEqual(fetcher.fetched, [])
        self.assertEqual(df["Game"].tolist(), [1, 2, 3])

    def test_unavailable_archive_fetches_everything_missing(self):
        fetcher = _fetcher()
        archive = FakeArchive(error=FetchError("archive down"))
        df = update_match_results(self.local, [2018], fetcher=fetcher, archive=archive)

        self.assertEqual(fetcher.fetched, [2, 3])
        self.assertEqual(df["Game"].tolist(), [1, 2, 3])

    def test_no_archive(self):
        fetcher = _fetcher()
        update_match_results(self.local, [2018], fetcher=fetcher)
        self.assertEqual(fetcher.fetched, [2, 3])

    def test_no_local_data(self):
        fetcher = _fetcher()
        df = update_match_results(None, [2018], fetcher=fetcher)
        self.assertEqual(fetcher.fetched, [1, 2, 3])
        self.assertEqual(len(df), 3)

    def test_download_everything(self):
        fetcher = _fetcher()
        df = update_match_results(self.local, [2018], fetcher=fetcher, check_existing=False)
        self.assertEqual(fetcher.fetched, [1, 2, 3])
        self.assertEqual(df["Game"].tolist(), [1, 2, 3])

    def test_partial_failure_policies(self):
        with self.assertRaises(FetchError):
            update_match_results(self.local, [2018], fetcher=_fetcher(failing=[3]))

        df = update_match_results(self.local, [2018], fetcher=_fetcher(failing=[3]),
                                  on_error="skip")
        self.assertEqual(df["Game"].tolist(), [1, 2])

    def test_finals_numbered_after_merge(self):
        rows = {
            40: result_fields(game=40, date="2018-09-06 19:50", round_="QF",
                              round_type="Finals", round_number=""),
        }
        local = matches_frame([result_fields(game=39, date="2018-08-26 15:20",
                                             round_="R23", round_number="23")])
        fetcher = FakeFetcher(season_ids={2018: [39, 40]}, rows=rows)

        df = update_match_results(local, [2018], fetcher=fetcher)

        self.assertEqual(df["Round.Number"].tolist(), [23, 24])

    def test_requires_seasons(self):
        with self.assertRaises(ValueError):
            update_match_results(self.local, [], fetcher=_fetcher())
        with self.assertRaises(ValueError):
            update_match_results(self.local, ["2018"], fetcher=_fetcher())


if __name__ == '__main__':
    unittest.main()

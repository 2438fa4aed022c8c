"""Unit tests for fetch planning and match table merging."""

import unittest

import pandas as pd

from footywire.sync import ArchiveState, match_ids, merge, plan_fetch

from match_factories import SEASON_2018, matches_frame, result_fields, unscored_fields


class TestPlanFetch(unittest.TestCase):

    def test_trusted_archive_ids_are_not_fetched(self):
        self.assertEqual(plan_fetch({1, 2, 3}, {1}, {2}, trust_archive=True), {3})

    def test_untrusted_archive_ids_are_fetched(self):
        self.assertEqual(plan_fetch({1, 2, 3}, {1}, {2}, trust_archive=False), {2, 3})

    def test_everything_local(self):
        source = {10, 11, 12}
        self.assertEqual(plan_fetch(source, source, set()), set())

    def test_never_returns_local_ids(self):
        cases = [
            ({1, 2, 3, 4}, {2, 4}, {3}),
            ({1, 2}, set(), {1, 2, 5}),
            (set(), {1}, {1}),
            ({7, 8}, {9}, set()),
        ]
        for source, local, archive in cases:
            for trust in (True, False):
                plan = plan_fetch(source, local, archive, trust_archive=trust)
                self.assertTrue(plan <= source - local)
                self.assertFalse(plan & local)

    def test_inputs_not_modified(self):
        source, local, archive = {1, 2, 3}, {1}, {2}
        plan_fetch(source, local, archive)
        self.assertEqual((source, local, archive), ({1, 2, 3}, {1}, {2}))

    def test_archive_state(self):
        state = ArchiveState.from_ids(local_ids=[1], archive_ids=[2], source_ids=[1, 2, 3])
        self.assertEqual(state.missing_locally, {2, 3})
        self.assertEqual(state.plan(), {3})
        self.assertEqual(state.plan(trust_archive=False), {2, 3})


class TestMerge(unittest.TestCase):

    def setUp(self):
        self.x = merge(matches_frame([SEASON_2018[1], SEASON_2018[3]]), None)
        self.y = matches_frame([SEASON_2018[2], SEASON_2018[3]])

    def test_merge_with_empty_is_identity(self):
        pd.testing.assert_frame_equal(merge(self.x, matches_frame([])), self.x)
        pd.testing.assert_frame_equal(merge(self.x, None), self.x)

    def test_merge_is_idempotent(self):
        merged = merge(self.x, self.y)
        pd.testing.assert_frame_equal(merge(merged, self.y), merged)

    def test_no_duplicate_games(self):
        merged = merge(self.x, self.y)
        self.assertEqual(merged["Game"].tolist(), [1, 2, 3])
        self.assertFalse(merged["Game"].duplicated().any())

    def test_ordered_by_date_then_game(self):
        df = matches_frame([
            result_fields(game=20, date="2018-03-24 16:35"),
            result_fields(game=12, date="2018-03-24 16:35"),
            result_fields(game=5, date="2018-03-25 13:10"),
        ])
        self.assertEqual(merge(df, None)["Game"].tolist(), [12, 20, 5])

    def test_final_row_wins_over_scheduled(self):
        scheduled = matches_frame([unscored_fields(9, "2018-03-24 19:25")])
        final = matches_frame([result_fields(game=9, date="2018-03-24 19:25")])

        for existing, new in ((scheduled, final), (final, scheduled)):
            merged = merge(existing, new)
            self.assertEqual(len(merged), 1)
            self.assertEqual(merged.loc[0, "Status"], "final")
            self.assertEqual(merged.loc[0, "Home.Points"], 121)

    def test_rescheduled_final_row_wins(self):
        scheduled = matches_frame([unscored_fields(9, "2018-03-24 19:25")])
        played = matches_frame([result_fields(game=9, date="2018-03-31 19:25")])
        merged = merge(scheduled, played)
        self.assertEqual(len(merged), 1)
        self.assertEqual(merged.loc[0, "Date"], pd.Timestamp("2018-03-31 19:25"))

    def test_existing_row_kept_on_tie(self):
        old = matches_frame([result_fields(game=9, venue="MCG")])
        new = matches_frame([result_fields(game=9, venue="M.C.G.")])
        self.assertEqual(merge(old, new).loc[0, "Venue"], "MCG")

    def test_both_empty(self):
        merged = merge(None, None)
        self.assertTrue(merged.empty)
        self.assertIn("Status", merged.columns)

    def test_match_ids(self):
        self.assertEqual(match_ids(self.x), {1, 3})
        self.assertEqual(match_ids(None), set())


if __name__ == '__main__':
    unittest.main()

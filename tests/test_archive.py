"""Tests for loading the results archive."""

import os
import tempfile
import unittest

from footywire.archive import RemoteArchive
from footywire.config import MATCH_COLUMNS, RESULT_COLUMNS
from footywire.exceptions import FetchError, MalformedRowError


ARCHIVE_CSV = "\n".join([
    ",".join(RESULT_COLUMNS),
    "9515,2018-03-23 19:50,R1,Essendon,12,10,82,Adelaide,16,6,102,Docklands,-20,2018,Regular,1",
    "9514,2018-03-22 19:25,R1,Richmond,17,19,121,Kangaroos,15,5,95,MCG,26,2018,Regular,1",
    "9600,2018-06-02 13:45,R11,Western Bulldogs,,,,Carlton,,,,Docklands,,2018,Regular,11",
]) + "\n"


class PageFetcher:

    def __init__(self, pages):
        self.pages = pages
        self.requested = []

    def fetch_page(self, url):
        self.requested.append(url)
        if url not in self.pages:
            raise FetchError(f"no page at {url}", url=url)
        return self.pages[url]


class TestRemoteArchive(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "archive.csv")
        with open(self.path, "w") as f:
            f.write(ARCHIVE_CSV)

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_local_file(self):
        archive = RemoteArchive(self.path)
        self.assertFalse(archive.is_remote)

        df = archive.load()

        self.assertEqual(list(df.columns), MATCH_COLUMNS)
        self.assertEqual(df["Game"].tolist(), [9514, 9515, 9600])
        self.assertEqual(df["Status"].tolist(), ["final", "final", "scheduled"])

    def test_team_names_canonicalized(self):
        df = RemoteArchive(self.path).load()
        self.assertEqual(df.loc[0, "Away.Team"], "North Melbourne")
        self.assertEqual(df.loc[2, "Home.Team"], "Footscray")

    def test_unscored_rows_stay_missing(self):
        df = RemoteArchive(self.path).load()
        self.assertTrue(df.loc[2, ["Home.Points", "Away.Points", "Margin"]].isna().all())

    def test_missing_file(self):
        archive = RemoteArchive(os.path.join(self.tmp.name, "nope.csv"))
        with self.assertRaises(FetchError):
            archive.load()

    def test_missing_columns(self):
        with open(self.path, "w") as f:
            f.write("Game,Date\n1,2018-03-22\n")
        with self.assertRaises(MalformedRowError):
            RemoteArchive(self.path).load()

    def test_unparseable_dates(self):
        with open(self.path, "w") as f:
            f.write(ARCHIVE_CSV.replace("2018-03-23 19:50", "sometime in March"))
        with self.assertRaises(MalformedRowError):
            RemoteArchive(self.path).load()

    def test_empty_file(self):
        with open(self.path, "w") as f:
            f.write("")
        with self.assertRaises(MalformedRowError):
            RemoteArchive(self.path).load()

    def test_remote_archive_uses_fetcher(self):
        url = "https://example.org/afl/match_results.csv"
        fetcher = PageFetcher({url: ARCHIVE_CSV})
        archive = RemoteArchive(url, fetcher=fetcher)

        self.assertTrue(archive.is_remote)
        df = archive.load()

        self.assertEqual(fetcher.requested, [url])
        self.assertEqual(len(df), 3)

    def test_unreachable_remote_archive(self):
        archive = RemoteArchive("https://example.org/missing.csv", fetcher=PageFetcher({}))
        with self.assertRaises(FetchError):
            archive.load()


if __name__ == '__main__':
    unittest.main()

"""Tests for the DateResolver priority fallback."""

import unittest
from datetime import datetime, timezone

from exif_date_resolver import (
    DEFAULT_SENTINEL, LEGACY_SENTINEL, DateResolver, ExifReadError, SourceResult,
    TimestampSource, is_undetermined,
)
from tests.test_utils import FakeExifReader, FakeFileTimes


def utc(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp())


ALL_TAGS = {
    'DateTimeOriginal': "2019:06:15 10:30:00",
    'DateTimeDigitized': "2018:03:04 05:06:07",
    'DateTime': "2017:12:31 23:59:59",
}


class TestDateResolver(unittest.TestCase):
    """Test cases for DateResolver with stubbed collaborators."""

    def make_resolver(self, tags=None, exif_error=None, times=None, times_error=None, **kwargs):
        self.exif_reader = FakeExifReader(tags, error=exif_error)
        self.file_times = FakeFileTimes(**(times or {}), error=times_error)
        return DateResolver(exif_reader=self.exif_reader, file_times_reader=self.file_times, **kwargs)

    def test_date_time_original_wins(self):
        """Test DateTimeOriginal beats every other tag and filesystem time."""
        resolver = self.make_resolver(ALL_TAGS, times={'created': 1000000, 'modified': 2000000})

        self.assertEqual(resolver.resolve("photo.jpg"), 1560594600)
        self.assertEqual(self.file_times.calls, 0, "Filesystem should not be queried")

    def test_digitized_when_original_missing(self):
        """Test DateTimeDigitized is used when DateTimeOriginal is absent."""
        tags = {k: v for k, v in ALL_TAGS.items() if k != 'DateTimeOriginal'}
        resolver = self.make_resolver(tags, times={'created': 1000000})

        resolution = resolver.resolve_with_source("photo.jpg")

        self.assertEqual(resolution.timestamp, utc(2018, 3, 4, 5, 6, 7))
        self.assertEqual(resolution.source, TimestampSource.EXIF_DATE_TIME_DIGITIZED)

    def test_date_time_last_exif_choice(self):
        """Test the IFD0 DateTime tag is the last EXIF fallback."""
        resolver = self.make_resolver({'DateTime': "2017:12:31 23:59:59"}, times={'created': 1000000})

        resolution = resolver.resolve_with_source("photo.jpg")

        self.assertEqual(resolution.timestamp, utc(2017, 12, 31, 23, 59, 59))
        self.assertEqual(resolution.source, TimestampSource.EXIF_DATE_TIME)

    def test_malformed_original_falls_through(self):
        """Test malformed text in the top tag does not stop resolution."""
        tags = dict(ALL_TAGS, DateTimeOriginal="2020-13-99 99:99:99")
        resolver = self.make_resolver(tags)

        resolution = resolver.resolve_with_source("photo.jpg")

        self.assertEqual(resolution.source, TimestampSource.EXIF_DATE_TIME_DIGITIZED)

    def test_all_exif_malformed_uses_filesystem(self):
        """Test every EXIF tag unparseable falls back to the filesystem."""
        tags = {name: "garbage" for name in ALL_TAGS}
        resolver = self.make_resolver(tags, times={'modified': 2000000})

        self.assertEqual(resolver.resolve("photo.jpg"), 2000000)

    def test_filesystem_priority(self):
        """Test created > modified > accessed when no EXIF is present."""
        test_cases = [
            ({'created': 1000000, 'modified': 2000000, 'accessed': 3000000}, 1000000, TimestampSource.FS_CREATED),
            ({'modified': 2000000, 'accessed': 3000000}, 2000000, TimestampSource.FS_MODIFIED),
            ({'accessed': 3000000}, 3000000, TimestampSource.FS_ACCESSED),
        ]

        for times, expected, source in test_cases:
            with self.subTest(times=times):
                resolver = self.make_resolver(exif_error=ExifReadError("not an image"), times=times)
                resolution = resolver.resolve_with_source("photo.jpg")
                self.assertEqual(resolution.timestamp, expected)
                self.assertEqual(resolution.source, source)

    def test_no_exif_created_and_modified(self):
        """Test the created time is returned when both created and modified exist."""
        resolver = self.make_resolver({}, times={'created': 1000000, 'modified': 2000000})

        self.assertEqual(resolver.resolve("photo.jpg"), 1000000)

    def test_nothing_available_returns_sentinel(self):
        """Test the sentinel is returned when every source fails."""
        resolver = self.make_resolver(exif_error=ExifReadError("corrupt"), times={})

        resolution = resolver.resolve_with_source("photo.jpg")

        self.assertEqual(resolution.timestamp, DEFAULT_SENTINEL)
        self.assertIsNone(resolution.source)
        self.assertFalse(resolution.determined)

    def test_unreadable_file_returns_sentinel(self):
        """Test that errors from both collaborators are absorbed."""
        resolver = self.make_resolver(exif_error=OSError("permission denied"),
                                      times_error=FileNotFoundError("missing"))

        self.assertEqual(resolver.resolve("photo.jpg"), DEFAULT_SENTINEL)

    def test_custom_sentinel(self):
        """Test that the sentinel is configurable."""
        resolver = self.make_resolver(exif_error=ExifReadError("corrupt"), sentinel=LEGACY_SENTINEL)

        self.assertEqual(resolver.resolve("photo.jpg"), 1936268400)
        self.assertTrue(resolver.is_undetermined(1936268400))

    def test_invalid_sentinel(self):
        """Test that out of range sentinels are rejected."""
        for sentinel in (-1, 2 ** 64, 1.5, True):
            with self.subTest(sentinel=sentinel):
                with self.assertRaises(ValueError):
                    DateResolver(sentinel=sentinel)

    def test_pre_epoch_dates_are_skipped(self):
        """Test that dates before 1970 cannot be returned as unsigned values."""
        resolver = self.make_resolver({'DateTimeOriginal': "1969:12:31 23:59:59"}, times={'modified': 2000000})

        self.assertEqual(resolver.resolve("photo.jpg"), 2000000)

    def test_collaborators_read_once(self):
        """Test EXIF and filesystem data are read once per resolution."""
        resolver = self.make_resolver({}, times={'accessed': 3000000})

        resolver.resolve("photo.jpg")

        self.assertEqual(self.exif_reader.calls, 1)
        self.assertEqual(self.file_times.calls, 1)

    def test_idempotent(self):
        """Test resolving twice gives the same answer."""
        resolver = self.make_resolver(ALL_TAGS)

        self.assertEqual(resolver.resolve("photo.jpg"), resolver.resolve("photo.jpg"))

    def test_explain_reports_every_source(self):
        """Test explain evaluates all sources and records skip reasons."""
        tags = {'DateTimeOriginal': "2020-13-99 99:99:99", 'DateTime': "2017:12:31 23:59:59"}
        resolver = self.make_resolver(tags, times_error=OSError("stat failed"))

        results = resolver.explain("photo.jpg")

        self.assertEqual([r.source for r in results], list(TimestampSource))
        self.assertFalse(results[0].ok)
        self.assertIn("not a valid EXIF date", results[0].reason)
        self.assertIn("tag missing", results[1].reason)
        self.assertEqual(results[2], SourceResult.found(TimestampSource.EXIF_DATE_TIME, utc(2017, 12, 31, 23, 59, 59)))
        for result in results[3:]:
            self.assertIn("filesystem metadata unavailable", result.reason)

    def test_explain_exif_unavailable(self):
        """Test every EXIF source is skipped when the container is unreadable."""
        resolver = self.make_resolver(exif_error=ExifReadError("not an image"), times={'modified': 2000000})

        results = resolver.explain("photo.jpg")

        for result in results[:3]:
            self.assertIn("EXIF metadata unavailable", result.reason)
        self.assertIn("created time not available", results[3].reason)
        self.assertEqual(results[4].timestamp, 2000000)
        self.assertFalse(results[5].ok)

    def test_is_undetermined(self):
        """Test the undetermined check against the sentinel."""
        self.assertTrue(is_undetermined(DEFAULT_SENTINEL))
        self.assertTrue(is_undetermined(DEFAULT_SENTINEL + 1))
        self.assertFalse(is_undetermined(1560594600))
        self.assertTrue(is_undetermined(1936268400, sentinel=LEGACY_SENTINEL))


class TestTimestampSource(unittest.TestCase):
    """Test cases for the TimestampSource ordering."""

    def test_priority_order(self):
        """Test that enum order matches the resolution priority."""
        self.assertEqual([s for s, _ in DateResolver.PROVIDERS], sorted(TimestampSource))

    def test_exif_sources(self):
        """Test the EXIF/filesystem split."""
        exif = [s for s in TimestampSource if s.is_exif]
        self.assertEqual(exif, [
            TimestampSource.EXIF_DATE_TIME_ORIGINAL,
            TimestampSource.EXIF_DATE_TIME_DIGITIZED,
            TimestampSource.EXIF_DATE_TIME,
        ])

    def test_labels(self):
        """Test every source has a label."""
        for source in TimestampSource:
            with self.subTest(source=source):
                self.assertTrue(source.label)


if __name__ == '__main__':
    unittest.main()

"""
Date Resolver - Picks the best available timestamp for an image file.

Sources are tried in a fixed order and the first one that yields a usable
value wins:

    1. EXIF DateTimeOriginal
    2. EXIF DateTimeDigitized
    3. EXIF DateTime
    4. filesystem creation time
    5. filesystem modification time
    6. filesystem access time

If none of them produce a value the resolver returns a sentinel far in the
future, so the result is always an integer and "no date" sorts last.
"""

import logging
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .exif_reader import (
    DATE_TIME, DATE_TIME_DIGITIZED, DATE_TIME_ORIGINAL,
    ExifReadError, parse_exif_datetime, read_exif_tags,
)
from .file_access import FileInput, display_name
from .file_times import FileTimes, read_file_times
from .sources import Resolution, SourceResult, TimestampSource

logger = logging.getLogger(__name__)

# 9999-12-31T23:59:59Z
DEFAULT_SENTINEL = 253402300799
# 2031-05-11T12:20:00Z, the value returned by earlier releases
LEGACY_SENTINEL = 1936268400

MAX_TIMESTAMP = 2 ** 64 - 1

ExifReader = Callable[[FileInput], Dict[str, str]]
FileTimesReader = Callable[[FileInput], FileTimes]


class _SourceUnavailable(Exception):
    """A whole group of sources (EXIF or filesystem) could not be read."""


class _FileLookup:
    """Reads EXIF tags and filesystem times at most once per resolution."""

    def __init__(self, file: FileInput, exif_reader: ExifReader,
                 file_times_reader: FileTimesReader):
        self.file = file
        self._exif_reader = exif_reader
        self._file_times_reader = file_times_reader
        self._exif_tags: Optional[Dict[str, str]] = None
        self._exif_error: Optional[str] = None
        self._file_times: Optional[FileTimes] = None
        self._file_times_error: Optional[str] = None

    def exif_tags(self) -> Dict[str, str]:
        if self._exif_tags is None and self._exif_error is None:
            try:
                self._exif_tags = dict(self._exif_reader(self.file))
            except (ExifReadError, OSError, ValueError) as e:
                self._exif_error = f"EXIF metadata unavailable: {e}"
        if self._exif_error is not None:
            raise _SourceUnavailable(self._exif_error)
        return self._exif_tags

    def file_times(self) -> FileTimes:
        if self._file_times is None and self._file_times_error is None:
            try:
                self._file_times = self._file_times_reader(self.file)
            except (OSError, ValueError) as e:
                self._file_times_error = f"filesystem metadata unavailable: {e}"
        if self._file_times_error is not None:
            raise _SourceUnavailable(self._file_times_error)
        return self._file_times


Provider = Callable[[_FileLookup, TimestampSource], SourceResult]


def _to_timestamp(source: TimestampSource, seconds: int) -> SourceResult:
    if not 0 <= seconds <= MAX_TIMESTAMP:
        return SourceResult.skipped(source, f"{seconds} is outside the unsigned epoch range")
    return SourceResult.found(source, seconds)


def _exif_tag(tag_name: str) -> Provider:
    def provide(lookup: _FileLookup, source: TimestampSource) -> SourceResult:
        raw = lookup.exif_tags().get(tag_name)
        if raw is None:
            return SourceResult.skipped(source, f"{tag_name} tag missing")
        parsed = parse_exif_datetime(raw)
        if parsed is None:
            return SourceResult.skipped(source, f"{tag_name} value {raw!r} is not a valid EXIF date")
        return _to_timestamp(source, int(parsed.timestamp()))
    return provide


def _file_time(field: str) -> Provider:
    def provide(lookup: _FileLookup, source: TimestampSource) -> SourceResult:
        seconds = getattr(lookup.file_times(), field)
        if seconds is None:
            return SourceResult.skipped(source, f"{field} time not available")
        return _to_timestamp(source, seconds)
    return provide


class DateResolver:
    """Resolve the best available timestamp of an image file."""

    PROVIDERS: Tuple[Tuple[TimestampSource, Provider], ...] = (
        (TimestampSource.EXIF_DATE_TIME_ORIGINAL, _exif_tag(DATE_TIME_ORIGINAL)),
        (TimestampSource.EXIF_DATE_TIME_DIGITIZED, _exif_tag(DATE_TIME_DIGITIZED)),
        (TimestampSource.EXIF_DATE_TIME, _exif_tag(DATE_TIME)),
        (TimestampSource.FS_CREATED, _file_time('created')),
        (TimestampSource.FS_MODIFIED, _file_time('modified')),
        (TimestampSource.FS_ACCESSED, _file_time('accessed')),
    )

    def __init__(self, sentinel: int = DEFAULT_SENTINEL,
                 exif_reader: ExifReader = read_exif_tags,
                 file_times_reader: FileTimesReader = read_file_times):
        """
        Args:
            sentinel: Value returned when no source yields a timestamp
            exif_reader: Callable returning the raw EXIF date tags of a file
            file_times_reader: Callable returning the filesystem times of a file
        """
        if isinstance(sentinel, bool) or not isinstance(sentinel, int):
            raise ValueError(f"Sentinel must be an integer, got {sentinel!r}")
        if not 0 <= sentinel <= MAX_TIMESTAMP:
            raise ValueError(f"Sentinel {sentinel} is outside the unsigned 64-bit range")
        self.sentinel = sentinel
        self.exif_reader = exif_reader
        self.file_times_reader = file_times_reader

    def iter_results(self, file: FileInput) -> Iterator[SourceResult]:
        """Lazily evaluate every source in priority order."""
        lookup = _FileLookup(file, self.exif_reader, self.file_times_reader)
        for source, provide in self.PROVIDERS:
            try:
                yield provide(lookup, source)
            except _SourceUnavailable as e:
                yield SourceResult.skipped(source, str(e))

    def resolve_with_source(self, file: FileInput) -> Resolution:
        """Return the winning timestamp together with the source it came from."""
        name = display_name(file)
        for result in self.iter_results(file):
            if result.ok:
                logger.debug("Resolved %s from %s: %d", name, result.source.label, result.timestamp)
                return Resolution(timestamp=result.timestamp, source=result.source)
            logger.debug("Skipping %s for %s: %s", result.source.label, name, result.reason)

        logger.info("No date could be determined for %s, using sentinel %d", name, self.sentinel)
        return Resolution(timestamp=self.sentinel)

    def resolve(self, file: FileInput) -> int:
        """
        Return the epoch seconds of the best available date of a file.

        Never raises for unreadable, missing or unsupported files; the
        sentinel is returned instead.
        """
        return self.resolve_with_source(file).timestamp

    def explain(self, file: FileInput) -> List[SourceResult]:
        """Evaluate all sources without stopping at the first hit."""
        return list(self.iter_results(file))

    def is_undetermined(self, value: int) -> bool:
        return is_undetermined(value, self.sentinel)


def is_undetermined(value: int, sentinel: int = DEFAULT_SENTINEL) -> bool:
    """True if value is the sentinel (or beyond it) rather than a real date."""
    return value >= sentinel


def get_image_date(file: FileInput, sentinel: int = DEFAULT_SENTINEL) -> int:
    """Shortcut for ``DateResolver(sentinel).resolve(file)``."""
    return DateResolver(sentinel=sentinel).resolve(file)

"""
Timestamp sources and the per-source results produced while resolving a file.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class TimestampSource(IntEnum):
    """Places a timestamp can come from. Lower values have higher priority."""

    EXIF_DATE_TIME_ORIGINAL = 1
    EXIF_DATE_TIME_DIGITIZED = 2
    EXIF_DATE_TIME = 3
    FS_CREATED = 4
    FS_MODIFIED = 5
    FS_ACCESSED = 6

    @property
    def is_exif(self) -> bool:
        return self <= TimestampSource.EXIF_DATE_TIME

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    TimestampSource.EXIF_DATE_TIME_ORIGINAL: 'EXIF DateTimeOriginal',
    TimestampSource.EXIF_DATE_TIME_DIGITIZED: 'EXIF DateTimeDigitized',
    TimestampSource.EXIF_DATE_TIME: 'EXIF DateTime',
    TimestampSource.FS_CREATED: 'File Creation Date',
    TimestampSource.FS_MODIFIED: 'File Modification Date',
    TimestampSource.FS_ACCESSED: 'File Access Date',
}


@dataclass(frozen=True)
class SourceResult:
    """Outcome of asking a single source for a timestamp.

    Exactly one of ``timestamp`` and ``reason`` is set: either the source
    produced epoch seconds, or it was skipped and ``reason`` says why.
    """

    source: TimestampSource
    timestamp: Optional[int] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.timestamp is not None

    @classmethod
    def found(cls, source: TimestampSource, timestamp: int) -> 'SourceResult':
        return cls(source=source, timestamp=timestamp)

    @classmethod
    def skipped(cls, source: TimestampSource, reason: str) -> 'SourceResult':
        return cls(source=source, reason=reason)


@dataclass(frozen=True)
class Resolution:
    """Final answer for a file: the timestamp and where it came from.

    ``source`` is None when no source produced a value and ``timestamp`` holds
    the sentinel.
    """

    timestamp: int
    source: Optional[TimestampSource] = None

    @property
    def determined(self) -> bool:
        return self.source is not None

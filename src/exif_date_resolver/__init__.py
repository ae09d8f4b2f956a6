"""EXIF Date Resolver - Determine the best available timestamp of an image file."""

from .exif_reader import ExifReadError, parse_exif_datetime, read_exif_tags
from .file_times import FileTimes, read_file_times
from .resolver import (
    DEFAULT_SENTINEL, LEGACY_SENTINEL, DateResolver, get_image_date, is_undetermined,
)
from .sources import Resolution, SourceResult, TimestampSource

try:
    from ._version import __version__
except ImportError:
    # Fallback version if _version.py doesn't exist (e.g., during development)
    __version__ = "0.0.0+unknown"

__all__ = [
    "DateResolver", "get_image_date", "is_undetermined",
    "DEFAULT_SENTINEL", "LEGACY_SENTINEL",
    "TimestampSource", "SourceResult", "Resolution",
    "read_exif_tags", "parse_exif_datetime", "ExifReadError",
    "read_file_times", "FileTimes",
]

"""
EXIF Reader - Extracts the raw date/time tags from image files.
"""

import logging
import re
from datetime import datetime, timezone
from typing import BinaryIO, Dict, Optional

import exifread
from PIL import Image, ExifTags

from .file_access import FileInput, display_name, open_for_reading

logger = logging.getLogger(__name__)

# Tag names handed to the resolver, in priority order
DATE_TIME_ORIGINAL = 'DateTimeOriginal'
DATE_TIME_DIGITIZED = 'DateTimeDigitized'
DATE_TIME = 'DateTime'
EXIF_DATE_TAGS = (DATE_TIME_ORIGINAL, DATE_TIME_DIGITIZED, DATE_TIME)

# DateTime lives in IFD0, the other two in the Exif sub-IFD
_PIL_EXIF_IFD_TAGS = {
    ExifTags.Base.DateTimeOriginal: DATE_TIME_ORIGINAL,
    ExifTags.Base.DateTimeDigitized: DATE_TIME_DIGITIZED,
}
_PIL_IFD0_TAGS = {
    ExifTags.Base.DateTime: DATE_TIME,
}

_EXIFREAD_KEYS = {
    'EXIF DateTimeOriginal': DATE_TIME_ORIGINAL,
    'EXIF DateTimeDigitized': DATE_TIME_DIGITIZED,
    'Image DateTime': DATE_TIME,
}

EXIF_DATETIME_FORMAT = '%Y:%m:%d %H:%M:%S'
_EXIF_DATETIME_RE = re.compile(r'[0-9]{4}:[0-9]{2}:[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}')


class ExifReadError(Exception):
    """Raised when no EXIF container could be recognized in a file."""


def read_exif_tags(file: FileInput) -> Dict[str, str]:
    """
    Read the EXIF date/time tags from an image.

    Args:
        file: Path or binary file object of the image

    Returns:
        Dict mapping tag name (see EXIF_DATE_TAGS) to the raw tag text.
        Tags that are not present are left out.

    Raises:
        ExifReadError: If the file cannot be opened or neither Pillow nor
            exifread recognize it as an image with EXIF data.
    """
    name = display_name(file)
    try:
        with open_for_reading(file) as handle:
            return _read_tags(handle, name)
    except OSError as e:
        raise ExifReadError(f"Could not read {name}: {e}") from e


def _read_tags(handle: BinaryIO, name: str) -> Dict[str, str]:
    tags: Dict[str, str] = {}

    # Try with PIL first
    pillow_error = None
    try:
        tags.update(_read_with_pillow(handle))
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        # UnidentifiedImageError is an OSError; oversized images raise
        # DecompressionBombError before any EXIF is parsed
        pillow_error = e
        logger.debug("Pillow could not read EXIF from %s: %s", name, e)

    if all(tag in tags for tag in EXIF_DATE_TAGS):
        return tags

    # Fallback to exifread for tags PIL did not give us
    handle.seek(0)
    try:
        found = _read_with_exifread(handle)
    except Exception as e:
        # exifread raises a wide range of errors on corrupted data
        logger.debug("exifread could not read EXIF from %s: %s", name, e)
        found = {}

    if pillow_error is not None and not found:
        raise ExifReadError(f"No EXIF data recognized in {name}") from pillow_error

    for tag, value in found.items():
        tags.setdefault(tag, value)
    return tags


def _read_with_pillow(handle: BinaryIO) -> Dict[str, str]:
    tags = {}
    with Image.open(handle) as img:
        exif = img.getexif()
        if not exif:
            return tags

        exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
        for tag_id, tag_name in _PIL_EXIF_IFD_TAGS.items():
            # Some writers put these in IFD0 directly
            value = _clean_value(exif_ifd.get(tag_id, exif.get(tag_id)))
            if value:
                tags[tag_name] = value

        for tag_id, tag_name in _PIL_IFD0_TAGS.items():
            value = _clean_value(exif.get(tag_id))
            if value:
                tags[tag_name] = value
    return tags


def _read_with_exifread(handle: BinaryIO) -> Dict[str, str]:
    tags = {}
    raw_tags = exifread.process_file(handle, details=False)
    for key, tag_name in _EXIFREAD_KEYS.items():
        if key in raw_tags:
            value = _clean_value(raw_tags[key].values)
            if value:
                tags[tag_name] = value
    return tags


def _clean_value(value) -> Optional[str]:
    """Normalize a raw tag value to text, dropping NUL padding."""
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='replace')
    elif not isinstance(value, str):
        value = str(value)
    return value.strip(' \x00\t\r\n')


def parse_exif_datetime(date_str: str) -> Optional[datetime]:
    """
    Parse an EXIF datetime string ('YYYY:MM:DD HH:MM:SS').

    EXIF dates carry no time zone, they are interpreted as UTC. Returns None
    for anything that deviates from the fixed layout or names an impossible
    date.
    """
    if not isinstance(date_str, str):
        return None
    text = date_str.strip(' \x00')
    if not _EXIF_DATETIME_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, EXIF_DATETIME_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None

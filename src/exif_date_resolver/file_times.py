"""
Filesystem timestamps (created, modified, accessed) for a file.
"""

import math
import os
import sys
from typing import NamedTuple, Optional

from .file_access import FileInput, is_file_handle

_NS_PER_SECOND = 1_000_000_000


class FileTimes(NamedTuple):
    """Epoch seconds for each filesystem time, None where the OS has none."""

    created: Optional[int]
    modified: Optional[int]
    accessed: Optional[int]


def read_file_times(file: FileInput) -> FileTimes:
    """
    Read the filesystem times of a path or open file.

    Sub-second precision is truncated. Times before the epoch are reported
    as unavailable.

    Raises:
        OSError: If the file cannot be stat'ed at all (this includes file
            objects without a descriptor, such as io.BytesIO).
    """
    if is_file_handle(file):
        st = os.fstat(file.fileno())
    else:
        st = os.stat(os.fspath(file))

    return FileTimes(
        created=_created_seconds(st),
        modified=_seconds_from_ns(st.st_mtime_ns),
        accessed=_seconds_from_ns(st.st_atime_ns),
    )


def _created_seconds(st: os.stat_result) -> Optional[int]:
    # st_birthtime exists on macOS/BSD, and on Windows from Python 3.12
    birthtime_ns = getattr(st, 'st_birthtime_ns', None)
    if birthtime_ns is not None:
        return _seconds_from_ns(birthtime_ns)

    birthtime = getattr(st, 'st_birthtime', None)
    if birthtime is not None:
        return _non_negative(math.floor(birthtime))

    # Before 3.12 Windows reported the creation time as st_ctime
    if sys.platform == 'win32':
        return _seconds_from_ns(st.st_ctime_ns)

    # On Linux st_ctime is the inode change time, not a creation time
    return None


def _seconds_from_ns(value_ns: int) -> Optional[int]:
    return _non_negative(value_ns // _NS_PER_SECOND)


def _non_negative(seconds: int) -> Optional[int]:
    return seconds if seconds >= 0 else None

"""
Helpers for accepting either a filesystem path or an already open binary file.
"""

import os
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Union

FileInput = Union[str, bytes, "os.PathLike[str]", BinaryIO]


def is_file_handle(file: FileInput) -> bool:
    """Return True for file objects, False for paths."""
    return hasattr(file, 'read')


def display_name(file: FileInput) -> str:
    """Best effort human readable name used in log messages."""
    if is_file_handle(file):
        return str(getattr(file, 'name', '<file object>'))
    return os.fsdecode(file)


@contextmanager
def open_for_reading(file: FileInput) -> Iterator[BinaryIO]:
    """
    Yield a binary handle positioned at the start of the file.

    Paths are opened read-only and closed again. Caller supplied handles are
    left open and their stream position is restored afterwards.
    """
    if is_file_handle(file):
        position = file.tell()
        file.seek(0)
        try:
            yield file
        finally:
            file.seek(position)
    else:
        with open(os.fspath(file), 'rb') as handle:
            yield handle

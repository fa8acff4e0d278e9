# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Utilities"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from . import error

# seconds between the BLUE epoch (1950-01-01) and the unix epoch
BLUE_EPOCH_OFFSET = 631152000
MAGIC = b"BLUE"


def timecode_to_datetime(timecode: float) -> Optional[datetime]:
    """
    Convert seconds since 1950-01-01 to a UTC datetime.

    A zero timecode means no time was recorded.

    Example
    -------
    >>> timecode_to_datetime(631152000.5)
    datetime.datetime(1970, 1, 1, 0, 0, 0, 500000, tzinfo=datetime.timezone.utc)
    """
    if timecode == 0:
        return None
    return datetime.fromtimestamp(timecode - BLUE_EPOCH_OFFSET, tz=timezone.utc)


def get_magic_bytes(file_path: Path, count: int = 4, offset: int = 0) -> bytes:
    """
    Get magic bytes from a file to help identify file type.

    Raises
    ------
    IoFailure
        If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as handle:
            handle.seek(offset)
            return handle.read(count)
    except OSError as err:
        raise error.IoFailure(f"Failed to read magic bytes from {file_path}: {err}") from err


def is_bluefile(file_path: Path) -> bool:
    """True if the file starts with the BLUE version tag."""
    return get_magic_bytes(file_path) == MAGIC

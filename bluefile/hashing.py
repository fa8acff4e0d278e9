# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Header CRC Functions"""

from functools import lru_cache
from typing import BinaryIO, Optional

from .error import IoFailure
from .header import FixedHeader

CRC_POLY = 0x04C11DB7
# CRC covers the fixed header up to the keyword block plus the extended header
CRC_FIXED_BYTES = 160


@lru_cache()
def _crc_table() -> tuple:
    """MSB-first lookup table for CRC_POLY"""
    table = []
    for idx in range(256):
        reg = idx << 24
        for _ in range(8):
            reg = ((reg << 1) ^ CRC_POLY if reg & 0x80000000 else reg << 1) & 0xFFFFFFFF
        table.append(reg)
    return tuple(table)


def _update(crc: int, values) -> int:
    table = _crc_table()
    for value in values:
        crc = ((crc << 8) ^ table[(crc >> 24) ^ value]) & 0xFFFFFFFF
    return crc


def _length_bytes(size: int, shift: int) -> list:
    """trailing length bytes, consumed low byte first"""
    values = []
    while size > 0:
        values.append((size >> shift) & 0xFF)
        size >>= 8
    return values


def crc32_posix(data: bytes) -> str:
    """
    POSIX.2 CRC-32 with buffer length included

    Supposed BLUE standard implementation.

    Test Vector
    -----------
    >>> crc32_posix(bytes.fromhex('deadbeef'))
    '1c3cd7e6'
    """
    crc = _update(_update(0, data), _length_bytes(len(data), 0))
    return f"{~crc & 0xFFFFFFFF:08x}"


def crc32_broken(data: bytes) -> str:
    """
    Similar to posix but seeded with all ones, and the length loop only ever
    feeds the high byte of the length.

    Used in many BLUE files.

    Test Vector
    -----------
    >>> crc32_broken(bytes.fromhex('deadbeef'))
    '48281aa6'
    """
    crc = _update(_update(0xFFFFFFFF, data), _length_bytes(len(data), 24))
    return f"{~crc & 0xFFFFFFFF:08x}"


def read_crc_buffer(handle: BinaryIO, header: FixedHeader) -> bytes:
    """Bytes covered by the header CRC keyword."""
    try:
        handle.seek(0)
        buffer = handle.read(CRC_FIXED_BYTES)
        if header.ext_size > 0:
            handle.seek(header.ext_offset)
            buffer += handle.read(header.ext_size)
    except OSError as err:
        raise IoFailure(f"Failed to read CRC region: {err}") from err
    return buffer


def match_crc(buffer: bytes, target: str) -> Optional[str]:
    """
    Check `buffer` against a hex CRC string.

    Returns
    -------
    str or None
        Name of the matching implementation, "BLUE" or "POSIX", or None.
    """
    target = target.strip().lower()
    if target == crc32_broken(buffer):
        return "BLUE"
    if target == crc32_posix(buffer):
        return "POSIX"
    return None

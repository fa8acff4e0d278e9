# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Extended Header keywords.

Each keyword entry is laid out as::

    lkey  int32   total entry length in bytes, including padding
    lext  int16   entry length excluding the value (prologue, tag & padding)
    ltag  int8    tag length
    type  char    value format code
    value         lkey - lext bytes
    tag           ltag bytes
    padding       to an 8 byte boundary
"""

import struct
from typing import Any, BinaryIO, Iterator, List, Union

import numpy as np
from pydantic import BaseModel, ConfigDict

from .datatype import TYPE_MAP
from .error import IoFailure, MalformedHeader
from .header import FixedHeader

PROLOGUE_SIZE = 8
TEXT_FORMATS = ("A", "S", "Z")


class ExtendedHeaderEntry(BaseModel):
    """Single extended header keyword."""

    model_config = ConfigDict(frozen=True)

    tag: str
    format: str
    value: Any
    length: int


class ExtendedHeader:
    """
    Ordered extended header keywords.

    Repeated tags are all retained in file order. Indexing by tag returns the
    first value, indexing by position returns the entry.
    """

    def __init__(self, entries=None):
        self._entries = list(entries) if entries else []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ExtendedHeaderEntry]:
        return iter(self._entries)

    def __contains__(self, tag) -> bool:
        return any(entry.tag == tag for entry in self._entries)

    def __getitem__(self, key: Union[int, str]):
        if isinstance(key, int):
            return self._entries[key]
        for entry in self._entries:
            if entry.tag == key:
                return entry.value
        raise KeyError(key)

    def __eq__(self, other):
        if not isinstance(other, ExtendedHeader):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"ExtendedHeader({self.items()!r})"

    def get(self, tag: str, default=None):
        try:
            return self[tag]
        except KeyError:
            return default

    def getall(self, tag: str) -> list:
        """All values for `tag` in file order."""
        return [entry.value for entry in self._entries if entry.tag == tag]

    def keys(self) -> List[str]:
        return [entry.tag for entry in self._entries]

    def items(self) -> list:
        return [(entry.tag, entry.value) for entry in self._entries]

    def to_dict(self) -> dict:
        """
        Flatten to a dict, numbering repeated tags.

        Example
        -------
        >>> ExtendedHeader([ExtendedHeaderEntry(tag="C", format="A", value="a", length=16),
        ...                 ExtendedHeaderEntry(tag="C", format="A", value="b", length=16)]).to_dict()
        {'C': 'a', 'C_1': 'b'}
        """
        extended = {}
        tag_counts = {}
        for entry in self._entries:
            if entry.tag in extended:
                tag_counts[entry.tag] = tag_counts.get(entry.tag, 0) + 1
                extended[f"{entry.tag}_{tag_counts[entry.tag]}"] = entry.value
            else:
                extended[entry.tag] = entry.value
        return extended


def _decode_value(raw: bytes, type_char: str, order: str):
    if type_char in TEXT_FORMATS:
        return raw.rstrip(b"\x00").decode("ascii", errors="replace")
    dtype = np.dtype(TYPE_MAP[type_char]).newbyteorder(order)
    if len(raw) % dtype.itemsize:
        raise MalformedHeader(f"Extended header value of {len(raw)} bytes is not a multiple of {type_char!r}")
    value = np.frombuffer(raw, dtype=dtype).tolist()
    if len(value) == 1:
        return value[0]
    return value


def parse_extended_header(raw: bytes, order: str) -> ExtendedHeader:
    """
    Walk the extended header keyword entries.

    Parameters
    ----------
    raw : bytes
        The entire extended header region.
    order : str
        Header byte order, "<" or ">".

    Returns
    -------
    ExtendedHeader

    Raises
    ------
    MalformedHeader
        If an entry overruns the region, is inconsistent, or has an unknown type.
    """
    entries = []
    size = len(raw)
    pos = 0
    while pos < size:
        if size - pos < PROLOGUE_SIZE:
            raise MalformedHeader(f"Extended header entry at byte {pos} truncated by region end")
        lkey, lext, ltag = struct.unpack_from(order + "ihB", raw, pos)
        type_char = chr(raw[pos + 7])

        if lkey < PROLOGUE_SIZE or pos + lkey > size:
            raise MalformedHeader(f"Extended header entry at byte {pos} declares invalid length {lkey}")
        val_len = lkey - lext
        if lext < PROLOGUE_SIZE + ltag or val_len < 0:
            raise MalformedHeader(f"Extended header entry at byte {pos} has inconsistent lengths ({lkey}, {lext}, {ltag})")
        if type_char not in TEXT_FORMATS and type_char not in TYPE_MAP:
            raise MalformedHeader(f"Unsupported extended header type {type_char!r} at byte {pos}")

        val_lo = pos + PROLOGUE_SIZE
        tag_lo = val_lo + val_len
        value = _decode_value(raw[val_lo:tag_lo], type_char, order)
        tag = raw[tag_lo : tag_lo + ltag].decode("ascii", errors="replace")

        entries.append(ExtendedHeaderEntry(tag=tag, format=type_char, value=value, length=lkey))
        pos += lkey

    return ExtendedHeader(entries)


def read_extended_header(handle: BinaryIO, header: FixedHeader) -> ExtendedHeader:
    """
    Read the extended header declared by the fixed header.

    Raises
    ------
    IoFailure
        If the source cannot supply the declared region.
    """
    if header.ext_size <= 0:
        return ExtendedHeader()
    try:
        handle.seek(header.ext_offset)
        raw = handle.read(header.ext_size)
    except OSError as err:
        raise IoFailure(f"Failed to read extended header: {err}") from err
    if len(raw) < header.ext_size:
        raise IoFailure(f"Unexpected end of extended header: {len(raw)} of {header.ext_size} bytes")
    return parse_extended_header(raw, header.header_order)

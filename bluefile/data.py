# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Lazy decoding of the data region."""

from itertools import islice
from typing import BinaryIO, Optional

from .datatype import DataType, decode_value
from .error import IoFailure


class DataIterator:
    """
    Pull-based iterator over the elements of a data region.

    Each step reads exactly one element from the source at this iterator's
    own cursor, so several iterators may share a source handle. A trailing
    partial element, or a source shorter than the declared region, ends the
    sequence without error; compare `position` against `data_size` to detect
    that case.

    Parameters
    ----------
    handle : BinaryIO
        Seekable binary source.
    data_start : int
        Data region start in bytes.
    data_size : int
        Data region size in bytes.
    data_order : str
        Data byte order, "<" or ">".
    data_type : DataType
        Decoded data type code.
    frame_size : int, optional
        Elements per frame for framed types.
    offset : int, optional
        Starting cursor in bytes, relative to `data_start`.
    """

    def __init__(
        self,
        handle: BinaryIO,
        data_start: int,
        data_size: int,
        data_order: str,
        data_type: DataType,
        frame_size: Optional[int] = None,
        offset: int = 0,
    ):
        if offset < 0 or offset > data_size:
            raise ValueError(f"Offset {offset} outside data region of {data_size} bytes")
        if frame_size is not None and frame_size <= 0:
            raise ValueError(f"Invalid frame size: {frame_size}")
        self.handle = handle
        self.data_start = int(data_start)
        self.data_size = int(data_size)
        self.data_order = data_order
        self.data_type = data_type
        self.frame_size = frame_size
        self.position = offset
        self._dtype = data_type.dtype(data_order)

    def __iter__(self):
        return self

    def __next__(self):
        item_size = self.data_type.size
        if self.data_size - self.position < item_size:
            raise StopIteration
        try:
            self.handle.seek(self.data_start + self.position)
            buf = self.handle.read(item_size)
        except OSError as err:
            raise IoFailure(f"Failed to read data at byte {self.data_start + self.position}: {err}") from err
        if len(buf) < item_size:
            raise StopIteration
        self.position += item_size
        return decode_value(self.data_type, self.data_order, buf, self._dtype)

    def __repr__(self) -> str:
        return f"DataIterator({self.data_type}, position={self.position}, size={self.data_size})"

    @property
    def remaining(self) -> int:
        """bytes left in the data region"""
        return self.data_size - self.position

    def take(self, count: int) -> list:
        """Up to `count` further values."""
        return list(islice(self, count))

    def frame_offset(self, index: int) -> int:
        """byte offset of frame `index` relative to the data region"""
        if self.frame_size is None:
            raise ValueError("Data is not framed")
        if index < 0:
            raise ValueError(f"Invalid frame index: {index}")
        return index * self.frame_size * self.data_type.size

    def at_offset(self, offset: int) -> "DataIterator":
        """New independent iterator starting `offset` bytes into the data region."""
        return DataIterator(
            self.handle,
            self.data_start,
            self.data_size,
            self.data_order,
            self.data_type,
            frame_size=self.frame_size,
            offset=offset,
        )

    def at_frame(self, index: int) -> "DataIterator":
        """New independent iterator starting at frame `index`."""
        return self.at_offset(self.frame_offset(index))

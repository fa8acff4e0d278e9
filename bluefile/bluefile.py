# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""BlueFile Object"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union

import numpy as np

from .adjunct import Type1000Adjunct, Type2000Adjunct, read_adjunct_header
from .data import DataIterator
from .datatype import COMPLEX, SCALAR
from .endian import order_name
from .error import BluefileError, IoFailure
from .extended import read_extended_header
from .hashing import match_crc, read_crc_buffer
from .header import FIXED_LAYOUT, read_fixed_header
from .utils import timecode_to_datetime

log = logging.getLogger()

DETACHED_EXT = ".det"


class BlueFile:
    """
    Reader for a single BLUE file.

    Parses the fixed, adjunct and extended headers once on construction and
    decodes data on demand.

    Parameters
    ----------
    source : str, Path or binary file object
        Path to the BLUE file or an open seekable binary source.
    data_path : str or Path, optional
        Data file for detached headers. When omitted for a detached header,
        a sibling file with the ".det" extension is used if it exists.
    """

    def __init__(self, source: Union[str, os.PathLike, BinaryIO], data_path: Optional[Union[str, os.PathLike]] = None):
        self.path = None
        self.data_path = None
        self._handles = []
        if isinstance(source, (str, os.PathLike)):
            self.path = Path(source)
            self._handle = self._open(self.path)
        else:
            self._handle = source
        self._data_handle = self._handle

        try:
            self.header = read_fixed_header(self._handle)
            self.adjunct = read_adjunct_header(self._handle, self.header)
            self.extended = read_extended_header(self._handle, self.header)
            self._open_data(data_path)
            self._check_crc()
            self._check_boundaries()
        except BluefileError:
            self.close()
            raise
        log.info(self.description)
        self._log_headers()

    def _open(self, path: Path) -> BinaryIO:
        try:
            handle = open(path, "rb")
        except OSError as err:
            raise IoFailure(f"Failed to open {path}: {err}") from err
        self._handles.append(handle)
        return handle

    def _open_data(self, data_path) -> None:
        if data_path is None and self.header.detached and self.path is not None:
            candidate = self.path.with_suffix(DETACHED_EXT)
            if candidate.exists():
                data_path = candidate
            else:
                log.warning("detached header but %s not found, reading data from header file", candidate)
        if data_path is not None:
            self.data_path = Path(data_path)
            self._data_handle = self._open(self.data_path)
            log.debug("reading detached data from %s", self.data_path)

    def _check_crc(self) -> None:
        target = self.header.get_keyword("CRC")
        if target is None:
            return
        matched = match_crc(read_crc_buffer(self._handle, self.header), target)
        if matched is None:
            log.warning("CRC mismatch in BLUE metadata!")
        else:
            log.debug("CRC ok (%s implementation)", matched)

    def _check_boundaries(self) -> None:
        _, _, trailing_bytes = self.get_boundaries()
        if trailing_bytes < 0:
            log.warning(
                "data region ends %d bytes past end of file, trailing elements will be missing", -trailing_bytes
            )

    def _log_headers(self) -> None:
        log.debug(">>>>>>>>> Fixed Header")
        for key, _, _, _, desc in FIXED_LAYOUT:
            log.debug(f"{key:10s}: {getattr(self.header, key)!r}  # {desc}")

        log.debug(">>>>>>>>> Adjunct Header")
        log.debug(self.adjunct)

        log.debug(">>>>>>>>> Extended Header")
        for entry in self.extended:
            log.debug(f"{entry.tag:20s}:{entry.value}")

    def close(self) -> None:
        """Close any files opened by this reader."""
        while self._handles:
            self._handles.pop().close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        return f"BlueFile({self.path or self._handle!r}, type={self.header.type_code}, format={self.header.format})"

    def __len__(self) -> int:
        """number of complete elements declared by the data region"""
        return self.header.data_length // self.header.data_type.size

    def __iter__(self) -> Iterator:
        return self.data_iter()

    @property
    def frame_size(self) -> Optional[int]:
        return self.adjunct.frame_size

    @property
    def frame_count(self) -> Optional[int]:
        if self.frame_size is None:
            return None
        return len(self) // self.frame_size

    @property
    def description(self) -> str:
        """human-readable description of the file"""
        return (
            f"Read {self.header.version} type {self.header.type_code} {self.header.format} "
            f"({order_name(self.header.data_order)} endian data) using {self.header.specification} specification."
        )

    @property
    def datetime(self) -> Optional[datetime]:
        """Start time of the data in UTC, None if the file carries no timecode."""
        start_time = self.header.timecode
        if isinstance(self.adjunct, (Type1000Adjunct, Type2000Adjunct)):
            start_time += self.adjunct.xstart
        start_time += float(self.header.get_keyword("TC_PREC", 0))
        return timecode_to_datetime(start_time)

    def get_boundaries(self) -> Tuple[int, int, int]:
        """
        Data boundaries of the file.

        Returns
        -------
        tuple
            (header_bytes, data_bytes, trailing_bytes). Trailing bytes are
            negative when the data region runs past the end of the file.
        """
        try:
            file_bytes = self._data_handle.seek(0, os.SEEK_END)
        except OSError as err:
            raise IoFailure(f"Failed to size data source: {err}") from err
        header_bytes = self.header.data_offset
        data_bytes = self.header.data_length
        trailing_bytes = file_bytes - (header_bytes + data_bytes)
        return header_bytes, data_bytes, trailing_bytes

    def data_iter(self, offset: int = 0) -> DataIterator:
        """Lazy iterator over decoded values starting `offset` bytes into the data region."""
        return DataIterator(
            self._data_handle,
            self.header.data_offset,
            self.header.data_length,
            self.header.data_order,
            self.header.data_type,
            frame_size=self.frame_size,
            offset=offset,
        )

    def frame_iter(self, index: int) -> DataIterator:
        """Lazy iterator starting at frame `index`, running to the end of the data."""
        return self.data_iter().at_frame(index)

    def frame(self, index: int) -> list:
        """Decoded values of frame `index`."""
        return self.frame_iter(index).take(self.frame_size)

    def points(self) -> Iterator[tuple]:
        """
        Values tagged with their abscissa.

        Yields ``(x, value)`` for type 1000 files and ``(x, y, value)`` for
        type 2000 files.
        """
        adjunct = self.adjunct
        if isinstance(adjunct, Type1000Adjunct):
            for idx, value in enumerate(self):
                yield adjunct.xstart + idx * adjunct.xdelta, value
        elif isinstance(adjunct, Type2000Adjunct):
            for idx, value in enumerate(self):
                row, col = divmod(idx, adjunct.subsize)
                yield adjunct.xstart + col * adjunct.xdelta, adjunct.ystart + row * adjunct.ydelta, value
        else:
            raise BluefileError(f"Type {self.header.type_code} data has no element abscissa")

    def read_samples(self, start_index: int = 0, count: int = -1) -> np.ndarray:
        """
        Read a block of elements into a numpy array.

        Parameters
        ----------
        start_index : int, optional
            First element to read.
        count : int, optional
            Number of elements to read, -1 for all remaining.

        Returns
        -------
        numpy.ndarray
            1D array for scalar data, complex128 for complex data, and
            (count, N) for N element vector data. Truncated trailing
            elements are dropped.
        """
        data_type = self.header.data_type
        total = len(self)
        if start_index < 0 or start_index > total:
            raise BluefileError(f"Start index {start_index} outside of {total} elements")
        if count < 0 or start_index + count > total:
            count = total - start_index

        try:
            self._data_handle.seek(self.header.data_offset + start_index * data_type.size)
            raw = self._data_handle.read(count * data_type.size)
        except OSError as err:
            raise IoFailure(f"Failed to read samples: {err}") from err
        count = len(raw) // data_type.size
        data = np.frombuffer(raw, dtype=data_type.dtype(self.header.data_order), count=count * data_type.arity)

        if data_type.kind == SCALAR:
            return data
        data = data.reshape(count, data_type.arity)
        if data_type.kind == COMPLEX:
            return data[:, 0].astype(np.float64) + 1j * data[:, 1].astype(np.float64)
        return data


def fromfile(filename: Union[str, os.PathLike], data_path: Optional[Union[str, os.PathLike]] = None) -> BlueFile:
    """
    Open a BLUE file.

    Example
    -------
    >>> with fromfile("sin.tmp") as blue:      # doctest: +SKIP
    ...     values = blue.data_iter().take(16)
    """
    return BlueFile(filename, data_path=data_path)

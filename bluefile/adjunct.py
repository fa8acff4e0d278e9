# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Adjunct Header parsing.

The adjunct header occupies the second half of the Header Control Block and
its layout depends on the type code family of the fixed header. Each family
decodes to its own record type.
"""

import struct
from typing import BinaryIO, ClassVar, Optional

from pydantic import BaseModel, ConfigDict

from .error import IoFailure, MalformedHeader, UnsupportedTypeCode
from .header import FixedHeader

ADJUNCT_HEADER_OFFSET = 256
ADJUNCT_HEADER_SIZE = 256


class AdjunctHeader(BaseModel):
    """Base for the per-family adjunct header records."""

    model_config = ConfigDict(frozen=True)

    family: ClassVar[int] = 0

    @property
    def frame_size(self) -> Optional[int]:
        """elements per frame, None when the family is not framed by element count"""
        return None


class Type1000Adjunct(AdjunctHeader):
    """One dimensional data: a single abscissa."""

    family: ClassVar[int] = 1

    xstart: float
    xdelta: float
    xunits: int


class Type2000Adjunct(AdjunctHeader):
    """Framed data: `subsize` elements per frame along x, frames along y."""

    family: ClassVar[int] = 2

    xstart: float
    xdelta: float
    xunits: int
    subsize: int
    ystart: float
    ydelta: float
    yunits: int

    @property
    def frame_size(self) -> Optional[int]:
        return self.subsize


class _RecordAdjunct(AdjunctHeader):
    rstart: float
    rdelta: float
    runits: int
    subrecords: int
    r2start: float
    r2delta: float
    r2units: int
    record_length: int


class Type3000Adjunct(_RecordAdjunct):
    """Scalar packetized records."""

    family: ClassVar[int] = 3


class Type4000Adjunct(AdjunctHeader):
    """Variable length records (keyword/value pairs)."""

    family: ClassVar[int] = 4

    vrstart: float
    vrdelta: float
    vrunits: int
    nvar: int
    vr2start: float
    vr2delta: float
    vr2units: int
    vrecord_length: int


class Type5000Adjunct(AdjunctHeader):
    """Ephemeris and state vector records."""

    family: ClassVar[int] = 5

    tstart: float
    tdelta: float
    tunits: int
    components: int
    t2start: float
    t2delta: float
    t2units: int
    rec_length: int


class Type6000Adjunct(_RecordAdjunct):
    """Generalized records with subrecord definitions."""

    family: ClassVar[int] = 6


def _record_layout(start, delta, units, count, start2, delta2, units2, length):
    """record families share one shape: two axes, a count and a record length"""
    return [
        (start, 0, "d"),
        (delta, 8, "d"),
        (units, 16, "i"),
        (count, 20, "i"),
        (start2, 24, "d"),
        (delta2, 32, "d"),
        (units2, 40, "i"),
        (length, 44, "i"),
    ]


# fmt: off
_XY_AXES = [
    # Adjunct Header definitions: (key, offset, fmt)
    ("xstart",  0,  "d"),
    ("xdelta",  8,  "d"),
    ("xunits",  16, "i"),
    ("subsize", 20, "i"),
    ("ystart",  24, "d"),
    ("ydelta",  32, "d"),
    ("yunits",  40, "i"),
]


_RECORD_AXES = _record_layout("rstart", "rdelta", "runits", "subrecords", "r2start", "r2delta", "r2units", "record_length")

ADJUNCT_LAYOUTS = {
    # family: (record type, field layout)
    1: (Type1000Adjunct, _XY_AXES[:3]),
    2: (Type2000Adjunct, _XY_AXES),
    3: (Type3000Adjunct, _RECORD_AXES),
    4: (Type4000Adjunct, _record_layout(
        "vrstart", "vrdelta", "vrunits", "nvar", "vr2start", "vr2delta", "vr2units", "vrecord_length")),
    5: (Type5000Adjunct, _record_layout(
        "tstart", "tdelta", "tunits", "components", "t2start", "t2delta", "t2units", "rec_length")),
    6: (Type6000Adjunct, _RECORD_AXES),
}
# fmt: on


def layout_size(layout: list) -> int:
    """bytes spanned by a field layout"""
    return max(offset + struct.calcsize(fmt) for _, offset, fmt in layout)


def _lookup(type_code: int):
    try:
        return ADJUNCT_LAYOUTS[type_code // 1000]
    except KeyError:
        raise UnsupportedTypeCode(f"No adjunct header layout for type code {type_code}") from None


def validate_adjunct(adjunct: AdjunctHeader) -> None:
    """
    Raises
    ------
    MalformedHeader
        If a framed adjunct declares a non-positive frame size.
    """
    if isinstance(adjunct, Type2000Adjunct) and adjunct.subsize <= 0:
        raise MalformedHeader(f"Invalid adjunct subsize: {adjunct.subsize} (must be > 0)")


def parse_adjunct_header(raw: bytes, type_code: int, order: str) -> AdjunctHeader:
    """
    Parse an adjunct header from raw bytes.

    Parameters
    ----------
    raw : bytes
        Bytes starting at the adjunct header offset.
    type_code : int
        Type code from the fixed header, selects the layout.
    order : str
        Header byte order, "<" or ">".

    Returns
    -------
    AdjunctHeader
        One of the TypeN000Adjunct records.

    Raises
    ------
    UnsupportedTypeCode
        If the type code family has no known layout.
    MalformedHeader
        If there are too few bytes or a field is invalid.
    """
    record_type, layout = _lookup(type_code)
    size = layout_size(layout)
    if len(raw) < size:
        raise MalformedHeader(f"Not enough adjunct header bytes: {len(raw)} < {size}")

    fields = {}
    for key, offset, fmt in layout:
        fields[key] = struct.unpack_from(order + fmt, raw, offset)[0]
    adjunct = record_type(**fields)
    validate_adjunct(adjunct)
    return adjunct


def read_adjunct_header(handle: BinaryIO, header: FixedHeader) -> AdjunctHeader:
    """
    Read the adjunct header following the fixed header.

    Only the bytes of the selected layout are read.
    """
    _, layout = _lookup(header.type_code)
    try:
        handle.seek(ADJUNCT_HEADER_OFFSET)
        raw = handle.read(layout_size(layout))
    except OSError as err:
        raise IoFailure(f"Failed to read adjunct header: {err}") from err
    return parse_adjunct_header(raw, header.type_code, header.header_order)

# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Fixed Header parsing.

The first 256 bytes of the Header Control Block (HCB) hold the fixed header,
decoded here using the byte order declared by its own representation tag.
The adjunct header follows at byte 256.
"""

import struct
from typing import BinaryIO, Optional, Tuple

from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ConfigDict

from .datatype import DataType, parse_data_type
from .endian import resolve_endianness
from .error import IoFailure, MalformedHeader, UnsupportedTypeCode, UnsupportedVersion

BLOCK_SIZE_BYTES = 512
FIXED_HEADER_SIZE = 256
KEYWORDS_SIZE = 92
VERSIONS = ("BLUE",)
FAMILIES = (1, 2, 3, 4, 5, 6)

# fmt: off
FIXED_LAYOUT = [
    # Fixed Header definitions: (key, offset, size, fmt, description) up to adjunct
    ("version",   0,   4,  "4s",   "Header version"),
    ("head_rep",  4,   4,  "4s",   "Header representation"),
    ("data_rep",  8,   4,  "4s",   "Data representation"),
    ("detached",  12,  4,  "i",    "Detached header"),
    ("protected", 16,  4,  "i",    "Protected from overwrite"),
    ("pipe",      20,  4,  "i",    "Pipe mode (N/A)"),
    ("ext_start", 24,  4,  "i",    "Extended header start (512-byte blocks)"),
    ("ext_size",  28,  4,  "i",    "Extended header size in bytes"),
    ("data_start",32,  8,  "d",    "Data start in bytes"),
    ("data_size", 40,  8,  "d",    "Data size in bytes"),
    ("type_code", 48,  4,  "i",    "File type code"),
    ("format",    52,  2,  "2s",   "2 Letter data format code"),
    ("flagmask",  54,  2,  "h",    "16-bit flagmask"),
    ("timecode",  56,  8,  "d",    "Time code field"),
    ("inlet",     64,  2,  "h",    "Inlet owner"),
    ("outlets",   66,  2,  "h",    "Number of outlets"),
    ("outmask",   68,  4,  "i",    "Outlet async mask"),
    ("pipeloc",   72,  4,  "i",    "Pipe location"),
    ("pipesize",  76,  4,  "i",    "Pipe size in bytes"),
    ("in_byte",   80,  8,  "d",    "Next input byte"),
    ("out_byte",  88,  8,  "d",    "Next out byte (cumulative)"),
    ("outbytes",  96,  64, "8d",   "Next out byte (each outlet)"),
    ("keylength", 160, 4,  "i",    "Length of keyword string"),
    ("keywords",  164, 92, "92s",  "User defined keyword string"),
    # Adjunct starts at byte 256 after this
]
# fmt: on


class FixedHeader(BaseModel):
    """Decoded fixed header. Byte offsets and sizes are in bytes unless noted."""

    model_config = ConfigDict(frozen=True)

    version: str
    head_rep: str
    data_rep: str
    header_order: str
    data_order: str
    detached: int
    protected: int
    pipe: int
    ext_start: int
    ext_size: int
    data_start: float
    data_size: float
    type_code: int
    format: str
    data_type: DataType
    flagmask: int
    timecode: float
    inlet: int
    outlets: int
    outmask: int
    pipeloc: int
    pipesize: int
    in_byte: float
    out_byte: float
    outbytes: Tuple[float, ...]
    keylength: int
    keywords: Tuple[Tuple[str, str], ...]

    @property
    def family(self) -> int:
        """type code family, e.g. 2 for type 2000 or 2001"""
        return self.type_code // 1000

    @property
    def ext_offset(self) -> int:
        """extended header start in bytes"""
        return self.ext_start * BLOCK_SIZE_BYTES

    @property
    def data_offset(self) -> int:
        return int(self.data_start)

    @property
    def data_length(self) -> int:
        return int(self.data_size)

    def get_keyword(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a main header keyword."""
        for key, value in self.keywords:
            if key == name:
                return value
        return default

    @property
    def specification(self) -> str:
        """BLUE specification named by the VER keyword."""
        try:
            version = Version(self.get_keyword("VER", "0.0"))
        except InvalidVersion:
            return "Unknown"
        if version.major == 1:
            return f"BLUE {version}"
        if version.major == 2:
            return f"Platinum {version}"
        return "Unknown"


def parse_header_keywords(block: bytes, keylength: int) -> Tuple[Tuple[str, str], ...]:
    """
    Split the main header keyword block into (name, value) pairs.

    Keywords are stored as ``NAME=VALUE`` strings separated by NUL bytes
    within the first `keylength` bytes of the block.

    Raises
    ------
    MalformedHeader
        If `keylength` is out of range or a keyword lacks an equals sign.
    """
    if keylength < 0 or keylength > KEYWORDS_SIZE:
        raise MalformedHeader(f"Invalid header keyword length: {keylength}")
    keywords = []
    for field in block[:keylength].decode("ascii", errors="replace").split("\x00"):
        if not field:
            continue
        if "=" not in field:
            raise MalformedHeader(f"Header keyword missing '=': {field!r}")
        name, value = field.split("=", 1)
        keywords.append((name, value))
    return tuple(keywords)


def validate_type_code(type_code: int) -> None:
    """
    Raises
    ------
    UnsupportedTypeCode
        If the type code does not belong to a known family.
    """
    if type_code // 1000 not in FAMILIES:
        raise UnsupportedTypeCode(f"Unsupported type code: {type_code}")


def validate_fixed(fields: dict) -> None:
    """
    Check that decoded fixed header fields are structurally consistent.

    Raises
    ------
    MalformedHeader
        If offsets or sizes are invalid or the extended header overlaps data.
    """
    for key in ("data_start", "data_size"):
        value = fields[key]
        if not float(value).is_integer() or value < 0:
            raise MalformedHeader(f"Invalid {key}: {value}")
    for key in ("ext_start", "ext_size"):
        if fields[key] < 0:
            raise MalformedHeader(f"Invalid {key}: {fields[key]}")
    if fields["ext_size"] > 0:
        ext_lo = fields["ext_start"] * BLOCK_SIZE_BYTES
        ext_hi = ext_lo + fields["ext_size"]
        data_lo = fields["data_start"]
        data_hi = data_lo + fields["data_size"]
        if ext_lo < BLOCK_SIZE_BYTES:
            raise MalformedHeader(f"Extended header at byte {ext_lo} overlaps header control block")
        # detached data lives in a separate file
        if fields["detached"] or fields["data_size"] == 0:
            return
        if ext_lo < data_hi and data_lo < ext_hi:
            raise MalformedHeader(f"Extended header [{ext_lo}, {ext_hi}) overlaps data [{data_lo}, {data_hi})")


def parse_fixed_header(raw: bytes) -> FixedHeader:
    """
    Parse the fixed header from raw bytes.

    Parameters
    ----------
    raw : bytes
        At least the first 256 bytes of the file.

    Returns
    -------
    FixedHeader

    Raises
    ------
    MalformedHeader
        If there are too few bytes or the header is structurally invalid.
    UnsupportedVersion
        If the version tag is not recognized.
    UnsupportedTypeCode
        If the type code family is unknown.
    UnsupportedDataType
        If the data type code is unknown.
    """
    if len(raw) < FIXED_HEADER_SIZE:
        raise MalformedHeader(f"Not enough header bytes: {len(raw)} < {FIXED_HEADER_SIZE}")

    version = raw[0:4].decode("ascii", errors="replace")
    if version not in VERSIONS:
        raise UnsupportedVersion(f"Unsupported header version: {version!r}")

    # representation tags are literal ascii, resolve before any numeric field
    header_order, data_order = resolve_endianness(raw[4:8], raw[8:12])

    fields = {"header_order": header_order, "data_order": data_order}
    for key, offset, size, fmt, _ in FIXED_LAYOUT:
        chunk = raw[offset : offset + size]
        try:
            values = struct.unpack(header_order + fmt, chunk)
        except struct.error as err:
            raise MalformedHeader(f"Failed to unpack field {key} with endian {header_order}") from err
        if len(values) > 1:
            fields[key] = values
        elif isinstance(values[0], bytes):
            fields[key] = values[0] if key == "keywords" else values[0].decode("ascii", errors="replace")
        else:
            fields[key] = values[0]

    validate_type_code(fields["type_code"])
    fields["data_type"] = parse_data_type(fields["format"])
    fields["keywords"] = parse_header_keywords(fields["keywords"], fields["keylength"])
    validate_fixed(fields)

    return FixedHeader(**fields)


def read_fixed_header(handle: BinaryIO) -> FixedHeader:
    """
    Read and parse the fixed header from the start of a binary source.

    Raises
    ------
    IoFailure
        If the source fails to read.
    """
    try:
        handle.seek(0)
        raw = handle.read(FIXED_HEADER_SIZE)
    except OSError as err:
        raise IoFailure(f"Failed to read fixed header: {err}") from err
    return parse_fixed_header(raw)

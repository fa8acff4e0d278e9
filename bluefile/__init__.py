# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

# version of this python module
__version__ = "0.1.0"

from . import adjunct, bluefile, data, datatype, endian, error, extended, hashing, header, utils
from .adjunct import (
    AdjunctHeader,
    Type1000Adjunct,
    Type2000Adjunct,
    Type3000Adjunct,
    Type4000Adjunct,
    Type5000Adjunct,
    Type6000Adjunct,
    read_adjunct_header,
)
from .bluefile import BlueFile, fromfile
from .data import DataIterator
from .datatype import DataType, parse_data_type
from .endian import resolve_endianness
from .extended import ExtendedHeader, ExtendedHeaderEntry, read_extended_header
from .header import FixedHeader, read_fixed_header

# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Data type codes.

A BLUE data type code is two characters: the first gives the number of
scalar components per element (S=scalar, C=complex, V=vector of 3 ...),
the second the numeric format of each component (B=int8, I=int16 ...).
"""

from typing import Union

import numpy as np
from pydantic import BaseModel, ConfigDict

from .error import UnsupportedDataType

SCALAR = "scalar"
COMPLEX = "complex"
VECTOR = "vector"

# fmt: off
ARITY_MAP = {
    # BLUE size code to number of components per element
    "S": 1,   # scalar
    "C": 2,   # complex
    "V": 3,   # vector
    "Q": 4,   # quad
    "M": 9,   # 3x3 matrix
    "X": 10,  # 10 element
    "T": 16,  # 4x4 transform matrix
}
ARITY_MAP.update({str(num): num for num in range(1, 10)})

TYPE_MAP = {
    # BLUE format code to numpy dtype
    # "P" : packed bits,
    # "N" : 4-bit integer,
    "B": np.int8,
    "O": np.uint8,  # offset byte
    "I": np.int16,
    "U": np.uint16,
    "L": np.int32,
    "V": np.uint32,
    "X": np.int64,
    "F": np.float32,
    "D": np.float64,
}
# fmt: on


class DataType(BaseModel):
    """Decoded two character data type code."""

    model_config = ConfigDict(frozen=True)

    arity_code: str
    format_code: str

    @property
    def code(self) -> str:
        return self.arity_code + self.format_code

    @property
    def arity(self) -> int:
        """scalar components per element"""
        return ARITY_MAP[self.arity_code]

    @property
    def kind(self) -> str:
        if self.arity_code == "S":
            return SCALAR
        if self.arity_code == "C":
            return COMPLEX
        return VECTOR

    @property
    def is_complex(self) -> bool:
        return self.kind == COMPLEX

    @property
    def width(self) -> int:
        """bytes per scalar component"""
        return np.dtype(TYPE_MAP[self.format_code]).itemsize

    @property
    def size(self) -> int:
        """bytes per element"""
        return self.width * self.arity

    def dtype(self, order: str) -> np.dtype:
        """numpy dtype of a single component in the given byte order"""
        return np.dtype(TYPE_MAP[self.format_code]).newbyteorder(order)

    def __str__(self) -> str:
        return self.code


def parse_data_type(code: Union[str, bytes]) -> DataType:
    """
    Decode a two character data type code.

    Parameters
    ----------
    code : str or bytes
        Data type code, e.g. "SF" or "CI".

    Returns
    -------
    DataType

    Raises
    ------
    UnsupportedDataType
        If either character is not a known arity or format code.
    """
    if isinstance(code, bytes):
        code = code.decode("ascii", errors="replace")
    if len(code) != 2:
        raise UnsupportedDataType(f"Data type code must be 2 characters: {code!r}")
    arity_code, format_code = code[0], code[1]
    if arity_code not in ARITY_MAP:
        raise UnsupportedDataType(f"Unsupported data type size code {arity_code!r} in {code!r}")
    if format_code not in TYPE_MAP:
        raise UnsupportedDataType(f"Unsupported data type format code {format_code!r} in {code!r}")
    return DataType(arity_code=arity_code, format_code=format_code)


def decode_value(data_type: DataType, order: str, buf: bytes, dtype: np.dtype = None):
    """
    Decode a single element and widen it to native python numbers.

    Integers become ``int`` and floats become ``float``. Complex elements
    become ``complex`` and vector elements a ``tuple`` of components.
    """
    if dtype is None:
        dtype = data_type.dtype(order)
    values = np.frombuffer(buf, dtype=dtype, count=data_type.arity).tolist()
    if data_type.arity_code == "S":
        return values[0]
    if data_type.arity_code == "C":
        return complex(values[0], values[1])
    return tuple(values)

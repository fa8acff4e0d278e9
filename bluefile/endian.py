# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Byte order resolution for header and data representation tags."""

from typing import Tuple, Union

from .error import MalformedHeader

LITTLE = "<"
BIG = ">"

REPRESENTATIONS = {
    # representation tag to struct/numpy byte order prefix
    "EEEI": LITTLE,
    "IEEE": BIG,
}


def byte_order(tag: Union[str, bytes]) -> str:
    """
    Resolve a single 4 character representation tag.

    Parameters
    ----------
    tag : str or bytes
        Representation tag, "EEEI" or "IEEE".

    Returns
    -------
    str
        "<" for little-endian or ">" for big-endian.

    Raises
    ------
    MalformedHeader
        If the tag matches neither representation.
    """
    if isinstance(tag, bytes):
        tag = tag.decode("ascii", errors="replace")
    try:
        return REPRESENTATIONS[tag]
    except KeyError:
        raise MalformedHeader(f"Unsupported representation: {tag!r}") from None


def resolve_endianness(head_rep: Union[str, bytes], data_rep: Union[str, bytes]) -> Tuple[str, str]:
    """Return (header_order, data_order) for the two representation tags."""
    return byte_order(head_rep), byte_order(data_rep)


def order_name(order: str) -> str:
    """Human readable name of a byte order prefix."""
    return "little" if order == LITTLE else "big"

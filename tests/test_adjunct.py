# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Tests for Adjunct Header dispatch"""

import io
import struct
import unittest

import pytest

from bluefile.adjunct import (
    ADJUNCT_LAYOUTS,
    Type1000Adjunct,
    Type2000Adjunct,
    Type3000Adjunct,
    Type4000Adjunct,
    Type5000Adjunct,
    Type6000Adjunct,
    layout_size,
    parse_adjunct_header,
    read_adjunct_header,
)
from bluefile.error import MalformedHeader, UnsupportedTypeCode
from bluefile.header import read_fixed_header

from .testdata import adjunct_1000, adjunct_2000, make_blue

RECORD_BYTES = struct.pack("<ddiiddii", 1.0, 0.5, 1, 3, 2.0, 0.25, 4, 64)


class TestAdjunctDispatch(unittest.TestCase):
    """type code family selects the adjunct record"""

    def test_type1000(self):
        adjunct = parse_adjunct_header(adjunct_1000(xstart=1.5, xdelta=0.125, xunits=1), 1000, "<")
        self.assertIsInstance(adjunct, Type1000Adjunct)
        self.assertEqual(adjunct.family, 1)
        self.assertEqual(adjunct.xstart, 1.5)
        self.assertEqual(adjunct.xdelta, 0.125)
        self.assertEqual(adjunct.xunits, 1)
        self.assertIsNone(adjunct.frame_size)

    def test_type1001(self):
        adjunct = parse_adjunct_header(adjunct_1000(), 1001, "<")
        self.assertIsInstance(adjunct, Type1000Adjunct)

    def test_type2000(self):
        raw = adjunct_2000(">", xstart=0.0, xdelta=1.0, xunits=0, subsize=128, ystart=0.0, ydelta=1.0, yunits=0)
        adjunct = parse_adjunct_header(raw, 2000, ">")
        self.assertIsInstance(adjunct, Type2000Adjunct)
        self.assertEqual(adjunct.subsize, 128)
        self.assertEqual(adjunct.frame_size, 128)
        self.assertEqual(adjunct.ydelta, 1.0)

    def test_record_families(self):
        for type_code, record_type in [
            (3000, Type3000Adjunct),
            (4000, Type4000Adjunct),
            (5000, Type5000Adjunct),
            (6000, Type6000Adjunct),
        ]:
            adjunct = parse_adjunct_header(RECORD_BYTES, type_code, "<")
            self.assertIsInstance(adjunct, record_type)
            self.assertEqual(adjunct.family, type_code // 1000)
            self.assertIsNone(adjunct.frame_size)
        adjunct = parse_adjunct_header(RECORD_BYTES, 3000, "<")
        self.assertEqual(adjunct.subrecords, 3)
        self.assertEqual(adjunct.record_length, 64)
        adjunct = parse_adjunct_header(RECORD_BYTES, 4000, "<")
        self.assertEqual(adjunct.nvar, 3)
        self.assertEqual(adjunct.vrecord_length, 64)
        adjunct = parse_adjunct_header(RECORD_BYTES, 5000, "<")
        self.assertEqual(adjunct.components, 3)
        self.assertEqual(adjunct.t2units, 4)

    def test_variants_are_distinct(self):
        """no family record is a superset of another"""
        type2000 = parse_adjunct_header(adjunct_2000(), 2000, "<")
        self.assertNotIsInstance(type2000, Type1000Adjunct)
        self.assertFalse(hasattr(parse_adjunct_header(adjunct_1000(), 1000, "<"), "subsize"))

    def test_read_uses_header_order(self):
        source = io.BytesIO(
            make_blue(
                adjunct=adjunct_2000(">", subsize=16, xdelta=0.5),
                head_rep=b"IEEE",
                data_rep=b"EEEI",
                type_code=2000,
            )
        )
        header = read_fixed_header(source)
        adjunct = read_adjunct_header(source, header)
        self.assertEqual(adjunct.subsize, 16)
        self.assertEqual(adjunct.xdelta, 0.5)


@pytest.mark.parametrize("type_code", [0, 999, 7000, 9000, -2000])
def test_unknown_family(type_code: int) -> None:
    with pytest.raises(UnsupportedTypeCode):
        parse_adjunct_header(b"\x00" * 256, type_code, "<")


@pytest.mark.parametrize("subsize", [0, -4])
def test_invalid_subsize(subsize: int) -> None:
    with pytest.raises(MalformedHeader):
        parse_adjunct_header(adjunct_2000(subsize=subsize), 2000, "<")


def test_short_adjunct() -> None:
    with pytest.raises(MalformedHeader):
        parse_adjunct_header(adjunct_1000()[:19], 1000, "<")
    with pytest.raises(MalformedHeader):
        parse_adjunct_header(adjunct_1000(), 2000, "<")


def test_layout_sizes() -> None:
    assert layout_size(ADJUNCT_LAYOUTS[1][1]) == 20
    assert layout_size(ADJUNCT_LAYOUTS[2][1]) == 44
    for family in (3, 4, 5, 6):
        assert layout_size(ADJUNCT_LAYOUTS[family][1]) == 48

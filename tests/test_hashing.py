# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Header CRC Tests"""

import io
import unittest

from bluefile import hashing
from bluefile.header import read_fixed_header

from .testdata import ext_entry, make_blue


class TestHeaderCRC(unittest.TestCase):
    """CRC helpers against known vectors and synthetic headers"""

    def test_vectors(self):
        self.assertEqual(hashing.crc32_posix(bytes.fromhex("deadbeef")), "1c3cd7e6")
        self.assertEqual(hashing.crc32_broken(bytes.fromhex("deadbeef")), "48281aa6")

    def test_match(self):
        buffer = bytes.fromhex("deadbeef")
        self.assertEqual(hashing.match_crc(buffer, "48281AA6"), "BLUE")
        self.assertEqual(hashing.match_crc(buffer, "1c3cd7e6"), "POSIX")
        self.assertIsNone(hashing.match_crc(buffer, "00000000"))

    def test_crc_region(self):
        """CRC covers the first 160 header bytes and the extended header"""
        extended = ext_entry("COMMENT", "A", b"hello")
        raw = make_blue(data=b"\x00" * 8, extended=extended)
        source = io.BytesIO(raw)
        header = read_fixed_header(source)
        buffer = hashing.read_crc_buffer(source, header)
        self.assertEqual(buffer, raw[:160] + extended)

    def test_crc_region_without_extended(self):
        raw = make_blue(data=b"\x00" * 8)
        source = io.BytesIO(raw)
        header = read_fixed_header(source)
        self.assertEqual(hashing.read_crc_buffer(source, header), raw[:160])

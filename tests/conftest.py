# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Provides pytest fixtures for other tests."""

import struct

import pytest

from .testdata import TEST_SD_DATA, adjunct_1000, adjunct_2000, ext_entry, make_blue


@pytest.fixture
def sine_path(tmp_path):
    """type 1000 SD file with two extended header keywords"""
    path = tmp_path / "sin.tmp"
    extended = ext_entry("COMMENT", "A", b"sine wave") + ext_entry("RF_FREQ", "D", struct.pack("<d", 1e9))
    path.write_bytes(
        make_blue(
            data=TEST_SD_DATA.astype("<f8").tobytes(),
            adjunct=adjunct_1000(xstart=0.0, xdelta=0.5, xunits=1),
            extended=extended,
            timecode=631152000.0,
        )
    )
    return path


@pytest.fixture
def framed_path(tmp_path):
    """type 2000 SI file: 4 frames of 8 elements counting upward"""
    path = tmp_path / "frames.prm"
    path.write_bytes(
        make_blue(
            data=struct.pack("<32h", *range(32)),
            adjunct=adjunct_2000(subsize=8, xstart=10.0, xdelta=2.0, ystart=-1.0, ydelta=0.25),
            type_code=2000,
            fmt=b"SI",
        )
    )
    return path

# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Tests for the bluejay header dump"""

import json

import pytest

from bluefile.apps import bluejay

from .testdata import make_blue


def test_dump(sine_path, capsys) -> None:
    bluejay.main((str(sine_path),))
    result = json.loads(capsys.readouterr().out)
    assert result["type_code"] == 1000
    assert result["header_endianness"] == "little"
    assert result["data_endianness"] == "little"
    assert result["data_type"] == "SD"
    assert result["data_start"] == 512
    assert result["data_size"] == 512
    assert result["ext_header_start"] == 1024
    assert result["xdelta"] == 0.5
    assert result["xunits"] == 1
    assert {"name": "VER", "value": "1.1"} in result["keywords"]
    assert result["ext_header"] == [
        {"name": "COMMENT", "value": "sine wave", "format": "A"},
        {"name": "RF_FREQ", "value": 1e9, "format": "D"},
    ]


def test_dump_framed(framed_path, capsys) -> None:
    bluejay.main((str(framed_path), "--no-ext"))
    result = json.loads(capsys.readouterr().out)
    assert result["type_code"] == 2000
    assert result["subsize"] == 8
    assert result["ystart"] == -1.0
    assert "ext_header" not in result


@pytest.mark.parametrize("contents", [b"", b"NOPE" + b"\x00" * 252, make_blue(type_code=8000)])
def test_bad_file(tmp_path, contents: bytes) -> None:
    path = tmp_path / "bad.tmp"
    path.write_bytes(contents)
    with pytest.raises(SystemExit) as exc:
        bluejay.main((str(path),))
    assert exc.value.code == 1


def test_missing_file(tmp_path) -> None:
    with pytest.raises(SystemExit) as exc:
        bluejay.main((str(tmp_path / "missing.tmp"),))
    assert exc.value.code == 1

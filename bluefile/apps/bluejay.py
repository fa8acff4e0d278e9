# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Dump BLUE headers as JSON"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from .. import __version__ as toolversion
from ..adjunct import read_adjunct_header
from ..endian import order_name
from ..error import BluefileError
from ..extended import read_extended_header
from ..header import read_fixed_header

log = logging.getLogger()


def header_to_dict(blue_path: Path, include_extended: bool = True) -> dict:
    """
    Parse the headers of a BLUE file into a JSON serializable dict.

    Raises
    ------
    BluefileError
        If any header fails to parse.
    OSError
        If the file cannot be opened.
    """
    with open(blue_path, "rb") as handle:
        header = read_fixed_header(handle)
        adjunct = read_adjunct_header(handle, header)
        extended = read_extended_header(handle, header) if include_extended else None

    result = {
        "type_code": header.type_code,
        "header_endianness": order_name(header.header_order),
        "data_endianness": order_name(header.data_order),
        "ext_header_start": header.ext_offset,
        "ext_header_size": header.ext_size,
        "data_start": header.data_start,
        "data_size": header.data_size,
        "data_type": header.format,
        "timecode": header.timecode,
    }
    result.update(adjunct.model_dump())
    result["keywords"] = [{"name": name, "value": value} for name, value in header.keywords]
    if extended is not None:
        result["ext_header"] = [
            {"name": entry.tag, "value": entry.value, "format": entry.format} for entry in extended
        ]
    return result


def main(arg_tuple: Optional[Tuple[str, ...]] = None) -> None:
    """entry-point for bluejay"""
    parser = argparse.ArgumentParser(description="Print BLUE file headers as JSON.", prog="bluejay")
    parser.add_argument("path", type=str, help="BLUE file path")
    parser.add_argument("--no-ext", action="store_true", help="Skip reading the extended header.")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    parser.add_argument("--version", action="version", version=f"%(prog)s {toolversion}")

    # allow pass-in arg_tuple for testing purposes
    args = parser.parse_args(arg_tuple)

    level_lut = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    logging.basicConfig(level=level_lut[min(args.verbose, 2)])

    blue_path = Path(args.path.strip())
    log.debug(f"read {blue_path}")
    try:
        result = header_to_dict(blue_path, include_extended=not args.no_ext)
    except (BluefileError, OSError) as err:
        log.error(f"file `{blue_path}`: {err}")
        sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()

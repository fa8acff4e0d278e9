# Copyright: Multiple Authors
#
# This file is part of bluefile-python.
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Defines Bluefile exception classes."""


class BluefileError(Exception):
    """Bluefile base exception."""


class MalformedHeader(BluefileError):
    """Structural violations in a header: short reads, invalid representation
    tags, or extended header entries overrunning their region."""


class UnsupportedVersion(BluefileError):
    """Exceptions related to the header version tag."""


class UnsupportedTypeCode(BluefileError):
    """The type code family has no known adjunct header layout."""


class UnsupportedDataType(BluefileError):
    """The data type code uses an unknown arity or format character."""


class IoFailure(BluefileError):
    """The byte source could not satisfy a requested read."""

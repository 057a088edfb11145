# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 cfmissing developers

"""
Tolerances, attribute names and netCDF default fill values.

Centralizes the constants shared by the comparison helpers, the attribute
extraction step and the missing-data policy.
"""

import sys
from typing import Dict, Tuple

import numpy as np

DEFAULT_MAX_RELATIVE_DIFF = 1.0e-5
"""
Relative-difference tolerance used everywhere a value is compared.

The same epsilon widens the valid-range bounds and decides whether a sample
matches the fill value or a missing value. It is deliberately not
configurable per call or per field.
"""

MIN_NORMAL = sys.float_info.min
"""Smallest positive normal float64 (2.2250738585072014e-308)."""

DBL_MAX = sys.float_info.max
"""Largest finite float64, the unset value of ``valid_max``."""


class CFAttributes:
    """
    Names of the CF/NUG attributes that drive missing-data resolution.
    """

    VALID_RANGE = 'valid_range'
    VALID_MIN = 'valid_min'
    VALID_MAX = 'valid_max'
    FILL_VALUE = '_FillValue'
    MISSING_VALUE = 'missing_value'
    SCALE_FACTOR = 'scale_factor'
    ADD_OFFSET = 'add_offset'
    UNSIGNED = '_Unsigned'


class NetCDFFill:
    """
    netCDF default fill values (netcdf.h ``NC_FILL_*``).

    Used as the fill value of a variable that declares no ``_FillValue``.
    """

    BYTE = -127
    CHAR = 0
    SHORT = -32767
    INT = -2147483647
    INT64 = -9223372036854775806
    FLOAT = 9.9692099683868690e+36
    DOUBLE = 9.9692099683868690e+36
    UBYTE = 255
    USHORT = 65535
    UINT = 4294967295
    UINT64 = 18446744073709551614


# (numpy kind, itemsize) -> default fill
DEFAULT_FILL_VALUES: Dict[Tuple[str, int], float] = {
    ('i', 1): NetCDFFill.BYTE,
    ('i', 2): NetCDFFill.SHORT,
    ('i', 4): NetCDFFill.INT,
    ('i', 8): NetCDFFill.INT64,
    ('u', 1): NetCDFFill.UBYTE,
    ('u', 2): NetCDFFill.USHORT,
    ('u', 4): NetCDFFill.UINT,
    ('u', 8): NetCDFFill.UINT64,
    ('f', 4): NetCDFFill.FLOAT,
    ('f', 8): NetCDFFill.DOUBLE,
}


def default_fill_value(dtype, unsigned: bool = False) -> float:
    """
    Return the netCDF default fill value for a numpy dtype.

    Args:
        dtype: Raw (packed) data type of the variable
        unsigned: Treat a signed integer dtype as unsigned (``_Unsigned = "true"``)

    Returns:
        The default fill as a float; ``CHAR`` fill for string/char types and
        NaN for types netCDF has no default for.
    """
    dtype = np.dtype(dtype)
    if dtype.kind in ('S', 'U'):
        return float(NetCDFFill.CHAR)
    kind = dtype.kind
    if unsigned and kind == 'i':
        kind = 'u'
    fill = DEFAULT_FILL_VALUES.get((kind, dtype.itemsize))
    return float('nan') if fill is None else float(fill)


__all__ = [
    'DEFAULT_MAX_RELATIVE_DIFF',
    'MIN_NORMAL',
    'DBL_MAX',
    'CFAttributes',
    'NetCDFFill',
    'DEFAULT_FILL_VALUES',
    'default_fill_value',
]

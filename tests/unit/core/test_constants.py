"""Tests for tolerances and netCDF default fill values."""

import math

import numpy as np
import pytest

from cfmissing.core.constants import (
    DEFAULT_MAX_RELATIVE_DIFF,
    CFAttributes,
    NetCDFFill,
    default_fill_value,
)


def test_tolerance():
    assert DEFAULT_MAX_RELATIVE_DIFF == 1.0e-5


def test_attribute_names():
    assert CFAttributes.FILL_VALUE == "_FillValue"
    assert CFAttributes.MISSING_VALUE == "missing_value"
    assert CFAttributes.VALID_RANGE == "valid_range"


@pytest.mark.parametrize(
    "dtype, expected",
    [
        (np.int8, NetCDFFill.BYTE),
        (np.int16, NetCDFFill.SHORT),
        (np.int32, NetCDFFill.INT),
        (np.uint16, NetCDFFill.USHORT),
        (np.float64, NetCDFFill.DOUBLE),
        ("S1", NetCDFFill.CHAR),
    ],
)
def test_default_fill_value(dtype, expected):
    assert default_fill_value(dtype) == float(expected)


def test_default_fill_unsigned_flag():
    assert default_fill_value(np.int16, unsigned=True) == float(NetCDFFill.USHORT)


def test_default_fill_unknown_type():
    assert math.isnan(default_fill_value(np.bool_))

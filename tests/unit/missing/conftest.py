"""Shared fixtures for missing-data policy tests."""

import numpy as np
import pytest
import xarray as xr

from cfmissing.missing.policy import MissingDataPolicy


@pytest.fixture
def fill_policy():
    """Only the fill value (-999) counts as missing."""
    return MissingDataPolicy(
        fill_value_is_missing=True,
        invalid_data_is_missing=False,
        missing_data_is_missing=False,
        has_fill_value=True,
        fill_value=-999.0,
    )


@pytest.fixture
def range_policy():
    """Only data outside [0, 100] counts as missing."""
    return MissingDataPolicy(
        fill_value_is_missing=False,
        invalid_data_is_missing=True,
        missing_data_is_missing=False,
        has_valid_min=True,
        has_valid_max=True,
        valid_min=0.0,
        valid_max=100.0,
    )


@pytest.fixture
def full_policy():
    """Valid range [0, 100], fill -999 and missing value 55, all enabled."""
    return MissingDataPolicy(
        fill_value_is_missing=True,
        invalid_data_is_missing=True,
        missing_data_is_missing=True,
        has_valid_min=True,
        has_valid_max=True,
        valid_min=0.0,
        valid_max=100.0,
        has_fill_value=True,
        fill_value=-999.0,
        raw_missing_values=[55.0, -999.0, np.nan, 250.0],
    )


@pytest.fixture
def sample_dataarray():
    """Temperature-like DataArray with a fill value in its attributes."""
    return xr.DataArray(
        np.array([[1.0, -999.0, 3.0], [4.0, 5.0, -999.0]]),
        dims=("time", "station"),
        coords={"time": [0, 1], "station": ["a", "b", "c"]},
        name="airtemp",
        attrs={"_FillValue": -999.0, "units": "K"},
    )

"""
Unit test fixtures and configuration.

Fixtures specific to unit tests (fast, isolated tests).
"""

import pytest

from cfmissing.core.config import MissingDataConfig


@pytest.fixture
def all_flags_config():
    """Every missing-data mode enabled (the default)."""
    return MissingDataConfig()


@pytest.fixture
def no_flags_config():
    """Every missing-data mode disabled."""
    return MissingDataConfig(
        fill_value_is_missing=False,
        invalid_data_is_missing=False,
        missing_data_is_missing=False,
    )

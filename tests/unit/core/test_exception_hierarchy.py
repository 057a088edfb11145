"""Tests for the cfmissing exception hierarchy and validation helpers."""

import pytest

from cfmissing.core.exceptions import (
    AttributeParseError,
    CFMissingError,
    ConfigurationError,
    InvalidArgumentError,
    ValidationError,
    require,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_type",
        [ConfigurationError, ValidationError, InvalidArgumentError, AttributeParseError],
    )
    def test_all_derive_from_base(self, error_type):
        assert issubclass(error_type, CFMissingError)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            raise InvalidArgumentError("bad shape")


class TestRequire:
    def test_passes(self):
        require(True, "never raised")

    def test_default_error(self):
        with pytest.raises(ValidationError, match="must hold"):
            require(False, "must hold")

    def test_custom_error(self):
        with pytest.raises(InvalidArgumentError):
            require(False, "bad", InvalidArgumentError)

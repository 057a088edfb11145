"""Configuration, constants, exceptions and comparison helpers."""

from .config import MissingDataConfig
from .constants import DEFAULT_MAX_RELATIVE_DIFF, CFAttributes, NetCDFFill, default_fill_value
from .exceptions import (
    AttributeParseError,
    CFMissingError,
    ConfigurationError,
    InvalidArgumentError,
    ValidationError,
    require,
)
from .numeric import nearly_equals, nearly_equals_array, relative_difference

__all__ = [
    'MissingDataConfig',
    'DEFAULT_MAX_RELATIVE_DIFF',
    'CFAttributes',
    'NetCDFFill',
    'default_fill_value',
    'CFMissingError',
    'ConfigurationError',
    'ValidationError',
    'InvalidArgumentError',
    'AttributeParseError',
    'require',
    'nearly_equals',
    'nearly_equals_array',
    'relative_difference',
]

# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 cfmissing developers

"""
Custom exception hierarchy for cfmissing.

Unparsable missing-value text is not an error: it is dropped and logged as a
warning by the attribute extraction step. The exceptions below cover
configuration problems and caller contract violations only.
"""


class CFMissingError(Exception):
    """
    Base exception for all cfmissing-specific errors.

    Catch this to handle any error raised by the package with a single
    except clause.
    """
    pass


class ConfigurationError(CFMissingError):
    """
    Configuration-related errors.

    Raised when:
    - A configuration file cannot be found or parsed
    - A configuration value fails validation
    """
    pass


class ValidationError(CFMissingError):
    """
    Data or argument validation failures.

    Raised when:
    - An argument violates the calling contract
    - Input data has an unusable structure
    """
    pass


class InvalidArgumentError(ValidationError, ValueError):
    """
    Caller contract violations at the public boundary.

    Raised when:
    - An ``out`` buffer does not match the input shape
    - An ``out`` buffer cannot hold not-a-number values
    """
    pass


class AttributeParseError(CFMissingError):
    """
    Variable attributes that cannot be interpreted at all.

    Raised when:
    - The attribute container is not a mapping
    - The variable dtype cannot be determined
    """
    pass


def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: ValidationError)

    Raises:
        ValidationError (or specified error_type) if condition is False

    Example:
        >>> require(out.shape == values.shape, "shape mismatch", InvalidArgumentError)
    """
    if error_type is None:
        error_type = ValidationError
    if not condition:
        raise error_type(message)


__all__ = [
    'CFMissingError',
    'ConfigurationError',
    'ValidationError',
    'InvalidArgumentError',
    'AttributeParseError',
    'require',
]

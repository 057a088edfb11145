# src/cfmissing/__init__.py
try:
    from .cfmissing_version import __version__
except ImportError:
    try:
        from importlib.metadata import version, PackageNotFoundError
        __version__ = version("cfmissing")
    except (ImportError, PackageNotFoundError):
        __version__ = "0.0.0"

from .core.config import MissingDataConfig
from .core.exceptions import (
    AttributeParseError,
    CFMissingError,
    ConfigurationError,
    InvalidArgumentError,
    ValidationError,
)
from .missing import (
    MissingAttributes,
    MissingDataPolicy,
    ScaleOffset,
    extract_missing_attributes,
    mask_dataset,
    mask_missing,
    policy_for,
    policy_from_attributes,
)

__all__ = [
    "__version__",
    "MissingDataConfig",
    "MissingDataPolicy",
    "MissingAttributes",
    "ScaleOffset",
    "extract_missing_attributes",
    "policy_from_attributes",
    "policy_for",
    "mask_missing",
    "mask_dataset",
    "CFMissingError",
    "ConfigurationError",
    "ValidationError",
    "InvalidArgumentError",
    "AttributeParseError",
]

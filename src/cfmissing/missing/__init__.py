"""
Missing-data resolution for CF/netCDF-style variables.

Turns valid-range, fill-value and missing-value metadata into an immutable
policy that classifies samples and replaces missing ones with NaN.
"""

from .attributes import (
    MissingAttributes,
    ScaleOffset,
    extract_missing_attributes,
    policy_from_attributes,
)
from .policy import MissingDataPolicy
from .xarray_ops import is_packed, mask_dataset, mask_missing, policy_for, unpack

__all__ = [
    "MissingDataPolicy",
    "MissingAttributes",
    "ScaleOffset",
    "extract_missing_attributes",
    "policy_from_attributes",
    "policy_for",
    "mask_missing",
    "mask_dataset",
    "is_packed",
    "unpack",
]

# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 cfmissing developers

"""
Missing-data policy.

``MissingDataPolicy`` classifies numeric samples as valid or missing from a
variable's valid range, fill value and missing-value list, gated by the three
mode flags, and replaces missing samples with NaN. A policy is immutable once
constructed and can be shared between any number of readers; to change the
mode flags build a new policy with :meth:`MissingDataPolicy.with_flags`.
"""

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

from cfmissing.core.constants import DBL_MAX, DEFAULT_MAX_RELATIVE_DIFF
from cfmissing.core.exceptions import InvalidArgumentError, require
from cfmissing.core.numeric import nearly_equals, nearly_equals_array

# Signed/unsigned integers and floats. Booleans, complex, strings, objects
# and datetimes are left alone by bulk conversion.
_NUMERIC_KINDS = frozenset('iuf')


def is_numeric_dtype(dtype) -> bool:
    """True if bulk conversion applies to arrays of ``dtype``."""
    return np.dtype(dtype).kind in _NUMERIC_KINDS


def converted_dtype(dtype) -> np.dtype:
    """Output dtype of bulk conversion: floats keep their type, integers become float64."""
    dtype = np.dtype(dtype)
    return dtype if dtype.kind == 'f' else np.dtype(np.float64)


@dataclass(frozen=True)
class MissingDataPolicy:
    """Immutable valid/fill/missing-value classifier for one variable.

    Args:
        fill_value_is_missing: Samples matching the fill value are missing
        invalid_data_is_missing: Samples outside the valid range are missing
        missing_data_is_missing: Samples matching a missing value are missing
        has_valid_min: Whether ``valid_min`` was set
        has_valid_max: Whether ``valid_max`` was set
        valid_min: Lower valid bound, already unpacked and ordered by the caller
        valid_max: Upper valid bound, already unpacked and ordered by the caller
        has_fill_value: Whether the variable declares a fill value
        fill_value: The fill value
        raw_missing_values: Candidate missing values before filtering, or None

    The constructor derives ``fuzzy_valid_min`` / ``fuzzy_valid_max`` and the
    filtered ``missing_values`` tuple; nothing changes afterwards.
    """

    fill_value_is_missing: bool
    invalid_data_is_missing: bool
    missing_data_is_missing: bool
    has_valid_min: bool = False
    has_valid_max: bool = False
    valid_min: float = -DBL_MAX
    valid_max: float = DBL_MAX
    has_fill_value: bool = False
    fill_value: float = float('nan')
    raw_missing_values: Optional[Sequence[float]] = field(default=None, repr=False)

    fuzzy_valid_min: float = field(init=False)
    fuzzy_valid_max: float = field(init=False)
    missing_values: Tuple[float, ...] = field(init=False)
    has_missing_value: bool = field(init=False)

    def __post_init__(self) -> None:
        # frozen dataclass: derived fields go through object.__setattr__
        set_ = object.__setattr__
        set_(self, 'valid_min', float(self.valid_min))
        set_(self, 'valid_max', float(self.valid_max))
        set_(self, 'fill_value', float(self.fill_value))
        set_(self, 'fuzzy_valid_min', self.valid_min - DEFAULT_MAX_RELATIVE_DIFF)
        set_(self, 'fuzzy_valid_max', self.valid_max + DEFAULT_MAX_RELATIVE_DIFF)

        raw = None
        if self.raw_missing_values is not None:
            raw = tuple(float(v) for v in np.ravel(self.raw_missing_values))
        set_(self, 'raw_missing_values', raw)

        if self.missing_data_is_missing and raw is not None:
            missing = tuple(v for v in raw if self._keep_missing_candidate(v))
        else:
            missing = raw or ()
        set_(self, 'missing_values', missing)
        set_(self, 'has_missing_value', len(missing) > 0)

    def _keep_missing_candidate(self, value: float) -> bool:
        if math.isnan(value):
            return False
        if self.fill_value_is_missing and self.has_fill_value and nearly_equals(value, self.fill_value):
            return False
        if self.invalid_data_is_missing and self.has_valid_min and value < self.fuzzy_valid_min:
            return False
        if self.invalid_data_is_missing and self.has_valid_max and value > self.fuzzy_valid_max:
            return False
        return True

    def with_flags(
        self,
        *,
        fill_value_is_missing: Optional[bool] = None,
        invalid_data_is_missing: Optional[bool] = None,
        missing_data_is_missing: Optional[bool] = None,
    ) -> 'MissingDataPolicy':
        """Return a new policy built from the same inputs with some flags changed.

        The missing-value list is re-filtered from the raw candidates, so
        turning a flag off can bring back values an earlier filter dropped.
        """
        changes = {
            name: value for name, value in (
                ('fill_value_is_missing', fill_value_is_missing),
                ('invalid_data_is_missing', invalid_data_is_missing),
                ('missing_data_is_missing', missing_data_is_missing),
            ) if value is not None
        }
        return dataclasses.replace(self, **changes)

    # ------------------------------------------------------------------
    # Scalar classification
    # ------------------------------------------------------------------

    def has_valid_data(self) -> bool:
        return self.has_valid_min or self.has_valid_max

    def is_invalid_data(self, value: float) -> bool:
        """True for NaN or a value outside the fuzzy valid bounds.

        Not gated by :meth:`has_valid_data`: with no bounds set only NaN is
        invalid, and callers must check :meth:`has_valid_data` themselves.
        """
        value = float(value)
        return math.isnan(value) or value > self.fuzzy_valid_max or value < self.fuzzy_valid_min

    def is_fill_value(self, value: float) -> bool:
        return self.has_fill_value and nearly_equals(value, self.fill_value)

    def is_missing_value(self, value: float) -> bool:
        return any(nearly_equals(value, mv) for mv in self.missing_values)

    def has_missing(self) -> bool:
        """True if any sample of this variable could be classified missing.

        When False, :meth:`convert` and :meth:`convert_missing` never change
        anything.
        """
        return ((self.invalid_data_is_missing and self.has_valid_data())
                or (self.fill_value_is_missing and self.has_fill_value)
                or (self.missing_data_is_missing and self.has_missing_value))

    def is_missing(self, value: float) -> bool:
        """True if ``value`` is NaN or matches an enabled missing-data rule."""
        value = float(value)
        if math.isnan(value):
            return True
        return ((self.missing_data_is_missing and self.has_missing_value and self.is_missing_value(value))
                or (self.fill_value_is_missing and self.has_fill_value and self.is_fill_value(value))
                or (self.invalid_data_is_missing and self.has_valid_data() and self.is_invalid_data(value)))

    def convert(self, value: float) -> float:
        """NaN if ``value`` is missing, otherwise ``value`` itself."""
        return float('nan') if self.is_missing(value) else value

    # ------------------------------------------------------------------
    # Bulk classification
    # ------------------------------------------------------------------

    def missing_mask(self, values) -> np.ndarray:
        """Elementwise :meth:`is_missing` as a boolean array.

        Non-numeric arrays give an all-False mask of the same shape.
        """
        arr = np.asarray(values)
        if not is_numeric_dtype(arr.dtype):
            return np.zeros(arr.shape, dtype=bool)

        data = arr.astype(np.float64, copy=False)
        mask = np.isnan(data)

        if self.missing_data_is_missing and self.has_missing_value:
            for mv in self.missing_values:
                mask |= nearly_equals_array(data, mv)
        if self.fill_value_is_missing and self.has_fill_value:
            mask |= nearly_equals_array(data, self.fill_value)
        if self.invalid_data_is_missing and self.has_valid_data():
            with np.errstate(invalid='ignore'):
                mask |= (data > self.fuzzy_valid_max) | (data < self.fuzzy_valid_min)

        return mask

    def convert_missing(self, values, out: Optional[np.ndarray] = None):
        """Replace every missing sample of an array with NaN.

        Contract: if the array is not numeric, or :meth:`has_missing` is
        False, ``values`` itself is returned (same object, no copy, ``out``
        untouched). Callers in large-array pipelines may rely on this
        identity to skip copies.

        Otherwise a new array of the same shape is returned (or ``out`` is
        filled and returned). Floating dtypes are preserved. Integer input
        is the one exception to same-type output: it is promoted to float64,
        because NaN has no integer representation and writing it back through
        an integer cast would silently turn missing samples into 0.

        Args:
            values: Array of any shape
            out: Optional destination with the same shape and a float dtype

        Returns:
            ``values`` unchanged, or the converted array

        Raises:
            InvalidArgumentError: If ``out`` has the wrong shape or a
                non-float dtype
        """
        arr = np.asarray(values)
        if not is_numeric_dtype(arr.dtype) or not self.has_missing():
            return values

        mask = self.missing_mask(arr)

        if out is None:
            out = np.array(arr, dtype=converted_dtype(arr.dtype), copy=True)
        else:
            require(isinstance(out, np.ndarray), "out must be a numpy array", InvalidArgumentError)
            require(out.shape == arr.shape,
                    f"out has shape {out.shape}, expected {arr.shape}", InvalidArgumentError)
            require(out.dtype.kind == 'f',
                    f"out must have a floating dtype to hold NaN, got {out.dtype}", InvalidArgumentError)
            out[...] = arr

        out[mask] = np.nan
        return out


__all__ = [
    'MissingDataPolicy',
    'is_numeric_dtype',
    'converted_dtype',
]

# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 cfmissing developers

"""
Tolerant floating-point comparison.

Scalar and vectorized forms of the relative-difference test used for fill
value and missing value matching. Both forms must agree element for element.
"""

import math

import numpy as np

from .constants import DEFAULT_MAX_RELATIVE_DIFF, MIN_NORMAL


def _same(a: float, b: float) -> bool:
    return a == b or (math.isnan(a) and math.isnan(b))


def relative_difference(a: float, b: float) -> float:
    """Relative difference of two floats.

    Identical values (including two NaNs) give 0. When either value is zero,
    or the absolute difference is subnormal, the difference is scaled by the
    smallest normal float instead of the operands' magnitude.
    """
    a = float(a)
    b = float(b)
    if _same(a, b):
        return 0.0
    abs_diff = abs(a - b)
    if a == 0 or b == 0 or abs_diff < MIN_NORMAL:
        return abs_diff / MIN_NORMAL
    return abs_diff / max(abs(a), abs(b))


def nearly_equals(a: float, b: float, max_rel_diff: float = DEFAULT_MAX_RELATIVE_DIFF) -> bool:
    """True if ``a`` and ``b`` differ by less than ``max_rel_diff`` relatively."""
    return relative_difference(a, b) < max_rel_diff


def nearly_equals_array(
    values,
    target: float,
    max_rel_diff: float = DEFAULT_MAX_RELATIVE_DIFF,
) -> np.ndarray:
    """Elementwise :func:`nearly_equals` of an array against one scalar.

    Args:
        values: Array-like of numbers, compared in float64
        target: Scalar to compare against
        max_rel_diff: Relative tolerance

    Returns:
        Boolean array with the shape of ``values``
    """
    values = np.asarray(values, dtype=np.float64)
    target = float(target)

    with np.errstate(invalid='ignore', over='ignore', divide='ignore'):
        abs_diff = np.abs(values - target)
        same = values == target
        if math.isnan(target):
            same = same | np.isnan(values)
        tiny = (values == 0) | (target == 0) | (abs_diff < MIN_NORMAL)
        scale = np.where(tiny, MIN_NORMAL, np.maximum(np.abs(values), abs(target)))
        rel = abs_diff / scale

    return same | (rel < max_rel_diff)


__all__ = [
    'relative_difference',
    'nearly_equals',
    'nearly_equals_array',
]

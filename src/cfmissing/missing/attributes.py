# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 cfmissing developers

"""
Extraction of missing-data attributes from variable metadata.

Reads ``valid_range`` / ``valid_min`` / ``valid_max``, ``_FillValue`` and
``missing_value`` from an in-memory attribute mapping and normalizes them
into unpacked float64 values ready for :class:`MissingDataPolicy`:

1. Integer attributes of unsigned variables are reinterpreted as unsigned
2. Valid bounds stored packed are unpacked with the scale/offset service
3. Bounds swapped by a negative scale factor are put back in order
4. Numeric text in a string ``missing_value`` is parsed; garbage is dropped
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np

from cfmissing.core.config import MissingDataConfig
from cfmissing.core.constants import DBL_MAX, CFAttributes, default_fill_value
from cfmissing.core.exceptions import AttributeParseError, require

from .policy import MissingDataPolicy

logger = logging.getLogger(__name__)

# Integer width -> rank; floats rank above every integer
_INT_RANK = {1: 0, 2: 1, 4: 2, 8: 3}


def dtype_rank(dtype: Optional[np.dtype]) -> int:
    """Order numeric types by width: byte < short < int < long < float < double."""
    if dtype is None:
        return -1
    dtype = np.dtype(dtype)
    if dtype.kind == 'f':
        return 4 if dtype.itemsize <= 4 else 5
    if dtype.kind in 'iu':
        return _INT_RANK.get(dtype.itemsize, -1)
    return -1


def _largest_of(a: Optional[np.dtype], b: Optional[np.dtype]) -> Optional[np.dtype]:
    if a is None:
        return b
    if b is None:
        return a
    return a if dtype_rank(a) >= dtype_rank(b) else b


def is_char_dtype(dtype) -> bool:
    return np.dtype(dtype).kind in ('S', 'U')


def is_unsigned(attrs: Mapping, dtype) -> bool:
    """True for unsigned integer data, native or flagged with ``_Unsigned = "true"``."""
    dtype = np.dtype(dtype)
    if dtype.kind == 'u':
        return True
    if dtype.kind != 'i':
        return False
    flag = attrs.get(CFAttributes.UNSIGNED)
    if isinstance(flag, bytes):
        flag = flag.decode('ascii', errors='replace')
    return str(flag).strip().lower() == 'true'


def _is_string(value: Any) -> bool:
    if isinstance(value, (str, bytes)):
        return True
    return isinstance(value, (np.ndarray, np.generic)) and value.dtype.kind in ('S', 'U')


def _numeric_array(value: Any, var_dtype: np.dtype) -> np.ndarray:
    """Attribute value as a 1-D numeric array.

    Numpy values keep their own dtype. Plain Python integers take the
    variable's integer dtype when they fit, matching how they would have been
    stored next to the data. Negative integers on an unsigned variable take
    the signed type of the same width. Anything that fits neither stays int64.
    """
    if isinstance(value, (np.ndarray, np.generic)):
        return np.atleast_1d(value)
    arr = np.atleast_1d(np.asarray(value))
    if arr.size and arr.dtype.kind == 'i' and var_dtype.kind in 'iu':
        for candidate in (var_dtype, np.dtype(f'i{var_dtype.itemsize}')):
            info = np.iinfo(candidate)
            if arr.min() >= info.min and arr.max() <= info.max:
                return arr.astype(candidate)
    return arr


def to_unsigned(arr: np.ndarray, unsigned: bool) -> np.ndarray:
    """Reinterpret signed integers as unsigned of the same width when ``unsigned``."""
    if unsigned and arr.dtype.kind == 'i':
        # two's complement reinterpretation at the attribute's own width
        return arr.astype(np.dtype(f'u{arr.dtype.itemsize}'))
    return arr


@dataclass(frozen=True)
class ScaleOffset:
    """Unpacking service built from ``scale_factor`` / ``add_offset``.

    ``dtype`` is the wider of the two attribute types, or None when the
    variable is not packed (``apply`` is then the identity).
    """

    scale: float = 1.0
    offset: float = 0.0
    dtype: Optional[np.dtype] = None

    @classmethod
    def from_attributes(cls, attrs: Mapping) -> 'ScaleOffset':
        scale_att = attrs.get(CFAttributes.SCALE_FACTOR)
        offset_att = attrs.get(CFAttributes.ADD_OFFSET)

        scale, offset, dtype = 1.0, 0.0, None
        if scale_att is not None and not _is_string(scale_att):
            arr = np.atleast_1d(np.asarray(scale_att))
            scale = float(arr[0])
            dtype = arr.dtype
        if offset_att is not None and not _is_string(offset_att):
            arr = np.atleast_1d(np.asarray(offset_att))
            offset = float(arr[0])
            dtype = _largest_of(dtype, arr.dtype)
        return cls(scale=scale, offset=offset, dtype=dtype)

    @property
    def is_packed(self) -> bool:
        return self.dtype is not None

    def apply(self, value: float) -> float:
        if not self.is_packed:
            return float(value)
        return float(value) * self.scale + self.offset

    def apply_array(self, values) -> np.ndarray:
        """Unpack a whole array into float64."""
        data = np.asarray(values, dtype=np.float64)
        if not self.is_packed:
            return data
        return data * self.scale + self.offset


@dataclass(frozen=True)
class MissingAttributes:
    """Unpacked missing-data attributes of one variable."""

    has_valid_min: bool = False
    has_valid_max: bool = False
    valid_min: float = -DBL_MAX
    valid_max: float = DBL_MAX
    has_fill_value: bool = False
    fill_value: float = float('nan')
    missing_values: Optional[Tuple[float, ...]] = None

    def to_policy(self, config: Optional[MissingDataConfig] = None) -> MissingDataPolicy:
        if config is None:
            config = MissingDataConfig()
        return MissingDataPolicy(
            fill_value_is_missing=config.fill_value_is_missing,
            invalid_data_is_missing=config.invalid_data_is_missing,
            missing_data_is_missing=config.missing_data_is_missing,
            has_valid_min=self.has_valid_min,
            has_valid_max=self.has_valid_max,
            valid_min=self.valid_min,
            valid_max=self.valid_max,
            has_fill_value=self.has_fill_value,
            fill_value=self.fill_value,
            raw_missing_values=self.missing_values,
        )


def _extract_valid_range(
    attrs: Mapping,
    var_dtype: np.dtype,
    unsigned: bool,
    scale_offset: ScaleOffset,
) -> Tuple[bool, bool, float, float]:
    valid_min, valid_max = -DBL_MAX, DBL_MAX
    has_min = has_max = False
    valid_type: Optional[np.dtype] = None

    range_att = attrs.get(CFAttributes.VALID_RANGE)
    if range_att is not None and not _is_string(range_att):
        arr = to_unsigned(_numeric_array(range_att, var_dtype), unsigned)
        if arr.size > 1:
            valid_type = arr.dtype
            valid_min, valid_max = float(arr[0]), float(arr[1])
            has_min = has_max = True

    # valid_min / valid_max only count when valid_range is absent
    if not has_min:
        min_att = attrs.get(CFAttributes.VALID_MIN)
        if min_att is not None and not _is_string(min_att):
            arr = to_unsigned(_numeric_array(min_att, var_dtype), unsigned)
            valid_type = arr.dtype
            valid_min = float(arr[0])
            has_min = True

        max_att = attrs.get(CFAttributes.VALID_MAX)
        if max_att is not None and not _is_string(max_att):
            arr = to_unsigned(_numeric_array(max_att, var_dtype), unsigned)
            valid_type = _largest_of(valid_type, arr.dtype)
            valid_max = float(arr[0])
            has_max = True

    if not (has_min or has_max):
        return has_min, has_max, valid_min, valid_max

    scaled_type = scale_offset.dtype if scale_offset.is_packed else var_dtype
    stored_unpacked = (dtype_rank(valid_type) == dtype_rank(scaled_type)
                       and dtype_rank(valid_type) > dtype_rank(var_dtype))
    if not stored_unpacked:
        if has_min:
            valid_min = scale_offset.apply(valid_min)
        if has_max:
            valid_max = scale_offset.apply(valid_max)

    # a negative scale factor flips the bounds
    if valid_min > valid_max:
        valid_min, valid_max = valid_max, valid_min

    return has_min, has_max, valid_min, valid_max


def _extract_fill_value(
    attrs: Mapping,
    var_dtype: np.dtype,
    unsigned: bool,
    scale_offset: ScaleOffset,
    name: str,
) -> Tuple[bool, float]:
    fill_att = attrs.get(CFAttributes.FILL_VALUE)
    if fill_att is None:
        return False, default_fill_value(var_dtype, unsigned)

    if _is_string(fill_att):
        text = _as_text(fill_att)
        if is_char_dtype(var_dtype):
            return True, float(ord(text[0])) if text else 0.0
        try:
            return True, float(text)
        except ValueError:
            logger.warning("Ignoring non-numeric %s %r on %s", CFAttributes.FILL_VALUE, text, name)
            return False, default_fill_value(var_dtype, unsigned)

    arr = to_unsigned(_numeric_array(fill_att, var_dtype), unsigned)
    return True, scale_offset.apply(float(arr[0]))


def _extract_missing_values(
    attrs: Mapping,
    var_dtype: np.dtype,
    unsigned: bool,
    scale_offset: ScaleOffset,
    name: str,
) -> Optional[Tuple[float, ...]]:
    missing_att = attrs.get(CFAttributes.MISSING_VALUE)
    if missing_att is None:
        return None

    if _is_string(missing_att):
        text = _as_text(missing_att)
        if is_char_dtype(var_dtype):
            return (float(ord(text[0])) if text else 0.0,)
        # numeric value stored as a string attribute
        try:
            return (float(text),)
        except ValueError:
            logger.warning(
                "Dropping unparsable %s %r on %s", CFAttributes.MISSING_VALUE, text, name
            )
            return ()

    arr = to_unsigned(_numeric_array(missing_att, var_dtype), unsigned)
    values: List[float] = [scale_offset.apply(float(v)) for v in arr]
    return tuple(values)


def _as_text(value: Any) -> str:
    if isinstance(value, (np.ndarray, np.generic)):
        value = value.item() if value.size == 1 else value.ravel()[0]
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return str(value)


def extract_missing_attributes(
    attrs: Mapping,
    dtype,
    *,
    scale_offset: Optional[ScaleOffset] = None,
    name: Optional[str] = None,
) -> MissingAttributes:
    """Read and normalize the missing-data attributes of one variable.

    Args:
        attrs: Variable attributes (``valid_range``, ``_FillValue``, ...)
        dtype: Raw (packed) data type of the variable
        scale_offset: Unpacking service; built from ``scale_factor`` /
            ``add_offset`` in ``attrs`` when omitted
        name: Variable name used in log messages

    Returns:
        MissingAttributes with unpacked, ordered values

    Raises:
        AttributeParseError: If ``attrs`` is not a mapping or ``dtype`` is
            not a valid numpy dtype
    """
    require(isinstance(attrs, Mapping),
            f"Variable attributes must be a mapping, got {type(attrs).__name__}",
            AttributeParseError)
    try:
        var_dtype = np.dtype(dtype)
    except TypeError as exc:
        raise AttributeParseError(f"Cannot interpret variable dtype {dtype!r}") from exc

    name = name or '<unnamed>'
    if scale_offset is None:
        scale_offset = ScaleOffset.from_attributes(attrs)
    unsigned = is_unsigned(attrs, var_dtype)

    has_min, has_max, valid_min, valid_max = _extract_valid_range(
        attrs, var_dtype, unsigned, scale_offset
    )
    has_fill, fill_value = _extract_fill_value(attrs, var_dtype, unsigned, scale_offset, name)
    missing_values = _extract_missing_values(attrs, var_dtype, unsigned, scale_offset, name)

    return MissingAttributes(
        has_valid_min=has_min,
        has_valid_max=has_max,
        valid_min=valid_min,
        valid_max=valid_max,
        has_fill_value=has_fill,
        fill_value=fill_value,
        missing_values=missing_values,
    )


def policy_from_attributes(
    attrs: Mapping,
    dtype,
    config: Optional[MissingDataConfig] = None,
    *,
    scale_offset: Optional[ScaleOffset] = None,
    name: Optional[str] = None,
) -> MissingDataPolicy:
    """Build the missing-data policy of a variable from its attributes and mode flags."""
    extracted = extract_missing_attributes(attrs, dtype, scale_offset=scale_offset, name=name)
    policy = extracted.to_policy(config)
    logger.debug(
        "Missing-data policy for %s: valid=%s fill=%s missing=%s has_missing=%s",
        name or '<unnamed>',
        (policy.valid_min, policy.valid_max) if policy.has_valid_data() else None,
        policy.fill_value if policy.has_fill_value else None,
        policy.missing_values,
        policy.has_missing(),
    )
    return policy


__all__ = [
    'MissingAttributes',
    'ScaleOffset',
    'dtype_rank',
    'is_char_dtype',
    'is_unsigned',
    'to_unsigned',
    'extract_missing_attributes',
    'policy_from_attributes',
]

# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 cfmissing developers

"""
xarray integration for missing-data policies.

Builds a :class:`MissingDataPolicy` from a DataArray's metadata and applies
it to DataArrays and Datasets already held in memory.
"""

import logging
from typing import Dict, Iterable, Optional

import numpy as np
import xarray as xr

from cfmissing.core.config import MissingDataConfig
from cfmissing.core.constants import CFAttributes
from cfmissing.core.exceptions import InvalidArgumentError, require

from .attributes import ScaleOffset, is_unsigned, policy_from_attributes, to_unsigned
from .policy import MissingDataPolicy, is_numeric_dtype

logger = logging.getLogger(__name__)

# Attributes xarray moves from attrs into encoding when it decodes CF data
_ENCODING_KEYS = (
    CFAttributes.FILL_VALUE,
    CFAttributes.MISSING_VALUE,
    CFAttributes.SCALE_FACTOR,
    CFAttributes.ADD_OFFSET,
    CFAttributes.UNSIGNED,
)

# Attributes that mark values as still stored packed; decoding moves them to encoding
_PACKING_KEYS = (
    CFAttributes.SCALE_FACTOR,
    CFAttributes.ADD_OFFSET,
    CFAttributes.UNSIGNED,
)


def _merged_attributes(da: xr.DataArray) -> Dict:
    merged = {key: da.encoding[key] for key in _ENCODING_KEYS if key in da.encoding}
    merged.update(da.attrs)
    return merged


def policy_for(da: xr.DataArray, config: Optional[MissingDataConfig] = None) -> MissingDataPolicy:
    """Build the missing-data policy of a DataArray.

    Attributes are read from ``da.attrs`` with CF encoding attributes from
    ``da.encoding`` as fallback. The raw dtype is ``encoding['dtype']`` when
    xarray recorded one, otherwise the array's own dtype.
    """
    raw_dtype = np.dtype(da.encoding.get('dtype', da.dtype))
    return policy_from_attributes(
        _merged_attributes(da),
        raw_dtype,
        config,
        name=str(da.name) if da.name is not None else None,
    )


def is_packed(da: xr.DataArray) -> bool:
    """True if ``da`` still holds raw packed or ``_Unsigned``-flagged values.

    xarray's CF decoding records the raw type in ``encoding['dtype']`` and
    moves the packing attributes out of ``attrs``; either sign means the
    values are already unpacked.
    """
    if 'dtype' in da.encoding or not is_numeric_dtype(da.dtype):
        return False
    if CFAttributes.SCALE_FACTOR in da.attrs or CFAttributes.ADD_OFFSET in da.attrs:
        return True
    return da.dtype.kind == 'i' and is_unsigned(da.attrs, da.dtype)


def unpack(da: xr.DataArray) -> xr.DataArray:
    """Unpack raw values to float64: unsigned reinterpretation, then scale/offset.

    The packing attributes move from ``attrs`` to ``encoding`` together with
    the raw dtype, so the result looks like an xarray-decoded variable.
    """
    raw_dtype = da.dtype
    scale_offset = ScaleOffset.from_attributes(da.attrs)
    data = scale_offset.apply_array(to_unsigned(np.asarray(da.values), is_unsigned(da.attrs, raw_dtype)))

    unpacked = da.copy(data=data)
    unpacked.attrs = {k: v for k, v in da.attrs.items() if k not in _PACKING_KEYS}
    encoding = dict(da.encoding)
    encoding.update({k: da.attrs[k] for k in _PACKING_KEYS if k in da.attrs})
    encoding['dtype'] = raw_dtype
    unpacked.encoding = encoding
    return unpacked


def mask_missing(
    da: xr.DataArray,
    config: Optional[MissingDataConfig] = None,
    policy: Optional[MissingDataPolicy] = None,
) -> xr.DataArray:
    """Replace missing samples of a DataArray with NaN.

    The policy's thresholds are in unpacked units, so packed input (see
    :func:`is_packed`) is unpacked first and the result is always a new,
    decoded DataArray. Otherwise returns ``da`` itself when the policy has
    nothing to convert, or a copy with the same dims, coords, attrs and
    encoding.
    """
    if policy is None:
        policy = policy_for(da, config)

    if is_packed(da):
        logger.debug("Unpacking %s before masking missing data", da.name)
        da = unpack(da)

    values = da.values
    converted = policy.convert_missing(values)
    if converted is values:
        return da
    return da.copy(data=converted)


def mask_dataset(
    ds: xr.Dataset,
    config: Optional[MissingDataConfig] = None,
    variables: Optional[Iterable[str]] = None,
) -> xr.Dataset:
    """Apply :func:`mask_missing` to data variables of a Dataset.

    Args:
        ds: Dataset held in memory
        config: Mode flags shared by every variable
        variables: Names to mask (default: all data variables)

    Returns:
        ``ds`` itself if no variable changed, otherwise a new Dataset

    Raises:
        InvalidArgumentError: If a requested variable is not in ``ds``
    """
    names = list(ds.data_vars) if variables is None else list(variables)
    unknown = [name for name in names if name not in ds.data_vars]
    require(not unknown, f"Unknown data variables: {', '.join(map(str, unknown))}",
            InvalidArgumentError)

    changed = {}
    for name in names:
        da = ds[name]
        masked = mask_missing(da, config)
        if masked is not da:
            changed[name] = masked

    if not changed:
        return ds

    logger.debug("Masked missing data in %d variable(s): %s", len(changed), ", ".join(map(str, changed)))
    return ds.assign(changed)


__all__ = [
    'policy_for',
    'is_packed',
    'unpack',
    'mask_missing',
    'mask_dataset',
]

# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 cfmissing developers

"""
Missing-data mode configuration.

Defines the Pydantic model holding the three dataset-level mode flags that
decide which kinds of sentinel count as missing, and the layered loader that
builds it from defaults, a YAML file, environment variables and overrides.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Standard ConfigDict for all config models
FROZEN_CONFIG = ConfigDict(extra='allow', populate_by_name=True, frozen=True)

ENV_PREFIX = "CFMISSING_"


class MissingDataConfig(BaseModel):
    """Mode flags controlling which sentinels are treated as missing."""
    model_config = FROZEN_CONFIG

    fill_value_is_missing: bool = Field(
        default=True,
        alias='FILL_VALUE_IS_MISSING',
        description='Samples equal to _FillValue are missing'
    )
    invalid_data_is_missing: bool = Field(
        default=True,
        alias='INVALID_DATA_IS_MISSING',
        description='Samples outside valid_range / valid_min / valid_max are missing'
    )
    missing_data_is_missing: bool = Field(
        default=True,
        alias='MISSING_DATA_IS_MISSING',
        description='Samples equal to a missing_value entry are missing'
    )

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
        *,
        use_env: bool = True,
    ) -> 'MissingDataConfig':
        """
        Build a configuration from layered sources.

        Loading precedence (highest to lowest):
        1. Programmatic overrides
        2. Environment variables (CFMISSING_*)
        3. Config file (YAML)
        4. Field defaults

        Args:
            path: Optional YAML file with flat upper-case keys
            overrides: Dictionary of programmatic overrides
            use_env: Whether to read environment variables (default: True)

        Returns:
            Validated MissingDataConfig instance

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        config_dict: Dict[str, Any] = {}

        if path is not None:
            config_dict.update(_load_yaml(Path(path)))

        if use_env:
            config_dict.update(_load_env_overrides())

        if overrides:
            config_dict.update({_normalize_key(k): v for k, v in overrides.items()})

        try:
            return cls(**config_dict)
        except PydanticValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got {type(data).__name__}"
        )

    logger.debug("Loaded missing-data configuration from %s", path)
    return {_normalize_key(k): v for k, v in data.items()}


def _known_keys() -> set:
    keys = set()
    for name, field_info in MissingDataConfig.model_fields.items():
        keys.add(_normalize_key(name))
        if field_info.alias:
            keys.add(field_info.alias)
    return keys


def _load_env_overrides() -> Dict[str, Any]:
    """
    Load configuration overrides from environment variables.

    Unknown CFMISSING_* names are logged and skipped so a misspelled flag
    does not vanish into the model's extra fields.
    """
    env_overrides = {}
    known = _known_keys()

    for env_key, env_value in os.environ.items():
        if env_key.startswith(ENV_PREFIX):
            config_key = _normalize_key(env_key[len(ENV_PREFIX):])
            if config_key not in known:
                logger.warning("Ignoring unknown environment variable %s", env_key)
                continue
            env_overrides[config_key] = _coerce_value(env_value)

    return env_overrides


def _normalize_key(key: str) -> str:
    return str(key).upper()


def _coerce_value(value: Any) -> Any:
    """Helper to attempt basic coercion for values."""
    if not isinstance(value, str):
        return value

    lower = value.strip().lower()
    if lower in ('true', 'yes', 'on', '1'):
        return True
    if lower in ('false', 'no', 'off', '0'):
        return False
    return value.strip()


def _format_validation_error(error: PydanticValidationError) -> str:
    lines = ["Invalid missing-data configuration:"]
    for err in error.errors():
        field_name = str(err['loc'][0]) if err['loc'] else 'unknown'
        lines.append(f"  {field_name}: {err['msg']}")
    return "\n".join(lines)


__all__ = [
    'FROZEN_CONFIG',
    'ENV_PREFIX',
    'MissingDataConfig',
]

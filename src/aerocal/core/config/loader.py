# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Configuration loading.

Loading precedence (highest to lowest):
1. Programmatic / CLI overrides
2. Environment variables (AEROCAL_<ALIAS>, e.g. AEROCAL_ENSEMBLE_SIZE=20)
3. Config file (YAML)
4. Defaults from the Pydantic models

Files and overrides may use the nested section layout, the flat
UPPER_CASE aliases, or a mix of both.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from aerocal.core.exceptions import ConfigurationError

from .models import AerocalConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = 'AEROCAL_'
SECTION_KEYS = {'experiment', 'eki', 'truth', 'priors', 'scenario', 'reporting'}


def _collect_aliases(
    model: type,
    prefix: Tuple[str, ...],
    aliases: Dict[str, Tuple[str, ...]],
) -> None:
    for field_name, field in model.model_fields.items():
        path = prefix + (field_name,)
        annotation = field.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            _collect_aliases(annotation, path, aliases)
        elif field.alias:
            aliases[field.alias] = path


def alias_map() -> Dict[str, Tuple[str, ...]]:
    """Map every flat UPPER_CASE alias to its nested field path."""
    aliases: Dict[str, Tuple[str, ...]] = {'PRIORS': ('priors',)}
    for section in ('experiment', 'eki', 'truth', 'scenario', 'reporting'):
        section_model = AerocalConfig.model_fields[section].annotation
        _collect_aliases(section_model, (section,), aliases)
    return aliases


def _set_path(target: Dict[str, Any], path: Tuple[str, ...], value: Any) -> None:
    node = target
    for key in path[:-1]:
        node = node.setdefault(key, {})
    node[path[-1]] = value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with override taking precedence.

    For nested dictionaries, recursively merge. For other values, override wins.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def to_nested(config: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a flat, nested or mixed mapping into the nested layout."""
    aliases = alias_map()
    nested: Dict[str, Any] = {}
    flat: Dict[str, Any] = {}

    for key, value in config.items():
        if key.lower() in SECTION_KEYS:
            nested[key.lower()] = value
        elif key.upper() in aliases:
            flat[key.upper()] = value
        else:
            logger.warning(f"Ignoring unknown configuration key: {key}")

    for alias, value in flat.items():
        flat_nested: Dict[str, Any] = {}
        _set_path(flat_nested, aliases[alias], value)
        nested = _deep_merge(nested, flat_nested)

    return nested


def _load_env_overrides() -> Dict[str, Any]:
    """Read AEROCAL_* environment variables into flat alias keys.

    Values are parsed as YAML scalars so numbers, booleans, null and
    inline mappings come through typed.
    """
    aliases = alias_map()
    overrides = {}
    for key, raw in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        alias = key[len(ENV_PREFIX):]
        if alias in aliases:
            overrides[alias] = yaml.safe_load(raw)
    return overrides


def _format_validation_error(error: PydanticValidationError) -> str:
    lines = ["Invalid configuration:"]
    for item in error.errors():
        location = '.'.join(str(part) for part in item.get('loc', ())) or '<root>'
        lines.append(f"  - {location}: {item.get('msg')}")
    return '\n'.join(lines)


def build_config(
    file_config: Dict[str, Any],
    overrides: Optional[Dict[str, Any]] = None,
    *,
    use_env: bool = True,
) -> AerocalConfig:
    """Merge file, environment and override layers and validate.

    Raises:
        ConfigurationError: If the merged configuration is invalid.
    """
    merged = to_nested(file_config or {})

    if use_env:
        env_overrides = _load_env_overrides()
        if env_overrides:
            logger.debug(f"Environment overrides: {sorted(env_overrides)}")
            merged = _deep_merge(merged, to_nested(env_overrides))

    if overrides:
        merged = _deep_merge(merged, to_nested(overrides))

    try:
        return AerocalConfig.model_validate(merged)
    except PydanticValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e


def load_config(
    path: Path,
    overrides: Optional[Dict[str, Any]] = None,
    *,
    use_env: bool = True,
) -> AerocalConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to configuration YAML file
        overrides: Dictionary of CLI/programmatic overrides
        use_env: Whether to apply AEROCAL_* environment variables

    Returns:
        Validated AerocalConfig instance

    Raises:
        FileNotFoundError: If config file is missing
        ConfigurationError: If the file cannot be parsed or is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path, 'r') as f:
            file_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    if not isinstance(file_config, dict):
        raise ConfigurationError(f"Top level of {path} must be a mapping")

    return build_config(file_config, overrides, use_env=use_env)


def flatten_config(config: AerocalConfig) -> Dict[str, Any]:
    """Inverse of :func:`to_nested`: flat alias keys from a config."""
    nested = config.model_dump(mode='json')
    flat = {}
    for alias, path in alias_map().items():
        node: Any = nested
        for key in path:
            node = node[key]
        flat[alias] = node
    return flat


def template_path() -> Path:
    """Path of the bundled configuration template."""
    return Path(__file__).resolve().parents[2] / 'resources' / 'config_template.yaml'

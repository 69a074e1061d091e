"""
RTWPilot Configuration Loader

Loads and validates engine configuration from YAML or JSON files.

Converts the Pydantic schema model to the EngineConfig settings dataclass.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigLoadError, ConfigValidationError
from .schema import SCHEMA_VERSION, EngineConfigSchema, check_schema_version, validate_engine_config
from .settings import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RTWPILOT_CONFIG"


def _convert_config(schema: EngineConfigSchema) -> EngineConfig:
    """Convert EngineConfigSchema to the EngineConfig settings model."""
    values = schema.model_dump(exclude={"schema_version"})
    return EngineConfig(**values)


def _load_file(path: Path) -> dict[str, Any]:
    """Load data from YAML or JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(f) or {}
        elif path.suffix.lower() == ".json":
            return json.load(f)
        else:
            # Try YAML first, then JSON
            content = f.read()
            try:
                return yaml.safe_load(content) or {}
            except yaml.YAMLError:
                return json.loads(content)


def config_from_dict(data: dict[str, Any]) -> EngineConfig:
    """
    Build an EngineConfig from already-parsed data.

    Raises:
        ConfigValidationError: If validation fails or the version is incompatible
    """
    if not check_schema_version(data):
        raise ConfigValidationError(
            message=(
                f"Schema version mismatch: config has {data.get('schema_version')}, "
                f"expected {SCHEMA_VERSION}"
            ),
            details={"config_version": data.get("schema_version"), "expected_version": SCHEMA_VERSION},
        )
    try:
        schema = validate_engine_config(data)
    except ValidationError as e:
        raise ConfigValidationError(
            message=f"Engine config validation failed: {e.error_count()} errors",
            details={"errors": e.errors(include_url=False)},
        )
    return _convert_config(schema)


def load_engine_config(path: Union[str, Path]) -> EngineConfig:
    """
    Load engine configuration from a file.

    Args:
        path: Path to YAML or JSON file

    Returns:
        Loaded EngineConfig

    Raises:
        ConfigLoadError: If file cannot be read
        ConfigValidationError: If validation fails
    """
    path = Path(path)
    try:
        data = _load_file(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigLoadError(
            message=f"Failed to load engine config: {e}",
            details={"path": str(path), "error": str(e)},
        )
    if not isinstance(data, dict):
        raise ConfigValidationError(
            message="Engine config must be a mapping",
            details={"path": str(path)},
        )

    config = config_from_dict(data)
    logger.info("Loaded engine config from %s", path)
    return config


def config_from_env(env_var: str = CONFIG_ENV_VAR) -> EngineConfig:
    """Load the config named by an environment variable, or the defaults."""
    path: Optional[str] = os.environ.get(env_var)
    if not path:
        return DEFAULT_CONFIG
    return load_engine_config(path)

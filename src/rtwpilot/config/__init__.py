"""
RTWPilot Configuration

Engine thresholds and the loader for configuration files.
"""
from __future__ import annotations

from .loader import CONFIG_ENV_VAR, config_from_dict, config_from_env, load_engine_config
from .schema import SCHEMA_VERSION, EngineConfigSchema
from .settings import DEFAULT_CONFIG, EngineConfig

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "EngineConfigSchema",
    "SCHEMA_VERSION",
    "config_from_dict",
    "config_from_env",
    "load_engine_config",
]

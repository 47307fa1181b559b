"""Configuration loading and the injected scoring tables."""

from .loader import (
    load_config,
    load_default_config,
    validate_config,
    get_config_value,
    DEFAULT_CONFIG_PATH,
)
from .tables import ScoringTables

__all__ = [
    "load_config",
    "load_default_config",
    "validate_config",
    "get_config_value",
    "DEFAULT_CONFIG_PATH",
    "ScoringTables",
]

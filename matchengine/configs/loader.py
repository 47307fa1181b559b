"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that the sections the engine reads are present and sane.
"""

import logging
import math
from pathlib import Path
from typing import Dict, Any, List

import yaml

from ..errors import ConfigurationError
from ..schema import COMPONENTS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"

REQUIRED_SECTIONS = ["global", "weights", "tables", "batch"]


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If the YAML is invalid, empty, or not a mapping
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {filepath}: {e}") from e

    if config is None:
        raise ConfigurationError(f"Configuration file is empty: {filepath}")
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {filepath}")

    return config


def load_default_config() -> Dict[str, Any]:
    """Load the configuration shipped with the package."""
    return load_config(str(DEFAULT_CONFIG_PATH))


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in REQUIRED_SECTIONS:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    weights = config.get("weights", {})
    if not isinstance(weights, dict):
        issues.append("weights must be a mapping of weight-set name to weights")
        weights = {}
    if weights and "general" not in weights:
        issues.append("Missing weights.general (the default weight set)")

    for set_name, components in weights.items():
        if not isinstance(components, dict) or not components:
            issues.append(f"Weight set {set_name} must be a non-empty mapping")
            continue
        total = 0.0
        for name, value in components.items():
            if name not in COMPONENTS and name != "bio":
                issues.append(f"Weight set {set_name} has unknown component: {name}")
            if not _is_finite_number(value) or value < 0:
                issues.append(f"Weight set {set_name}.{name} must be a non-negative number, got {value!r}")
                continue
            total += value
        if abs(total - 1.0) > 0.01:
            issues.append(f"Weight set {set_name} weights don't sum to 1: {total}")

    tables = config.get("tables", {})
    if isinstance(tables, dict):
        for table_name in ["interest_synonyms", "nearby_cities"]:
            if table_name not in tables:
                issues.append(f"Missing tables.{table_name}")
    else:
        issues.append("tables must be a mapping")

    batch = config.get("batch", {}) or {}
    if not isinstance(batch, dict):
        issues.append("batch must be a mapping")
        batch = {}
    threshold = batch.get("threshold")
    if threshold is not None and (not _is_finite_number(threshold) or not 0 <= threshold <= 1):
        issues.append(f"batch.threshold must be a number in [0, 1], got {threshold!r}")
    for key in ["limit", "max_candidates", "chunk_size"]:
        value = batch.get(key)
        if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
            issues.append(f"batch.{key} must be a non-negative integer, got {value!r}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "batch.max_candidates")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value

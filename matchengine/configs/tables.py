"""
Lookup tables injected into the interest and location scorers.

The tables are plain configuration data (see default.yaml). They are
frozen into read-only mappings so one ScoringTables instance can be shared
by every scorer and every worker without copying.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, Mapping, FrozenSet, Optional

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def _normalize_key(value: str) -> str:
    return " ".join(value.strip().lower().split())


def freeze_table(raw: Optional[Dict[str, Any]], table_name: str) -> Mapping[str, FrozenSet[str]]:
    """
    Convert a {term: [related terms]} mapping into a read-only lookup.

    Keys and values are lower-cased and whitespace-collapsed.

    Raises:
        ConfigurationError: If the table is not a mapping of string lists
    """
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Table {table_name} must be a mapping, got {type(raw).__name__}")

    frozen: Dict[str, FrozenSet[str]] = {}
    for key, related in raw.items():
        if not isinstance(key, str) or not isinstance(related, (list, tuple, set, frozenset)):
            raise ConfigurationError(
                f"Table {table_name} entry {key!r} must map a string to a list of strings"
            )
        if not all(isinstance(r, str) for r in related):
            raise ConfigurationError(f"Table {table_name} entry {key!r} contains non-string values")
        normalized = _normalize_key(key)
        frozen[normalized] = frozen.get(normalized, frozenset()) | frozenset(
            _normalize_key(r) for r in related if r.strip()
        )
    return MappingProxyType(frozen)


def _symmetric_lookup(table: Mapping[str, FrozenSet[str]], a: str, b: str) -> bool:
    return b in table.get(a, frozenset()) or a in table.get(b, frozenset())


@dataclass(frozen=True)
class ScoringTables:
    """
    Static lookup data used by the scorers.

    Attributes:
        interest_synonyms: Interest tag -> related tags (partial credit)
        nearby_cities: City -> neighboring cities in the same region
    """
    interest_synonyms: Mapping[str, FrozenSet[str]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    nearby_cities: Mapping[str, FrozenSet[str]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def are_synonyms(self, a: str, b: str) -> bool:
        """Symmetric, case-insensitive synonym check."""
        return _symmetric_lookup(self.interest_synonyms, _normalize_key(a), _normalize_key(b))

    def are_nearby(self, city_a: str, city_b: str) -> bool:
        """Symmetric, case-insensitive adjacency check."""
        return _symmetric_lookup(self.nearby_cities, _normalize_key(city_a), _normalize_key(city_b))

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to plain {term: sorted list} mappings."""
        return {
            "interest_synonyms": {k: sorted(v) for k, v in self.interest_synonyms.items()},
            "nearby_cities": {k: sorted(v) for k, v in self.nearby_cities.items()},
        }

    def __reduce__(self):
        # mappingproxy objects can't be pickled; rebuild from plain dicts in workers
        return (self.__class__.from_dict, (self.to_dict(),))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScoringTables":
        """Create from the `tables` section of a config."""
        return cls(
            interest_synonyms=freeze_table(d.get("interest_synonyms"), "interest_synonyms"),
            nearby_cities=freeze_table(d.get("nearby_cities"), "nearby_cities"),
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScoringTables":
        """Create from main config dictionary."""
        tables = config.get("tables", {}) or {}
        if not isinstance(tables, dict):
            raise ConfigurationError("tables section must be a mapping")
        instance = cls.from_dict(tables)
        logger.info(
            f"Loaded scoring tables: {len(instance.interest_synonyms)} synonym entries, "
            f"{len(instance.nearby_cities)} nearby-city entries"
        )
        return instance

    @classmethod
    def default(cls) -> "ScoringTables":
        """Tables from the configuration shipped with the package."""
        from .loader import load_default_config
        return cls.from_config(load_default_config())

"""
Named weight sets for combining component scores.

Two contexts use different weightings:
- general: profile-to-profile matching (interests, bio embedding, age,
  location, availability)
- event_context: matching among attendees of one event (interests, age,
  location only)

Weight Formula:
    overall = clamp(sum(weight[c] * score[c] for c in components), 0, 1)

Weights are NOT renormalized when a component is unavailable for a pair.
A missing component contributes 0, which keeps scores comparable across
pairs with different amounts of profile data.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Any, Tuple, Union, Optional

from ..errors import ConfigurationError
from ..schema import COMPONENTS

logger = logging.getLogger(__name__)

DEFAULT_WEIGHT_SET = "general"

DEFAULT_WEIGHT_SETS: Dict[str, Dict[str, float]] = {
    "general": {
        "interest": 0.4,
        "semantic": 0.3,
        "age": 0.2,
        "location": 0.1,
        "availability": 0.0,
    },
    "event_context": {
        "interest": 0.5,
        "age": 0.3,
        "location": 0.2,
    },
}

# Older configs call the embedding component "bio"
COMPONENT_ALIASES = {"bio": "semantic"}


@dataclass
class WeightSet:
    """
    Weights for one matching context.

    Attributes:
        name: Weight-set name (e.g. "general")
        weights: Component name -> non-negative weight
    """
    name: str
    weights: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        self.weights = self._canonicalize(self.weights)
        self.validate()

    def _canonicalize(self, weights: Dict[str, Any]) -> Dict[str, float]:
        if not isinstance(weights, dict):
            raise ConfigurationError(f"Weight set {self.name} must be a mapping, got {type(weights).__name__}")
        canonical: Dict[str, float] = {}
        for key, value in weights.items():
            name = COMPONENT_ALIASES.get(key, key)
            if name in canonical:
                raise ConfigurationError(f"Weight set {self.name} lists {name} twice")
            canonical[name] = value
        return canonical

    def validate(self) -> None:
        """
        Validate component names and weight values.

        Raises:
            ConfigurationError: For unknown components or invalid weights
        """
        if not self.weights:
            raise ConfigurationError(f"Weight set {self.name} is empty")
        for component, weight in self.weights.items():
            if component not in COMPONENTS:
                raise ConfigurationError(
                    f"Weight set {self.name} has unknown component {component!r}; "
                    f"expected one of {list(COMPONENTS)}"
                )
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                raise ConfigurationError(f"Weight {self.name}.{component} must be a number, got {weight!r}")
            if not math.isfinite(weight) or weight < 0:
                raise ConfigurationError(f"Weight {self.name}.{component} must be a finite non-negative number, got {weight}")
        total = self.total
        if abs(total - 1.0) > 0.01:
            logger.warning(f"Weight set {self.name} sums to {total:.3f}; scores are clamped to [0, 1]")

    @property
    def components(self) -> Tuple[str, ...]:
        """Components in this set, in canonical report order."""
        return tuple(c for c in COMPONENTS if c in self.weights)

    @property
    def total(self) -> float:
        return float(sum(self.weights.values()))

    def weight(self, component: str) -> float:
        return float(self.weights.get(component, 0.0))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"name": self.name, "weights": dict(self.weights)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WeightSet":
        """Create from dictionary."""
        return cls(name=d["name"], weights=d["weights"])

    @classmethod
    def named(cls, name: str) -> "WeightSet":
        """
        One of the built-in weight sets.

        Raises:
            ConfigurationError: If the name is unknown
        """
        if name not in DEFAULT_WEIGHT_SETS:
            raise ConfigurationError(
                f"Unknown weight set {name!r}; expected one of {sorted(DEFAULT_WEIGHT_SETS)}"
            )
        return cls(name=name, weights=dict(DEFAULT_WEIGHT_SETS[name]))

    @classmethod
    def from_config(cls, config: Dict[str, Any], name: str = DEFAULT_WEIGHT_SET) -> "WeightSet":
        """
        Create from main config dictionary.

        Falls back to the built-in sets when the config has no `weights`
        section.

        Raises:
            ConfigurationError: If the name is not defined
        """
        sets = config.get("weights")
        if not sets:
            return cls.named(name)
        if not isinstance(sets, dict):
            raise ConfigurationError("weights section must be a mapping")
        if name not in sets:
            raise ConfigurationError(f"Unknown weight set {name!r}; expected one of {sorted(sets)}")
        return cls(name=name, weights=dict(sets[name]))


def resolve_weight_set(
    weights: Union[str, WeightSet, None],
    config: Optional[Dict[str, Any]] = None
) -> WeightSet:
    """
    Turn a weight-set name (or an existing WeightSet) into a WeightSet.

    Args:
        weights: Name, WeightSet, or None for the default set
        config: Optional config whose `weights` section defines the names

    Raises:
        ConfigurationError: For unknown names or unsupported types
    """
    if isinstance(weights, WeightSet):
        return weights
    if weights is None:
        weights = DEFAULT_WEIGHT_SET
    if not isinstance(weights, str):
        raise ConfigurationError(f"weights must be a name or WeightSet, got {type(weights).__name__}")
    if config is not None:
        return WeightSet.from_config(config, weights)
    return WeightSet.named(weights)

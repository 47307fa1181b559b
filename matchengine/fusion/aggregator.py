"""
Aggregation of component scores into one compatibility score.

The aggregator runs each scorer named by the active weight set and
combines the results. Missing profile data never raises: every scorer has
a fallback, and the fallback still counts toward the weight total.

Only two failures propagate to the caller:
- ContractViolationError: malformed embeddings
- ConfigurationError: unknown or invalid weight set
"""

import logging
from datetime import datetime
from functools import lru_cache
from typing import Dict, Any, Optional, Tuple, Union

from ..configs.loader import load_default_config
from ..configs.tables import ScoringTables
from ..explanations.explainer import MatchExplainer, ExplainerConfig
from ..schema import Profile, ComponentScore, MatchResult
from ..scorers import (
    InterestScorer,
    AgeScorer,
    LocationScorer,
    AvailabilityScorer,
    SemanticScorer,
    parse_location,
)
from .weights import WeightSet, resolve_weight_set

logger = logging.getLogger(__name__)


class CompatibilityAggregator:
    """
    Weighted combination of the per-factor scorers.

    Attributes:
        weight_set: Active WeightSet
        tables: Scoring tables injected into the interest and location scorers
        explainer: Builds MatchResult.explanation; None disables explanations
    """

    def __init__(
        self,
        weight_set: WeightSet,
        tables: ScoringTables,
        explainer: Optional[MatchExplainer] = None
    ):
        """
        Initialize the aggregator.

        Args:
            weight_set: Weights for the matching context
            tables: Synonym and nearby-city tables
            explainer: Optional explainer for the result text
        """
        self.weight_set = weight_set
        self.tables = tables
        self.explainer = explainer

        self.interest_scorer = InterestScorer(tables)
        self.age_scorer = AgeScorer()
        self.location_scorer = LocationScorer(tables)
        self.availability_scorer = AvailabilityScorer()
        self.semantic_scorer = SemanticScorer()

        logger.info(
            f"Initialized CompatibilityAggregator with weight set {weight_set.name}: "
            f"{weight_set.weights}"
        )

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        weight_set: Union[str, WeightSet, None] = None,
        explain: bool = True
    ) -> "CompatibilityAggregator":
        """
        Factory function to create an aggregator from config.

        Args:
            config: Main configuration dictionary
            weight_set: Weight-set name or WeightSet (default: general)
            explain: Whether results carry an explanation

        Returns:
            Configured CompatibilityAggregator instance
        """
        weights = resolve_weight_set(weight_set, config)
        tables = ScoringTables.from_config(config)
        explainer = MatchExplainer(ExplainerConfig.from_config(config)) if explain else None
        return cls(weights, tables, explainer)

    def score(
        self,
        profile_a: Profile,
        profile_b: Profile,
        computed_at: Optional[datetime] = None
    ) -> MatchResult:
        """
        Compute the compatibility of two profiles.

        Args:
            profile_a: First profile
            profile_b: Second profile
            computed_at: Timestamp to record (default: now, UTC)

        Returns:
            MatchResult with overall score and component breakdown

        Raises:
            ContractViolationError: If both profiles carry embeddings and
                they are malformed
        """
        components = tuple(
            self._component(name, profile_a, profile_b)
            for name in self.weight_set.components
        )

        total = sum(c.contribution for c in components)
        overall = max(0.0, min(1.0, total))

        explanation = None
        if self.explainer is not None:
            explanation = self.explainer.explain(
                profile_a, profile_b, {c.name: c for c in components}
            )

        kwargs = {}
        if computed_at is not None:
            kwargs["computed_at"] = computed_at

        return MatchResult(
            profile_a_id=profile_a.id,
            profile_b_id=profile_b.id,
            score=overall,
            components=components,
            explanation=explanation,
            weight_set=self.weight_set.name,
            **kwargs
        )

    def _component(self, name: str, profile_a: Profile, profile_b: Profile) -> ComponentScore:
        value, available, details = self._compute(name, profile_a, profile_b)
        return ComponentScore(
            name=name,
            value=max(0.0, min(1.0, value)),
            weight=self.weight_set.weight(name),
            available=available,
            details=details,
        )

    def _compute(
        self,
        name: str,
        a: Profile,
        b: Profile
    ) -> Tuple[float, bool, Dict[str, Any]]:
        """Run one scorer; returns (value, available, details)."""
        if name == "interest":
            result = self.interest_scorer.score(a.interests, b.interests)
            available = bool(a.interests) and bool(b.interests)
            return result.score, available, {
                "exact_matches": result.exact_matches,
                "fuzzy_matches": result.fuzzy_matches,
                "shared": list(result.shared),
            }

        if name == "age":
            available = a.age is not None and b.age is not None
            details = {"age_difference": abs(a.age - b.age)} if available else {}
            return self.age_scorer.score(a.age, b.age), available, details

        if name == "location":
            available = parse_location(a.location) is not None and parse_location(b.location) is not None
            return self.location_scorer.score(a.location, b.location), available, {}

        if name == "availability":
            value, subs = self.availability_scorer.score_with_details(a.availability, b.availability)
            return value, bool(subs), subs

        if name == "semantic":
            if a.embedding is None or b.embedding is None:
                return 0.0, False, {}
            return self.semantic_scorer.score(a.embedding, b.embedding), True, {}

        # WeightSet.validate() rejects unknown names before we get here
        raise ValueError(f"Unknown component: {name}")


@lru_cache(maxsize=None)
def _default_components() -> Tuple[ScoringTables, ExplainerConfig]:
    """Tables and explainer settings from the packaged config, parsed once."""
    config = load_default_config()
    return ScoringTables.from_config(config), ExplainerConfig.from_config(config)


@lru_cache(maxsize=None)
def _default_aggregator(weight_set_name: str) -> CompatibilityAggregator:
    return CompatibilityAggregator.from_config(load_default_config(), weight_set_name)


def get_aggregator(
    weights: Union[str, WeightSet, None] = None,
    config: Optional[Dict[str, Any]] = None
) -> CompatibilityAggregator:
    """
    Aggregator for a weight-set name or WeightSet.

    Named sets with the packaged default config are built once and reused.
    A custom WeightSet with no config reuses the packaged tables.
    """
    if config is None and (weights is None or isinstance(weights, str)):
        return _default_aggregator(resolve_weight_set(weights).name)
    if config is None:
        tables, explainer_config = _default_components()
        return CompatibilityAggregator(
            resolve_weight_set(weights), tables, MatchExplainer(explainer_config)
        )
    return CompatibilityAggregator.from_config(config, weights)


def score(
    profile_a: Profile,
    profile_b: Profile,
    weights: Union[str, WeightSet, None] = None,
    config: Optional[Dict[str, Any]] = None
) -> MatchResult:
    """
    Score one pair of profiles.

    Args:
        profile_a: First profile
        profile_b: Second profile
        weights: Weight-set name ("general", "event_context") or WeightSet
        config: Optional config dictionary (default: packaged config)

    Returns:
        MatchResult with breakdown and explanation

    Raises:
        ConfigurationError: For an unknown weight set
        ContractViolationError: For malformed embeddings
    """
    return get_aggregator(weights, config).score(profile_a, profile_b)

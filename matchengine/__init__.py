"""
Compatibility Scoring Engine

This package scores how well two user profiles match for the social-events
app. Each factor (interests, age, location, availability, bio embeddings)
has its own stateless scorer, and the aggregator combines them with a named
weight set into one score in [0, 1].

Key Design Decisions:
- Scorers never fail on missing profile data; each has a neutral fallback
- Embeddings are a caller contract: malformed vectors raise immediately
- Weights are not renormalized when a component is unavailable
- Lookup tables (synonyms, nearby cities) are injected, not module state
"""

from .errors import MatchEngineError, ContractViolationError, ConfigurationError
from .schema import Profile, Availability, ComponentScore, MatchResult
from .fusion import CompatibilityAggregator, WeightSet, score
from .pair_generation import BatchScorer, score_batch

__version__ = "1.0.0"

__all__ = [
    "MatchEngineError",
    "ContractViolationError",
    "ConfigurationError",
    "Profile",
    "Availability",
    "ComponentScore",
    "MatchResult",
    "CompatibilityAggregator",
    "WeightSet",
    "score",
    "BatchScorer",
    "score_batch",
]

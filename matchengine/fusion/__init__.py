"""Weight sets and the aggregator that combines component scores."""

from .weights import WeightSet, resolve_weight_set, DEFAULT_WEIGHT_SETS, DEFAULT_WEIGHT_SET
from .aggregator import CompatibilityAggregator, get_aggregator, score

__all__ = [
    "WeightSet",
    "resolve_weight_set",
    "DEFAULT_WEIGHT_SETS",
    "DEFAULT_WEIGHT_SET",
    "CompatibilityAggregator",
    "get_aggregator",
    "score",
]

"""Per-factor compatibility scorers."""

from .interests import InterestScorer, normalize_interests
from .demographics import AgeScorer
from .location import LocationScorer, parse_location
from .availability import AvailabilityScorer
from .semantic import SemanticScorer, cosine_similarity, normalize_similarity

__all__ = [
    "InterestScorer",
    "normalize_interests",
    "AgeScorer",
    "LocationScorer",
    "parse_location",
    "AvailabilityScorer",
    "SemanticScorer",
    "cosine_similarity",
    "normalize_similarity",
]

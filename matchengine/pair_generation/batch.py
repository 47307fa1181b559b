"""
Batch pairwise scoring.

Runs the aggregator over every unordered pair of a candidate list (or one
subject against many candidates) and returns results sorted by descending
score. Ties are broken by the unordered pair key, so the order is the same
whether pairs were scored serially or by parallel workers, and whichever
side of a pair came first in the input.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, Sequence, Union

from joblib import Parallel, delayed

from ..fusion.aggregator import CompatibilityAggregator, get_aggregator
from ..fusion.weights import WeightSet
from ..schema import Profile, MatchResult
from .generator import PairGenerator

logger = logging.getLogger(__name__)


@dataclass
class BatchOptions:
    """
    Configuration for batch scoring.

    Attributes:
        threshold: Drop results scoring below this value (None keeps all)
        limit: Keep at most this many results (None keeps all)
        max_candidates: Cap on candidates for rank_candidates (None = no cap)
        chunk_size: Pairs per worker task
        n_jobs: joblib worker count (1 = serial, -1 = all cores)
    """
    threshold: Optional[float] = None
    limit: Optional[int] = None
    max_candidates: Optional[int] = 50
    chunk_size: int = 256
    n_jobs: int = 1

    def validate(self) -> None:
        """Validate configuration values."""
        validate_threshold(self.threshold)
        validate_limit(self.limit)
        if self.max_candidates is not None and self.max_candidates < 1:
            raise ValueError(f"max_candidates must be >= 1, got {self.max_candidates}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.n_jobs == 0:
            raise ValueError("n_jobs must not be 0")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "BatchOptions":
        """Create from main config dictionary."""
        batch_config = config.get("batch", {}) or {}
        global_config = config.get("global", {}) or {}

        return cls(
            threshold=batch_config.get("threshold"),
            limit=batch_config.get("limit"),
            max_candidates=batch_config.get("max_candidates", 50),
            chunk_size=batch_config.get("chunk_size", 256),
            n_jobs=global_config.get("n_jobs", 1)
        )


def validate_threshold(threshold: Optional[float]) -> None:
    if threshold is None:
        return
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ValueError(f"threshold must be a number, got {threshold!r}")
    if not 0 <= threshold <= 1:
        raise ValueError(f"threshold must be in [0, 1], got {threshold}")


def validate_limit(limit: Optional[int]) -> None:
    if limit is None:
        return
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValueError(f"limit must be an integer, got {limit!r}")
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")


def sort_results(results: List[MatchResult]) -> List[MatchResult]:
    """Sort by score descending, then by unordered pair key ascending."""
    return sorted(results, key=lambda r: (-r.score, r.pair_key, r.profile_a_id))


def select_results(
    results: List[MatchResult],
    threshold: Optional[float] = None,
    limit: Optional[int] = None
) -> List[MatchResult]:
    """Sort, drop results below threshold, and truncate to limit."""
    ordered = sort_results(results)
    if threshold is not None:
        ordered = [r for r in ordered if r.score >= threshold]
    if limit is not None:
        ordered = ordered[:limit]
    return ordered


def _score_chunk(
    aggregator: CompatibilityAggregator,
    profiles_a: List[Profile],
    profiles_b: List[Profile],
    computed_at: datetime
) -> List[MatchResult]:
    return [aggregator.score(a, b, computed_at) for a, b in zip(profiles_a, profiles_b)]


class BatchScorer:
    """
    Applies the aggregator across a candidate set.

    Attributes:
        aggregator: CompatibilityAggregator used for every pair
        options: BatchOptions with defaults for threshold, limit and workers
        generator: PairGenerator enumerating the pairs
    """

    def __init__(
        self,
        aggregator: CompatibilityAggregator,
        options: Optional[BatchOptions] = None
    ):
        self.aggregator = aggregator
        self.options = options or BatchOptions()
        self.options.validate()
        self.generator = PairGenerator(chunk_size=self.options.chunk_size)

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        weight_set: Union[str, WeightSet, None] = None
    ) -> "BatchScorer":
        """Create from main config dictionary."""
        aggregator = CompatibilityAggregator.from_config(config, weight_set)
        return cls(aggregator, BatchOptions.from_config(config))

    def score_batch(
        self,
        profiles: Sequence[Profile],
        threshold: Optional[float] = None,
        limit: Optional[int] = None
    ) -> List[MatchResult]:
        """
        Score every unordered pair of profiles.

        Args:
            profiles: Candidate profiles
            threshold: Minimum score to keep (default: options.threshold)
            limit: Maximum results to return (default: options.limit)

        Returns:
            MatchResults sorted by descending score

        Raises:
            ValueError: For an out-of-range threshold or negative limit
            ContractViolationError: If any pair has malformed embeddings
        """
        threshold = self.options.threshold if threshold is None else threshold
        limit = self.options.limit if limit is None else limit
        validate_threshold(threshold)
        validate_limit(limit)

        profiles = list(profiles)
        self._warn_on_duplicate_ids(profiles)

        indices_a, indices_b = self.generator.all_pairs(len(profiles))
        results = self._score_pairs(profiles, profiles, indices_a, indices_b)

        selected = select_results(results, threshold, limit)
        logger.info(f"Scored {len(results)} pairs, returning {len(selected)}")
        return selected

    def rank_candidates(
        self,
        subject: Profile,
        candidates: Sequence[Profile],
        threshold: Optional[float] = None,
        limit: Optional[int] = None
    ) -> List[MatchResult]:
        """
        Score one profile against a list of candidates.

        Candidates sharing the subject's id are skipped. If the list is
        longer than options.max_candidates, the extra candidates are dropped.

        Returns:
            MatchResults with profile_a_id == subject.id, best first
        """
        threshold = self.options.threshold if threshold is None else threshold
        limit = self.options.limit if limit is None else limit
        validate_threshold(threshold)
        validate_limit(limit)

        others = [c for c in candidates if c.id != subject.id]
        cap = self.options.max_candidates
        if cap is not None and len(others) > cap:
            logger.warning(f"Candidate list of {len(others)} exceeds max_candidates={cap}; truncating")
            others = others[:cap]

        # Subject is index 0 of the combined list
        pool = [subject] + others
        indices_a, indices_b = self.generator.pairs_with(0, len(pool))
        results = self._score_pairs(pool, pool, indices_a, indices_b)
        return select_results(results, threshold, limit)

    def _score_pairs(self, left, right, indices_a, indices_b) -> List[MatchResult]:
        """Score pairs (left[i], right[j]) serially or with joblib workers."""
        computed_at = datetime.now(timezone.utc)
        tasks = [
            ([left[i] for i in chunk_a], [right[j] for j in chunk_b])
            for chunk_a, chunk_b in self.generator.chunks(indices_a, indices_b)
        ]

        if self.options.n_jobs == 1 or len(tasks) <= 1:
            chunk_results = [
                _score_chunk(self.aggregator, a, b, computed_at) for a, b in tasks
            ]
        else:
            logger.info(f"Scoring {len(indices_a)} pairs in {len(tasks)} chunks with n_jobs={self.options.n_jobs}")
            chunk_results = Parallel(n_jobs=self.options.n_jobs)(
                delayed(_score_chunk)(self.aggregator, a, b, computed_at) for a, b in tasks
            )

        return [result for chunk in chunk_results for result in chunk]

    @staticmethod
    def _warn_on_duplicate_ids(profiles: List[Profile]) -> None:
        seen = set()
        duplicates = set()
        for profile in profiles:
            if profile.id in seen:
                duplicates.add(profile.id)
            seen.add(profile.id)
        if duplicates:
            logger.warning(f"Duplicate profile ids in batch: {sorted(duplicates)}")


def score_batch(
    profiles: Sequence[Profile],
    threshold: Optional[float] = None,
    limit: Optional[int] = None,
    weights: Union[str, WeightSet, None] = None,
    n_jobs: int = 1,
    config: Optional[Dict[str, Any]] = None
) -> List[MatchResult]:
    """
    Score every unordered pair in a candidate set.

    Args:
        profiles: Candidate profiles
        threshold: Minimum score to keep
        limit: Maximum number of results
        weights: Weight-set name or WeightSet (default: general)
        n_jobs: joblib worker count
        config: Optional config dictionary (default: packaged config)

    Returns:
        MatchResults sorted by descending score
    """
    aggregator = get_aggregator(weights, config)
    options = BatchOptions(n_jobs=n_jobs)
    if config is not None:
        options = BatchOptions.from_config(config)
        options.n_jobs = n_jobs
    return BatchScorer(aggregator, options).score_batch(profiles, threshold, limit)

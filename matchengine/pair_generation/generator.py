"""
Pair generation for batch compatibility scoring.

Key Design Decisions:
- Pairs are unordered: (A, B) and (B, A) are considered the same pair
- Self-pairs are excluded: (A, A) is never generated
- Every pair is generated exactly once, in row-major (i, j) order
- O(n^2) pairs is expected for candidate sets of tens to hundreds
"""

import logging
from typing import Iterator, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class PairGenerator:
    """
    Enumerates unordered index pairs for a candidate list.

    Attributes:
        chunk_size: Number of pairs handed to each worker task
    """

    def __init__(self, chunk_size: int = 256):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.chunk_size = chunk_size

    @staticmethod
    def count_pairs(n_persons: int) -> int:
        """Number of unordered pairs: n * (n - 1) / 2."""
        if n_persons < 2:
            return 0
        return n_persons * (n_persons - 1) // 2

    def all_pairs(self, n_persons: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Generate every unordered pair of person indices.

        Args:
            n_persons: Total number of persons

        Returns:
            Tuple of (indices_a, indices_b) arrays where each (indices_a[k], indices_b[k])
            represents a pair. Indices are guaranteed to satisfy indices_a[k] < indices_b[k].
        """
        if n_persons < 0:
            raise ValueError(f"n_persons must be non-negative, got {n_persons}")

        # Strict upper triangle: i < j
        indices_a, indices_b = np.triu_indices(n_persons, k=1)

        logger.info(f"Generated {len(indices_a)} pairs from {n_persons} persons")
        return indices_a, indices_b

    def pairs_with(self, subject_index: int, n_persons: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Pairs between one person and every other person.

        Args:
            subject_index: Index of the subject
            n_persons: Total number of persons

        Returns:
            Tuple of (indices_a, indices_b) with indices_a all equal to subject_index
        """
        if not 0 <= subject_index < n_persons:
            raise ValueError(f"subject_index {subject_index} out of range for {n_persons} persons")
        others = np.array([j for j in range(n_persons) if j != subject_index], dtype=int)
        return np.full(len(others), subject_index, dtype=int), others

    def chunks(
        self,
        indices_a: np.ndarray,
        indices_b: np.ndarray
    ) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Split pair arrays into chunks of at most chunk_size pairs."""
        for start in range(0, len(indices_a), self.chunk_size):
            stop = start + self.chunk_size
            yield indices_a[start:stop], indices_b[start:stop]

"""
Semantic similarity between precomputed bio embeddings.

Similarity is computed as (cosine_similarity + 1) / 2 to map to [0, 1].
Embedding generation happens elsewhere; this module only compares vectors.
"""

from typing import Optional, Sequence, Union

import numpy as np

from ..errors import ContractViolationError

Vector = Union[Sequence[float], np.ndarray]


def _as_vector(vec: Optional[Vector], label: str) -> np.ndarray:
    if vec is None:
        raise ContractViolationError(f"Embedding {label} is missing")
    try:
        arr = np.asarray(vec, dtype=float)
    except (TypeError, ValueError) as e:
        raise ContractViolationError(f"Embedding {label} is not numeric: {e}") from e
    if arr.ndim != 1:
        raise ContractViolationError(f"Embedding {label} must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise ContractViolationError(f"Embedding {label} cannot be empty")
    if not np.all(np.isfinite(arr)):
        raise ContractViolationError(f"Embedding {label} contains NaN or infinite values")
    return arr


def cosine_similarity(vec_a: Vector, vec_b: Vector) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Similarity in [-1, 1]; 0 if either vector has zero norm

    Raises:
        ContractViolationError: If a vector is empty, non-finite, or the
            lengths differ
    """
    a = _as_vector(vec_a, "A")
    b = _as_vector(vec_b, "B")
    if a.shape != b.shape:
        raise ContractViolationError(
            f"Embeddings must have same length: {a.size} vs {b.size}"
        )

    # Scale by max |x| first so huge or tiny entries neither overflow nor underflow
    scale_a = np.max(np.abs(a))
    scale_b = np.max(np.abs(b))
    if scale_a == 0 or scale_b == 0:
        return 0.0
    a = a / scale_a
    b = b / scale_b

    similarity = float(np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b)))
    if not np.isfinite(similarity):
        raise ContractViolationError(f"Cosine similarity is not finite: {similarity}")
    # Floating point error can push |cos| slightly past 1
    return float(np.clip(similarity, -1.0, 1.0))


def normalize_similarity(cosine: float) -> float:
    """Map a cosine similarity from [-1, 1] to [0, 1]."""
    return (cosine + 1.0) / 2.0


class SemanticScorer:
    """Cosine-similarity scorer for bio embeddings."""

    def score(self, embedding_a: Vector, embedding_b: Vector) -> float:
        """
        Score two embeddings.

        A zero vector on either side scores 0, not the 0.5 midpoint.

        Raises:
            ContractViolationError: For empty, non-finite, or mismatched vectors
        """
        a = _as_vector(embedding_a, "A")
        b = _as_vector(embedding_b, "B")
        if a.shape != b.shape:
            raise ContractViolationError(
                f"Embeddings must have same length: {a.size} vs {b.size}"
            )
        if not np.any(a) or not np.any(b):
            return 0.0
        return normalize_similarity(cosine_similarity(a, b))

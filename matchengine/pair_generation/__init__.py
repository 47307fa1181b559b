"""Pair enumeration and batch scoring."""

from .generator import PairGenerator
from .batch import BatchScorer, BatchOptions, score_batch, sort_results, select_results

__all__ = [
    "PairGenerator",
    "BatchScorer",
    "BatchOptions",
    "score_batch",
    "sort_results",
    "select_results",
]

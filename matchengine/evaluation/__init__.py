"""Evaluation module for batch score analytics."""

from .metrics import (
    results_to_frame,
    compute_score_distribution_stats,
    compute_component_correlations,
    count_match_levels,
    ScoreReport,
    create_score_report
)

__all__ = [
    "results_to_frame",
    "compute_score_distribution_stats",
    "compute_component_correlations",
    "count_match_levels",
    "ScoreReport",
    "create_score_report"
]

"""
Score analytics for batch match results.

Used for the admin analytics views and for checking a weight set before
rolling it out:
1. Score distribution analysis
2. Per-component contribution and coverage
3. Sanity checks (each weighted component should move with the overall score)

These numbers describe how the engine behaves on a candidate set. They say
nothing about real-world match quality.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
import json

import numpy as np
import pandas as pd
from scipy.stats import spearmanr

from ..explanations.explainer import match_strength, STRENGTH_LEVELS
from ..schema import MatchResult, component_names

logger = logging.getLogger(__name__)

DEFAULT_QUANTILES = (0.1, 0.25, 0.5, 0.75, 0.9)


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    count: int
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 0.2, "p50": 0.5, "p90": 0.8}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": int(self.count),
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class ComponentSummary:
    """How one component behaved across a batch."""
    name: str
    weight: float
    mean_value: float
    mean_contribution: float
    coverage: float                      # share of pairs where the input was available
    correlation_with_score: Optional[float]  # Spearman; None if undefined

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "weight": float(self.weight),
            "mean_value": float(self.mean_value),
            "mean_contribution": float(self.mean_contribution),
            "coverage": float(self.coverage),
            "correlation_with_score": (
                None if self.correlation_with_score is None else float(self.correlation_with_score)
            ),
        }


@dataclass
class ScoreReport:
    """
    Analytics report for one batch run.

    Contains distribution statistics and per-component summaries.
    """
    weight_set: str
    n_profiles: int
    distribution_stats: ScoreDistributionStats
    components: List[ComponentSummary] = field(default_factory=list)
    match_levels: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weight_set": self.weight_set,
            "n_profiles": int(self.n_profiles),
            "distribution_stats": self.distribution_stats.to_dict(),
            "components": [c.to_dict() for c in self.components],
            "match_levels": dict(self.match_levels),
        }

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved score report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        stats = self.distribution_stats
        lines = [
            f"Score Report: {self.weight_set} ({self.n_profiles} profiles, {stats.count} pairs)",
            "=" * 50,
            "",
            "Score Distribution:",
            f"  Mean: {stats.mean:.4f}",
            f"  Std:  {stats.std:.4f}",
            f"  Min:  {stats.min:.4f}",
            f"  Max:  {stats.max:.4f}",
        ]

        for q_name, q_value in stats.quantiles.items():
            lines.append(f"  {q_name}: {q_value:.4f}")

        if self.components:
            lines.extend(["", "Components:"])
            for comp in self.components:
                corr = "n/a" if comp.correlation_with_score is None else f"{comp.correlation_with_score:.3f}"
                lines.append(
                    f"  {comp.name:<13} weight={comp.weight:.2f} mean={comp.mean_value:.3f} "
                    f"coverage={comp.coverage:.0%} spearman={corr}"
                )

        if self.match_levels:
            lines.extend(["", "Match Levels:"])
            for level, count in self.match_levels.items():
                lines.append(f"  {level}: {count}")

        return "\n".join(lines)


def results_to_frame(results: List[MatchResult]) -> pd.DataFrame:
    """
    Flatten match results into one row per pair.

    Columns: profile_a_id, profile_b_id, score, weight_set, explanation,
    then `<component>` and `<component>_available` for each component.
    """
    names = component_names(results)
    rows = []
    for result in results:
        row = {
            "profile_a_id": result.profile_a_id,
            "profile_b_id": result.profile_b_id,
            "score": result.score,
            "weight_set": result.weight_set,
            "explanation": result.explanation,
        }
        for name in names:
            comp = result.component(name)
            row[name] = comp.value if comp is not None else np.nan
            row[f"{name}_available"] = comp.available if comp is not None else False
        rows.append(row)

    columns = ["profile_a_id", "profile_b_id", "score", "weight_set", "explanation"]
    for name in names:
        columns.extend([name, f"{name}_available"])
    return pd.DataFrame(rows, columns=columns)


def compute_score_distribution_stats(
    scores: np.ndarray,
    quantiles: tuple = DEFAULT_QUANTILES
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Array of compatibility scores
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance (all zeros for an empty array)
    """
    scores = np.asarray(scores, dtype=float)
    if scores.size == 0:
        return ScoreDistributionStats(
            count=0, mean=0.0, std=0.0, min=0.0, max=0.0,
            quantiles={f"p{int(q * 100)}": 0.0 for q in quantiles}
        )

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        count=int(scores.size),
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def compute_component_correlations(frame: pd.DataFrame, components: List[str]) -> Dict[str, Optional[float]]:
    """
    Spearman correlation of each component with the overall score.

    A weighted component should correlate positively with the overall
    score. Correlation is undefined (None) with fewer than 3 pairs or when
    either column is constant.
    """
    correlations: Dict[str, Optional[float]] = {}
    for name in components:
        values = frame[name].to_numpy(dtype=float)
        scores = frame["score"].to_numpy(dtype=float)
        if len(values) < 3 or np.all(values == values[0]) or np.all(scores == scores[0]):
            correlations[name] = None
            continue
        correlation, _ = spearmanr(values, scores)
        correlations[name] = None if np.isnan(correlation) else float(correlation)
    return correlations


def count_match_levels(scores: np.ndarray) -> Dict[str, int]:
    """Count results per match-strength level, strongest first."""
    counts = {level: 0 for _, level, _ in STRENGTH_LEVELS}
    counts["potential"] = 0
    for value in scores:
        counts[match_strength(float(value)).level] += 1
    return counts


def create_score_report(
    results: List[MatchResult],
    n_profiles: int,
    quantiles: tuple = DEFAULT_QUANTILES
) -> ScoreReport:
    """
    Create a complete analytics report for a batch of results.

    Args:
        results: Match results from one weight set
        n_profiles: Number of profiles that were paired
        quantiles: Quantiles to compute

    Returns:
        ScoreReport instance
    """
    frame = results_to_frame(results)
    scores = frame["score"].to_numpy(dtype=float)
    dist_stats = compute_score_distribution_stats(scores, quantiles)

    names = component_names(results)
    correlations = compute_component_correlations(frame, names) if len(frame) else {}

    summaries = []
    for name in names:
        weights = [r.component(name).weight for r in results if r.component(name) is not None]
        weight = weights[0] if weights else 0.0
        mean_value = float(frame[name].mean()) if len(frame) else 0.0
        summaries.append(ComponentSummary(
            name=name,
            weight=weight,
            mean_value=mean_value,
            mean_contribution=mean_value * weight,
            coverage=float(frame[f"{name}_available"].mean()) if len(frame) else 0.0,
            correlation_with_score=correlations.get(name),
        ))

    weight_set = results[0].weight_set if results else "n/a"
    return ScoreReport(
        weight_set=weight_set,
        n_profiles=n_profiles,
        distribution_stats=dist_stats,
        components=summaries,
        match_levels=count_match_levels(scores),
    )

"""Explanation text and match-strength labels."""

from .explainer import MatchExplainer, ExplainerConfig, MatchStrength, match_strength

__all__ = ["MatchExplainer", "ExplainerConfig", "MatchStrength", "match_strength"]

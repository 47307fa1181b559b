"""Age compatibility scoring."""

from typing import Optional


class AgeScorer:
    """
    Piecewise-linear score over the absolute age difference.

    The curve is non-increasing in the difference and never leaves
    [FLOOR, 1.0]:

        d <= 5        1.00 -> 0.81
        5 < d <= 7    0.80 -> 0.50
        7 < d <= 15   0.50 -> 0.15
        d > 15        0.15 -> 0.05, losing 0.1 per 20 years
    """

    NEUTRAL = 0.5   # Either age unknown
    FLOOR = 0.05

    OPTIMAL_RANGE = 5
    ACCEPTABLE_RANGE = 7
    WIDE_RANGE = 15

    def score(self, age_a: Optional[int], age_b: Optional[int]) -> float:
        """
        Score the age gap between two people.

        Args:
            age_a: Age of person A, or None
            age_b: Age of person B, or None

        Returns:
            Score in [0.05, 1.0], or 0.5 if either age is missing
        """
        if age_a is None or age_b is None:
            return self.NEUTRAL
        if age_a == age_b:
            return 1.0
        return self.curve(abs(age_a - age_b))

    def curve(self, diff: float) -> float:
        """Score for an absolute age difference."""
        if diff <= self.OPTIMAL_RANGE:
            return 1.0 - (diff / self.OPTIMAL_RANGE) * 0.19

        if diff <= self.ACCEPTABLE_RANGE:
            span = self.ACCEPTABLE_RANGE - self.OPTIMAL_RANGE
            return 0.8 - ((diff - self.OPTIMAL_RANGE) / span) * 0.3

        if diff <= self.WIDE_RANGE:
            span = self.WIDE_RANGE - self.ACCEPTABLE_RANGE
            return 0.5 - ((diff - self.ACCEPTABLE_RANGE) / span) * 0.35

        return max(self.FLOOR, 0.15 - ((diff - self.WIDE_RANGE) / 20) * 0.1)

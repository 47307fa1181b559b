"""
Availability overlap scoring.

Three sub-scores with fixed weights:
    weekdays  0.5   |days_A & days_B| / max(|days_A|, |days_B|)
    weekends  0.3   1 if both are free on weekends
    evenings  0.2   1 if both are free in the evenings

A sub-score only counts when both people stated that field. The result is
the weighted sum divided by the weights that counted.
"""

from typing import Optional, Tuple, Dict

from ..schema import Availability

WEEKDAY_WEIGHT = 0.5
WEEKEND_WEIGHT = 0.3
EVENING_WEIGHT = 0.2


class AvailabilityScorer:
    """Weighted overlap of two availability descriptors."""

    def score(self, avail_a: Optional[Availability], avail_b: Optional[Availability]) -> float:
        value, _ = self.score_with_details(avail_a, avail_b)
        return value

    def score_with_details(
        self,
        avail_a: Optional[Availability],
        avail_b: Optional[Availability]
    ) -> Tuple[float, Dict[str, float]]:
        """
        Score availability and report which sub-scores applied.

        Returns:
            Tuple of (score in [0, 1], {sub-score name: sub-score})
        """
        if avail_a is None or avail_b is None:
            return 0.0, {}

        weighted = 0.0
        applicable = 0.0
        subs: Dict[str, float] = {}

        if avail_a.weekdays is not None and avail_b.weekdays is not None:
            longest = max(len(avail_a.weekdays), len(avail_b.weekdays))
            if avail_a.weekdays and avail_b.weekdays:
                overlap = len(avail_a.weekdays & avail_b.weekdays) / longest
            else:
                overlap = 0.0
            subs["weekdays"] = overlap
            weighted += overlap * WEEKDAY_WEIGHT
            applicable += WEEKDAY_WEIGHT

        if avail_a.weekends is not None and avail_b.weekends is not None:
            both = 1.0 if avail_a.weekends and avail_b.weekends else 0.0
            subs["weekends"] = both
            weighted += both * WEEKEND_WEIGHT
            applicable += WEEKEND_WEIGHT

        if avail_a.evenings is not None and avail_b.evenings is not None:
            both = 1.0 if avail_a.evenings and avail_b.evenings else 0.0
            subs["evenings"] = both
            weighted += both * EVENING_WEIGHT
            applicable += EVENING_WEIGHT

        if applicable == 0:
            return 0.0, subs

        return min(1.0, weighted / applicable), subs

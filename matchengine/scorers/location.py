"""
Location scoring from free-text "city, region" strings.

Tiers:
    identical string                    1.00
    same city                           0.95
    same region, neighboring cities     0.70
    same region, other city             0.50
    anything else                       0.20
    either side missing                 0.50 (neutral)
"""

from typing import Optional, NamedTuple

from ..configs.tables import ScoringTables


class ParsedLocation(NamedTuple):
    full: str
    city: str
    region: str


def parse_location(location: Optional[str]) -> Optional[ParsedLocation]:
    """
    Normalize and split a location string on its first comma.

    Returns None for missing or blank input. Never raises.
    """
    if not isinstance(location, str):
        return None
    full = " ".join(location.strip().lower().split())
    if not full:
        return None
    parts = [p.strip() for p in full.split(",")]
    city = parts[0]
    region = parts[1] if len(parts) > 1 else ""
    return ParsedLocation(full=full, city=city, region=region)


class LocationScorer:
    """
    Tiered string match with a nearby-cities table for same-region pairs.

    Attributes:
        tables: Scoring tables providing the nearby-cities lookup
    """

    EXACT = 1.0
    SAME_CITY = 0.95
    NEARBY = 0.7
    SAME_REGION = 0.5
    DIFFERENT = 0.2
    NEUTRAL = 0.5

    def __init__(self, tables: ScoringTables):
        self.tables = tables

    def score(self, location_a: Optional[str], location_b: Optional[str]) -> float:
        loc_a = parse_location(location_a)
        loc_b = parse_location(location_b)
        if loc_a is None or loc_b is None:
            return self.NEUTRAL

        return self.tier(loc_a, loc_b)

    def tier(self, loc_a: ParsedLocation, loc_b: ParsedLocation) -> float:
        if loc_a.full == loc_b.full:
            return self.EXACT

        if loc_a.city and loc_a.city == loc_b.city:
            return self.SAME_CITY

        if loc_a.region and loc_a.region == loc_b.region:
            if loc_a.city and loc_b.city and self.tables.are_nearby(loc_a.city, loc_b.city):
                return self.NEARBY
            return self.SAME_REGION

        return self.DIFFERENT

"""
Pytest configuration and shared fixtures.
"""

from typing import List

import pytest

from matchengine import Profile
from matchengine.configs import ScoringTables, load_default_config
from matchengine.fusion import CompatibilityAggregator, WeightSet


@pytest.fixture
def default_config():
    """Packaged default configuration."""
    return load_default_config()


@pytest.fixture
def tables() -> ScoringTables:
    """Small hand-written tables so expected values are easy to read."""
    return ScoringTables.from_dict({
        "interest_synonyms": {
            "hiking": ["trekking", "walking"],
            "cooking": ["baking"],
            "reading": ["books"],
        },
        "nearby_cities": {
            "san francisco": ["oakland", "berkeley"],
        },
    })


@pytest.fixture
def general_aggregator(tables) -> CompatibilityAggregator:
    """Aggregator with the general weight set and no explainer."""
    return CompatibilityAggregator(WeightSet.named("general"), tables)


@pytest.fixture
def alice() -> Profile:
    return Profile(
        id="alice",
        display_name="Alice",
        age=30,
        location="San Francisco, CA",
        interests=("Hiking", "Reading", "Cooking"),
        embedding=(1.0, 0.0, 0.0),
        availability={"weekdays": ["monday", "friday"], "weekends": True, "evenings": False},
    )


@pytest.fixture
def bob() -> Profile:
    return Profile(
        id="bob",
        display_name="Bob",
        age=32,
        location="Oakland, CA",
        interests=("hiking", "books", "music"),
        embedding=(0.8, 0.6, 0.0),
        availability={"weekdays": ["friday"], "weekends": True, "evenings": True},
    )


@pytest.fixture
def empty_profile() -> Profile:
    """Profile with every optional field missing."""
    return Profile(id="ghost")


@pytest.fixture
def candidate_profiles() -> List[Profile]:
    """Five profiles with a mix of present and missing data."""
    return [
        Profile(id="p1", age=25, location="San Francisco, CA",
                interests=("hiking", "music"), embedding=(1.0, 0.0)),
        Profile(id="p2", age=27, location="Oakland, CA",
                interests=("hiking", "cooking"), embedding=(0.9, 0.1)),
        Profile(id="p3", age=45, location="Brooklyn, NY",
                interests=("art",), embedding=(0.0, 1.0)),
        Profile(id="p4", age=26, location="San Francisco, CA",
                interests=("music", "hiking")),
        Profile(id="p5"),
    ]

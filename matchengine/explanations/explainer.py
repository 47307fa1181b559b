"""
Human-readable match explanations.

Explanations are built only from the component scores and the two
profiles, so the same pair always gets the same text.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, List, NamedTuple, Optional

from ..schema import Profile, ComponentScore
from ..scorers.interests import normalize_interests
from ..scorers.location import LocationScorer

FALLBACK_PHRASE = "This could be an interesting connection"


class MatchStrength(NamedTuple):
    level: str
    label: str


# (minimum score, level, label), highest first
STRENGTH_LEVELS = [
    (0.85, "excellent", "Excellent Match"),
    (0.70, "great", "Great Match"),
    (0.55, "good", "Good Match"),
    (0.35, "fair", "Fair Match"),
]


def match_strength(score: float) -> MatchStrength:
    """Map an overall score in [0, 1] to a display level."""
    for minimum, level, label in STRENGTH_LEVELS:
        if score >= minimum:
            return MatchStrength(level, label)
    return MatchStrength("potential", "Potential Match")


@dataclass
class ExplainerConfig:
    """
    Thresholds that decide which phrases appear in an explanation.

    Attributes:
        interest_min: Interest component needed to mention shared interests
        age_min: Age component needed to mention age
        semantic_min: Semantic component needed to mention bio similarity
        max_shared_interests: How many shared interests to name
    """
    interest_min: float = 0.35
    age_min: float = 0.75
    semantic_min: float = 0.7
    max_shared_interests: int = 3

    def validate(self) -> None:
        """Validate configuration values."""
        for attr in ["interest_min", "age_min", "semantic_min"]:
            val = getattr(self, attr)
            if not 0 <= val <= 1:
                raise ValueError(f"{attr} must be in [0, 1], got {val}")
        if self.max_shared_interests < 1:
            raise ValueError(f"max_shared_interests must be >= 1, got {self.max_shared_interests}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ExplainerConfig":
        """Create from main config dictionary."""
        section = config.get("explanations", {}) or {}
        defaults = cls()
        return cls(
            interest_min=section.get("interest_min", defaults.interest_min),
            age_min=section.get("age_min", defaults.age_min),
            semantic_min=section.get("semantic_min", defaults.semantic_min),
            max_shared_interests=section.get("max_shared_interests", defaults.max_shared_interests),
        )


class MatchExplainer:
    """Builds the one-line explanation stored on a MatchResult."""

    def __init__(self, config: Optional[ExplainerConfig] = None):
        self.config = config or ExplainerConfig()
        self.config.validate()

    def explain(
        self,
        profile_a: Profile,
        profile_b: Profile,
        components: Dict[str, ComponentScore]
    ) -> str:
        """
        Explain a match in a short sentence or two.

        Args:
            profile_a: First profile
            profile_b: Second profile
            components: Component name -> ComponentScore for this pair

        Returns:
            Phrases joined with ". " and ending with a period
        """
        phrases = self.phrases(profile_a, profile_b, components)
        if not phrases:
            phrases = [FALLBACK_PHRASE]
        return ". ".join(phrases) + "."

    def phrases(
        self,
        profile_a: Profile,
        profile_b: Profile,
        components: Dict[str, ComponentScore]
    ) -> List[str]:
        phrases = []

        interest = components.get("interest")
        if interest is not None and interest.value >= self.config.interest_min:
            shared = self._shared_interests(profile_a, profile_b)
            if shared:
                phrases.append(f"You both enjoy {', '.join(shared)}")

        age = components.get("age")
        if age is not None and age.available and age.value >= self.config.age_min:
            diff = abs(profile_a.age - profile_b.age)
            if diff <= 2:
                phrases.append("You're very close in age")
            elif diff <= 5:
                phrases.append("You're similar in age")

        location = components.get("location")
        if location is not None and location.available:
            if location.value >= LocationScorer.SAME_CITY:
                phrases.append(f"You're both in {profile_a.location.strip()}")
            elif location.value == LocationScorer.NEARBY:
                phrases.append("You live near each other")

        semantic = components.get("semantic")
        if semantic is not None and semantic.available and semantic.value >= self.config.semantic_min:
            phrases.append("Your profiles show good compatibility")

        return phrases

    def _shared_interests(self, profile_a: Profile, profile_b: Profile) -> List[str]:
        """Shared interests in A's original spelling and order."""
        keys_b = set(normalize_interests(profile_b.interests))
        shared = []
        for tag in profile_a.interests:
            key = normalize_interests([tag])
            if key and key[0] in keys_b and tag not in shared:
                shared.append(tag)
        return shared[:self.config.max_shared_interests]

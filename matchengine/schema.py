"""
Data structures shared by the scorers, the aggregator and the batch driver.

Profiles are read-only inputs supplied by the storage layer. Every optional
field may be missing, so scorers only ever see None, never a KeyError.

MatchResult is immutable: recomputing a pair produces a new result.
"""

import math
import numbers
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Tuple, FrozenSet, Iterable

MAX_AGE = 150

# Every component the aggregator knows how to compute, in report order.
COMPONENTS = ("interest", "semantic", "age", "location", "availability")


def _clean_tags(values: Optional[Iterable[Any]], field_name: str) -> Tuple[str, ...]:
    """Strip tags, drop empties and duplicates, keep first-seen order."""
    if values is None:
        return ()
    if isinstance(values, str) or not isinstance(values, (list, tuple, set, frozenset)):
        raise ValueError(f"{field_name} must be a list of strings, got {type(values).__name__}")

    seen = set()
    cleaned = []
    for value in values:
        if not isinstance(value, str):
            raise ValueError(f"{field_name} must contain only strings, got {value!r}")
        tag = value.strip()
        if tag and tag not in seen:
            seen.add(tag)
            cleaned.append(tag)
    return tuple(cleaned)


def _is_missing(value: Any) -> bool:
    """True for None and for the NaN placeholders pandas puts in empty cells."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _first_present(d: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        if not _is_missing(d.get(key)):
            return str(d[key])
    return ""


@dataclass(frozen=True)
class Availability:
    """
    When a person is free to attend events.

    None on any field means the person did not say.

    Attributes:
        weekdays: Lower-cased weekday names (e.g. {"monday", "friday"})
        weekends: Free on weekends
        evenings: Free in the evenings
    """
    weekdays: Optional[FrozenSet[str]] = None
    weekends: Optional[bool] = None
    evenings: Optional[bool] = None

    def __post_init__(self):
        """Normalize weekday names and validate flags."""
        if self.weekdays is not None:
            days = _clean_tags(self.weekdays, "weekdays")
            object.__setattr__(self, "weekdays", frozenset(d.lower() for d in days))
        for attr in ["weekends", "evenings"]:
            val = getattr(self, attr)
            if val is not None and not isinstance(val, bool):
                raise ValueError(f"{attr} must be a boolean, got {val!r}")

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> Optional["Availability"]:
        """Create from a storage row; returns None for an empty descriptor."""
        if not d:
            return None
        return cls(
            weekdays=d.get("weekdays"),
            weekends=d.get("weekends"),
            evenings=d.get("evenings"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "weekdays": sorted(self.weekdays) if self.weekdays is not None else None,
            "weekends": self.weekends,
            "evenings": self.evenings,
        }


@dataclass(frozen=True)
class Profile:
    """
    A user profile as seen by the scoring engine.

    Attributes:
        id: Profile identifier
        display_name: Name shown in the app
        age: Age in years, or None
        location: Free-text location such as "Oakland, CA", or None
        interests: Interest tags, stripped and de-duplicated in input order
        bio: Free-text biography, or None
        embedding: Precomputed bio embedding, or None
        availability: Availability descriptor, or None
    """
    id: str
    display_name: str = ""
    age: Optional[int] = None
    location: Optional[str] = None
    interests: Tuple[str, ...] = ()
    bio: Optional[str] = None
    embedding: Optional[Tuple[float, ...]] = None
    availability: Optional[Availability] = None

    def __post_init__(self):
        """Validate field types and freeze collections."""
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"id must be a non-empty string, got {self.id!r}")

        if self.age is not None:
            if isinstance(self.age, bool) or not isinstance(self.age, int):
                raise ValueError(f"age must be an integer, got {self.age!r}")
            if not 0 <= self.age < MAX_AGE:
                raise ValueError(f"age must be between 0 and {MAX_AGE - 1}, got {self.age}")

        object.__setattr__(self, "interests", _clean_tags(self.interests, "interests"))

        if self.embedding is not None:
            try:
                vector = tuple(float(x) for x in self.embedding)
            except (TypeError, ValueError) as e:
                raise ValueError(f"embedding must be a sequence of numbers: {e}") from e
            object.__setattr__(self, "embedding", vector)

        if isinstance(self.availability, dict):
            object.__setattr__(self, "availability", Availability.from_dict(self.availability))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Profile":
        """
        Create from a storage row.

        Accepts either `id` or `user_id` as the identifier and `name` as an
        alias for `display_name`. Empty cells (None, NaN, blank strings)
        become None.
        """
        raw_id = d.get("id", d.get("user_id"))
        if _is_missing(raw_id):
            raise ValueError("profile row has no id")

        age = d.get("age")
        if _is_missing(age):
            age = None
        elif isinstance(age, numbers.Integral) and not isinstance(age, bool):
            age = int(age)
        elif isinstance(age, numbers.Real) and float(age).is_integer():
            age = int(age)

        location = d.get("location")
        bio = d.get("bio")
        interests = d.get("interests")
        embedding = d.get("embedding", d.get("bio_embedding"))
        availability = d.get("availability")
        if not isinstance(availability, Availability):
            availability = Availability.from_dict(availability if isinstance(availability, dict) else None)

        return cls(
            id=str(raw_id),
            display_name=_first_present(d, "display_name", "name"),
            age=age,
            location=None if _is_missing(location) else str(location),
            interests=() if _is_missing(interests) else interests,
            bio=None if _is_missing(bio) else str(bio),
            embedding=None if _is_missing(embedding) else embedding,
            availability=availability,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "age": self.age,
            "location": self.location,
            "interests": list(self.interests),
            "bio": self.bio,
            "embedding": list(self.embedding) if self.embedding is not None else None,
            "availability": self.availability.to_dict() if self.availability else None,
        }


@dataclass(frozen=True)
class InterestScore:
    """Output of the interest overlap scorer."""
    exact_matches: int
    fuzzy_matches: int           # floor of accumulated fuzzy points
    score: float                 # [0, 1]
    shared: Tuple[str, ...] = ()  # normalized tags present on both sides


@dataclass(frozen=True)
class ComponentScore:
    """
    One factor's contribution to a match.

    Attributes:
        name: Component name (interest, age, location, availability, semantic)
        value: Score in [0, 1]
        weight: Weight from the active weight set
        available: False when the scorer used its fallback for missing input
        details: Scorer-specific diagnostics
    """
    name: str
    value: float
    weight: float
    available: bool = True
    details: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def contribution(self) -> float:
        """Weighted contribution to the overall score."""
        return self.value * self.weight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": round(self.value, 6),
            "weight": self.weight,
            "contribution": round(self.contribution, 6),
            "available": self.available,
            "details": dict(self.details),
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MatchResult:
    """
    Compatibility of one pair of profiles.

    Equality ignores `computed_at`, so rescoring the same inputs gives an
    equal result.
    """
    profile_a_id: str
    profile_b_id: str
    score: float
    components: Tuple[ComponentScore, ...]
    explanation: Optional[str] = None
    weight_set: str = "general"
    computed_at: datetime = field(default_factory=_utcnow, compare=False)

    @property
    def pair_key(self) -> Tuple[str, str]:
        """Unordered pair key (smaller id first) for symmetric caches."""
        return tuple(sorted((self.profile_a_id, self.profile_b_id)))

    def component(self, name: str) -> Optional[ComponentScore]:
        """Return the named component, or None if it was not computed."""
        for comp in self.components:
            if comp.name == name:
                return comp
        return None

    def breakdown(self) -> Dict[str, float]:
        """Component name -> value."""
        return {comp.name: comp.value for comp in self.components}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "profile_a_id": self.profile_a_id,
            "profile_b_id": self.profile_b_id,
            "score": round(self.score, 6),
            "weight_set": self.weight_set,
            "components": [c.to_dict() for c in self.components],
            "explanation": self.explanation,
            "computed_at": self.computed_at.isoformat(),
        }


def component_names(results: List[MatchResult]) -> List[str]:
    """Component names across results, in first-seen order."""
    names: List[str] = []
    for result in results:
        for comp in result.components:
            if comp.name not in names:
                names.append(comp.name)
    return names

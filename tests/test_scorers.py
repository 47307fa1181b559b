"""Tests for the per-factor scorers."""

import pytest

from matchengine.errors import ContractViolationError
from matchengine.schema import Availability
from matchengine.scorers import (
    AgeScorer,
    AvailabilityScorer,
    InterestScorer,
    LocationScorer,
    SemanticScorer,
    cosine_similarity,
    normalize_interests,
    parse_location,
)


class TestInterestScorer:
    """Interest overlap with fuzzy partial credit."""

    @pytest.fixture
    def scorer(self, tables):
        return InterestScorer(tables)

    def test_half_overlap(self, scorer):
        result = scorer.score(["hiking", "reading"], ["hiking", "cooking"])
        assert result.exact_matches == 1
        assert result.fuzzy_matches == 0
        assert result.score == pytest.approx(0.5)
        assert result.shared == ("hiking",)

    def test_identical_sets_score_one(self, scorer):
        assert scorer.score(["art", "music"], ["music", "art"]).score == pytest.approx(1.0)

    def test_matching_is_case_insensitive(self, scorer):
        result = scorer.score(["Hiking"], [" hiking "])
        assert result.exact_matches == 1
        assert result.score == pytest.approx(1.0)

    def test_single_related_pair_gets_partial_credit(self, scorer):
        result = scorer.score(["hiking"], ["trekking"])
        assert result.exact_matches == 0
        assert result.fuzzy_matches == 0  # half a point rounds down
        assert result.score == pytest.approx(0.25)

    def test_two_related_pairs(self, scorer):
        result = scorer.score(["hiking", "cooking"], ["trekking", "baking"])
        assert result.fuzzy_matches == 1
        assert result.score == pytest.approx(0.25)

    def test_exact_and_fuzzy_combined(self, scorer):
        result = scorer.score(["hiking", "walking"], ["hiking", "trekking"])
        assert result.exact_matches == 1
        assert result.score == pytest.approx(0.75)

    def test_score_is_capped_at_one(self, scorer):
        tags = ["hiking", "trekking", "walking"]
        assert scorer.score(tags, tags).score == pytest.approx(1.0)

    @pytest.mark.parametrize("a, b", [([], ["hiking"]), (["hiking"], None), (None, None)])
    def test_empty_side_scores_zero(self, scorer, a, b):
        result = scorer.score(a, b)
        assert result.score == 0.0
        assert result.exact_matches == 0

    def test_symmetric(self, scorer):
        a = ["hiking", "cooking", "art"]
        b = ["trekking", "cooking"]
        assert scorer.score(a, b).score == pytest.approx(scorer.score(b, a).score)

    def test_normalize_interests(self):
        assert normalize_interests(["Board  Games", "board games", " ", "Art"]) == ("board games", "art")


class TestAgeScorer:

    @pytest.fixture
    def scorer(self):
        return AgeScorer()

    @pytest.mark.parametrize("age_a, age_b, expected", [
        (30, 30, 1.0),
        (30, 35, 0.81),
        (30, 37, 0.5),
        (30, 45, 0.15),
        (20, 80, 0.05),
    ])
    def test_curve_values(self, scorer, age_a, age_b, expected):
        assert scorer.score(age_a, age_b) == pytest.approx(expected)

    def test_missing_age_is_neutral(self, scorer):
        assert scorer.score(None, 30) == 0.5
        assert scorer.score(30, None) == 0.5

    def test_symmetric(self, scorer):
        assert scorer.score(25, 40) == scorer.score(40, 25)

    def test_non_increasing_and_bounded(self, scorer):
        values = [scorer.curve(d) for d in range(0, 120)]
        assert all(later <= earlier for earlier, later in zip(values, values[1:]))
        assert min(values) >= AgeScorer.FLOOR
        assert max(values) <= 1.0


class TestLocationScorer:

    @pytest.fixture
    def scorer(self, tables):
        return LocationScorer(tables)

    @pytest.mark.parametrize("a, b, expected", [
        ("San Francisco, CA", "san francisco, ca", 1.0),
        ("San Francisco, CA", "San Francisco", 0.95),
        ("San Francisco, CA", "Oakland, CA", 0.7),
        ("Berkeley, CA", "San Francisco, CA", 0.7),
        ("San Francisco, CA", "Fresno, CA", 0.5),
        ("San Francisco, CA", "Brooklyn, NY", 0.2),
        ("Oakland", "Berkeley", 0.2),
    ])
    def test_tiers(self, scorer, a, b, expected):
        assert scorer.score(a, b) == pytest.approx(expected)

    @pytest.mark.parametrize("a, b", [(None, "Oakland, CA"), ("Oakland, CA", "   "), (None, None)])
    def test_missing_location_is_neutral(self, scorer, a, b):
        assert scorer.score(a, b) == 0.5

    def test_parse_location(self):
        parsed = parse_location("  Oakland,  CA ")
        assert parsed.city == "oakland"
        assert parsed.region == "ca"
        assert parse_location("") is None
        assert parse_location(None) is None


class TestAvailabilityScorer:

    @pytest.fixture
    def scorer(self):
        return AvailabilityScorer()

    def test_weighted_sub_scores(self, scorer, alice, bob):
        value, subs = scorer.score_with_details(alice.availability, bob.availability)
        assert subs == {"weekdays": 0.5, "weekends": 1.0, "evenings": 0.0}
        assert value == pytest.approx(0.55)

    def test_missing_descriptor_scores_zero(self, scorer, alice):
        assert scorer.score(alice.availability, None) == 0.0
        assert scorer.score(None, None) == 0.0

    def test_only_shared_fields_count(self, scorer):
        a = Availability(weekends=True, evenings=True)
        b = Availability(weekends=True)
        value, subs = scorer.score_with_details(a, b)
        assert subs == {"weekends": 1.0}
        assert value == pytest.approx(1.0)

    def test_no_comparable_fields_scores_zero(self, scorer):
        value, subs = scorer.score_with_details(Availability(weekends=True), Availability(evenings=True))
        assert value == 0.0
        assert subs == {}

    def test_empty_weekday_lists(self, scorer):
        assert scorer.score(Availability(weekdays=[]), Availability(weekdays=[])) == 0.0


class TestSemanticScorer:

    @pytest.fixture
    def scorer(self):
        return SemanticScorer()

    def test_identical_vectors(self, scorer):
        assert scorer.score([0.3, 0.4], [0.3, 0.4]) == pytest.approx(1.0)

    def test_opposite_vectors(self, scorer):
        assert scorer.score([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(0.0)

    def test_orthogonal_vectors(self, scorer):
        assert scorer.score([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.5)

    def test_zero_vector_scores_zero(self, scorer):
        assert scorer.score([0.0, 0.0], [1.0, 0.0]) == 0.0

    def test_length_mismatch_raises(self, scorer):
        with pytest.raises(ContractViolationError):
            scorer.score([1, 0], [1, 0, 0])

    @pytest.mark.parametrize("bad", [[], [float("nan"), 1.0], [float("inf"), 0.0]])
    def test_malformed_vectors_raise(self, scorer, bad):
        with pytest.raises(ContractViolationError):
            scorer.score(bad, [1.0, 0.0])

    def test_contract_violation_is_a_value_error(self, scorer):
        with pytest.raises(ValueError):
            scorer.score([1.0], [1.0, 2.0])

    @pytest.mark.parametrize("magnitude", [1e200, 1e-200, 1e-310])
    def test_extreme_magnitudes(self, scorer, magnitude):
        same = [magnitude, magnitude]
        opposite = [-magnitude, -magnitude]
        assert scorer.score(same, same) == pytest.approx(1.0)
        assert scorer.score(same, opposite) == pytest.approx(0.0)
        assert scorer.score([magnitude, 0.0], [0.0, magnitude]) == pytest.approx(0.5)

    def test_mixed_magnitudes(self, scorer):
        assert scorer.score([1e200, 0.0], [1e-200, 0.0]) == pytest.approx(1.0)
        assert cosine_similarity([1e300, 1e300], [1e300, -1e300]) == pytest.approx(0.0)

    def test_cosine_similarity(self):
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
        assert cosine_similarity([2, 0], [5, 0]) == pytest.approx(1.0)
        assert cosine_similarity([0, 0], [1, 0]) == 0.0

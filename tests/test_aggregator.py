"""Tests for weight sets and the compatibility aggregator."""

import pytest

from matchengine import Profile, score
from matchengine.errors import ConfigurationError, ContractViolationError
from matchengine.explanations import MatchExplainer
from matchengine.fusion import CompatibilityAggregator, WeightSet, resolve_weight_set
from matchengine.fusion import aggregator as aggregator_module


# Expected component values for the alice/bob fixtures:
#   interest     (1 exact + 0.5 * 0.5 fuzzy) / 3
#   semantic     (0.8 + 1) / 2
#   age          diff 2 -> 1 - 0.4 * 0.19
#   location     nearby cities in the same region
INTEREST = 1.25 / 3
SEMANTIC = 0.9
AGE = 0.924
LOCATION = 0.7


class TestWeightSet:

    def test_builtin_sets(self):
        general = WeightSet.named("general")
        assert general.components == ("interest", "semantic", "age", "location", "availability")
        assert general.total == pytest.approx(1.0)

        event = WeightSet.named("event_context")
        assert event.components == ("interest", "age", "location")
        assert event.weight("semantic") == 0.0

    def test_unknown_name_raises(self):
        with pytest.raises(ConfigurationError):
            WeightSet.named("speed_dating")

    def test_unknown_component_raises(self):
        with pytest.raises(ConfigurationError):
            WeightSet("custom", {"charisma": 1.0})

    def test_negative_weight_raises(self):
        with pytest.raises(ConfigurationError):
            WeightSet("custom", {"interest": 1.2, "age": -0.2})

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_weight_raises(self, bad):
        with pytest.raises(ConfigurationError):
            WeightSet("custom", {"interest": bad})

    def test_empty_set_raises(self):
        with pytest.raises(ConfigurationError):
            WeightSet("custom", {})

    def test_bio_alias(self):
        weights = WeightSet("legacy", {"interest": 0.5, "bio": 0.5})
        assert weights.weight("semantic") == 0.5
        assert "bio" not in weights.weights

    def test_sum_not_one_only_warns(self, caplog):
        weights = WeightSet("heavy", {"interest": 2.0})
        assert weights.total == 2.0
        assert "sums to" in caplog.text

    def test_resolve_weight_set(self):
        assert resolve_weight_set(None).name == "general"
        existing = WeightSet.named("event_context")
        assert resolve_weight_set(existing) is existing
        with pytest.raises(ConfigurationError):
            resolve_weight_set(3)


class TestCompatibilityAggregator:

    def test_general_weighted_sum(self, general_aggregator, alice, bob):
        result = general_aggregator.score(alice, bob)
        breakdown = result.breakdown()

        assert breakdown["interest"] == pytest.approx(INTEREST)
        assert breakdown["semantic"] == pytest.approx(SEMANTIC)
        assert breakdown["age"] == pytest.approx(AGE)
        assert breakdown["location"] == pytest.approx(LOCATION)
        assert breakdown["availability"] == pytest.approx(0.55)

        expected = 0.4 * INTEREST + 0.3 * SEMANTIC + 0.2 * AGE + 0.1 * LOCATION
        assert result.score == pytest.approx(expected)
        assert result.weight_set == "general"
        assert result.profile_a_id == "alice"
        assert result.profile_b_id == "bob"

    def test_event_context_ignores_embeddings(self, tables, alice, bob):
        aggregator = CompatibilityAggregator(WeightSet.named("event_context"), tables)
        result = aggregator.score(alice, bob)
        assert [c.name for c in result.components] == ["interest", "age", "location"]
        assert result.score == pytest.approx(0.5 * INTEREST + 0.3 * AGE + 0.2 * LOCATION)

    def test_missing_data_is_not_renormalized(self, general_aggregator, alice, empty_profile):
        result = general_aggregator.score(alice, empty_profile)
        # Only the neutral age and location fallbacks contribute
        assert result.score == pytest.approx(0.2 * 0.5 + 0.1 * 0.5)
        assert not result.component("semantic").available
        assert not result.component("interest").available
        assert result.component("semantic").value == 0.0

    def test_component_details(self, general_aggregator, alice, bob):
        result = general_aggregator.score(alice, bob)
        interest = result.component("interest")
        assert interest.details["exact_matches"] == 1
        assert interest.details["shared"] == ["hiking"]
        assert result.component("age").details == {"age_difference": 2}
        assert result.component("availability").details["weekends"] == 1.0

    def test_score_is_clamped(self, tables):
        aggregator = CompatibilityAggregator(WeightSet("heavy", {"interest": 2.0}), tables)
        a = Profile(id="a", interests=("art",))
        b = Profile(id="b", interests=("art",))
        assert aggregator.score(a, b).score == 1.0

    def test_score_always_in_range(self, general_aggregator, candidate_profiles):
        for a in candidate_profiles:
            for b in candidate_profiles:
                assert 0.0 <= general_aggregator.score(a, b).score <= 1.0

    def test_deterministic(self, general_aggregator, alice, bob):
        assert general_aggregator.score(alice, bob) == general_aggregator.score(alice, bob)

    def test_symmetric_score(self, general_aggregator, alice, bob):
        forward = general_aggregator.score(alice, bob)
        backward = general_aggregator.score(bob, alice)
        assert forward.score == pytest.approx(backward.score)
        assert forward.pair_key == backward.pair_key

    def test_mismatched_embeddings_raise(self, general_aggregator):
        a = Profile(id="a", embedding=(1.0, 0.0))
        b = Profile(id="b", embedding=(1.0, 0.0, 0.0))
        with pytest.raises(ContractViolationError):
            general_aggregator.score(a, b)

    def test_huge_opposite_embeddings(self, general_aggregator):
        a = Profile(id="a", embedding=(1e200, 1e200))
        b = Profile(id="b", embedding=(-1e200, -1e200))
        result = general_aggregator.score(a, b)
        assert result.component("semantic").value == pytest.approx(0.0)
        assert 0.0 <= result.score <= 1.0

    def test_one_missing_embedding_does_not_raise(self, general_aggregator, alice):
        other = Profile(id="other", embedding=None)
        assert general_aggregator.score(alice, other).component("semantic").available is False

    def test_no_explanation_without_explainer(self, general_aggregator, alice, bob):
        assert general_aggregator.score(alice, bob).explanation is None

    def test_explanation_with_explainer(self, tables, alice, bob):
        aggregator = CompatibilityAggregator(WeightSet.named("general"), tables, MatchExplainer())
        assert aggregator.score(alice, bob).explanation == (
            "You both enjoy Hiking. You're very close in age. "
            "You live near each other. Your profiles show good compatibility."
        )

    def test_from_config(self, default_config):
        aggregator = CompatibilityAggregator.from_config(default_config, "event_context")
        assert aggregator.weight_set.name == "event_context"
        assert aggregator.explainer is not None
        assert aggregator.tables.are_nearby("oakland", "san francisco")

    def test_from_config_unknown_set(self, default_config):
        with pytest.raises(ConfigurationError):
            CompatibilityAggregator.from_config(default_config, "speed_dating")


class TestScoreFunction:

    def test_default_weights(self, alice, bob):
        result = score(alice, bob)
        assert result.weight_set == "general"
        assert 0.0 <= result.score <= 1.0
        assert result.explanation

    def test_unknown_weight_set(self, alice, bob):
        with pytest.raises(ConfigurationError):
            score(alice, bob, weights="speed_dating")

    def test_custom_weight_set(self, alice, bob):
        result = score(alice, bob, weights=WeightSet("ages_only", {"age": 1.0}))
        assert result.score == pytest.approx(AGE)

    def test_custom_weight_set_reuses_packaged_tables(self, alice, bob, monkeypatch):
        aggregator_module._default_components.cache_clear()
        calls = []
        real_loader = aggregator_module.load_default_config

        def counting_loader():
            calls.append(1)
            return real_loader()

        monkeypatch.setattr(aggregator_module, "load_default_config", counting_loader)
        weights = WeightSet("ages_only", {"age": 1.0})
        first = score(alice, bob, weights=weights)
        second = score(alice, bob, weights=weights)

        assert first == second
        assert len(calls) == 1
        aggregator_module._default_components.cache_clear()

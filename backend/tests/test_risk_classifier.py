"""
Tests for the two risk classifiers and the signal set.

1. Signal-count thresholds and monotonicity
2. Cumulative-impact thresholds over negative, zero and large sums
3. Toggle / clear mutate in place and reclassify immediately
4. Signal sets are always complete
5. RiskCategory ordering is ordinal, not alphabetical
"""
import pytest

from signify.models.risk import RiskCategory, SignalName, SignalSet
from signify.services.risk.classifier import (
    classify_by_cumulative_impact,
    classify_by_signals,
    clear_all_signals,
    toggle_signal,
)


def _signals_with(count):
    names = list(SignalName)[:count]
    return SignalSet.from_mapping({n.value: True for n in names})


# =============================================================================
# TEST: SIGNAL-COUNT CLASSIFIER
# =============================================================================

class TestClassifyBySignals:
    """Boolean-count classifier."""

    @pytest.mark.parametrize("count,expected", [
        (0, RiskCategory.GREEN),
        (1, RiskCategory.AMBER),
        (2, RiskCategory.AMBER),
        (3, RiskCategory.RED),
        (4, RiskCategory.RED),
        (7, RiskCategory.RED),
    ])
    def test_thresholds(self, count, expected):
        assert classify_by_signals(_signals_with(count)) == expected

    def test_monotonic_in_active_count(self):
        """More flags never lowers risk."""
        levels = [classify_by_signals(_signals_with(n)) for n in range(len(SignalName) + 1)]
        assert all(a <= b for a, b in zip(levels, levels[1:]))

    def test_which_signals_does_not_matter(self):
        first = SignalSet(previous_homelessness=True, care_status=True, youth_justice=True)
        second = SignalSet(parental_crimes=True, education_status=True, temporary_accommodation=True)
        assert classify_by_signals(first) == classify_by_signals(second) == RiskCategory.RED


# =============================================================================
# TEST: CUMULATIVE-IMPACT CLASSIFIER
# =============================================================================

class TestClassifyByCumulativeImpact:
    """Signed running-sum classifier."""

    @pytest.mark.parametrize("cumulative,expected", [
        (-5, RiskCategory.GREEN),
        (-1, RiskCategory.GREEN),
        (0, RiskCategory.GREEN),
        (1, RiskCategory.AMBER),
        (2, RiskCategory.AMBER),
        (3, RiskCategory.RED),
        (10, RiskCategory.RED),
        (10 ** 9, RiskCategory.RED),
        (-(10 ** 9), RiskCategory.GREEN),
    ])
    def test_thresholds(self, cumulative, expected):
        assert classify_by_cumulative_impact(cumulative) == expected

    def test_monotonic(self):
        levels = [classify_by_cumulative_impact(n) for n in range(-10, 11)]
        assert all(a <= b for a, b in zip(levels, levels[1:]))


# =============================================================================
# TEST: SIGNAL MUTATIONS
# =============================================================================

class TestSignalMutations:
    """toggle_signal / clear_all_signals."""

    def test_toggle_flips_in_place(self):
        signals = SignalSet()
        result = toggle_signal(signals, SignalName.CARE_STATUS)

        assert result is signals
        assert signals.care_status is True
        assert classify_by_signals(signals) == RiskCategory.AMBER

        toggle_signal(signals, "care_status")
        assert signals.care_status is False
        assert classify_by_signals(signals) == RiskCategory.GREEN

    def test_toggle_unknown_key_is_noop(self):
        signals = SignalSet(youth_justice=True)
        before = signals.to_dict()

        toggle_signal(signals, "owns_a_boat")

        assert signals.to_dict() == before

    def test_third_toggle_reaches_red(self):
        signals = SignalSet()
        for name in ("previous_homelessness", "parental_crimes", "education_status"):
            toggle_signal(signals, name)
        assert classify_by_signals(signals) == RiskCategory.RED

    def test_clear_all_goes_green(self):
        signals = SignalSet(**{s.value: True for s in SignalName})
        assert classify_by_signals(signals) == RiskCategory.RED

        result = clear_all_signals(signals)

        assert result is signals
        assert signals.count_active() == 0
        assert classify_by_signals(signals) == RiskCategory.GREEN


# =============================================================================
# TEST: SIGNAL SET SHAPE
# =============================================================================

class TestSignalSet:

    def test_missing_signals_default_false(self):
        signals = SignalSet.from_mapping({"care_status": True})
        data = signals.to_dict()

        assert set(data) == {s.value for s in SignalName}
        assert data["care_status"] is True
        assert sum(data.values()) == 1

    def test_unknown_keys_dropped(self):
        signals = SignalSet.from_mapping({"care_status": 1, "favourite_colour": True})
        assert signals.to_dict() == SignalSet(care_status=True).to_dict()

    def test_none_mapping(self):
        assert SignalSet.from_mapping(None) == SignalSet()

    def test_active_in_declaration_order(self):
        signals = SignalSet(education_status=True, previous_homelessness=True)
        assert signals.active() == [SignalName.PREVIOUS_HOMELESSNESS, SignalName.EDUCATION_STATUS]


# =============================================================================
# TEST: RISK CATEGORY ORDER
# =============================================================================

class TestRiskCategoryOrder:

    def test_ordinal_order(self):
        assert RiskCategory.GREEN < RiskCategory.AMBER < RiskCategory.RED
        assert RiskCategory.RED > RiskCategory.GREEN
        assert RiskCategory.AMBER >= RiskCategory.AMBER

    def test_sort_and_max(self):
        values = [RiskCategory.RED, RiskCategory.GREEN, RiskCategory.AMBER]
        assert sorted(values) == [RiskCategory.GREEN, RiskCategory.AMBER, RiskCategory.RED]
        assert max(values) == RiskCategory.RED

    def test_values_are_strings(self):
        assert RiskCategory.AMBER == "amber"
        assert RiskCategory("red") is RiskCategory.RED

"""
Tests for the signal log recomputation engine.

1. Chronological fold: cumulative sums and categories per event
2. Editing an early event changes later categories (full refold)
3. Out-of-order insertion is sorted before folding
4. Determinism and idempotence
5. Unknown ids are a no-op
6. Numeric input coercion
7. Derived fields cannot be supplied by callers
"""
from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from signify.models.risk import EventType, RiskCategory, SignalLogEvent
from signify.services.risk.signal_log import (
    add_event,
    coerce_impact,
    decrement_impact,
    delete_event,
    increment_impact,
    next_event_id,
    recompute,
    timeline_summary,
    update_impact,
)


# =============================================================================
# FIXTURES
# =============================================================================

def _event(event_id, when, impact, event_type=EventType.MOVING_HOUSE, description="event"):
    return SignalLogEvent(
        id=event_id,
        person_id=1,
        date=when,
        event_type=event_type,
        description=description,
        risk_score_impact=impact,
    )


@pytest.fixture
def three_events():
    """2023-01-15 +2, 2023-03-22 +2, 2023-05-10 +1 in insertion order."""
    return [
        _event(1, date(2023, 1, 15), 2),
        _event(2, date(2023, 3, 22), 2, EventType.TEMPORARY_ACCOMMODATION),
        _event(3, date(2023, 5, 10), 1, EventType.SCHOOL_EXPULSION),
    ]


def _sums(events):
    return [e.cumulative_impact for e in events]


def _categories(events):
    return [e.risk_score_after for e in events]


# =============================================================================
# TEST: FOLD
# =============================================================================

class TestRecompute:
    """recompute()"""

    def test_chronological_fold(self, three_events):
        result = recompute(three_events)

        assert [e.id for e in result] == [1, 2, 3]
        assert _sums(result) == [2, 4, 5]
        assert _categories(result) == [RiskCategory.AMBER, RiskCategory.RED, RiskCategory.RED]

    def test_input_not_mutated(self, three_events):
        recompute(three_events)
        assert all(e.risk_score_after is None for e in three_events)
        assert all(e.cumulative_impact is None for e in three_events)

    def test_returns_new_list(self, three_events):
        result = recompute(three_events)
        assert result is not three_events
        assert all(a is not b for a, b in zip(result, three_events))

    def test_idempotent(self, three_events):
        once = recompute(three_events)
        assert recompute(once) == once

    def test_deterministic_over_input_order(self, three_events):
        assert recompute(three_events) == recompute(list(reversed(three_events)))

    def test_ties_keep_insertion_order(self):
        same_day = date(2023, 6, 1)
        events = [
            _event(5, same_day, 3),
            _event(2, same_day, -3),
            _event(9, date(2023, 1, 1), 0),
        ]
        result = recompute(events)

        assert [e.id for e in result] == [9, 5, 2]
        assert _sums(result) == [0, 3, 0]
        assert _categories(result) == [RiskCategory.GREEN, RiskCategory.RED, RiskCategory.GREEN]

    def test_empty_log(self):
        assert recompute([]) == []

    def test_negative_and_large_impacts(self):
        events = [
            _event(1, date(2023, 1, 1), -4),
            _event(2, date(2023, 2, 1), 1000),
            _event(3, date(2023, 3, 1), -998),
        ]
        result = recompute(events)

        assert _sums(result) == [-4, 996, -2]
        assert _categories(result) == [RiskCategory.GREEN, RiskCategory.RED, RiskCategory.GREEN]

    def test_accepts_iso_date_strings(self):
        result = recompute([
            _event(1, "2023-05-10", 1),
            _event(2, "2023-01-15", 1),
        ])
        assert [e.id for e in result] == [2, 1]
        assert result[0].date == date(2023, 1, 15)


# =============================================================================
# TEST: IMPACT EDITS
# =============================================================================

class TestUpdateImpact:
    """update_impact / increment_impact / decrement_impact"""

    def test_edit_first_event_refolds_later_events(self, three_events):
        result = update_impact(recompute(three_events), 1, -2)

        assert _sums(result) == [-2, 0, 1]
        assert _categories(result) == [RiskCategory.GREEN, RiskCategory.GREEN, RiskCategory.AMBER]

    def test_edit_from_raw_unsorted_input(self, three_events):
        shuffled = [three_events[2], three_events[0], three_events[1]]
        result = update_impact(shuffled, 3, 0)

        assert [e.id for e in result] == [1, 2, 3]
        assert _sums(result) == [2, 4, 4]

    @pytest.mark.parametrize("raw", ["", "   ", "abc", None, "--3"])
    def test_unparseable_input_becomes_zero(self, three_events, raw):
        result = update_impact(three_events, 2, raw)

        assert result[1].risk_score_impact == 0
        assert _sums(result) == [2, 2, 3]

    def test_numeric_text_is_parsed(self, three_events):
        result = update_impact(three_events, 1, "-3")
        assert result[0].risk_score_impact == -3
        assert result[0].risk_score_after == RiskCategory.GREEN

    def test_unknown_event_id_returns_input_unchanged(self, three_events):
        folded = recompute(three_events)
        result = update_impact(folded, 99, 5)

        assert result == folded
        assert result is not folded

    def test_increment_and_decrement(self, three_events):
        up = increment_impact(three_events, 3)
        assert up[2].risk_score_impact == 2
        assert _sums(up) == [2, 4, 6]

        down = decrement_impact(up, 1)
        assert down[0].risk_score_impact == 1
        assert _sums(down) == [1, 3, 5]
        assert _categories(down) == [RiskCategory.AMBER, RiskCategory.RED, RiskCategory.RED]

    def test_increment_unknown_event(self, three_events):
        assert increment_impact(three_events, 42) == three_events
        assert decrement_impact(three_events, 42) == three_events


# =============================================================================
# TEST: ADD / DELETE
# =============================================================================

class TestAddAndDelete:

    def test_earlier_event_inserted_last_is_folded_first(self, three_events):
        folded = recompute(three_events)
        earliest = _event(4, date(2022, 12, 1), 1, EventType.BEREAVEMENT)

        result = add_event(folded, earliest)

        assert [e.id for e in result] == [4, 1, 2, 3]
        assert _sums(result) == [1, 3, 5, 6]
        assert _categories(result) == [
            RiskCategory.AMBER, RiskCategory.RED, RiskCategory.RED, RiskCategory.RED,
        ]

    def test_delete_refolds_remaining(self, three_events):
        result = delete_event(recompute(three_events), 2)

        assert [e.id for e in result] == [1, 3]
        assert _sums(result) == [2, 3]
        assert _categories(result) == [RiskCategory.AMBER, RiskCategory.RED]

    def test_delete_unknown_event(self, three_events):
        folded = recompute(three_events)
        assert delete_event(folded, 77) == folded

    def test_delete_last_event(self):
        assert delete_event([_event(1, date(2023, 1, 1), 3)], 1) == []

    def test_next_event_id(self, three_events):
        assert next_event_id([]) == 1
        assert next_event_id(three_events) == 4
        assert next_event_id([_event(7, date(2023, 1, 1), 0)]) == 8


# =============================================================================
# TEST: COERCION
# =============================================================================

class TestCoerceImpact:

    @pytest.mark.parametrize("raw,expected", [
        (3, 3),
        (-2, -2),
        (0, 0),
        ("7", 7),
        ("+2", 2),
        ("-4", -4),
        (" 5 ", 5),
        ("4abc", 4),
        ("", 0),
        ("abc", 0),
        (None, 0),
        (2.9, 2),
        (-2.9, -2),
        (float("nan"), 0),
        (True, 1),
    ])
    def test_coercion(self, raw, expected):
        assert coerce_impact(raw) == expected


# =============================================================================
# TEST: DERIVED FIELDS
# =============================================================================

class TestDerivedFields:
    """risk_score_after is only ever written by recompute."""

    def test_cannot_construct_with_risk_score_after(self):
        with pytest.raises(TypeError):
            SignalLogEvent(
                id=1, person_id=1, date=date(2023, 1, 1),
                event_type=EventType.ARREST, description="x",
                risk_score_impact=1, risk_score_after=RiskCategory.RED,
            )

    def test_cannot_assign_risk_score_after(self, three_events):
        event = recompute(three_events)[0]
        with pytest.raises(FrozenInstanceError):
            event.risk_score_after = RiskCategory.GREEN

    def test_new_event_has_no_derived_values(self):
        event = _event(1, date(2023, 1, 1), 2)
        assert event.risk_score_after is None
        assert event.cumulative_impact is None


# =============================================================================
# TEST: SUMMARY
# =============================================================================

class TestTimelineSummary:

    def test_summary(self, three_events):
        lowered = update_impact(three_events, 3, -4)
        summary = timeline_summary(lowered)

        assert summary.event_count == 3
        assert summary.cumulative_impact == 0
        assert summary.current_risk == RiskCategory.GREEN
        assert summary.peak_risk == RiskCategory.RED

    def test_empty_summary(self):
        summary = timeline_summary([])
        assert summary.to_dict() == {
            "event_count": 0,
            "cumulative_impact": 0,
            "current_risk": "green",
            "peak_risk": "green",
        }

"""
Tests for the remediation action registry.

1. Every event type has a catalog; unknown types get an empty list
2. Recording an action never changes derived risk
3. A second recorded action replaces the first
4. Unknown event ids and unknown action ids fail soft
"""
from datetime import date

import pytest

from signify.models.risk import ActionCategory, ActionTaken, EventType, SignalLogEvent
from signify.services.risk.remediation import (
    ACTION_CATEGORY_STYLES,
    REMEDIATION_CATALOG,
    category_style,
    clear_action,
    describe_action_taken,
    get_action_by_id,
    get_actions_for,
    record_action,
)
from signify.services.risk.signal_log import recompute


@pytest.fixture
def timeline():
    return recompute([
        SignalLogEvent(1, 7, date(2023, 1, 15), EventType.MOVING_HOUSE, "Moved flat", 2),
        SignalLogEvent(2, 7, date(2023, 3, 22), EventType.TEMPORARY_ACCOMMODATION, "B&B", 2),
        SignalLogEvent(3, 7, date(2023, 5, 10), EventType.SCHOOL_EXPULSION, "Excluded", 1),
    ])


# =============================================================================
# TEST: CATALOG
# =============================================================================

class TestCatalog:

    @pytest.mark.parametrize("event_type", list(EventType))
    def test_every_event_type_has_actions(self, event_type):
        actions = get_actions_for(event_type)
        assert actions
        assert all(a.category in ActionCategory for a in actions)

    def test_lookup_by_string_value(self):
        assert get_actions_for("arrest") == REMEDIATION_CATALOG[EventType.ARREST]

    @pytest.mark.parametrize("event_type", ["lottery_win", "", None])
    def test_unknown_event_type_gives_empty_list(self, event_type):
        assert get_actions_for(event_type) == []

    def test_returned_list_is_a_copy(self):
        actions = get_actions_for(EventType.ARREST)
        actions.clear()
        assert get_actions_for(EventType.ARREST)

    def test_action_ids_unique(self):
        ids = [a.id for actions in REMEDIATION_CATALOG.values() for a in actions]
        assert len(ids) == len(set(ids))

    def test_get_action_by_id(self):
        action = get_action_by_id(EventType.TEMPORARY_ACCOMMODATION, "ta_housing_referral")
        assert action is not None
        assert action.category == ActionCategory.REFERRAL

    def test_get_action_by_id_wrong_event_type(self):
        assert get_action_by_id(EventType.ARREST, "ta_housing_referral") is None
        assert get_action_by_id("not_a_type", "ta_housing_referral") is None


# =============================================================================
# TEST: RECORDING
# =============================================================================

class TestRecordAction:

    def test_attaches_action(self, timeline):
        result = record_action(timeline, 2, "ta_key_worker", date(2023, 3, 25), notes="Allocated")

        taken = result[1].action_taken
        assert taken == ActionTaken("ta_key_worker", date(2023, 3, 25), "Allocated")
        assert result[0].action_taken is None
        assert result[2].action_taken is None

    def test_never_changes_risk(self, timeline):
        result = record_action(timeline, 1, "mh_welcome_visit", date(2023, 2, 1))

        assert [e.risk_score_after for e in result] == [e.risk_score_after for e in timeline]
        assert [e.cumulative_impact for e in result] == [e.cumulative_impact for e in timeline]
        assert [e.id for e in result] == [e.id for e in timeline]

    def test_second_action_replaces_first(self, timeline):
        first = record_action(timeline, 2, "ta_housing_referral", date(2023, 3, 23))
        second = record_action(first, 2, "ta_weekly_contact", date(2023, 4, 1))

        assert second[1].action_taken.action_id == "ta_weekly_contact"
        assert second[1].action_taken.date_taken == date(2023, 4, 1)

    def test_unknown_event_returns_equal_list(self, timeline):
        result = record_action(timeline, 99, "ta_key_worker", date(2023, 3, 25))
        assert result == timeline

    @pytest.mark.parametrize("action_id", ["", None])
    def test_empty_action_id_is_noop(self, timeline, action_id):
        recorded = record_action(timeline, 2, "ta_key_worker", date(2023, 3, 25))

        assert record_action(timeline, 1, action_id, date(2023, 2, 1)) == timeline
        assert record_action(recorded, 2, action_id, date(2023, 4, 1)) == recorded

    def test_input_untouched(self, timeline):
        record_action(timeline, 1, "mh_welcome_visit", date(2023, 2, 1))
        assert timeline[0].action_taken is None

    def test_today_accepts_iso_string(self, timeline):
        result = record_action(timeline, 3, "se_mentoring", "2023-06-01")
        assert result[2].action_taken.date_taken == date(2023, 6, 1)

    def test_clear_action(self, timeline):
        recorded = record_action(timeline, 3, "se_mentoring", date(2023, 6, 1))
        cleared = clear_action(recorded, 3)

        assert cleared[2].action_taken is None
        assert cleared == timeline
        assert clear_action(timeline, 42) == timeline


# =============================================================================
# TEST: PRESENTATION
# =============================================================================

class TestDescribeActionTaken:

    def test_known_action(self, timeline):
        event = record_action(timeline, 2, "ta_prevention_duty", date(2023, 3, 24))[1]
        view = describe_action_taken(event)

        assert view["label"] == "Open prevention duty case"
        assert view["category"] == "intervention"
        assert view["category_style"] == ACTION_CATEGORY_STYLES[ActionCategory.INTERVENTION]
        assert view["date_taken"] == "2023-03-24"

    def test_unknown_action_renders_as_unknown(self, timeline):
        event = record_action(timeline, 2, "retired_action", date(2023, 3, 24))[1]
        view = describe_action_taken(event)

        assert view["category"] == "unknown"
        assert view["category_style"]["label"] == "Unknown"
        assert view["action_id"] == "retired_action"

    def test_no_action(self, timeline):
        assert describe_action_taken(timeline[0]) is None

    def test_category_style_table(self):
        assert len(ACTION_CATEGORY_STYLES) == 4
        assert category_style("support")["label"] == "Support"
        assert category_style("mystery")["label"] == "Unknown"
        assert category_style(None)["label"] == "Unknown"

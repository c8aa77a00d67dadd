"""
Remediation Action Registry

Static catalog of the interventions a caseworker can record against each
kind of life event, plus the operations that attach an action to a logged
event.

Recording an action is an informational overlay. It never feeds the risk
model, so nothing here triggers a recompute.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from ...models.risk import (
    ActionCategory, ActionTaken, EventType, RemediationAction, SignalLogEvent,
    coerce_date, parse_event_type,
)
from .signal_log import find_event

logger = logging.getLogger(__name__)


# =============================================================================
# CATEGORY STYLES
# =============================================================================

ACTION_CATEGORY_STYLES: Dict[ActionCategory, Dict[str, str]] = {
    ActionCategory.SUPPORT: {"label": "Support", "color": "#48bb78"},
    ActionCategory.REFERRAL: {"label": "Referral", "color": "#4299e1"},
    ActionCategory.INTERVENTION: {"label": "Intervention", "color": "#ed8936"},
    ActionCategory.MONITORING: {"label": "Monitoring", "color": "#9f7aea"},
}

UNKNOWN_CATEGORY_STYLE = {"label": "Unknown", "color": "#a0aec0"}
UNKNOWN_ACTION_ICON = "❔"


def category_style(category: Union[ActionCategory, str, None]) -> Dict[str, str]:
    """Label and colour for an action category; Unknown for anything else."""
    try:
        return dict(ACTION_CATEGORY_STYLES[ActionCategory(category)])
    except ValueError:
        return dict(UNKNOWN_CATEGORY_STYLE)


# =============================================================================
# CATALOG
# =============================================================================

def _action(action_id: str, label: str, icon: str, category: ActionCategory) -> RemediationAction:
    return RemediationAction(id=action_id, label=label, icon=icon, category=category)


REMEDIATION_CATALOG: Dict[EventType, List[RemediationAction]] = {
    EventType.MOVING_HOUSE: [
        _action("mh_welcome_visit", "Home welcome visit", "🏡", ActionCategory.SUPPORT),
        _action("mh_school_transfer", "Coordinate school transfer", "🏫", ActionCategory.REFERRAL),
        _action("mh_tenancy_check", "Tenancy stability check", "📋", ActionCategory.MONITORING),
    ],
    EventType.TEMPORARY_ACCOMMODATION: [
        _action("ta_housing_referral", "Refer to housing options team", "🏠", ActionCategory.REFERRAL),
        _action("ta_prevention_duty", "Open prevention duty case", "🛡️", ActionCategory.INTERVENTION),
        _action("ta_key_worker", "Assign key worker", "🤝", ActionCategory.SUPPORT),
        _action("ta_weekly_contact", "Weekly contact check", "📞", ActionCategory.MONITORING),
    ],
    EventType.BEREAVEMENT: [
        _action("bv_counselling", "Bereavement counselling referral", "🕊️", ActionCategory.REFERRAL),
        _action("bv_family_support", "Family support session", "👪", ActionCategory.SUPPORT),
        _action("bv_school_liaison", "Inform school pastoral lead", "🏫", ActionCategory.MONITORING),
    ],
    EventType.SCHOOL_EXPULSION: [
        _action("se_alt_provision", "Arrange alternative provision", "📚", ActionCategory.INTERVENTION),
        _action("se_education_welfare", "Education welfare officer referral", "🎓", ActionCategory.REFERRAL),
        _action("se_mentoring", "Assign youth mentor", "🧑‍🏫", ActionCategory.SUPPORT),
        _action("se_attendance_watch", "Attendance monitoring", "📈", ActionCategory.MONITORING),
    ],
    EventType.ARREST: [
        _action("ar_yot_referral", "Youth offending team referral", "⚖️", ActionCategory.REFERRAL),
        _action("ar_appropriate_adult", "Provide appropriate adult", "🧑‍⚖️", ActionCategory.SUPPORT),
        _action("ar_diversion", "Diversion programme", "🔀", ActionCategory.INTERVENTION),
    ],
    EventType.FAMILY_BREAKDOWN: [
        _action("fb_mediation", "Family mediation", "🤝", ActionCategory.INTERVENTION),
        _action("fb_early_help", "Early help assessment", "📝", ActionCategory.REFERRAL),
        _action("fb_respite", "Arrange respite stay", "🛏️", ActionCategory.SUPPORT),
        _action("fb_home_visits", "Scheduled home visits", "🚪", ActionCategory.MONITORING),
    ],
    EventType.JOB_LOSS: [
        _action("jl_employment_support", "Employment support referral", "💼", ActionCategory.REFERRAL),
        _action("jl_benefits_check", "Benefits entitlement check", "💷", ActionCategory.SUPPORT),
        _action("jl_rent_arrears_watch", "Rent arrears monitoring", "📊", ActionCategory.MONITORING),
    ],
    EventType.MENTAL_HEALTH_CRISIS: [
        _action("mc_camhs_referral", "CAMHS referral", "🧠", ActionCategory.REFERRAL),
        _action("mc_crisis_team", "Crisis team callout", "🚑", ActionCategory.INTERVENTION),
        _action("mc_safety_plan", "Agree safety plan", "🛟", ActionCategory.SUPPORT),
        _action("mc_wellbeing_check", "Wellbeing check-ins", "📅", ActionCategory.MONITORING),
    ],
    EventType.SUBSTANCE_ABUSE_INCIDENT: [
        _action("sa_treatment_referral", "Substance misuse service referral", "💊", ActionCategory.REFERRAL),
        _action("sa_harm_reduction", "Harm reduction session", "🩹", ActionCategory.INTERVENTION),
        _action("sa_peer_support", "Peer support group", "👥", ActionCategory.SUPPORT),
    ],
    EventType.CARE_PLACEMENT_CHANGE: [
        _action("cp_placement_review", "Placement stability review", "🔍", ActionCategory.MONITORING),
        _action("cp_social_worker_visit", "Social worker visit", "🧑‍💼", ActionCategory.SUPPORT),
        _action("cp_leaving_care", "Leaving care team referral", "🗂️", ActionCategory.REFERRAL),
    ],
}


# =============================================================================
# LOOKUPS
# =============================================================================

def get_actions_for(event_type: Union[EventType, str, None]) -> List[RemediationAction]:
    """Candidate actions for an event type; empty list for unknown types."""
    parsed = parse_event_type(event_type)
    if parsed is None:
        return []
    return list(REMEDIATION_CATALOG.get(parsed, []))


def get_action_by_id(event_type: Union[EventType, str, None], action_id: str) -> Optional[RemediationAction]:
    for action in get_actions_for(event_type):
        if action.id == action_id:
            return action
    return None


def describe_action_taken(event: SignalLogEvent) -> Optional[Dict[str, Any]]:
    """
    Presentation view of the action attached to an event.

    An action id missing from the catalog resolves to the Unknown style
    with a generic icon rather than failing.
    """
    taken = event.action_taken
    if taken is None:
        return None

    action = get_action_by_id(event.event_type, taken.action_id)
    if action is None:
        return {
            **taken.to_dict(),
            "label": taken.action_id,
            "icon": UNKNOWN_ACTION_ICON,
            "category": "unknown",
            "category_style": dict(UNKNOWN_CATEGORY_STYLE),
        }
    return {
        **taken.to_dict(),
        "label": action.label,
        "icon": action.icon,
        "category": action.category.value,
        "category_style": category_style(action.category),
    }


# =============================================================================
# MUTATIONS
# =============================================================================

def record_action(
    events: Sequence[SignalLogEvent],
    event_id: int,
    action_id: str,
    today: Union[date, str],
    notes: Optional[str] = None,
) -> List[SignalLogEvent]:
    """
    Attach an action to one event, replacing any earlier one.

    Order and derived risk values of the list are left exactly as given.
    An empty action id records nothing.
    """
    if not action_id:
        logger.debug("record_action: empty action id for event %s", event_id)
        return list(events)
    if find_event(events, event_id) is None:
        logger.debug("record_action: no event %s in log", event_id)
        return list(events)

    taken = ActionTaken(action_id=action_id, date_taken=coerce_date(today), notes=notes)
    return [e.evolve(action_taken=taken) if e.id == event_id else e for e in events]


def clear_action(events: Sequence[SignalLogEvent], event_id: int) -> List[SignalLogEvent]:
    if find_event(events, event_id) is None:
        return list(events)
    return [e.evolve(action_taken=None) if e.id == event_id else e for e in events]

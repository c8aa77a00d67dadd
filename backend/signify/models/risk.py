"""
Signify - Risk Domain Models

Plain data structures shared by the classifier, the signal log and the
remediation registry. Nothing in this module touches the database.

Derived values (a person's risk category, an event's cumulative impact and
resulting category) are never accepted as input. SignalLogEvent exposes them
as init=False fields that only the recomputation routine writes.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from dateutil import parser as date_parser


# =============================================================================
# ENUMS
# =============================================================================

class RiskCategory(str, Enum):
    """Ordinal risk level: green < amber < red."""
    GREEN = "green"
    AMBER = "amber"
    RED = "red"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]

    # str ordering would compare alphabetically ("amber" < "green")
    def __lt__(self, other):
        if not isinstance(other, RiskCategory):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskCategory):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskCategory):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskCategory):
            return NotImplemented
        return self.rank >= other.rank


_RISK_RANK = {
    RiskCategory.GREEN: 1,
    RiskCategory.AMBER: 2,
    RiskCategory.RED: 3,
}


class SignalName(str, Enum):
    """The seven boolean risk indicators tracked per person."""
    PREVIOUS_HOMELESSNESS = "previous_homelessness"
    TEMPORARY_ACCOMMODATION = "temporary_accommodation"
    CARE_STATUS = "care_status"
    PARENTAL_SUBSTANCE_ABUSE = "parental_substance_abuse"
    PARENTAL_CRIMES = "parental_crimes"
    YOUTH_JUSTICE = "youth_justice"
    EDUCATION_STATUS = "education_status"


class EventType(str, Enum):
    """Life-event categories recorded on a signal log."""
    MOVING_HOUSE = "moving_house"
    TEMPORARY_ACCOMMODATION = "temporary_accommodation"
    BEREAVEMENT = "bereavement"
    SCHOOL_EXPULSION = "school_expulsion"
    ARREST = "arrest"
    FAMILY_BREAKDOWN = "family_breakdown"
    JOB_LOSS = "job_loss"
    MENTAL_HEALTH_CRISIS = "mental_health_crisis"
    SUBSTANCE_ABUSE_INCIDENT = "substance_abuse_incident"
    CARE_PLACEMENT_CHANGE = "care_placement_change"


class ActionCategory(str, Enum):
    SUPPORT = "support"
    REFERRAL = "referral"
    INTERVENTION = "intervention"
    MONITORING = "monitoring"


# =============================================================================
# DISPLAY TABLES
# =============================================================================

RISK_CATEGORY_DISPLAY: Dict[RiskCategory, Dict[str, Any]] = {
    RiskCategory.RED: {"label": "High Risk", "color": "#e53e3e", "level": 3},
    RiskCategory.AMBER: {"label": "Medium Risk", "color": "#ed8936", "level": 2},
    RiskCategory.GREEN: {"label": "Low Risk", "color": "#48bb78", "level": 1},
}

SIGNAL_LABELS: Dict[SignalName, Dict[str, str]] = {
    SignalName.PREVIOUS_HOMELESSNESS: {"label": "Previous Homelessness", "icon": "🏠"},
    SignalName.TEMPORARY_ACCOMMODATION: {"label": "Temporary Accommodation", "icon": "🏨"},
    SignalName.CARE_STATUS: {"label": "Care Status", "icon": "👶"},
    SignalName.PARENTAL_SUBSTANCE_ABUSE: {"label": "Parental Substance Abuse", "icon": "⚠️"},
    SignalName.PARENTAL_CRIMES: {"label": "Parental Crimes", "icon": "🚨"},
    SignalName.YOUTH_JUSTICE: {"label": "Youth Justice", "icon": "⚖️"},
    SignalName.EDUCATION_STATUS: {"label": "Education Status", "icon": "📚"},
}

EVENT_TYPE_LABELS: Dict[EventType, Dict[str, str]] = {
    EventType.MOVING_HOUSE: {"label": "Moving House", "icon": "📦"},
    EventType.TEMPORARY_ACCOMMODATION: {"label": "Placed in Temporary Accommodation", "icon": "🏨"},
    EventType.BEREAVEMENT: {"label": "Bereavement", "icon": "🕯️"},
    EventType.SCHOOL_EXPULSION: {"label": "School Expulsion", "icon": "🏫"},
    EventType.ARREST: {"label": "Arrest", "icon": "🚔"},
    EventType.FAMILY_BREAKDOWN: {"label": "Family Breakdown", "icon": "💔"},
    EventType.JOB_LOSS: {"label": "Job Loss", "icon": "💼"},
    EventType.MENTAL_HEALTH_CRISIS: {"label": "Mental Health Crisis", "icon": "🧠"},
    EventType.SUBSTANCE_ABUSE_INCIDENT: {"label": "Substance Abuse Incident", "icon": "💊"},
    EventType.CARE_PLACEMENT_CHANGE: {"label": "Care Placement Change", "icon": "🔄"},
}


def parse_event_type(value: Union[str, EventType, None]) -> Optional[EventType]:
    """Look up an event type by value; None for anything unrecognised."""
    if isinstance(value, EventType):
        return value
    try:
        return EventType(value)
    except ValueError:
        return None


def parse_signal_name(value: Union[str, SignalName, None]) -> Optional[SignalName]:
    if isinstance(value, SignalName):
        return value
    try:
        return SignalName(value)
    except ValueError:
        return None


def coerce_date(value: Union[date, datetime, str]) -> date:
    """Accept a date, a datetime or an ISO-8601 string; keep the calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date_parser.isoparse(str(value).strip()).date()


# =============================================================================
# SIGNAL SET
# =============================================================================

@dataclass
class SignalSet:
    """
    Fixed-shape set of boolean risk indicators.

    Always carries all seven signals. Building from a partial mapping leaves
    missing signals False and drops keys that are not signal names.
    """
    previous_homelessness: bool = False
    temporary_accommodation: bool = False
    care_status: bool = False
    parental_substance_abuse: bool = False
    parental_crimes: bool = False
    youth_justice: bool = False
    education_status: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "SignalSet":
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = key.value if isinstance(key, SignalName) else key
            if name in known:
                values[name] = bool(value)
        return cls(**values)

    def get(self, signal: SignalName) -> bool:
        return getattr(self, signal.value)

    def set(self, signal: SignalName, value: bool) -> None:
        setattr(self, signal.value, bool(value))

    def active(self) -> list:
        """Signals currently set, in declaration order."""
        return [s for s in SignalName if self.get(s)]

    def count_active(self) -> int:
        return len(self.active())

    def to_dict(self) -> Dict[str, bool]:
        return {s.value: self.get(s) for s in SignalName}


# =============================================================================
# SIGNAL LOG
# =============================================================================

@dataclass(frozen=True)
class ActionTaken:
    """Remediation action recorded against a logged event."""
    action_id: str
    date_taken: date
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action_id": self.action_id,
            "date_taken": self.date_taken.isoformat(),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["ActionTaken"]:
        if not data or not data.get("action_id"):
            return None
        return cls(
            action_id=data["action_id"],
            date_taken=coerce_date(data["date_taken"]),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class SignalLogEvent:
    """
    One dated life event on a person's signal log.

    `cumulative_impact` and `risk_score_after` cannot be passed to the
    constructor; they stay None until the event has been through
    `services.risk.signal_log.recompute`.
    """
    id: int
    person_id: int
    date: date
    event_type: EventType
    description: str
    risk_score_impact: int = 0
    action_taken: Optional[ActionTaken] = None
    cumulative_impact: Optional[int] = field(default=None, init=False)
    risk_score_after: Optional[RiskCategory] = field(default=None, init=False)

    def __post_init__(self):
        object.__setattr__(self, "date", coerce_date(self.date))
        if not isinstance(self.event_type, EventType):
            object.__setattr__(self, "event_type", EventType(self.event_type))
        object.__setattr__(self, "risk_score_impact", int(self.risk_score_impact))

    def evolve(self, **changes) -> "SignalLogEvent":
        """Copy with raw-field changes, carrying the derived fields across."""
        clone = replace(self, **changes)
        object.__setattr__(clone, "cumulative_impact", self.cumulative_impact)
        object.__setattr__(clone, "risk_score_after", self.risk_score_after)
        return clone

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "person_id": self.person_id,
            "date": self.date.isoformat(),
            "event_type": self.event_type.value,
            "description": self.description,
            "risk_score_impact": self.risk_score_impact,
            "cumulative_impact": self.cumulative_impact,
            "risk_score_after": self.risk_score_after.value if self.risk_score_after else None,
            "action_taken": self.action_taken.to_dict() if self.action_taken else None,
        }


# =============================================================================
# REMEDIATION
# =============================================================================

@dataclass(frozen=True)
class RemediationAction:
    """Catalog entry for an intervention a caseworker can record."""
    id: str
    label: str
    icon: str
    category: ActionCategory

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "category": self.category.value,
        }

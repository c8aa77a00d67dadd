"""Signify - Data Models"""
from .risk import (
    # Enums
    RiskCategory, SignalName, EventType, ActionCategory,
    # Display tables
    RISK_CATEGORY_DISPLAY, SIGNAL_LABELS, EVENT_TYPE_LABELS,
    # Domain records
    SignalSet, SignalLogEvent, ActionTaken, RemediationAction,
    # Helpers
    parse_event_type, parse_signal_name, coerce_date,
)

__all__ = [
    "RiskCategory", "SignalName", "EventType", "ActionCategory",
    "RISK_CATEGORY_DISPLAY", "SIGNAL_LABELS", "EVENT_TYPE_LABELS",
    "SignalSet", "SignalLogEvent", "ActionTaken", "RemediationAction",
    "parse_event_type", "parse_signal_name", "coerce_date",
]

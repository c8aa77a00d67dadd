"""
Signify - Catalog API Router

Static lookup tables the frontend needs to render signals, event types,
risk badges and remediation actions.
"""
from fastapi import APIRouter

from ..models.risk import (
    EVENT_TYPE_LABELS, RISK_CATEGORY_DISPLAY, SIGNAL_LABELS,
)
from ..services.risk import ACTION_CATEGORY_STYLES, get_actions_for
from ..services.risk.remediation import UNKNOWN_CATEGORY_STYLE


router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/signals/definitions")
async def get_signal_definitions():
    return {
        "signals": [
            {"code": signal.value, **display}
            for signal, display in SIGNAL_LABELS.items()
        ]
    }


@router.get("/signal-log/event-types")
async def get_event_types():
    return {
        "types": [
            {"code": event_type.value, **display}
            for event_type, display in EVENT_TYPE_LABELS.items()
        ]
    }


@router.get("/risk-categories")
async def get_risk_categories():
    return {
        "categories": [
            {"code": category.value, **display}
            for category, display in RISK_CATEGORY_DISPLAY.items()
        ]
    }


@router.get("/remediation/categories")
async def get_action_categories():
    return {
        "categories": [
            {"code": category.value, **style}
            for category, style in ACTION_CATEGORY_STYLES.items()
        ],
        "unknown": dict(UNKNOWN_CATEGORY_STYLE),
    }


@router.get("/remediation/{event_type}/actions")
async def get_remediation_actions(event_type: str):
    """Candidate actions for an event type. Unknown types get an empty list."""
    return {
        "event_type": event_type,
        "actions": [action.to_dict() for action in get_actions_for(event_type)],
    }

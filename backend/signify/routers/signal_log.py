"""
Signify - Signal Log API Router

Per-person timeline of life events. Every write returns the whole timeline,
freshly refolded, with the log version the client should send back as
`expected_version` on its next write.

Unknown event ids are a no-op and return the timeline unchanged.
"""
import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.risk import EventType, parse_event_type
from ..services.risk import RiskEngine, SignalLogConflictError, SignalLogSnapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/people", tags=["signal-log"])


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class AddEventRequest(BaseModel):
    """Request to log a new life event."""
    event_date: date = Field(..., alias="date")
    event_type: str = Field(..., description="One of the signal log event types")
    description: str = ""
    risk_score_impact: Union[int, float, str, None] = Field(0, description="Signed impact; text and fractions are coerced")
    expected_version: Optional[int] = None


class ImpactUpdateRequest(BaseModel):
    """Numeric field edit. Empty or unparseable input counts as 0."""
    risk_score_impact: Union[int, float, str, None] = None
    expected_version: Optional[int] = None


class RecordActionRequest(BaseModel):
    action_id: str = Field(..., min_length=1)
    date_taken: Optional[date] = Field(None, description="Defaults to today")
    notes: Optional[str] = None
    expected_version: Optional[int] = None


def _run(operation: Callable[[], Optional[SignalLogSnapshot]]) -> Dict[str, Any]:
    """Map engine outcomes onto HTTP responses."""
    try:
        snapshot = operation()
    except SignalLogConflictError as exc:
        logger.warning("Signal log conflict: %s", exc)
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Signal log has changed since it was read",
                "expected_version": exc.expected_version,
                "current_version": exc.actual_version,
            },
        )
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return snapshot.to_dict()


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.get("/{person_id}/signal-log")
async def get_signal_log(person_id: int, db: Session = Depends(get_db)):
    """Chronological timeline with cumulative impact and risk after each event."""
    return _run(lambda: RiskEngine(db).get_timeline(person_id))


@router.post("/{person_id}/signal-log", status_code=201)
async def add_signal_log_event(person_id: int, request: AddEventRequest, db: Session = Depends(get_db)):
    # Validate event type
    event_type = parse_event_type(request.event_type)
    if event_type is None:
        valid_types = [e.value for e in EventType]
        raise HTTPException(
            status_code=400,
            detail=f"Invalid event_type. Must be one of: {valid_types}",
        )

    return _run(lambda: RiskEngine(db).add_event(
        person_id=person_id,
        event_date=request.event_date,
        event_type=event_type,
        description=request.description,
        risk_score_impact=request.risk_score_impact,
        expected_version=request.expected_version,
    ))


@router.put("/{person_id}/signal-log/{event_id}/impact")
async def update_event_impact(
    person_id: int,
    event_id: int,
    request: ImpactUpdateRequest,
    db: Session = Depends(get_db),
):
    return _run(lambda: RiskEngine(db).update_impact(
        person_id, event_id, request.risk_score_impact, request.expected_version,
    ))


@router.post("/{person_id}/signal-log/{event_id}/increment")
async def increment_event_impact(
    person_id: int,
    event_id: int,
    expected_version: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return _run(lambda: RiskEngine(db).adjust_impact(person_id, event_id, 1, expected_version))


@router.post("/{person_id}/signal-log/{event_id}/decrement")
async def decrement_event_impact(
    person_id: int,
    event_id: int,
    expected_version: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return _run(lambda: RiskEngine(db).adjust_impact(person_id, event_id, -1, expected_version))


@router.delete("/{person_id}/signal-log/{event_id}")
async def delete_signal_log_event(
    person_id: int,
    event_id: int,
    expected_version: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return _run(lambda: RiskEngine(db).delete_event(person_id, event_id, expected_version))


@router.put("/{person_id}/signal-log/{event_id}/action")
async def record_event_action(
    person_id: int,
    event_id: int,
    request: RecordActionRequest,
    db: Session = Depends(get_db),
):
    """
    Record the remediation action taken for an event.

    Replaces any earlier action. Does not change any risk value.
    """
    return _run(lambda: RiskEngine(db).record_action(
        person_id=person_id,
        event_id=event_id,
        action_id=request.action_id,
        today=request.date_taken,
        notes=request.notes,
        expected_version=request.expected_version,
    ))


@router.delete("/{person_id}/signal-log/{event_id}/action")
async def clear_event_action(
    person_id: int,
    event_id: int,
    expected_version: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return _run(lambda: RiskEngine(db).clear_action(person_id, event_id, expected_version))

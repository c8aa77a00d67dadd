"""
Signify - People API Router

Person CRUD, connections, the relationship network, and the per-person
signal set with its derived risk badge.
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.db_models import PersonDB
from ..models.risk import SignalName, parse_signal_name
from ..services.people_service import PeopleService
from ..services.risk import RiskEngine
from ..services.risk.engine import signals_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/people", tags=["people"])


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class PersonRequest(BaseModel):
    """Create or update a person."""
    name: str = Field(..., min_length=1)
    email: str = ""
    department: str = ""
    role: str = ""
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    postcode: Optional[str] = None
    connection_ids: List[int] = Field(default_factory=list)
    signals: Optional[Dict[str, bool]] = Field(None, description="Initial signals (create only)")


class PersonResponse(BaseModel):
    id: int
    name: str
    email: str
    department: str
    role: str
    date_of_birth: Optional[date]
    gender: Optional[str]
    postcode: Optional[str]
    connection_ids: List[int]
    signals: Dict[str, bool]
    risk_score: str
    signal_log_version: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class ConnectionRequest(BaseModel):
    source_person_id: int
    target_person_id: int
    relation_type: str = ""
    description: str = ""


class ConnectionResponse(BaseModel):
    id: int
    source_person_id: int
    target_person_id: int
    relation_type: str
    description: str


class SignalsUpdateRequest(BaseModel):
    """Full replacement of a signal set; omitted signals become False."""
    signals: Dict[str, bool]


class SignalsResponse(BaseModel):
    person_id: int
    signals: Dict[str, bool]
    active_count: int
    risk_score: str


def person_response(person: PersonDB) -> PersonResponse:
    derived = signals_payload(person)
    return PersonResponse(
        id=person.id,
        name=person.name,
        email=person.email or "",
        department=person.department or "",
        role=person.role or "",
        date_of_birth=person.date_of_birth,
        gender=person.gender,
        postcode=person.postcode,
        connection_ids=list(person.connection_ids or []),
        signals=derived["signals"],
        risk_score=derived["risk_score"],
        signal_log_version=person.signal_log_version or 0,
        created_at=person.created_at,
        updated_at=person.updated_at,
    )


# =============================================================================
# CONNECTIONS & NETWORK
# =============================================================================
# Declared before /{person_id} so the literal paths win

@router.get("/connections", response_model=List[ConnectionResponse])
async def list_connections(db: Session = Depends(get_db)):
    service = PeopleService(db)
    return [
        ConnectionResponse(
            id=c.id,
            source_person_id=c.source_person_id,
            target_person_id=c.target_person_id,
            relation_type=c.relation_type,
            description=c.description,
        )
        for c in service.list_connections()
    ]


@router.post("/connections", response_model=ConnectionResponse)
async def create_connection(request: ConnectionRequest, db: Session = Depends(get_db)):
    service = PeopleService(db)
    connection = service.add_connection(
        source_person_id=request.source_person_id,
        target_person_id=request.target_person_id,
        relation_type=request.relation_type,
        description=request.description,
    )
    if connection is None:
        raise HTTPException(status_code=400, detail="Invalid source or target person ID")

    return ConnectionResponse(
        id=connection.id,
        source_person_id=connection.source_person_id,
        target_person_id=connection.target_person_id,
        relation_type=connection.relation_type,
        description=connection.description,
    )


@router.get("/network")
async def get_network(db: Session = Depends(get_db)):
    """Nodes and links for the force-directed relationship graph."""
    return PeopleService(db).get_network_data()


# =============================================================================
# PEOPLE
# =============================================================================

@router.get("", response_model=List[PersonResponse])
async def list_people(db: Session = Depends(get_db)):
    return [person_response(p) for p in PeopleService(db).list_people()]


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(person_id: int, db: Session = Depends(get_db)):
    person = PeopleService(db).get_person(person_id)
    if person is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return person_response(person)


@router.post("", response_model=PersonResponse, status_code=201)
async def create_person(request: PersonRequest, db: Session = Depends(get_db)):
    person = PeopleService(db).add_person(request.model_dump())
    return person_response(person)


@router.put("/{person_id}", response_model=PersonResponse)
async def update_person(person_id: int, request: PersonRequest, db: Session = Depends(get_db)):
    data = request.model_dump(exclude={"signals"})
    person = PeopleService(db).update_person(person_id, data)
    if person is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return person_response(person)


@router.delete("/{person_id}", status_code=204)
async def delete_person(person_id: int, db: Session = Depends(get_db)):
    if not PeopleService(db).delete_person(person_id):
        raise HTTPException(status_code=404, detail="Person not found")
    return Response(status_code=204)


# =============================================================================
# SIGNALS
# =============================================================================

@router.get("/{person_id}/signals", response_model=SignalsResponse)
async def get_signals(person_id: int, db: Session = Depends(get_db)):
    result = RiskEngine(db).get_signals(person_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return result


@router.put("/{person_id}/signals", response_model=SignalsResponse)
async def set_signals(person_id: int, request: SignalsUpdateRequest, db: Session = Depends(get_db)):
    unknown = [key for key in request.signals if parse_signal_name(key) is None]
    if unknown:
        valid = [s.value for s in SignalName]
        raise HTTPException(
            status_code=400,
            detail=f"Unknown signals {unknown}. Must be drawn from: {valid}",
        )

    result = RiskEngine(db).set_signals(person_id, request.signals)
    if result is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return result


@router.post("/{person_id}/signals/clear", response_model=SignalsResponse)
async def clear_signals(person_id: int, db: Session = Depends(get_db)):
    result = RiskEngine(db).clear_signals(person_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return result


@router.post("/{person_id}/signals/{signal}/toggle", response_model=SignalsResponse)
async def toggle_signal(person_id: int, signal: str, db: Session = Depends(get_db)):
    # Validate signal name
    parsed = parse_signal_name(signal)
    if parsed is None:
        valid = [s.value for s in SignalName]
        raise HTTPException(
            status_code=400,
            detail=f"Invalid signal. Must be one of: {valid}",
        )

    result = RiskEngine(db).toggle_signal(person_id, parsed)
    if result is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return result

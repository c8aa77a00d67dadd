"""
Risk Engine

Composes the pure classifiers and signal-log operations with the database
session. Every mutating call is one transaction over a person's full state:

1. Read the person's whole signal set or whole event list
2. Apply one pure transform
3. Write the full result back and commit

Derived values are never stored; they are recomputed on every read.
Signal-log writes bump `signal_log_version`. Callers may pass the version
they last saw as `expected_version` and get SignalLogConflictError if another
write landed in between.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from ...models.db_models import PersonDB, SignalLogEventDB
from ...models.risk import (
    ActionTaken, EventType, SignalLogEvent, SignalName, SignalSet, coerce_date,
)
from .classifier import classify_by_signals, clear_all_signals, toggle_signal
from . import remediation
from . import signal_log

logger = logging.getLogger(__name__)


class SignalLogConflictError(Exception):
    """A signal log was written by someone else since the caller last read it."""

    def __init__(self, person_id: int, expected_version: int, actual_version: int):
        self.person_id = person_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Signal log for person {person_id} is at version {actual_version}, "
            f"expected {expected_version}"
        )


@dataclass
class SignalLogSnapshot:
    """A person's freshly folded timeline plus the version it was read at."""
    person_id: int
    version: int
    events: List[SignalLogEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        events = []
        for event in self.events:
            data = event.to_dict()
            data["action"] = remediation.describe_action_taken(event)
            events.append(data)
        return {
            "person_id": self.person_id,
            "version": self.version,
            "summary": signal_log.timeline_summary(self.events).to_dict(),
            "events": events,
        }


def signals_payload(person: PersonDB) -> Dict[str, Any]:
    """Signals of a person row with the risk badge derived from them."""
    signals = SignalSet.from_mapping(person.signals)
    return {
        "person_id": person.id,
        "signals": signals.to_dict(),
        "active_count": signals.count_active(),
        "risk_score": classify_by_signals(signals).value,
    }


def event_from_row(row: SignalLogEventDB) -> SignalLogEvent:
    return SignalLogEvent(
        id=row.event_id,
        person_id=row.person_id,
        date=row.event_date,
        event_type=EventType(row.event_type),
        description=row.description or "",
        risk_score_impact=int(row.risk_score_impact or 0),
        action_taken=ActionTaken.from_dict(row.action_taken),
    )


class RiskEngine:
    """
    Storage-facing entry points for signals and signal logs.

    Owned by whoever composes the application (request handler, test
    harness); holds no state beyond its session.
    """

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def get_signals(self, person_id: int) -> Optional[Dict[str, Any]]:
        person = self._get_person(person_id)
        if person is None:
            return None
        return signals_payload(person)

    def toggle_signal(self, person_id: int, signal: Union[SignalName, str]) -> Optional[Dict[str, Any]]:
        return self._mutate_signals(person_id, lambda s: toggle_signal(s, signal), f"toggle {signal}")

    def clear_signals(self, person_id: int) -> Optional[Dict[str, Any]]:
        return self._mutate_signals(person_id, clear_all_signals, "clear")

    def set_signals(self, person_id: int, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Replace the whole signal set; missing signals become False."""
        return self._mutate_signals(person_id, lambda _: SignalSet.from_mapping(values), "set")

    def _mutate_signals(
        self,
        person_id: int,
        transform: Callable[[SignalSet], SignalSet],
        label: str,
    ) -> Optional[Dict[str, Any]]:
        person = self._get_person(person_id)
        if person is None:
            return None

        signals = transform(SignalSet.from_mapping(person.signals))
        # Assign a new dict so the JSON column registers the change
        person.signals = signals.to_dict()
        self.db.commit()

        payload = signals_payload(person)
        logger.info(
            "Signals %s for person %s -> %s (%d active)",
            label, person_id, payload["risk_score"], payload["active_count"],
        )
        return payload

    # =========================================================================
    # SIGNAL LOG
    # =========================================================================

    def get_timeline(self, person_id: int) -> Optional[SignalLogSnapshot]:
        person = self._get_person(person_id)
        if person is None:
            return None
        return SignalLogSnapshot(
            person_id=person.id,
            version=person.signal_log_version or 0,
            events=signal_log.recompute(self._load_events(person)),
        )

    def update_impact(
        self,
        person_id: int,
        event_id: int,
        new_impact: Any,
        expected_version: Optional[int] = None,
    ) -> Optional[SignalLogSnapshot]:
        return self._mutate_log(
            person_id,
            lambda events: signal_log.update_impact(events, event_id, new_impact),
            expected_version,
            f"impact of event {event_id} set to {new_impact!r}",
        )

    def adjust_impact(
        self,
        person_id: int,
        event_id: int,
        delta: int,
        expected_version: Optional[int] = None,
    ) -> Optional[SignalLogSnapshot]:
        """+1 / -1 buttons. Any other delta is a ValueError."""
        steps = {1: signal_log.increment_impact, -1: signal_log.decrement_impact}
        if delta not in steps:
            raise ValueError(f"Impact can only be adjusted by +1 or -1, got {delta!r}")
        step = steps[delta]
        return self._mutate_log(
            person_id,
            lambda events: step(events, event_id),
            expected_version,
            f"impact of event {event_id} adjusted by {delta:+d}",
        )

    def add_event(
        self,
        person_id: int,
        event_date: Union[date, str],
        event_type: EventType,
        description: str,
        risk_score_impact: Any = 0,
        expected_version: Optional[int] = None,
    ) -> Optional[SignalLogSnapshot]:
        def transform(events):
            event = SignalLogEvent(
                id=signal_log.next_event_id(events),
                person_id=person_id,
                date=coerce_date(event_date),
                event_type=event_type,
                description=description,
                risk_score_impact=signal_log.coerce_impact(risk_score_impact),
            )
            return signal_log.add_event(events, event)

        return self._mutate_log(person_id, transform, expected_version, f"{event_type} event added")

    def delete_event(
        self,
        person_id: int,
        event_id: int,
        expected_version: Optional[int] = None,
    ) -> Optional[SignalLogSnapshot]:
        return self._mutate_log(
            person_id,
            lambda events: signal_log.delete_event(events, event_id),
            expected_version,
            f"event {event_id} deleted",
        )

    def record_action(
        self,
        person_id: int,
        event_id: int,
        action_id: str,
        today: Optional[date] = None,
        notes: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Optional[SignalLogSnapshot]:
        taken_on = today or date.today()
        return self._mutate_log(
            person_id,
            lambda events: remediation.record_action(events, event_id, action_id, taken_on, notes),
            expected_version,
            f"action {action_id} recorded on event {event_id}",
        )

    def clear_action(
        self,
        person_id: int,
        event_id: int,
        expected_version: Optional[int] = None,
    ) -> Optional[SignalLogSnapshot]:
        return self._mutate_log(
            person_id,
            lambda events: remediation.clear_action(events, event_id),
            expected_version,
            f"action cleared on event {event_id}",
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _get_person(self, person_id: int) -> Optional[PersonDB]:
        return self.db.query(PersonDB).filter(PersonDB.id == person_id).first()

    def _load_events(self, person: PersonDB) -> List[SignalLogEvent]:
        return [event_from_row(row) for row in person.events]

    def _mutate_log(
        self,
        person_id: int,
        transform: Callable[[List[SignalLogEvent]], List[SignalLogEvent]],
        expected_version: Optional[int],
        label: str,
    ) -> Optional[SignalLogSnapshot]:
        person = self._get_person(person_id)
        if person is None:
            return None

        version = person.signal_log_version or 0
        if expected_version is not None and expected_version != version:
            raise SignalLogConflictError(person_id, expected_version, version)

        current = signal_log.recompute(self._load_events(person))
        updated = transform(current)

        if updated == current:
            logger.debug("Signal log for person %s unchanged (%s)", person_id, label)
            return SignalLogSnapshot(person_id=person.id, version=version, events=current)

        self._write_events(person, updated)
        person.signal_log_version = version + 1
        self.db.commit()

        logger.info("Signal log for person %s: %s (version %d)", person_id, label, version + 1)
        return SignalLogSnapshot(person_id=person.id, version=version + 1, events=updated)

    def _write_events(self, person: PersonDB, events: List[SignalLogEvent]) -> None:
        """Make the stored rows match `events` exactly, in list order."""
        rows = {row.event_id: row for row in person.events}
        kept = set()

        for position, event in enumerate(events):
            row = rows.get(event.id)
            if row is None:
                row = SignalLogEventDB(person_id=person.id, event_id=event.id)
                person.events.append(row)
            row.position = position
            row.event_date = event.date
            row.event_type = event.event_type.value
            row.description = event.description
            row.risk_score_impact = str(event.risk_score_impact)
            row.action_taken = event.action_taken.to_dict() if event.action_taken else None
            kept.add(event.id)

        for event_id, row in rows.items():
            if event_id not in kept:
                person.events.remove(row)

"""
Signal Log Recomputation Engine

Every mutation of a person's signal log goes through `recompute`, which
stable-sorts the events by date and refolds the running impact total from
scratch. Derived values are never patched incrementally.

All functions return new lists of new event objects. Unknown event ids are a
no-op that hands back the input unchanged.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from ...models.risk import RiskCategory, SignalLogEvent
from .classifier import classify_by_cumulative_impact

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# =============================================================================
# INPUT COERCION
# =============================================================================

def coerce_impact(value: Any) -> int:
    """
    Coerce a numeric-field value to an integer impact.

    Integers pass through, floats truncate toward zero, text uses its leading
    integer ("4abc" -> 4). Empty or unparseable input becomes 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return int(match.group(1))


# =============================================================================
# RECOMPUTATION
# =============================================================================

def _with_derived(event: SignalLogEvent, cumulative: int) -> SignalLogEvent:
    clone = event.evolve()
    object.__setattr__(clone, "cumulative_impact", cumulative)
    object.__setattr__(clone, "risk_score_after", classify_by_cumulative_impact(cumulative))
    return clone


def recompute(events: Iterable[SignalLogEvent]) -> List[SignalLogEvent]:
    """
    Sort chronologically (stable on equal dates) and refold cumulative impact.

    Returns the events in ascending date order with `cumulative_impact` and
    `risk_score_after` set. Input objects are not modified.
    """
    ordered = sorted(events, key=lambda e: e.date)
    result = []
    running = 0
    for event in ordered:
        running += event.risk_score_impact
        result.append(_with_derived(event, running))
    return result


def find_event(events: Sequence[SignalLogEvent], event_id: int) -> Optional[SignalLogEvent]:
    for event in events:
        if event.id == event_id:
            return event
    return None


def next_event_id(events: Sequence[SignalLogEvent]) -> int:
    """Next free id within a person's log."""
    return max((e.id for e in events), default=0) + 1


# =============================================================================
# MUTATIONS
# =============================================================================

def update_impact(events: Sequence[SignalLogEvent], event_id: int, new_impact: Any) -> List[SignalLogEvent]:
    """Set one event's impact and refold the whole log."""
    if find_event(events, event_id) is None:
        logger.debug("update_impact: no event %s in log", event_id)
        return list(events)

    impact = coerce_impact(new_impact)
    updated = [
        e.evolve(risk_score_impact=impact) if e.id == event_id else e
        for e in events
    ]
    return recompute(updated)


def increment_impact(events: Sequence[SignalLogEvent], event_id: int) -> List[SignalLogEvent]:
    event = find_event(events, event_id)
    if event is None:
        return list(events)
    return update_impact(events, event_id, event.risk_score_impact + 1)


def decrement_impact(events: Sequence[SignalLogEvent], event_id: int) -> List[SignalLogEvent]:
    event = find_event(events, event_id)
    if event is None:
        return list(events)
    return update_impact(events, event_id, event.risk_score_impact - 1)


def add_event(events: Sequence[SignalLogEvent], event: SignalLogEvent) -> List[SignalLogEvent]:
    """Append an event; its date decides where it lands after the refold."""
    return recompute(list(events) + [event])


def delete_event(events: Sequence[SignalLogEvent], event_id: int) -> List[SignalLogEvent]:
    """Drop an event and refold what remains."""
    if find_event(events, event_id) is None:
        logger.debug("delete_event: no event %s in log", event_id)
        return list(events)
    return recompute(e for e in events if e.id != event_id)


# =============================================================================
# SUMMARY
# =============================================================================

@dataclass(frozen=True)
class TimelineSummary:
    event_count: int
    cumulative_impact: int
    current_risk: RiskCategory
    peak_risk: RiskCategory

    def to_dict(self):
        return {
            "event_count": self.event_count,
            "cumulative_impact": self.cumulative_impact,
            "current_risk": self.current_risk.value,
            "peak_risk": self.peak_risk.value,
        }


def timeline_summary(events: Iterable[SignalLogEvent]) -> TimelineSummary:
    """Headline figures for a log. An empty log is green with zero impact."""
    folded = recompute(events)
    if not folded:
        return TimelineSummary(0, 0, RiskCategory.GREEN, RiskCategory.GREEN)
    last = folded[-1]
    return TimelineSummary(
        event_count=len(folded),
        cumulative_impact=last.cumulative_impact,
        current_risk=last.risk_score_after,
        peak_risk=max(e.risk_score_after for e in folded),
    )

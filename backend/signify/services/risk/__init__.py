"""
Risk Scoring Services

Signal classifier, cumulative-impact classifier, signal-log recomputation,
remediation registry, and the RiskEngine that runs them against storage.
"""

from .classifier import (
    classify_by_signals,
    classify_by_cumulative_impact,
    toggle_signal,
    clear_all_signals,
)
from .signal_log import (
    recompute,
    update_impact,
    increment_impact,
    decrement_impact,
    add_event,
    delete_event,
    next_event_id,
    coerce_impact,
    timeline_summary,
    TimelineSummary,
)
from .remediation import (
    REMEDIATION_CATALOG,
    ACTION_CATEGORY_STYLES,
    get_actions_for,
    get_action_by_id,
    record_action,
    clear_action,
    describe_action_taken,
    category_style,
)
from .engine import RiskEngine, SignalLogSnapshot, SignalLogConflictError

__all__ = [
    'classify_by_signals',
    'classify_by_cumulative_impact',
    'toggle_signal',
    'clear_all_signals',
    'recompute',
    'update_impact',
    'increment_impact',
    'decrement_impact',
    'add_event',
    'delete_event',
    'next_event_id',
    'coerce_impact',
    'timeline_summary',
    'TimelineSummary',
    'REMEDIATION_CATALOG',
    'ACTION_CATEGORY_STYLES',
    'get_actions_for',
    'get_action_by_id',
    'record_action',
    'clear_action',
    'describe_action_taken',
    'category_style',
    # Storage-facing
    'RiskEngine',
    'SignalLogSnapshot',
    'SignalLogConflictError',
]

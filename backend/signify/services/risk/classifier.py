"""
Risk Classifiers

Two separate classifiers with the same threshold shape (1 / 3):

- classify_by_signals: count of true boolean signals (unsigned)
- classify_by_cumulative_impact: running signed sum of event impacts

The input domains are not interchangeable and their thresholds may diverge,
so they are kept as independent functions.
"""
import logging
from typing import Union

from ...models.risk import RiskCategory, SignalName, SignalSet, parse_signal_name

logger = logging.getLogger(__name__)


# =============================================================================
# THRESHOLDS
# =============================================================================

SIGNAL_COUNT_RED = 3
SIGNAL_COUNT_AMBER = 1

CUMULATIVE_IMPACT_RED = 3
CUMULATIVE_IMPACT_AMBER = 1


# =============================================================================
# CLASSIFIERS
# =============================================================================

def classify_by_signals(signals: SignalSet) -> RiskCategory:
    """Current risk badge for a person's signal set."""
    count = signals.count_active()
    if count >= SIGNAL_COUNT_RED:
        return RiskCategory.RED
    if count >= SIGNAL_COUNT_AMBER:
        return RiskCategory.AMBER
    return RiskCategory.GREEN


def classify_by_cumulative_impact(cumulative: int) -> RiskCategory:
    """Risk category for a running impact total. Total over all integers."""
    if cumulative >= CUMULATIVE_IMPACT_RED:
        return RiskCategory.RED
    if cumulative >= CUMULATIVE_IMPACT_AMBER:
        return RiskCategory.AMBER
    return RiskCategory.GREEN


# =============================================================================
# SIGNAL MUTATIONS
# =============================================================================

def toggle_signal(signals: SignalSet, key: Union[str, SignalName]) -> SignalSet:
    """
    Flip one signal in place and return the same set.

    Unknown keys leave the set untouched. Callers re-derive risk with
    classify_by_signals straight after.
    """
    signal = parse_signal_name(key)
    if signal is None:
        logger.debug("Ignoring toggle of unknown signal %r", key)
        return signals
    signals.set(signal, not signals.get(signal))
    return signals


def clear_all_signals(signals: SignalSet) -> SignalSet:
    """Reset every signal to False in place."""
    for signal in SignalName:
        signals.set(signal, False)
    return signals

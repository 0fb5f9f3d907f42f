"""
Descriptive statistics over a run's outcome history.

All public functions take a :class:`~roulette_lab.services.simulation.RunHistory`
(or a plain sequence) and return plain values or dicts, so they can be
called from the API layer without importing any web code.  Nothing here
predicts future spins; every figure describes what already happened.
"""

import logging
from collections import Counter
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

from roulette_lab.core.wheel import BLACK, GREEN, RED, Outcome, color, format_outcome
from roulette_lab.services.simulation import RunHistory

logger = logging.getLogger(__name__)


def longest_streak(values: Sequence[Hashable]) -> Tuple[int, Optional[Hashable]]:
    """
    Longest run of consecutive equal values.

    Returns:
        ``(length, value)``; ``(0, None)`` for an empty sequence.  On ties
        the earliest run wins.
    """
    best, best_value = 0, None
    current, current_value = 0, None

    for value in values:
        if current and value == current_value:
            current += 1
        else:
            current, current_value = 1, value
        if current > best:
            best, best_value = current, current_value

    return best, best_value


def longest_color_streak(history: RunHistory) -> Tuple[int, Optional[str]]:
    """Longest run of the same colour (green counts as its own colour)."""
    return longest_streak([color(o) for o in history.outcomes])


def color_counts(history: RunHistory) -> Dict[str, int]:
    counts = Counter(color(o) for o in history.outcomes)
    return {c: counts.get(c, 0) for c in (RED, BLACK, GREEN)}


def outcome_counts(history: RunHistory) -> Dict[str, int]:
    """Hits per outcome, keyed by its display string, most frequent first."""
    counts = Counter(format_outcome(o) for o in history.outcomes)
    return dict(counts.most_common())


def recent_outcomes(history: RunHistory, window: int = 24) -> List[Outcome]:
    """Latest ``window`` outcomes, newest first."""
    if window <= 0:
        return []
    return list(reversed(history.outcomes[-window:]))


def pnl_summary(history: RunHistory) -> Dict[str, float]:
    """
    Final, peak and trough cumulative P&L plus maximum drawdown.

    Drawdown is measured from the running peak, which starts at 0 (the
    bankroll before the first spin).
    """
    series = history.pnl_series
    if not series:
        return {"spins": 0, "final": 0.0, "peak": 0.0, "trough": 0.0, "max_drawdown": 0.0}

    peak = 0.0
    max_drawdown = 0.0
    for value in series:
        peak = max(peak, value)
        max_drawdown = max(max_drawdown, peak - value)

    return {
        "spins": len(series),
        "final": series[-1],
        "peak": max(series),
        "trough": min(series),
        "max_drawdown": max_drawdown,
    }


def summarize(history: RunHistory, recent_window: int = 24) -> Dict:
    """Bundle every statistic of this module into one dict."""
    streak_len, streak_color = longest_color_streak(history)
    summary = {
        "spins": len(history),
        "longest_color_streak": {"color": streak_color, "length": streak_len},
        "color_counts": color_counts(history),
        "outcome_counts": outcome_counts(history),
        "recent": recent_outcomes(history, recent_window),
        "pnl": pnl_summary(history),
    }
    logger.debug("Summarized run of %d spins", summary["spins"])
    return summary

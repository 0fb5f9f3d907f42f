"""Spin resolution: the net result of a bet spread for one outcome.

All functions here are **pure**: no I/O, no logging, no mutation of the
bets passed in.  Identical inputs always produce identical output.

A bet wins by *membership*: if the outcome is one of the spot's numbers the
bet returns ``stake × payout`` profit, otherwise the stake is lost.  A spot
pays once per its stake regardless of how many numbers it covers::

    net(o) = Σ_b  (b.stake · b.spot.payout   if o ∈ b.spot.numbers
                   else −b.stake)

An empty spread resolves to 0 for every outcome.

Because the net depends only on the outcome, batch simulation evaluates
:func:`net_table` once per wheel pocket and then indexes that table with the
drawn pockets instead of re-resolving every spin.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from roulette_lab.core.layout import Spot
from roulette_lab.core.wheel import Outcome


@dataclass(frozen=True, slots=True)
class Bet:
    """A stake placed on one spot."""

    spot: Spot
    stake: float

    def net(self, outcome: Outcome) -> float:
        if self.spot.covers(outcome):
            return self.stake * self.spot.payout
        return -self.stake


@dataclass(frozen=True, slots=True)
class SpinResult:
    """Outcome of a single spin and the net change it produced."""

    outcome: Outcome
    net: float


def resolve(outcome: Outcome, bets: Iterable[Bet]) -> float:
    """Net profit (positive) or loss (negative) of ``bets`` for ``outcome``."""
    return sum((bet.net(outcome) for bet in bets), 0.0)


def net_table(pockets: Sequence[Outcome], bets: Iterable[Bet]) -> np.ndarray:
    """Net result for every pocket, aligned with ``pockets``.

    Returns:
        Float array of shape ``(len(pockets),)``.
    """
    bets = tuple(bets)
    return np.array([resolve(p, bets) for p in pockets], dtype=float)


def expected_value(pockets: Sequence[Outcome], bets: Iterable[Bet]) -> float:
    """Exact mean net per spin over a uniform wheel.

    For any spread of standard bets this equals ``−house_edge × total
    stake``, e.g. −0.27 per 10 staked on the European wheel.
    """
    if not pockets:
        return 0.0
    return float(net_table(pockets, bets).mean())

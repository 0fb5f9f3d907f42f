"""
Spin simulation and run history.

The runner drives a fixed bet spread against a wheel and records, for every
spin, the drawn outcome and the cumulative profit/loss so far.

RunHistory has exactly three transitions::

    reset()                 → empty
    spin_once(wheel, bets)  → append one entry
    simulate(n, wheel, bets)→ replace all entries with n fresh ones

``simulate`` models "play this spread for n spins": the spread is never
changed mid-run, so the net of every spin depends on the drawn pocket only.
The runner therefore resolves the spread once per pocket
(:func:`~roulette_lab.core.resolver.net_table`), draws pocket indices with
numpy in chunks and takes a cumulative sum, instead of resolving each spin
individually.

Usage::

    runner = SimulationRunner()
    runner.simulate(1000, Wheel(Variant.EU, seed=1), ledger)
    runner.history.final_pnl
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

import numpy as np

from roulette_lab.core.resolver import Bet, SpinResult, net_table, resolve
from roulette_lab.core.table_config import DEFAULT_MAX_SIMULATED_SPINS
from roulette_lab.core.wheel import DOUBLE_ZERO, Outcome, Variant, Wheel, parse_outcome

logger = logging.getLogger(__name__)

# Draws per numpy batch inside one simulate call.
_CHUNK_SIZE = 5_000


def clamp_spins(n, upper: int = DEFAULT_MAX_SIMULATED_SPINS) -> int:
    """
    Coerce a requested spin count into ``[1, upper]``.

    Out-of-range and non-numeric requests are clamped, never rejected:
    ``0`` → 1, ``-5`` → 1, ``10**9`` → ``upper``, ``"abc"`` → 1.
    """
    if isinstance(n, float) and math.isinf(n):
        return upper if n > 0 else 1
    try:
        count = int(n)
    except (TypeError, ValueError):
        return 1
    return max(1, min(upper, count))


# ---------------------------------------------------------------------------
# Run history
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class HistoryEntry:
    outcome: Outcome
    pnl: float  # cumulative, after this spin


class RunHistory:
    """Ordered ``(outcome, cumulative P&L)`` entries of one run."""

    def __init__(self, entries: Iterable[HistoryEntry] = ()):
        self._entries: List[HistoryEntry] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    @property
    def outcomes(self) -> List[Outcome]:
        return [e.outcome for e in self._entries]

    @property
    def pnl_series(self) -> List[float]:
        return [e.pnl for e in self._entries]

    @property
    def final_pnl(self) -> float:
        return self._entries[-1].pnl if self._entries else 0.0

    # Transitions: called by SimulationRunner only.

    def append(self, outcome: Outcome, pnl: float) -> None:
        self._entries.append(HistoryEntry(outcome, pnl))

    def replace(self, entries: Iterable[HistoryEntry]) -> None:
        self._entries = list(entries)

    def clear(self) -> None:
        self._entries.clear()

    def serialize(self) -> dict:
        return {"entries": [{"outcome": e.outcome, "pnl": e.pnl} for e in self._entries]}

    @classmethod
    def deserialize(cls, data: dict, variant: Optional[Variant] = None) -> "RunHistory":
        """
        Rebuild a history from :meth:`serialize` output.

        When ``variant`` is given every outcome must be a pocket of that wheel.

        Raises:
            ValueError: On a malformed row or an outcome outside the wheel.
        """
        entries = []
        for i, row in enumerate(data.get("entries") or []):
            try:
                raw = row["outcome"]
                if variant is not None:
                    outcome = parse_outcome(raw, variant)
                else:
                    outcome = raw if raw == DOUBLE_ZERO else int(raw)
                pnl = float(row["pnl"])
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"invalid history entry {i}: {row!r}") from exc
            entries.append(HistoryEntry(outcome, pnl))
        return cls(entries)

    def __repr__(self) -> str:
        return f"RunHistory(spins={len(self._entries)}, final_pnl={self.final_pnl})"


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

class SimulationRunner:
    """
    Owns a RunHistory and applies spins to it.

    ``max_spins`` bounds ``simulate``; it defaults to the
    ``MAX_SIMULATED_SPINS`` environment variable, then 20,000.
    """

    def __init__(
        self,
        max_spins: Optional[int] = None,
        history: Optional[RunHistory] = None,
    ):
        if max_spins is None:
            max_spins = int(os.getenv("MAX_SIMULATED_SPINS", str(DEFAULT_MAX_SIMULATED_SPINS)))
        self.max_spins = max_spins
        self.history = history if history is not None else RunHistory()

    def spin_once(self, wheel: Wheel, bets: Iterable[Bet]) -> SpinResult:
        """Draw one outcome, resolve it and append it to the history."""
        outcome = wheel.draw()
        net = resolve(outcome, bets)
        self.history.append(outcome, self.history.final_pnl + net)
        logger.debug("Spin %d: %s net %+.2f", len(self.history), outcome, net)
        return SpinResult(outcome=outcome, net=net)

    def simulate(self, n, wheel: Wheel, bets: Iterable[Bet]) -> RunHistory:
        """
        Replace the history with ``n`` fresh spins of an unchanged spread.

        ``n`` is clamped to ``[1, max_spins]``.  Cumulative P&L restarts
        from zero.
        """
        count = clamp_spins(n, self.max_spins)
        if count != n:
            logger.debug("simulate: requested %r spins, clamped to %d", n, count)

        table = net_table(wheel.pockets, bets)
        entries: List[HistoryEntry] = []
        running = 0.0

        for start in range(0, count, _CHUNK_SIZE):
            size = min(_CHUNK_SIZE, count - start)
            idx = wheel.draw_indices(size)
            cumulative = np.cumsum(table[idx]) + running
            running = float(cumulative[-1])
            entries.extend(
                HistoryEntry(wheel.pockets[i], pnl)
                for i, pnl in zip(idx.tolist(), cumulative.tolist())
            )

        self.history.replace(entries)
        logger.info(
            "Simulated %d spins on %s wheel: final P&L %+.2f",
            count, wheel.variant.value, running,
        )
        return self.history

    def reset(self) -> None:
        """Empty the history."""
        self.history.clear()

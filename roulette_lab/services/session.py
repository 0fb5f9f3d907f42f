"""
Roulette session: the run context a front end talks to.

A session owns one wheel, the catalog for its variant, the bet ledger and
the simulation runner.  The ledger and the run history are mutated only
through the methods below.

Toggling the variant regenerates the catalog (a cached lookup), rebinds the
ledger so that spots missing from the new wheel are dropped, and swaps the
wheel.  The run history is left as it is.
"""

import logging
import os
import threading
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from roulette_lab.core.layout import SpotCatalog, build_catalog
from roulette_lab.core.resolver import Bet, SpinResult, expected_value
from roulette_lab.core.table_config import TableConfig
from roulette_lab.core.wheel import Outcome, Variant, Wheel
from roulette_lab.services.ledger import BetLedger
from roulette_lab.services.simulation import RunHistory, SimulationRunner
from roulette_lab.services import stats

logger = logging.getLogger(__name__)


def _env_seed() -> Optional[int]:
    raw = os.getenv("ROULETTE_SEED")
    return int(raw) if raw else None


def _env_config() -> TableConfig:
    cfg = TableConfig.for_variant(os.getenv("ROULETTE_WHEEL", "EU"))
    max_spins = os.getenv("MAX_SIMULATED_SPINS")
    return replace(cfg, max_simulated_spins=int(max_spins)) if max_spins else cfg


class RouletteSession:
    """
    Ledger, wheel and run history of one player.

    Every public mutator holds a re-entrant lock so that a threaded web
    server cannot interleave two operations on the same session.
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        seed: Optional[int] = None,
    ):
        self.config = config or _env_config()
        self._seed = seed if seed is not None else _env_seed()
        self.wheel = Wheel(self.config.variant, seed=self._seed)
        self.ledger = BetLedger(build_catalog(self.config.variant))
        self.runner = SimulationRunner(max_spins=self.config.max_simulated_spins)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Table
    # ------------------------------------------------------------------

    @property
    def variant(self) -> Variant:
        return self.config.variant

    @property
    def catalog(self) -> SpotCatalog:
        return self.ledger.catalog

    @property
    def history(self) -> RunHistory:
        return self.runner.history

    def set_variant(self, variant: Variant | str) -> List[str]:
        """
        Switch wheel variant.

        Returns:
            Spot keys dropped from the ledger because the new wheel lacks
            them.
        """
        variant = Variant(variant)
        with self._lock:
            if variant is self.config.variant:
                return []
            self.config = self.config.with_variant(variant)
            dropped = self.ledger.rebind(build_catalog(variant))
            self.wheel = Wheel(variant, seed=self._seed)
            logger.info("Session switched to %s wheel", variant.label)
            return dropped

    def chip_allowed(self, amount: float) -> bool:
        return self.config.is_valid_chip(amount)

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    def place(self, spot_id: str, amount: float) -> bool:
        with self._lock:
            return self.ledger.place(spot_id, amount)

    def remove(self, spot_id: str, amount: float) -> bool:
        with self._lock:
            return self.ledger.remove(spot_id, amount)

    def clear_bets(self) -> None:
        with self._lock:
            self.ledger.clear()

    def expected_value(self) -> float:
        """Exact mean net per spin of the current spread."""
        with self._lock:
            return expected_value(self.wheel.pockets, self.ledger)

    def ledger_view(self) -> Tuple[List[Bet], float, float]:
        """Consistent ``(bets, total stake, expected value)`` of the ledger."""
        with self._lock:
            bets = self.ledger.bets()
            return bets, self.ledger.total_stake(), expected_value(self.wheel.pockets, bets)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def spin_once(self) -> SpinResult:
        with self._lock:
            return self.runner.spin_once(self.wheel, self.ledger)

    def simulate(self, n) -> RunHistory:
        with self._lock:
            return self.runner.simulate(n, self.wheel, self.ledger)

    def reset(self) -> None:
        with self._lock:
            self.runner.reset()

    def history_view(self) -> Tuple[List[Outcome], List[float]]:
        """Outcomes and cumulative P&L of the run, taken together."""
        with self._lock:
            return self.history.outcomes, self.history.pnl_series

    def summary(self) -> Dict:
        with self._lock:
            return stats.summarize(self.history, self.config.recent_window)

    # ------------------------------------------------------------------
    # Persistence contract
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict:
        """Ledger and history as plain data for an external store."""
        with self._lock:
            return {
                "variant": self.variant.value,
                "ledger": self.ledger.serialize(),
                "history": self.history.serialize(),
            }

    def restore(self, data: Dict) -> None:
        """
        Replace variant, ledger and history from :meth:`snapshot` output.

        The whole snapshot is parsed before anything is swapped in, so a bad
        snapshot leaves the session untouched.

        Raises:
            ValueError: On an unknown variant, a non-numeric stake or a
                history outcome that is not a pocket of the variant.
        """
        variant = Variant(data.get("variant", self.variant.value))
        ledger = BetLedger.deserialize(data.get("ledger") or {}, build_catalog(variant))
        history = RunHistory.deserialize(data.get("history") or {}, variant)

        with self._lock:
            if variant is not self.config.variant:
                self.config = self.config.with_variant(variant)
                self.wheel = Wheel(variant, seed=self._seed)
            self.ledger = ledger
            self.runner.history = history
            logger.info(
                "Session restored: %d bet(s), %d spin(s) on %s wheel",
                len(self.ledger), len(self.history), variant.value,
            )


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_session: Optional[RouletteSession] = None


def get_session() -> RouletteSession:
    global _session
    if _session is None:
        _session = RouletteSession()
    return _session


def reset_session() -> None:
    """Forget the process-wide session (a fresh one is built on next use)."""
    global _session
    _session = None

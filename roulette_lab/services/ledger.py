"""
Bet ledger: the stakes waiting for the next spin.

The ledger maps spot keys to staked amounts for one session.  It is bound
to a :class:`~roulette_lab.core.layout.SpotCatalog` so that every key it
holds refers to a real spot of the current wheel variant.

Rules enforced here:

    1. ``place`` adds a positive amount to a spot, creating the entry if
       needed.
    2. ``remove`` subtracts an amount, floored at zero.  An entry whose stake
       reaches zero is deleted; zero-stake entries never persist.  Amounts
       and stakes are rounded to the cent.
    3. Unknown spot keys and non-positive or non-finite amounts are
       ignored (logged, not raised) so the front end stays responsive on
       bad input.
    4. Switching variant (``rebind``) drops entries whose spot does not
       exist on the new wheel, e.g. ``straight:00`` when going to EU.
"""

import logging
import math
from typing import Dict, Iterator, List, Optional

from roulette_lab.core.layout import SpotCatalog, build_catalog
from roulette_lab.core.resolver import Bet
from roulette_lab.core.wheel import Variant

logger = logging.getLogger(__name__)

# Stakes are kept to the cent so that repeated add/remove cannot drift.
STAKE_DECIMALS = 2


def quantize(amount: float) -> float:
    return round(float(amount), STAKE_DECIMALS)


class BetLedger:
    """
    Spot key → stake mapping with incremental add/remove.

    All mutations are synchronous; a ledger belongs to a single session and
    has no concurrent writers.
    """

    def __init__(self, catalog: Optional[SpotCatalog] = None):
        self.catalog = catalog if catalog is not None else build_catalog(Variant.EU)
        self._stakes: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def place(self, spot_id: str, amount: float) -> bool:
        """Add ``amount`` to the stake on ``spot_id``.

        Returns:
            True if the ledger changed, False for an ignored request.
        """
        if spot_id not in self.catalog:
            logger.warning("place ignored: unknown spot %r", spot_id)
            return False
        amount = quantize(amount)
        if not (math.isfinite(amount) and amount > 0):
            logger.debug("place ignored: invalid amount %r on %s", amount, spot_id)
            return False

        self._stakes[spot_id] = quantize(self._stakes.get(spot_id, 0) + amount)
        self._check_invariants()
        return True

    def remove(self, spot_id: str, amount: float) -> bool:
        """Take ``amount`` off ``spot_id``; the entry goes away at zero."""
        current = self._stakes.get(spot_id)
        if current is None:
            logger.debug("remove ignored: no stake on %r", spot_id)
            return False
        amount = quantize(amount)
        if not (math.isfinite(amount) and amount > 0):
            logger.debug("remove ignored: invalid amount %r on %s", amount, spot_id)
            return False

        remaining = quantize(current - amount)
        if remaining <= 0:
            del self._stakes[spot_id]
        else:
            self._stakes[spot_id] = remaining
        self._check_invariants()
        return True

    def clear(self) -> None:
        """Drop every bet."""
        self._stakes.clear()

    def rebind(self, catalog: SpotCatalog) -> List[str]:
        """
        Attach the ledger to another variant's catalog.

        Entries whose key is absent from ``catalog`` are removed.

        Returns:
            Keys that were dropped.
        """
        dropped = [key for key in self._stakes if key not in catalog]
        for key in dropped:
            del self._stakes[key]
        self.catalog = catalog
        if dropped:
            logger.info(
                "Ledger rebound to %s wheel: dropped %d bet(s) %s",
                catalog.variant.value, len(dropped), dropped,
            )
        self._check_invariants()
        return dropped

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def stake(self, spot_id: str) -> float:
        return self._stakes.get(spot_id, 0)

    def total_stake(self) -> float:
        """Sum of all current stakes, i.e. the amount at risk per spin."""
        return quantize(sum(self._stakes.values()))

    def bets(self) -> List[Bet]:
        return [Bet(spot=self.catalog[key], stake=stake) for key, stake in self._stakes.items()]

    def entries(self) -> Dict[str, float]:
        """Copy of the key → stake mapping."""
        return dict(self._stakes)

    def __iter__(self) -> Iterator[Bet]:
        return iter(self.bets())

    def __len__(self) -> int:
        return len(self._stakes)

    def __contains__(self, spot_id: object) -> bool:
        return spot_id in self._stakes

    def is_empty(self) -> bool:
        return not self._stakes

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self) -> dict:
        """Plain-data form for an external storage collaborator."""
        return {
            "variant": self.catalog.variant.value,
            "stakes": dict(self._stakes),
        }

    @classmethod
    def deserialize(cls, data: dict, catalog: Optional[SpotCatalog] = None) -> "BetLedger":
        """
        Rebuild a ledger from :meth:`serialize` output.

        When ``catalog`` is omitted the stored variant's catalog is used.
        Unknown keys and non-positive stakes are skipped.

        Raises:
            ValueError: If a stake is not a number.
        """
        if catalog is None:
            catalog = build_catalog(data.get("variant", Variant.EU.value))
        ledger = cls(catalog)
        for key, stake in (data.get("stakes") or {}).items():
            try:
                stake = quantize(stake)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"invalid stake {stake!r} on {key!r}") from exc
            ledger.place(key, stake)
        return ledger

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_invariants(self) -> None:
        assert all(stake > 0 for stake in self._stakes.values()), (
            f"ledger holds a non-positive stake: {self._stakes}"
        )

    def __repr__(self) -> str:
        return (
            f"BetLedger(variant={self.catalog.variant.value!r}, "
            f"bets={len(self._stakes)}, total={self.total_stake()})"
        )

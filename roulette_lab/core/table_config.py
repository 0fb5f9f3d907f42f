"""Table-level configuration: all variant-specific constants in one place.

:class:`TableConfig` is a frozen dataclass carrying the constants a session
needs besides the catalog itself.  Named constructors
(:meth:`TableConfig.european`, :meth:`TableConfig.american`) return
pre-populated instances.

Typical usage::

    from roulette_lab.core.table_config import TableConfig

    cfg = TableConfig.european()

    # Raise the simulate cap for an offline batch run:
    from dataclasses import replace
    big_cfg = replace(cfg, max_simulated_spins=100_000)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final, Tuple

from roulette_lab.core.wheel import Variant, house_edge

#: Upper bound for a single ``simulate`` call.
DEFAULT_MAX_SIMULATED_SPINS: Final[int] = 20_000

#: Chip denominations offered by the table.
DEFAULT_CHIPS: Final[Tuple[int, ...]] = (1, 2, 5, 10, 25, 50, 100)


@dataclass(frozen=True)
class TableConfig:
    """Immutable configuration bundle for one table.

    Attributes:
        variant: Wheel variant played at this table.
        max_simulated_spins: Upper clamp for ``simulate(n)``.  Bounding ``n``
            is the only latency guard; there is no cancellation.
        default_simulated_spins: Spin count offered to the front end before
            the user picks one.
        chip_denominations: Chip values the front end may stake with.
        default_chip: Chip selected when a session starts.
        recent_window: Number of latest outcomes shown in the history strip.
    """

    variant: Variant
    max_simulated_spins: int = DEFAULT_MAX_SIMULATED_SPINS
    default_simulated_spins: int = 200
    chip_denominations: Tuple[int, ...] = DEFAULT_CHIPS
    default_chip: int = 5
    recent_window: int = 24

    # ------------------------------------------------------------------ #
    #  Named constructors                                                  #
    # ------------------------------------------------------------------ #

    @classmethod
    def european(cls) -> TableConfig:
        """Single-zero table, 37 pockets."""
        return cls(variant=Variant.EU)

    @classmethod
    def american(cls) -> TableConfig:
        """Double-zero table, 38 pockets."""
        return cls(variant=Variant.US)

    @classmethod
    def for_variant(cls, variant: Variant | str) -> TableConfig:
        variant = Variant(variant)
        return cls.european() if variant is Variant.EU else cls.american()

    # ------------------------------------------------------------------ #
    #  Convenience accessors                                               #
    # ------------------------------------------------------------------ #

    @property
    def house_edge(self) -> float:
        return house_edge(self.variant)

    def with_variant(self, variant: Variant | str) -> TableConfig:
        """Return a copy of this config playing ``variant``.

        All other constants (caps, chips) are carried over unchanged.
        """
        return replace(self, variant=Variant(variant))

    def is_valid_chip(self, amount: float) -> bool:
        return amount in self.chip_denominations

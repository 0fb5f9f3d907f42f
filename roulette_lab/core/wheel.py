"""Wheel model: outcome domain, colour classification and draws.

Two variants are supported:

* **European** (``Variant.EU``): 37 pockets, ``0`` and ``1..36``.
* **American** (``Variant.US``): 38 pockets, ``0``, ``"00"`` and ``1..36``.

Outcomes are plain ``int`` values, except the American double zero which is
the string sentinel ``"00"`` so that it can never compare equal to ``0``.

Draws come from a numpy ``Generator``.  Every draw is independent and uniform
over the pockets; the wheel keeps no memory of earlier results.

Typical usage::

    wheel = Wheel(Variant.EU, seed=7)
    outcome = wheel.draw()
    color(outcome)            # "red" | "black" | "green"
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Optional, Tuple, Union

import numpy as np

Outcome = Union[int, str]

#: American-only pocket.
DOUBLE_ZERO: Final[str] = "00"

RED_NUMBERS: Final[frozenset[int]] = frozenset({
    1, 3, 5, 7, 9, 12, 14, 16, 18,
    19, 21, 23, 25, 27, 30, 32, 34, 36,
})

GREEN: Final[str] = "green"
RED: Final[str] = "red"
BLACK: Final[str] = "black"


class Variant(str, Enum):
    """Wheel variant.  ``Variant("XX")`` raises ``ValueError``."""

    EU = "EU"
    US = "US"

    @property
    def pockets(self) -> Tuple[Outcome, ...]:
        return _POCKETS[self]

    @property
    def label(self) -> str:
        return "European" if self is Variant.EU else "American"


_POCKETS = {
    Variant.EU: (0, *range(1, 37)),
    Variant.US: (0, DOUBLE_ZERO, *range(1, 37)),
}


def color(outcome: Outcome) -> str:
    """Return ``"green"``, ``"red"`` or ``"black"`` for an outcome."""
    if outcome == 0 or outcome == DOUBLE_ZERO:
        return GREEN
    return RED if outcome in RED_NUMBERS else BLACK


def house_edge(variant: Variant) -> float:
    """Operator advantage on every standard bet: zeros / pockets.

    2/38 for the American wheel (5.26%), 1/37 for the European one (2.70%).
    """
    pockets = variant.pockets
    zeros = sum(1 for p in pockets if color(p) == GREEN)
    return zeros / len(pockets)


def format_outcome(outcome: Outcome) -> str:
    return str(outcome)


def parse_outcome(raw: Union[str, int], variant: Variant) -> Outcome:
    """Convert a wire value (``"17"``, ``17``, ``"00"``) into an outcome.

    Raises:
        ValueError: If the value is not a pocket of ``variant``.
    """
    text = str(raw).strip()
    outcome: Outcome = DOUBLE_ZERO if text == DOUBLE_ZERO else int(text)
    if outcome not in variant.pockets:
        raise ValueError(f"{raw!r} is not a pocket on the {variant.label} wheel")
    return outcome


class Wheel:
    """A spinning wheel of one variant with its own random generator."""

    def __init__(self, variant: Variant = Variant.EU, seed: Optional[int] = None):
        self.variant = Variant(variant)
        self.pockets: Tuple[Outcome, ...] = self.variant.pockets
        self._rng = np.random.default_rng(seed)

    def __len__(self) -> int:
        return len(self.pockets)

    def draw(self) -> Outcome:
        """Return one uniformly drawn outcome."""
        return self.pockets[int(self._rng.integers(len(self.pockets)))]

    def draw_indices(self, n: int) -> np.ndarray:
        """Draw ``n`` pocket indices in one batch (positions in ``pockets``)."""
        return self._rng.integers(len(self.pockets), size=n)

    def draw_many(self, n: int) -> list[Outcome]:
        return [self.pockets[i] for i in self.draw_indices(n)]

    def __repr__(self) -> str:
        return f"Wheel(variant={self.variant.value!r}, pockets={len(self.pockets)})"

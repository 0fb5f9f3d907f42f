"""Layout generator: every wagerable spot on a standard table.

The inside of the table is a 12-column × 3-row grid of the numbers 1..36::

    row 0:  3  6  9 ... 36
    row 1:  2  5  8 ... 35
    row 2:  1  4  7 ... 34

Split, corner, street and six-line membership is derived from adjacency on
this grid.  The grid itself is never stored; :func:`number_at` maps a cell to
its number on demand.

Spot identity
-------------
Inside spots are keyed by kind plus their *sorted* members, e.g.
``split:1-4`` or ``corner:1-2-4-5``.  Walking the grid left-to-right or
right-to-left therefore yields the same key for the same physical spot, and
no adjacency graph is needed to collapse duplicates.  Outside spots are
named groups (``dozen:2``, ``column:3``, ``even_money:red``).

Catalog sizes per variant::

    straight   37 (EU) / 38 (US)      payout 35
    split      57 = 11×3 + 12×2      payout 17
    corner     22 = 11×2             payout 8
    street     12                    payout 11
    six_line   11                    payout 5
    dozen       3                    payout 2
    column      3                    payout 2
    even_money  6                    payout 1

The American catalog differs only by the ``straight:00`` spot; there are no
"00"-adjacent compound spots such as a basket bet.

Typical usage::

    catalog = build_catalog(Variant.EU)
    spot = catalog["split:1-4"]
    spot.covers(4)      # True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Final, Iterable, Iterator, List, Optional, Sequence, Tuple

from roulette_lab.core.wheel import DOUBLE_ZERO, RED_NUMBERS, Outcome, Variant

ROWS: Final[int] = 3
COLUMNS: Final[int] = 12


class SpotKind(str, Enum):
    STRAIGHT = "straight"
    SPLIT = "split"
    CORNER = "corner"
    STREET = "street"
    SIX_LINE = "six_line"
    DOZEN = "dozen"
    COLUMN = "column"
    EVEN_MONEY = "even_money"


#: Net payout ratio per unit staked (the stake itself is returned on top).
PAYOUTS: Final[Dict[SpotKind, int]] = {
    SpotKind.STRAIGHT: 35,
    SpotKind.SPLIT: 17,
    SpotKind.STREET: 11,
    SpotKind.CORNER: 8,
    SpotKind.SIX_LINE: 5,
    SpotKind.DOZEN: 2,
    SpotKind.COLUMN: 2,
    SpotKind.EVEN_MONEY: 1,
}

_INSIDE_KINDS = frozenset({
    SpotKind.STRAIGHT, SpotKind.SPLIT, SpotKind.CORNER,
    SpotKind.STREET, SpotKind.SIX_LINE,
})


@dataclass(frozen=True, slots=True)
class Spot:
    """A wagerable location covering one or more outcomes.

    Attributes:
        key: Canonical identity, unique within a catalog.
        kind: Bet family, which fixes the payout.
        label: Human-readable name for the front end.
        numbers: Covered outcomes in ascending order.
        payout: Net payout ratio (35 for a straight, 1 for even-money).
    """

    key: str
    kind: SpotKind
    label: str
    numbers: Tuple[Outcome, ...]
    payout: int

    def covers(self, outcome: Outcome) -> bool:
        return outcome in self.numbers


# ---------------------------------------------------------------------------
# Grid and keys
# ---------------------------------------------------------------------------

def number_at(row: int, col: int) -> int:
    """Number printed in grid cell ``(row, col)``."""
    if not (0 <= row < ROWS and 0 <= col < COLUMNS):
        raise ValueError(f"cell ({row}, {col}) is outside the 3x12 grid")
    return 3 * col + (ROWS - row)


def _order(outcome: Outcome) -> float:
    # "00" sits between 0 and 1 on the American layout.
    return 0.5 if outcome == DOUBLE_ZERO else float(outcome)


def spot_key(kind: SpotKind, numbers: Iterable[Outcome]) -> str:
    """Canonical key for an inside spot: kind plus sorted members."""
    members = sorted(set(numbers), key=_order)
    return f"{kind.value}:{'-'.join(str(n) for n in members)}"


def _inside(kind: SpotKind, numbers: Sequence[Outcome], label: str) -> Spot:
    return Spot(
        key=spot_key(kind, numbers),
        kind=kind,
        label=label,
        numbers=tuple(sorted(set(numbers), key=_order)),
        payout=PAYOUTS[kind],
    )


def _outside(kind: SpotKind, name: str, numbers: Iterable[int], label: str) -> Spot:
    return Spot(
        key=f"{kind.value}:{name}",
        kind=kind,
        label=label,
        numbers=tuple(sorted(numbers)),
        payout=PAYOUTS[kind],
    )


# ---------------------------------------------------------------------------
# Generators, one per bet family
# ---------------------------------------------------------------------------

def _straights(variant: Variant) -> Iterator[Spot]:
    for pocket in variant.pockets:
        yield _inside(SpotKind.STRAIGHT, (pocket,), str(pocket))


def _split(a: int, b: int) -> Spot:
    lo, hi = sorted((a, b))
    return _inside(SpotKind.SPLIT, (a, b), f"Split {lo}/{hi}")


def _splits() -> Iterator[Spot]:
    # Horizontal neighbours: same row, adjacent columns.
    for row in range(ROWS):
        for col in range(COLUMNS - 1):
            yield _split(number_at(row, col), number_at(row, col + 1))
    # Vertical neighbours: same column, adjacent rows.
    for col in range(COLUMNS):
        for row in range(ROWS - 1):
            yield _split(number_at(row, col), number_at(row + 1, col))


def _corners() -> Iterator[Spot]:
    for row in range(ROWS - 1):
        for col in range(COLUMNS - 1):
            block = [
                number_at(row, col), number_at(row, col + 1),
                number_at(row + 1, col), number_at(row + 1, col + 1),
            ]
            label = "Corner " + "-".join(str(n) for n in sorted(block))
            yield _inside(SpotKind.CORNER, block, label)


def _street_numbers(col: int) -> List[int]:
    return [number_at(row, col) for row in range(ROWS)]


def _streets() -> Iterator[Spot]:
    for col in range(COLUMNS):
        start = 3 * col + 1
        yield _inside(SpotKind.STREET, _street_numbers(col), f"Street {start}-{start + 2}")


def _six_lines() -> Iterator[Spot]:
    for col in range(COLUMNS - 1):
        start = 3 * col + 1
        numbers = _street_numbers(col) + _street_numbers(col + 1)
        yield _inside(SpotKind.SIX_LINE, numbers, f"Six-line {start}-{start + 5}")


def _dozens() -> Iterator[Spot]:
    names = {1: "1st 12", 2: "2nd 12", 3: "3rd 12"}
    for which in (1, 2, 3):
        start = 12 * (which - 1) + 1
        yield _outside(
            SpotKind.DOZEN, str(which), range(start, start + 12),
            f"{names[which]} ({start}-{start + 11})",
        )


def _columns() -> Iterator[Spot]:
    # Column 1 holds n % 3 == 1, column 2 n % 3 == 2, column 3 n % 3 == 0.
    for which in (1, 2, 3):
        numbers = [n for n in range(1, 37) if n % 3 == which % 3]
        yield _outside(SpotKind.COLUMN, str(which), numbers, f"Column {which} (2 to 1)")


def _even_money() -> Iterator[Spot]:
    numbers = range(1, 37)
    groups = (
        ("low", "1 to 18", [n for n in numbers if n <= 18]),
        ("high", "19 to 36", [n for n in numbers if n >= 19]),
        ("odd", "Odd", [n for n in numbers if n % 2 == 1]),
        ("even", "Even", [n for n in numbers if n % 2 == 0]),
        ("red", "Red", [n for n in numbers if n in RED_NUMBERS]),
        ("black", "Black", [n for n in numbers if n not in RED_NUMBERS]),
    )
    for name, label, members in groups:
        yield _outside(SpotKind.EVEN_MONEY, name, members, label)


def generate_spots(variant: Variant | str) -> Tuple[Spot, ...]:
    """Enumerate every spot for ``variant`` in a fixed order.

    Pure and idempotent: two calls return equal tuples.  Prefer
    :func:`build_catalog`, which memoises the result per variant.
    """
    variant = Variant(variant)
    return (
        *_straights(variant),
        *_splits(),
        *_corners(),
        *_streets(),
        *_six_lines(),
        *_dozens(),
        *_columns(),
        *_even_money(),
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class SpotCatalog:
    """Read-only collection of a variant's spots, indexed by key."""

    def __init__(self, variant: Variant, spots: Iterable[Spot]):
        self.variant = Variant(variant)
        self.spots: Tuple[Spot, ...] = tuple(spots)

        index: Dict[str, Spot] = {}
        for spot in self.spots:
            assert spot.key not in index, f"duplicate spot key {spot.key!r}"
            index[spot.key] = spot
        self._by_key = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self.spots)

    def __iter__(self) -> Iterator[Spot]:
        return iter(self.spots)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __getitem__(self, key: str) -> Spot:
        return self._by_key[key]

    def get(self, key: str) -> Optional[Spot]:
        return self._by_key.get(key)

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._by_key)

    def by_kind(self, kind: SpotKind | str) -> Tuple[Spot, ...]:
        kind = SpotKind(kind)
        return tuple(s for s in self.spots if s.kind is kind)

    def counts(self) -> Dict[str, int]:
        """Number of spots per kind, in generation order."""
        out: Dict[str, int] = {}
        for spot in self.spots:
            out[spot.kind.value] = out.get(spot.kind.value, 0) + 1
        return out

    def __repr__(self) -> str:
        return f"SpotCatalog(variant={self.variant.value!r}, spots={len(self.spots)})"


@lru_cache(maxsize=None)
def _cached_catalog(variant: Variant) -> SpotCatalog:
    return SpotCatalog(variant, generate_spots(variant))


def build_catalog(variant: Variant | str) -> SpotCatalog:
    """Return the shared catalog for ``variant``, built once per process."""
    return _cached_catalog(Variant(variant))


def is_inside(kind: SpotKind) -> bool:
    return kind in _INSIDE_KINDS

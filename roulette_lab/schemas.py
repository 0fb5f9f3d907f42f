"""
Pydantic request/response schemas for the Roulette Lab API.

The engine itself works on plain dataclasses and dicts; these models only
describe what crosses the HTTP boundary.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

OutcomeValue = Union[int, str]


# ---------------------------------------------------------------------------
# Table and catalog
# ---------------------------------------------------------------------------

class TableResponse(BaseModel):
    variant: Literal["EU", "US"]
    label: str
    pockets: int
    house_edge: float = Field(..., description="Zeros / pockets, e.g. 0.027 on EU")
    chip_denominations: List[int]
    default_chip: int
    default_simulated_spins: int
    max_simulated_spins: int


class VariantUpdate(BaseModel):
    """Payload for PUT /api/table/variant."""

    variant: Literal["EU", "US"]


class VariantUpdateResponse(BaseModel):
    variant: Literal["EU", "US"]
    dropped: List[str] = Field(default_factory=list, description="Spot keys removed from the ledger")


class SpotResponse(BaseModel):
    key: str
    kind: str
    label: str
    numbers: List[OutcomeValue]
    payout: int
    inside: bool


class CatalogResponse(BaseModel):
    variant: Literal["EU", "US"]
    total: int
    counts: Dict[str, int]
    spots: List[SpotResponse]


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------

class BetRequest(BaseModel):
    """
    Payload for POST /api/ledger/place and /api/ledger/remove.

    ``amount`` must be one of the session table's chip denominations; the
    endpoint checks that.  Unknown ``spot_id`` values are accepted here and
    ignored by the ledger.
    """

    spot_id: str = Field(..., min_length=1, max_length=64, description='e.g. "split:1-4"')
    amount: float = Field(..., gt=0)


class LedgerEntry(BaseModel):
    spot_id: str
    label: str
    stake: float
    payout: int


class LedgerResponse(BaseModel):
    variant: Literal["EU", "US"]
    entries: List[LedgerEntry]
    total_stake: float
    expected_value: float = Field(..., description="Exact mean net per spin")


class BetActionResponse(BaseModel):
    applied: bool
    ledger: LedgerResponse


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------

class SpinResponse(BaseModel):
    outcome: OutcomeValue
    color: Literal["red", "black", "green"]
    net: float
    cumulative_pnl: float
    spins: int


class SimulateRequest(BaseModel):
    """
    Payload for POST /api/run/simulate.

    ``n`` is clamped to ``[1, max_simulated_spins]`` rather than rejected.
    When omitted the table default is used.
    """

    n: Optional[int] = None


class RunHistoryResponse(BaseModel):
    variant: Literal["EU", "US"]
    spins: int
    outcomes: List[OutcomeValue]
    pnl: List[float]
    final_pnl: float


class StreakResponse(BaseModel):
    color: Optional[str] = None
    length: int


class PnlSummary(BaseModel):
    spins: int
    final: float
    peak: float
    trough: float
    max_drawdown: float


class RunStatsResponse(BaseModel):
    spins: int
    longest_color_streak: StreakResponse
    color_counts: Dict[str, int]
    outcome_counts: Dict[str, int]
    recent: List[OutcomeValue]
    pnl: PnlSummary


# ---------------------------------------------------------------------------
# Snapshot (external storage contract)
# ---------------------------------------------------------------------------

class LedgerSnapshot(BaseModel):
    variant: Literal["EU", "US"] = "EU"
    stakes: Dict[str, float] = Field(default_factory=dict)


class HistoryEntrySnapshot(BaseModel):
    outcome: OutcomeValue
    pnl: float


class HistorySnapshot(BaseModel):
    entries: List[HistoryEntrySnapshot] = Field(default_factory=list)


class SessionSnapshot(BaseModel):
    variant: Literal["EU", "US"] = "EU"
    ledger: LedgerSnapshot = Field(default_factory=LedgerSnapshot)
    history: HistorySnapshot = Field(default_factory=HistorySnapshot)

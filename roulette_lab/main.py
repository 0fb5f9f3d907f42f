"""
FastAPI application for Roulette Lab
Serves the betting engine to the table front end: catalog, ledger, spins,
batch simulation and run statistics.
"""

from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from typing import Optional
import logging
import os

from roulette_lab.core.layout import SpotKind, is_inside
from roulette_lab.core.wheel import color
from roulette_lab.services.session import RouletteSession, get_session
from roulette_lab.schemas import (
    BetActionResponse,
    BetRequest,
    CatalogResponse,
    LedgerEntry,
    LedgerResponse,
    RunHistoryResponse,
    RunStatsResponse,
    SessionSnapshot,
    SimulateRequest,
    SpinResponse,
    SpotResponse,
    TableResponse,
    VariantUpdate,
    VariantUpdateResponse,
)

load_dotenv()

# Logging setup
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Roulette Lab",
    description="Roulette betting engine - layout, ledger, spins and simulation",
    version="1.0",
)

# CORS (adjust origins for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# HELPERS
# ============================================================================

def _ledger_response(session: RouletteSession) -> LedgerResponse:
    bets, total_stake, ev = session.ledger_view()
    return LedgerResponse(
        variant=session.variant.value,
        entries=[
            LedgerEntry(
                spot_id=bet.spot.key,
                label=bet.spot.label,
                stake=bet.stake,
                payout=bet.spot.payout,
            )
            for bet in bets
        ],
        total_stake=total_stake,
        expected_value=round(ev, 6),
    )


def _require_chip(session: RouletteSession, amount: float) -> None:
    if not session.chip_allowed(amount):
        chips = list(session.config.chip_denominations)
        raise HTTPException(status_code=422, detail=f"amount must be one of the chip values {chips}")


def _history_response(session: RouletteSession) -> RunHistoryResponse:
    outcomes, pnl = session.history_view()
    return RunHistoryResponse(
        variant=session.variant.value,
        spins=len(outcomes),
        outcomes=outcomes,
        pnl=pnl,
        final_pnl=pnl[-1] if pnl else 0.0,
    )


# ============================================================================
# HEALTH
# ============================================================================

@app.get("/")
async def root():
    return {"name": "Roulette Lab", "docs": "/docs"}


@app.get("/health")
async def health(session: RouletteSession = Depends(get_session)):
    return {
        "status": "ok",
        "variant": session.variant.value,
        "spots": len(session.catalog),
    }


# ============================================================================
# TABLE
# ============================================================================

@app.get("/api/table", response_model=TableResponse)
def get_table(session: RouletteSession = Depends(get_session)):
    """Variant, house edge and chip/limit constants for the front end."""
    cfg = session.config
    return TableResponse(
        variant=cfg.variant.value,
        label=cfg.variant.label,
        pockets=len(session.wheel),
        house_edge=round(cfg.house_edge, 6),
        chip_denominations=list(cfg.chip_denominations),
        default_chip=cfg.default_chip,
        default_simulated_spins=cfg.default_simulated_spins,
        max_simulated_spins=cfg.max_simulated_spins,
    )


@app.put("/api/table/variant", response_model=VariantUpdateResponse)
def set_variant(payload: VariantUpdate, session: RouletteSession = Depends(get_session)):
    """Toggle European/American; bets on spots the new wheel lacks are dropped."""
    dropped = session.set_variant(payload.variant)
    return VariantUpdateResponse(variant=session.variant.value, dropped=dropped)


@app.get("/api/spots", response_model=CatalogResponse)
def list_spots(
    kind: Optional[SpotKind] = Query(default=None),
    session: RouletteSession = Depends(get_session),
):
    """Every wagerable spot of the current variant, optionally one kind only."""
    catalog = session.catalog
    spots = catalog.by_kind(kind) if kind else catalog.spots
    return CatalogResponse(
        variant=catalog.variant.value,
        total=len(spots),
        counts=catalog.counts(),
        spots=[
            SpotResponse(
                key=s.key,
                kind=s.kind.value,
                label=s.label,
                numbers=list(s.numbers),
                payout=s.payout,
                inside=is_inside(s.kind),
            )
            for s in spots
        ],
    )


# ============================================================================
# LEDGER
# ============================================================================

@app.get("/api/ledger", response_model=LedgerResponse)
def get_ledger(session: RouletteSession = Depends(get_session)):
    return _ledger_response(session)


@app.post("/api/ledger/place", response_model=BetActionResponse)
def place_bet(payload: BetRequest, session: RouletteSession = Depends(get_session)):
    _require_chip(session, payload.amount)
    applied = session.place(payload.spot_id, payload.amount)
    return BetActionResponse(applied=applied, ledger=_ledger_response(session))


@app.post("/api/ledger/remove", response_model=BetActionResponse)
def remove_bet(payload: BetRequest, session: RouletteSession = Depends(get_session)):
    _require_chip(session, payload.amount)
    applied = session.remove(payload.spot_id, payload.amount)
    return BetActionResponse(applied=applied, ledger=_ledger_response(session))


@app.delete("/api/ledger", response_model=LedgerResponse)
def clear_ledger(session: RouletteSession = Depends(get_session)):
    session.clear_bets()
    return _ledger_response(session)


# ============================================================================
# RUN
# ============================================================================

@app.post("/api/run/spin", response_model=SpinResponse)
def spin(session: RouletteSession = Depends(get_session)):
    result = session.spin_once()
    return SpinResponse(
        outcome=result.outcome,
        color=color(result.outcome),
        net=result.net,
        cumulative_pnl=session.history.final_pnl,
        spins=len(session.history),
    )


@app.post("/api/run/simulate", response_model=RunHistoryResponse)
def simulate(payload: SimulateRequest, session: RouletteSession = Depends(get_session)):
    """Replace the run with n spins of the current spread (n is clamped)."""
    n = payload.n if payload.n is not None else session.config.default_simulated_spins
    session.simulate(n)
    return _history_response(session)


@app.get("/api/run", response_model=RunHistoryResponse)
def get_run(session: RouletteSession = Depends(get_session)):
    return _history_response(session)


@app.delete("/api/run", response_model=RunHistoryResponse)
def reset_run(session: RouletteSession = Depends(get_session)):
    session.reset()
    return _history_response(session)


@app.get("/api/run/stats", response_model=RunStatsResponse)
def run_stats(session: RouletteSession = Depends(get_session)):
    return session.summary()


# ============================================================================
# SNAPSHOT
# ============================================================================

@app.get("/api/session/snapshot", response_model=SessionSnapshot)
def get_snapshot(session: RouletteSession = Depends(get_session)):
    """Ledger and run history as plain data for an external store."""
    return session.snapshot()


@app.put("/api/session/snapshot", response_model=SessionSnapshot)
def put_snapshot(payload: SessionSnapshot, session: RouletteSession = Depends(get_session)):
    try:
        session.restore(payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return session.snapshot()


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Catch-all exception handler"""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": type(exc).__name__}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

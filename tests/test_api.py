"""
Tests for the HTTP API
Run with: pytest tests/test_api.py -v
"""

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from roulette_lab.core.table_config import TableConfig
from roulette_lab.main import app
from roulette_lab.services.session import RouletteSession, get_session


@pytest.fixture
def session():
    cfg = replace(TableConfig.european(), max_simulated_spins=500)
    return RouletteSession(cfg, seed=123)


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestTable:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "variant": "EU", "spots": 151}

    def test_table(self, client):
        body = client.get("/api/table").json()
        assert body["variant"] == "EU"
        assert body["pockets"] == 37
        assert body["house_edge"] == pytest.approx(1 / 37, abs=1e-6)
        assert body["chip_denominations"] == [1, 2, 5, 10, 25, 50, 100]
        assert body["max_simulated_spins"] == 500

    def test_spots(self, client):
        body = client.get("/api/spots").json()
        assert body["total"] == 151
        assert body["counts"]["split"] == 57
        first = body["spots"][0]
        assert first == {
            "key": "straight:0", "kind": "straight", "label": "0",
            "numbers": [0], "payout": 35, "inside": True,
        }

    def test_spots_by_kind(self, client):
        body = client.get("/api/spots", params={"kind": "corner"}).json()
        assert body["total"] == 22
        assert all(s["payout"] == 8 for s in body["spots"])

    def test_unknown_kind_rejected(self, client):
        assert client.get("/api/spots", params={"kind": "basket"}).status_code == 422

    def test_variant_toggle(self, client):
        r = client.put("/api/table/variant", json={"variant": "US"})
        assert r.json() == {"variant": "US", "dropped": []}
        assert client.get("/api/spots").json()["total"] == 152

        client.post("/api/ledger/place", json={"spot_id": "straight:00", "amount": 10})
        r = client.put("/api/table/variant", json={"variant": "EU"})
        assert r.json()["dropped"] == ["straight:00"]
        assert client.get("/api/ledger").json()["entries"] == []

    def test_bad_variant(self, client):
        assert client.put("/api/table/variant", json={"variant": "FR"}).status_code == 422


class TestLedger:
    def test_place_and_remove(self, client):
        r = client.post("/api/ledger/place", json={"spot_id": "straight:17", "amount": 10})
        assert r.status_code == 200
        body = r.json()
        assert body["applied"] is True
        assert body["ledger"]["total_stake"] == 10
        assert body["ledger"]["entries"] == [
            {"spot_id": "straight:17", "label": "17", "stake": 10, "payout": 35},
        ]
        assert body["ledger"]["expected_value"] == pytest.approx(-10 / 37, abs=1e-6)

        body = client.post("/api/ledger/remove", json={"spot_id": "straight:17", "amount": 10}).json()
        assert body["applied"] is True
        assert body["ledger"]["entries"] == []
        assert body["ledger"]["total_stake"] == 0

    def test_unknown_spot_is_not_an_error(self, client):
        r = client.post("/api/ledger/place", json={"spot_id": "split:3-4", "amount": 5})
        assert r.status_code == 200
        assert r.json()["applied"] is False

    @pytest.mark.parametrize("amount", [3, 0, -10, 1000])
    def test_non_chip_amount_rejected(self, client, amount):
        r = client.post("/api/ledger/place", json={"spot_id": "straight:17", "amount": amount})
        assert r.status_code == 422

    def test_fractional_stakes_do_not_drift(self, session, client):
        session.place("straight:17", 0.2)
        session.place("straight:17", 0.1)
        body = client.post("/api/ledger/remove", json={"spot_id": "straight:17", "amount": 1}).json()
        assert body["ledger"]["entries"] == []
        session.place("straight:17", 0.2)
        session.place("straight:17", 0.1)
        session.remove("straight:17", 0.1)
        assert client.get("/api/ledger").json()["total_stake"] == 0.2

    def test_clear(self, client):
        client.post("/api/ledger/place", json={"spot_id": "dozen:1", "amount": 25})
        body = client.delete("/api/ledger").json()
        assert body["entries"] == []


class TestRun:
    def test_spin(self, client):
        client.post("/api/ledger/place", json={"spot_id": "even_money:red", "amount": 10})
        body = client.post("/api/run/spin").json()
        assert body["spins"] == 1
        assert body["color"] in ("red", "black", "green")
        expected = 10 if body["color"] == "red" else -10
        assert body["net"] == expected
        assert body["cumulative_pnl"] == expected

    def test_simulate(self, client):
        body = client.post("/api/run/simulate", json={"n": 300}).json()
        assert body["spins"] == 300
        assert len(body["outcomes"]) == 300
        assert body["final_pnl"] == 0

    @pytest.mark.parametrize("n, expected", [(0, 1), (-3, 1), (10**6, 500)])
    def test_simulate_clamps(self, client, n, expected):
        assert client.post("/api/run/simulate", json={"n": n}).json()["spins"] == expected

    def test_simulate_default_count(self, client):
        assert client.post("/api/run/simulate", json={}).json()["spins"] == 200

    def test_get_and_reset(self, client):
        client.post("/api/run/simulate", json={"n": 40})
        assert client.get("/api/run").json()["spins"] == 40
        assert client.delete("/api/run").json()["spins"] == 0

    def test_stats(self, client):
        client.post("/api/ledger/place", json={"spot_id": "column:1", "amount": 5})
        client.post("/api/run/simulate", json={"n": 100})
        body = client.get("/api/run/stats").json()
        assert body["spins"] == 100
        assert sum(body["color_counts"].values()) == 100
        assert len(body["recent"]) == 24
        assert body["longest_color_streak"]["length"] >= 1
        assert set(body["pnl"]) == {"spins", "final", "peak", "trough", "max_drawdown"}


class TestSnapshot:
    def test_round_trip(self, client, session):
        client.post("/api/ledger/place", json={"spot_id": "split:1-4", "amount": 10})
        client.post("/api/run/simulate", json={"n": 20})
        snapshot = client.get("/api/session/snapshot").json()
        assert snapshot["ledger"]["stakes"] == {"split:1-4": 10}
        assert len(snapshot["history"]["entries"]) == 20

        client.delete("/api/ledger")
        client.delete("/api/run")
        restored = client.put("/api/session/snapshot", json=snapshot).json()
        assert restored == snapshot
        assert session.ledger.entries() == {"split:1-4": 10}

    def test_malformed_snapshot_rejected(self, client, session):
        client.post("/api/ledger/place", json={"spot_id": "straight:17", "amount": 10})
        client.post("/api/run/simulate", json={"n": 5})
        before = client.get("/api/session/snapshot").json()

        bad = {
            "variant": "US",
            "ledger": {"variant": "US", "stakes": {"straight:00": 10}},
            "history": {"entries": [{"outcome": "abc", "pnl": 0.0}]},
        }
        r = client.put("/api/session/snapshot", json=bad)
        assert r.status_code == 422
        assert client.get("/api/session/snapshot").json() == before
        assert session.variant.value == "EU"

    @pytest.mark.parametrize("outcome", ["00", 99])
    def test_snapshot_outcome_off_the_wheel(self, client, outcome):
        bad = {"variant": "EU", "history": {"entries": [{"outcome": outcome, "pnl": 0.0}]}}
        assert client.put("/api/session/snapshot", json=bad).status_code == 422
        assert client.get("/api/run").json()["spins"] == 0


class TestCustomChips:
    @pytest.fixture
    def client(self):
        cfg = replace(TableConfig.european(), chip_denominations=(1, 7))
        app.dependency_overrides[get_session] = lambda: RouletteSession(cfg, seed=1)
        try:
            yield TestClient(app)
        finally:
            app.dependency_overrides.clear()

    def test_table_chips_accepted(self, client):
        r = client.post("/api/ledger/place", json={"spot_id": "straight:17", "amount": 7})
        assert r.status_code == 200
        assert r.json()["applied"] is True

    def test_default_chip_not_on_this_table(self, client):
        r = client.post("/api/ledger/place", json={"spot_id": "straight:17", "amount": 5})
        assert r.status_code == 422

"""
Tests for the wheel model and table config
Run with: pytest tests/test_wheel.py -v
"""

import pytest

from roulette_lab.core.table_config import TableConfig
from roulette_lab.core.wheel import (
    DOUBLE_ZERO,
    RED_NUMBERS,
    Variant,
    Wheel,
    color,
    house_edge,
    parse_outcome,
)


class TestDomain:
    """Pockets per variant"""

    def test_european_pockets(self):
        assert Variant.EU.pockets == tuple(range(37))

    def test_american_pockets(self):
        pockets = Variant.US.pockets
        assert len(pockets) == 38
        assert pockets[:2] == (0, DOUBLE_ZERO)
        assert set(pockets[2:]) == set(range(1, 37))

    def test_unknown_variant_fails_fast(self):
        with pytest.raises(ValueError):
            Variant("FR")

    def test_double_zero_is_not_zero(self):
        assert DOUBLE_ZERO != 0
        assert Variant.US.pockets.count(0) == 1


class TestColor:
    """Colour classification"""

    @pytest.mark.parametrize("outcome", [0, "00"])
    def test_zeros_are_green(self, outcome):
        assert color(outcome) == "green"

    def test_eighteen_red_eighteen_black(self):
        colors = [color(n) for n in range(1, 37)]
        assert colors.count("red") == 18
        assert colors.count("black") == 18

    @pytest.mark.parametrize("n, expected", [
        (1, "red"), (2, "black"), (10, "black"), (11, "black"),
        (19, "red"), (28, "black"), (29, "black"), (36, "red"),
    ])
    def test_known_colors(self, n, expected):
        assert color(n) == expected

    def test_red_set_is_fixed(self):
        assert RED_NUMBERS == {1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36}


class TestHouseEdge:
    def test_european_edge(self):
        assert house_edge(Variant.EU) == pytest.approx(1 / 37)
        assert house_edge(Variant.EU) == pytest.approx(0.0270, abs=1e-4)

    def test_american_edge(self):
        assert house_edge(Variant.US) == pytest.approx(2 / 38)
        assert house_edge(Variant.US) == pytest.approx(0.0526, abs=1e-4)


class TestParseOutcome:
    @pytest.mark.parametrize("raw, expected", [("17", 17), (17, 17), (" 0 ", 0), ("36", 36)])
    def test_numbers(self, raw, expected):
        assert parse_outcome(raw, Variant.EU) == expected

    def test_double_zero_on_american(self):
        assert parse_outcome("00", Variant.US) == DOUBLE_ZERO

    @pytest.mark.parametrize("raw", ["00", "37", "-1", "red"])
    def test_rejects_foreign_values_on_european(self, raw):
        with pytest.raises(ValueError):
            parse_outcome(raw, Variant.EU)


class TestDraw:
    """Draws are uniform over the domain and reproducible under a seed"""

    def test_draws_stay_in_domain(self):
        for variant in Variant:
            wheel = Wheel(variant, seed=3)
            assert all(wheel.draw() in variant.pockets for _ in range(500))

    def test_seeded_wheels_agree(self):
        a = Wheel(Variant.US, seed=11)
        b = Wheel(Variant.US, seed=11)
        assert a.draw_many(200) == b.draw_many(200)

    def test_every_pocket_hit_in_long_run(self):
        wheel = Wheel(Variant.US, seed=5)
        assert set(wheel.draw_many(5000)) == set(Variant.US.pockets)

    def test_roughly_uniform(self):
        wheel = Wheel(Variant.EU, seed=42)
        draws = wheel.draw_many(37_000)
        expected = 1000
        for pocket in Variant.EU.pockets:
            # ±25% of the expected count is > 7 standard deviations
            assert abs(draws.count(pocket) - expected) < 250


class TestTableConfig:
    def test_named_constructors(self):
        assert TableConfig.european().variant is Variant.EU
        assert TableConfig.american().variant is Variant.US
        assert TableConfig.for_variant("US") == TableConfig.american()

    def test_defaults(self):
        cfg = TableConfig.european()
        assert cfg.max_simulated_spins == 20_000
        assert cfg.chip_denominations == (1, 2, 5, 10, 25, 50, 100)
        assert cfg.recent_window == 24

    def test_with_variant_keeps_other_constants(self):
        from dataclasses import replace
        cfg = replace(TableConfig.european(), max_simulated_spins=500)
        us = cfg.with_variant(Variant.US)
        assert us.variant is Variant.US
        assert us.max_simulated_spins == 500
        assert us.house_edge == pytest.approx(2 / 38)

    def test_chip_validation(self):
        cfg = TableConfig.european()
        assert cfg.is_valid_chip(25)
        assert not cfg.is_valid_chip(3)

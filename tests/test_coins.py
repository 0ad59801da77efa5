"""Tests for simulated coin authenticity checks."""

import pytest

from vending_machine.config import DEFAULT_COIN_PROFILES
from vending_machine.core.coins import CoinSpec, build_coin_specs, verify_coin_authenticity


@pytest.fixture
def specs():
    return build_coin_specs(DEFAULT_COIN_PROFILES)


class TestVerifyCoinAuthenticity:
    @pytest.mark.parametrize("denomination", [1, 5, 10, 50])
    def test_default_coins_pass(self, specs, denomination):
        assert verify_coin_authenticity(denomination, specs)

    def test_unknown_denomination(self, specs):
        assert not verify_coin_authenticity(99, specs)

    @pytest.mark.parametrize("weight,diameter", [
        (20.0, 28.0),   # too heavy
        (2.0, 28.0),    # too light
        (10.0, 50.0),   # too wide
        (10.0, 10.0),   # too narrow
    ])
    def test_tolerance_window(self, weight, diameter):
        specs = {50: CoinSpec(50, weight, diameter, 1)}
        assert not verify_coin_authenticity(50, specs)

    def test_bimetal_must_be_heavy(self):
        assert not verify_coin_authenticity(50, {50: CoinSpec(50, 8.0, 28.0, 1)})

    def test_cupronickel_must_be_wide(self):
        assert not verify_coin_authenticity(10, {10: CoinSpec(10, 7.5, 20.0, 2)})

    def test_copper_must_be_light(self):
        assert not verify_coin_authenticity(1, {1: CoinSpec(1, 6.0, 20.0, 3)})

    def test_checksum_rejects_small_odd_values(self):
        # 1 * 17 - 10 = 7: odd and <= 10
        assert not verify_coin_authenticity(1, {1: CoinSpec(1, 3.8, 20.0, -10)})

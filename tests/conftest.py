"""Shared fixtures for vending machine tests."""

import pytest

from vending_machine.config import MachineConfig
from vending_machine.core.change import ChangeAllocator, CoinReserve
from vending_machine.core.coins import build_coin_specs
from vending_machine.core.machine import VendingMachine
from vending_machine.core.state import Product


@pytest.fixture
def machine():
    """Fresh machine with the default catalog: A1 Cola 25/10, A2 Green Tea 20/5, B1 Coffee 35/2."""
    return VendingMachine()


@pytest.fixture
def make_machine():
    """Factory: machine with custom products / config overrides."""
    def _make(products=None, is_member=False, **config_overrides):
        return VendingMachine(MachineConfig(**config_overrides), products=products, is_member=is_member)
    return _make


@pytest.fixture
def make_allocator():
    """Factory: allocator over the default denominations with an explicit reserve."""
    def _make(counts, coin_profiles=None):
        cfg = MachineConfig()
        profiles = coin_profiles if coin_profiles is not None else cfg.coin_profiles
        return ChangeAllocator(
            CoinReserve(counts, cfg.denominations),
            safety_threshold=cfg.safety_threshold,
            audit_threshold=cfg.audit_threshold,
            coin_specs=build_coin_specs(profiles),
        )
    return _make


@pytest.fixture
def snack():
    """Generic product priced 25 with a single unit left."""
    return Product(product_id="X1", name="Snack", unit_price=25, stock=1)

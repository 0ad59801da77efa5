"""Tests for maintenance diagnostics and reports."""

from vending_machine.config import MachineConfig
from vending_machine.core.maintenance import (
    analyze_inventory,
    check_subsystem,
    estimate_maintenance_cost,
    run_diagnostics,
)
from vending_machine.core.state import Product


def inv(*products):
    return {p.product_id: p for p in products}


class TestDiagnostics:
    def test_defaults_pass(self):
        report = run_diagnostics(inv(Product("A1", "Cola", 25, 3), Product("A2", "Tea", 20, 0)), MachineConfig())
        assert report.ok
        assert report.failures() == []
        assert report.slots == {"A1": "ok", "A2": "skipped"}

    def test_voltage_out_of_range(self):
        for v in (90, 220):
            report = run_diagnostics({}, MachineConfig(supply_voltage=v))
            assert report.failures() == ["POWER_UNIT"]

    def test_cooler_temperature(self):
        assert not check_subsystem("COOLING_SYSTEM", MachineConfig(cooler_temperature=50)).ok
        assert not check_subsystem("COOLING_SYSTEM", MachineConfig(cooler_temperature=-5)).ok
        assert check_subsystem("COOLING_SYSTEM", MachineConfig(cooler_temperature=4)).ok

    def test_connectivity(self):
        assert check_subsystem("CONNECTIVITY", MachineConfig(wifi_online=True, cellular_online=False)).detail == "wi-fi only"
        assert check_subsystem("CONNECTIVITY", MachineConfig(wifi_online=False, cellular_online=True)).detail == "cellular only"
        assert not check_subsystem("CONNECTIVITY", MachineConfig(wifi_online=False, cellular_online=False)).ok

    def test_unknown_subsystem(self):
        assert not check_subsystem("FLUX_CAPACITOR", MachineConfig()).ok


class TestInventoryAnalysis:
    def test_scores_and_status(self):
        analysis = analyze_inventory(inv(
            Product("B1", "Coffee", 35, 2, is_hot=True),
            Product("A1", "Cola", 25, 10),
            Product("A2", "Tea", 20, 5),
            Product("A3", "Water", 20, 4),
            Product("C1", "Gum", 10, 0),
        ), restock_level=10)
        by_id = {a.product_id: a for a in analysis}
        assert by_id["B1"].score == 140.0
        assert by_id["B1"].status == "URGENT"
        assert by_id["A1"].status == "OK"
        assert by_id["A2"].score == 50.0
        assert by_id["A2"].status == "OK"
        assert by_id["A3"].status == "WATCH"
        assert by_id["C1"].score == 150.0


class TestCostEstimate:
    def test_base_cost(self):
        assert estimate_maintenance_cost(inv(Product("A1", "Cola", 25, 3)), reserve_value=600) == 500

    def test_restock_and_coin_refill(self):
        items = inv(Product("A1", "Cola", 25, 0), Product("A2", "Tea", 20, 3))
        assert estimate_maintenance_cost(items, reserve_value=50) == 800

    def test_bulk_restock(self):
        items = inv(*[Product(f"A{i}", "Snack", 10, 0) for i in range(4)])
        assert estimate_maintenance_cost(items, reserve_value=600) == 800

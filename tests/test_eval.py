"""Tests for session runner, metrics, snapshots and JSONL export."""

import json
import random

from vending_machine.config import MachineConfig
from vending_machine.core.state import MachineState
from vending_machine.eval import (
    apply_action,
    export_sessions_to_jsonl,
    generate_sessions,
    machine_snapshot,
    random_policy,
    run_session,
)

PURCHASE = [
    {"op": "insert_funds", "args": {"amount": 10}},
    {"op": "insert_funds", "args": {"amount": 10}},
    {"op": "insert_funds", "args": {"amount": 10}},
    {"op": "select_product", "args": {"product_id": "A1"}},
]


def assert_invariants(machine):
    assert machine.balance >= 0
    assert all(p.stock >= 0 for p in machine.inventory.values())
    assert all(n >= 0 for n in machine.reserve.as_dict().values())
    assert all(key == p.product_id for key, p in machine.inventory.items())


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


class TestRunSession:
    def test_scripted_purchase(self):
        machine, metrics, trace = run_session(PURCHASE)
        assert [r.op for r in trace] == ["insert_funds"] * 3 + ["select_product"]
        assert trace[-1].accepted
        assert trace[-1].state == "idle"
        assert trace[-1].balance == 0
        assert metrics.units_sold == 1
        assert metrics.revenue == 23
        assert metrics.change_dispensed == 7
        assert metrics.change_shortfall == 0
        assert metrics.op_count == {"insert_funds": 3, "select_product": 1}
        assert metrics.units_by_product == {"A1": 1}
        assert metrics.final_state == "idle"

    def test_cancel_records_refund(self):
        _, metrics, trace = run_session([
            {"op": "insert_funds", "args": {"amount": 50}},
            {"op": "cancel", "args": {}},
        ])
        assert trace[-1].refund == 50
        assert metrics.refunds == 50

    def test_unknown_operation(self):
        _, _, trace = run_session([{"op": "explode", "args": {}}])
        assert not trace[0].accepted
        assert "Unknown operation" in trace[0].message

    def test_max_steps(self):
        _, metrics, trace = run_session(lambda m: {"op": "dispense", "args": {}}, max_steps=5)
        assert len(trace) == 5
        assert metrics.steps == 5

    def test_snapshots_captured(self):
        _, _, trace = run_session(PURCHASE, capture_state_snapshots=True)
        snap = trace[-1].state_snapshot
        assert snap["inventory"]["A1"]["stock"] == 9
        assert snap["sales"] == 1

    def test_apply_action_enter_maintenance(self, machine):
        accepted, _, _ = apply_action(machine, "enter_maintenance", {"code": "admin123"})
        assert accepted
        assert machine.state == MachineState.MAINTENANCE


class TestSnapshot:
    def test_fields(self, machine):
        snap = machine_snapshot(machine)
        assert snap["state"] == "idle"
        assert snap["balance"] == 0
        assert snap["reserve"] == {"50": 5, "10": 20, "5": 20, "1": 50}
        assert snap["reserve_value"] == 600
        assert set(snap["inventory"]) == {"A1", "A2", "B1"}


# ---------------------------------------------------------------------------
# Random sessions
# ---------------------------------------------------------------------------


class TestRandomSessions:
    def test_policy_returns_known_ops(self, machine):
        rng = random.Random(0)
        for _ in range(50):
            action = random_policy(machine, rng)
            assert action["op"] in ("insert_funds", "select_product", "dispense", "cancel", "enter_maintenance")

    def test_invariants_hold(self):
        for machine, metrics, trace in generate_sessions(5, base_seed=7, max_steps=300):
            assert_invariants(machine)
            assert metrics.steps == len(trace) == 300
            assert metrics.change_dispensed + metrics.change_shortfall >= 0

    def test_invariants_hold_with_tight_reserve(self):
        cfg = MachineConfig(initial_reserve={50: 1, 10: 2, 5: 1, 1: 3})
        for machine, metrics, _ in generate_sessions(3, config=cfg, base_seed=1, max_steps=400):
            assert_invariants(machine)
            for sale in machine.sales:
                assert sale.change.dispensed + sale.change.shortfall == sale.paid - sale.charged

    def test_sessions_are_reproducible(self):
        a = [m.units_sold for _, m, _ in generate_sessions(2, base_seed=3, max_steps=100)]
        b = [m.units_sold for _, m, _ in generate_sessions(2, base_seed=3, max_steps=100)]
        assert a == b


class TestExport:
    def test_trajectory_format(self, tmp_path):
        out = tmp_path / "sessions.jsonl"
        count = export_sessions_to_jsonl(out, n_sessions=3, max_steps=20)
        lines = out.read_text(encoding="utf-8").splitlines()
        assert count == len(lines) == 3
        record = json.loads(lines[0])
        assert len(record["trace"]) == 20
        assert "units_sold" in record["metrics"]

    def test_steps_format(self, tmp_path):
        out = tmp_path / "nested" / "steps.jsonl"
        count = export_sessions_to_jsonl(out, n_sessions=2, max_steps=10, format="steps")
        lines = out.read_text(encoding="utf-8").splitlines()
        assert count == len(lines) == 20
        assert json.loads(lines[0])["obs"]["state"] in {s.value for s in MachineState}
